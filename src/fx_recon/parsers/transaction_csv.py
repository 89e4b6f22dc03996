"""
Loader for transaction CSV files that are already in the normalized layout
(date, description, amount, currency, reference).
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional
import logging
import re

import pandas as pd

from ..config import ReconConfig
from ..fx.currencies import detect_currency_from_code, detect_currency_from_symbol
from ..models.transaction import Transaction
from ..utils.exceptions import TransactionParseError

logger = logging.getLogger(__name__)

_AMOUNT_NOISE = re.compile(r"[^0-9.\-]")


class TransactionCSVParser:
    """
    Reads one side of a reconciliation from a CSV export.

    Column names come from ``config.input.column_mappings``. Rows without a
    usable date or amount are logged and skipped.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        self.input_config = config.input
        self.column_mappings = config.input.column_mappings
        self.default_currency = config.currency.default_currency

    def parse_file(self, file_path: Path) -> list[Transaction]:
        """
        Parse a CSV file into transactions.

        Args:
            file_path: Path to the CSV file

        Returns:
            Transactions in file order

        Raises:
            TransactionParseError: If the file cannot be read or lacks required columns
        """
        logger.info(f"Parsing transaction CSV file: {file_path}")

        try:
            df = pd.read_csv(
                file_path,
                encoding=self.input_config.encoding,
                delimiter=self.input_config.delimiter,
                dtype=str,
            )
        except (OSError, ValueError, pd.errors.ParserError) as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise TransactionParseError(f"Failed to read CSV file {file_path}: {e}") from e

        transactions = self.parse_dataframe(df)
        logger.info(f"Extracted {len(transactions)} transactions from {file_path.name}")

        return transactions

    def parse_dataframe(self, df: pd.DataFrame) -> list[Transaction]:
        """Convert DataFrame rows to transactions."""
        for required in ("date", "amount"):
            column = self.column_mappings.get(required, required)
            if column not in df.columns:
                raise TransactionParseError(f"Missing required column: {column}")

        transactions: list[Transaction] = []
        for idx, row in df.iterrows():
            txn = self._normalize_row(row, int(idx))
            if txn:
                transactions.append(txn)

        return transactions

    def _normalize_row(self, row: pd.Series, idx: int) -> Optional[Transaction]:
        date_col = self.column_mappings.get("date", "date")
        desc_col = self.column_mappings.get("description", "description")
        amount_col = self.column_mappings.get("amount", "amount")
        currency_col = self.column_mappings.get("currency", "currency")
        ref_col = self.column_mappings.get("reference", "reference")

        txn_date = self._parse_date(row.get(date_col))
        if not txn_date:
            logger.warning(f"Row {idx}: Invalid date, skipping")
            return None

        raw_amount = row.get(amount_col)
        amount = self._parse_amount(raw_amount)
        if amount is None:
            logger.warning(f"Row {idx}: Invalid amount {raw_amount!r}, skipping")
            return None

        description = self._text(row.get(desc_col)) or ""
        reference = self._text(row.get(ref_col))
        currency = self._parse_currency(row.get(currency_col), raw_amount)

        return Transaction(
            date=txn_date,
            description=description,
            amount=amount,
            currency=currency,
            reference=reference,
        )

    def _parse_date(self, date_value) -> Optional[date]:
        if date_value is None or pd.isna(date_value):
            return None

        if isinstance(date_value, datetime):
            return date_value.date()
        if isinstance(date_value, date):
            return date_value

        text = str(date_value).strip()
        if self.input_config.date_format:
            try:
                return datetime.strptime(text, self.input_config.date_format).date()
            except ValueError:
                pass

        try:
            return pd.to_datetime(text).date()
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def _parse_amount(amount_value) -> Optional[Decimal]:
        """Parse amounts such as ``-1,234.50``, ``€12.00`` or ``(45.10)``."""
        if amount_value is None or pd.isna(amount_value):
            return None

        text = str(amount_value).strip()
        if not text:
            return None

        negative = text.startswith("(") and text.endswith(")")
        text = _AMOUNT_NOISE.sub("", text)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None

        return -amount if negative else amount

    def _parse_currency(self, currency_value, raw_amount) -> str:
        text = self._text(currency_value)
        if text:
            code = detect_currency_from_code(text)
            if code:
                return code
            if len(text) == 3 and text.isalpha():
                return text.upper()

        if raw_amount is not None and not pd.isna(raw_amount):
            code = detect_currency_from_symbol(str(raw_amount))
            if code:
                return code

        return self.default_currency

    @staticmethod
    def _text(value) -> Optional[str]:
        if value is None or pd.isna(value):
            return None
        text = str(value).strip()
        return text or None
