"""
Command-line interface for fx-recon.
"""

from pathlib import Path
from typing import Optional, Sequence
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import generate_default_config, load_config, with_base_currency
from .fx.client import RateClient
from .fx.currencies import format_amount
from .fx.normalizer import CurrencyNormalizer
from .matching.engine import ReconciliationEngine
from .models.transaction import AnyTransaction, ReconciliationSummary
from .parsers.transaction_csv import TransactionCSVParser
from .utils.exceptions import ReconciliationError
from .utils.logging_config import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Multi-currency fuzzy transaction reconciliation."""
    pass


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, path_type=Path))
@click.argument("accounts_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("--base-currency", default=None, help="Override the reporting currency")
@click.option("--show-unmatched/--no-show-unmatched", default=True)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def reconcile(
    bank_file: Path,
    accounts_file: Path,
    config: Optional[Path],
    base_currency: Optional[str],
    show_unmatched: bool,
    verbose: bool,
):
    """
    Reconcile a bank statement against an accounting ledger.

    BANK_FILE: CSV with date, description, amount, currency, reference columns
    ACCOUNTS_FILE: CSV in the same layout from the accounting system
    """
    try:
        recon_config = load_config(config)
        setup_logging(logging.DEBUG if verbose else recon_config.logging.level)

        if base_currency:
            recon_config = with_base_currency(recon_config, base_currency)

        parser = TransactionCSVParser(recon_config)
        bank_transactions = parser.parse_file(bank_file)
        account_transactions = parser.parse_file(accounts_file)

        rate_client = RateClient.from_config(recon_config)
        engine = ReconciliationEngine(
            recon_config, normalizer=CurrencyNormalizer(rate_client)
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Matching transactions...", total=len(bank_transactions))
            result = engine.reconcile(
                bank_transactions,
                account_transactions,
                on_progress=lambda done, total: progress.update(task, completed=done),
            )

        _display_summary(result.summary, result.processing_time_seconds)

        if show_unmatched:
            _display_transactions("Unmatched Bank Transactions", result.unmatched_bank)
            _display_transactions("Unmatched Account Transactions", result.unmatched_accounts)

    except ReconciliationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("rate_date", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("source_currency")
@click.argument("target_currency")
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def rate(rate_date, source_currency: str, target_currency: str, config: Optional[Path]):
    """
    Look up one historical exchange rate.

    RATE_DATE: Date in YYYY-MM-DD format
    """
    try:
        recon_config = load_config(config)
        setup_logging(recon_config.logging.level)
        client = RateClient.from_config(recon_config)
        fx_rate = client.rate(
            rate_date.date(), source_currency.upper(), target_currency.upper()
        )
    except ReconciliationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    effective = fx_rate.effective_date or fx_rate.date
    console.print(
        f"1 {fx_rate.source_currency} = {fx_rate.rate:.6f} {fx_rate.target_currency} "
        f"(quoted {effective.isoformat()}, {fx_rate.source.value})"
    )


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_summary(summary: ReconciliationSummary, processing_time: float) -> None:
    """Display reconciliation summary in console."""
    currency = summary.base_currency
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Matched", str(summary.total_matched))
    table.add_row("Unmatched Bank", str(summary.unmatched_bank_count))
    table.add_row("Unmatched Accounts", str(summary.unmatched_accounts_count))
    table.add_row("Matched Amount", format_amount(summary.matched_amount, currency))
    table.add_row("Unmatched Bank Amount", format_amount(summary.unmatched_bank_amount, currency))
    table.add_row(
        "Unmatched Accounts Amount", format_amount(summary.unmatched_accounts_amount, currency)
    )
    table.add_row("Bank Match Rate", f"{summary.match_rate_bank:.1f}%")
    table.add_row("Accounts Match Rate", f"{summary.match_rate_accounts:.1f}%")
    table.add_row("Processing Time", f"{processing_time:.2f}s")

    console.print(table)

    if len(summary.unmatched_bank_by_currency) > 1 or len(summary.unmatched_accounts_by_currency) > 1:
        by_currency = Table(title="Unmatched by Currency")
        by_currency.add_column("Currency")
        by_currency.add_column("Bank", justify="right")
        by_currency.add_column("Accounts", justify="right")
        codes = sorted(
            set(summary.unmatched_bank_by_currency) | set(summary.unmatched_accounts_by_currency)
        )
        for code in codes:
            by_currency.add_row(
                code,
                format_amount(summary.unmatched_bank_by_currency.get(code, 0), code),
                format_amount(summary.unmatched_accounts_by_currency.get(code, 0), code),
            )
        console.print(by_currency)


def _display_transactions(title: str, transactions: Sequence[AnyTransaction]) -> None:
    if not transactions:
        return

    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Reference")
    table.add_column("Amount", justify="right")
    table.add_column("Description")

    for txn in transactions[:20]:  # Show first 20
        table.add_row(
            txn.date.isoformat(),
            txn.reference or "-",
            f"{'-' if txn.amount < 0 else ''}{format_amount(txn.amount, txn.currency)}",
            txn.description[:40] + "..." if len(txn.description) > 40 else txn.description,
        )

    console.print(table)

    if len(transactions) > 20:
        console.print(f"... and {len(transactions) - 20} more transactions")


if __name__ == "__main__":
    main()
