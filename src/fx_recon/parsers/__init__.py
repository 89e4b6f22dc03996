"""Parsers for transaction files."""

from .transaction_csv import TransactionCSVParser

__all__ = ["TransactionCSVParser"]
