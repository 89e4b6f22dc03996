"""Multi-currency fuzzy reconciliation of bank and ledger transactions."""

__version__ = "0.1.0"
