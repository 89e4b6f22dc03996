"""Matching engine, acceptance rules and result aggregation."""

from .aggregator import build_summary, currency_totals
from .engine import ReconciliationEngine
from .rules import MatchDecision, MatchRules

__all__ = [
    "ReconciliationEngine",
    "MatchDecision",
    "MatchRules",
    "build_summary",
    "currency_totals",
]
