"""
Lexical description similarity.

Combines a greedy token alignment (Dice-style overlap) with a whole-string
Levenshtein ratio and keeps whichever is higher.
"""

from typing import Optional
import re

from rapidfuzz.distance import Levenshtein

from .base import SimilarityScorer

STOP_WORDS = frozenset(
    {
        "the",
        "and",
        "or",
        "to",
        "from",
        "in",
        "at",
        "on",
        "for",
        "of",
        "a",
        "an",
        "payment",
        "deposit",
        "transaction",
        "transfer",
    }
)

MIN_TOKEN_LENGTH = 3
CONTAINMENT_WEIGHT = 0.9
NEAR_MISS_WEIGHT = 0.7
NEAR_MISS_MAX_DISTANCE = 2
NEAR_MISS_MAX_RATIO = 0.4

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def normalize_text(text: str) -> str:
    """Lower-case, replace punctuation with spaces and collapse whitespace."""
    text = _NON_ALNUM.sub(" ", text.lower())
    return " ".join(text.split())


def tokenize(normalized: str) -> list[str]:
    """Split normalized text into significant words."""
    return [
        word
        for word in normalized.split()
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOP_WORDS
    ]


def edit_ratio(first: str, second: str) -> float:
    """(maxLen - distance) / maxLen; two empty strings count as identical."""
    max_len = max(len(first), len(second))
    if max_len == 0:
        return 1.0
    return (max_len - Levenshtein.distance(first, second)) / max_len


def token_score(first: str, second: str) -> float:
    """Score a single token pair: exact, containment, then near miss."""
    if first == second:
        return 1.0

    shorter, longer = sorted((len(first), len(second)))
    if first in second or second in first:
        return shorter / longer * CONTAINMENT_WEIGHT

    distance = Levenshtein.distance(first, second)
    if distance <= NEAR_MISS_MAX_DISTANCE and distance < longer * NEAR_MISS_MAX_RATIO:
        return (longer - distance) / longer * NEAR_MISS_WEIGHT

    return 0.0


def token_overlap(tokens1: list[str], tokens2: list[str]) -> float:
    """
    Greedy one-to-one token alignment.

    Each token of ``tokens1`` takes its best unconsumed partner from
    ``tokens2``; a consumed token cannot be reused.
    """
    consumed = [False] * len(tokens2)
    total = 0.0

    for token in tokens1:
        best_score = 0.0
        best_index: Optional[int] = None

        for index, candidate in enumerate(tokens2):
            if consumed[index]:
                continue
            score = token_score(token, candidate)
            if score > best_score:
                best_score = score
                best_index = index
                if score == 1.0:
                    break

        if best_index is not None:
            consumed[best_index] = True
            total += best_score

    return 2 * total / (len(tokens1) + len(tokens2))


class LexicalScorer(SimilarityScorer):
    """Deterministic string similarity with no external dependency."""

    name = "lexical"

    def score(self, first: str, second: str) -> float:
        if first == second:
            return 1.0

        normalized1 = normalize_text(first)
        normalized2 = normalize_text(second)
        if normalized1 == normalized2:
            return 1.0

        tokens1 = tokenize(normalized1)
        tokens2 = tokenize(normalized2)
        ratio = edit_ratio(normalized1, normalized2)

        if not tokens1 or not tokens2:
            return ratio

        return max(token_overlap(tokens1, tokens2), ratio)
