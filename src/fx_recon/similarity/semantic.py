"""
Embedding-based description similarity.

Vectors come from an external :class:`EmbeddingProvider`. Any failure on
the provider side surfaces as :class:`SimilarityProviderError` so the
caller can fall back to lexical scoring.
"""

from typing import Sequence
import logging

import numpy as np

from ..utils.exceptions import SimilarityProviderError
from .base import EmbeddingProvider, SimilarityScorer
from .lexical import normalize_text

logger = logging.getLogger(__name__)

KEYWORD_BOOST = 1.15
KEYWORD_MIN_LENGTH = 4


def share_keyword(normalized1: str, normalized2: str) -> bool:
    """True when both texts contain a common word longer than three characters."""
    keywords1 = {word for word in normalized1.split() if len(word) >= KEYWORD_MIN_LENGTH}
    keywords2 = {word for word in normalized2.split() if len(word) >= KEYWORD_MIN_LENGTH}
    return not keywords1.isdisjoint(keywords2)


class SemanticScorer(SimilarityScorer):
    """Cosine similarity of L2-normalized description embeddings."""

    name = "semantic"

    def __init__(self, provider: EmbeddingProvider):
        self.provider = provider
        # One embedding per distinct normalized description
        self._embeddings: dict[str, np.ndarray] = {}

    def is_ready(self) -> bool:
        try:
            return bool(self.provider.is_ready())
        except Exception as e:
            logger.warning(f"Embedding provider readiness check failed: {e}")
            return False

    def score(self, first: str, second: str) -> float:
        normalized1 = normalize_text(first)
        normalized2 = normalize_text(second)

        if normalized1 == normalized2:
            return 1.0
        if not normalized1 or not normalized2:
            return 0.0

        similarity = self._cosine(self._embedding(normalized1), self._embedding(normalized2))
        if share_keyword(normalized1, normalized2):
            similarity *= KEYWORD_BOOST

        return max(0.0, min(1.0, similarity))

    def score_many(self, base: str, candidates: Sequence[str]) -> list[float]:
        """Score ``base`` against every candidate, embedding ``base`` only once."""
        normalized_base = normalize_text(base)
        if normalized_base:
            self._embedding(normalized_base)
        return [self.score(base, candidate) for candidate in candidates]

    def clear(self) -> None:
        self._embeddings.clear()

    def _embedding(self, normalized: str) -> np.ndarray:
        cached = self._embeddings.get(normalized)
        if cached is not None:
            return cached

        try:
            vector = np.asarray(self.provider.embed(normalized), dtype=float).ravel()
        except Exception as e:
            raise SimilarityProviderError(f"Embedding provider failed: {e}") from e

        norm = np.linalg.norm(vector)
        if vector.size == 0 or not np.isfinite(norm) or norm == 0:
            raise SimilarityProviderError(
                f"Embedding provider returned an unusable vector for {normalized!r}"
            )

        vector = vector / norm
        self._embeddings[normalized] = vector
        return vector

    @staticmethod
    def _cosine(first: np.ndarray, second: np.ndarray) -> float:
        if first.shape != second.shape:
            raise SimilarityProviderError(
                f"Embedding dimensions differ: {first.shape} vs {second.shape}"
            )
        return float(np.dot(first, second))
