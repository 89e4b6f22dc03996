"""Interfaces shared by the similarity strategies."""

from abc import ABC, abstractmethod
from typing import Sequence


class SimilarityScorer(ABC):
    """Scores how alike two transaction descriptions are, from 0.0 to 1.0."""

    #: Selects which threshold set the matching rules apply
    name: str = ""

    @abstractmethod
    def score(self, first: str, second: str) -> float:
        """
        Score two descriptions.

        Args:
            first: Description from one side
            second: Description from the other side

        Returns:
            Similarity in the range 0.0-1.0
        """
        pass

    def score_many(self, base: str, candidates: Sequence[str]) -> list[float]:
        """Score one description against many candidates."""
        return [self.score(base, candidate) for candidate in candidates]

    def is_ready(self) -> bool:
        """Whether the scorer can be used right now."""
        return True

    def clear(self) -> None:
        """Drop state kept between calls, such as memoized embeddings."""
        pass


class EmbeddingProvider(ABC):
    """External model that turns text into a mean-pooled embedding vector."""

    @abstractmethod
    def embed(self, text: str) -> Sequence[float]:
        pass

    def is_ready(self) -> bool:
        return True
