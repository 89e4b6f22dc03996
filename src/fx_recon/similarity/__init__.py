"""Description similarity strategies."""

from typing import Optional
import logging

from ..config import MatchingConfig
from .base import EmbeddingProvider, SimilarityScorer
from .lexical import LexicalScorer, edit_ratio, normalize_text, tokenize
from .semantic import SemanticScorer

logger = logging.getLogger(__name__)


def build_scorer(
    config: MatchingConfig,
    embedding_provider: Optional[EmbeddingProvider] = None,
) -> SimilarityScorer:
    """Pick the similarity strategy the matching configuration asks for."""
    if config.use_semantic_similarity:
        if embedding_provider is not None:
            return SemanticScorer(embedding_provider)
        logger.warning("Semantic similarity requested without an embedding provider; using lexical")
    return LexicalScorer()


__all__ = [
    "EmbeddingProvider",
    "SimilarityScorer",
    "LexicalScorer",
    "SemanticScorer",
    "build_scorer",
    "edit_ratio",
    "normalize_text",
    "tokenize",
]
