"""Source registry and similarity metrics."""

from scholarly_integrity.registry.registry import SearchResults, SourceRegistry
from scholarly_integrity.registry.similarity import (
    DEFAULT_SIMILARITY_METRIC,
    SIMILARITY_METRICS,
    EmbeddingSimilarity,
    JaccardSimilarity,
    SimilarityMetric,
    TokenContainmentSimilarity,
    content_tokens,
    get_similarity_metric,
    prepare_metric,
    tokenize,
)

__all__ = [
    "SearchResults",
    "SourceRegistry",
    "DEFAULT_SIMILARITY_METRIC",
    "SIMILARITY_METRICS",
    "EmbeddingSimilarity",
    "JaccardSimilarity",
    "SimilarityMetric",
    "TokenContainmentSimilarity",
    "content_tokens",
    "get_similarity_metric",
    "prepare_metric",
    "tokenize",
]
