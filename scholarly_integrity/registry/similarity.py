"""Deterministic text similarity metrics.

Every downstream risk tier depends on the metric chosen here, so all
metrics are pure and deterministic: identical inputs always produce
identical scores, rounded to six decimal places.

Metrics:
- token_containment: share of the query's content tokens found in the
  candidate (default; suits short claims against long excerpts)
- jaccard: symmetric token-set overlap
- embedding: cosine similarity over a langchain-core Embeddings model
"""

import asyncio
import re
import unicodedata
from typing import Iterable, Protocol, runtime_checkable

import numpy as np
from langchain_core.embeddings import Embeddings

from scholarly_integrity.errors.exceptions import ConfigurationError


# =============================================================================
# Tokenization
# =============================================================================


STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "nor", "of", "in", "on", "at", "to",
    "for", "from", "by", "with", "as", "into", "onto", "about", "over",
    "under", "between", "through", "during", "within", "without", "is", "are",
    "was", "were", "be", "been", "being", "it", "its", "this", "that", "these",
    "those", "there", "their", "they", "them", "we", "our", "us", "he", "she",
    "his", "her", "which", "who", "whom", "whose", "what", "than", "then",
    "so", "such", "also", "not", "no", "do", "does", "did", "has", "have",
    "had", "can", "could", "may", "might", "will", "would", "shall", "should",
    "must", "if", "while", "both", "each", "more", "most", "other", "some",
    "any", "all", "et", "al",
})

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+(?:['-][a-z0-9]+)*")


def normalize_text(text: str) -> str:
    """Lower-case text and strip accents."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().replace("’", "'")


def fold_plural(token: str) -> str:
    """Fold simple English plurals so 'sources' and 'source' compare equal."""
    if len(token) <= 4 or token.isdigit():
        return token
    if token.endswith("ies"):
        return token[:-3] + "y"
    if token.endswith(("ss", "us", "is")):
        return token
    if token.endswith("s"):
        return token[:-1]
    return token


def tokenize(text: str) -> list[str]:
    """Split text into lower-cased word tokens, keeping order and stop words."""
    return _TOKEN_PATTERN.findall(normalize_text(text))


def content_tokens(text: str) -> list[str]:
    """Tokens with stop words removed and plurals folded, in text order."""
    return [fold_plural(t) for t in tokenize(text) if t not in STOP_WORDS]


# =============================================================================
# Metric Protocol
# =============================================================================


@runtime_checkable
class SimilarityMetric(Protocol):
    """A deterministic similarity function returning scores in [0, 1]."""

    name: str

    def score(self, query: str, candidate: str) -> float:
        """Score how well `candidate` supports `query`."""
        ...


class TokenContainmentSimilarity:
    """Share of the query's distinct content tokens present in the candidate.

    Asymmetric: a short claim fully contained in a long excerpt scores 1.0.
    """

    name = "token_containment"

    def score(self, query: str, candidate: str) -> float:
        query_tokens = set(content_tokens(query))
        if not query_tokens:
            return 0.0
        candidate_tokens = set(content_tokens(candidate))
        overlap = len(query_tokens & candidate_tokens)
        return round(overlap / len(query_tokens), 6)


class JaccardSimilarity:
    """Symmetric overlap of the two content-token sets."""

    name = "jaccard"

    def score(self, query: str, candidate: str) -> float:
        query_tokens = set(content_tokens(query))
        candidate_tokens = set(content_tokens(candidate))
        union = query_tokens | candidate_tokens
        if not union:
            return 0.0
        return round(len(query_tokens & candidate_tokens) / len(union), 6)


class EmbeddingSimilarity:
    """Cosine similarity between embeddings, clamped to [0, 1].

    Vectors are cached per instance, so one instance should be scoped to a
    single validation run. `aprepare` fills the cache through the model's
    async interface; texts scored without it are embedded synchronously.

    Args:
        embeddings: Any langchain-core Embeddings implementation. It must be
            deterministic for scores to be reproducible.
    """

    name = "embedding"

    def __init__(self, embeddings: Embeddings):
        self.embeddings = embeddings
        self._cache: dict[str, np.ndarray] = {}

    def _vector(self, text: str) -> np.ndarray:
        if text not in self._cache:
            self._cache[text] = np.asarray(
                self.embeddings.embed_query(text), dtype=float
            )
        return self._cache[text]

    async def aprepare(self, texts: Iterable[str]) -> None:
        """Embed texts not yet cached without blocking the event loop."""
        pending = list(dict.fromkeys(
            t for t in texts if t.strip() and t not in self._cache
        ))
        if not pending:
            return
        vectors = await asyncio.gather(*[
            self.embeddings.aembed_query(t) for t in pending
        ])
        for text, vector in zip(pending, vectors):
            self._cache[text] = np.asarray(vector, dtype=float)

    def score(self, query: str, candidate: str) -> float:
        if not query.strip() or not candidate.strip():
            return 0.0
        a = self._vector(query)
        b = self._vector(candidate)
        norm = float(np.linalg.norm(a) * np.linalg.norm(b))
        if norm == 0.0:
            return 0.0
        cosine = float(np.dot(a, b) / norm)
        return round(min(max(cosine, 0.0), 1.0), 6)


async def prepare_metric(metric: "SimilarityMetric", texts: Iterable[str]) -> None:
    """Let a metric precompute what it needs for texts it is about to score."""
    if isinstance(metric, EmbeddingSimilarity):
        await metric.aprepare(texts)


# =============================================================================
# Metric Resolution
# =============================================================================


SIMILARITY_METRICS: dict[str, type] = {
    TokenContainmentSimilarity.name: TokenContainmentSimilarity,
    JaccardSimilarity.name: JaccardSimilarity,
}

DEFAULT_SIMILARITY_METRIC = TokenContainmentSimilarity.name


def get_similarity_metric(
    metric: "str | SimilarityMetric | None" = None,
) -> SimilarityMetric:
    """
    Resolve a metric name or instance into a metric object.

    Args:
        metric: A registered metric name, a metric instance, or None for
            the default.

    Returns:
        A metric instance.

    Raises:
        ConfigurationError: If the name is unknown or names the embedding
            metric without supplying an Embeddings model.
    """
    if metric is None:
        metric = DEFAULT_SIMILARITY_METRIC

    if isinstance(metric, str):
        key = metric.strip().lower()
        if key == EmbeddingSimilarity.name:
            raise ConfigurationError(
                "The embedding metric needs an Embeddings model; pass "
                "EmbeddingSimilarity(embeddings) instead of its name",
                field="similarity_metric",
                value=metric,
            )
        if key not in SIMILARITY_METRICS:
            raise ConfigurationError(
                f"Unknown similarity metric '{metric}'",
                field="similarity_metric",
                value=metric,
                details={"available": sorted(SIMILARITY_METRICS)},
            )
        return SIMILARITY_METRICS[key]()

    if isinstance(metric, SimilarityMetric):
        return metric

    raise ConfigurationError(
        "similarity_metric must be a metric name or an object with a "
        "score(query, candidate) method",
        field="similarity_metric",
        value=type(metric).__name__,
    )
