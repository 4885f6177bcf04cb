"""Tests for the similarity metrics.

This module tests:
- Tokenization and content-token normalization
- Token containment and Jaccard metrics
- Embedding cosine metric
- Metric resolution by name
"""

import pytest
from langchain_core.embeddings import Embeddings

from scholarly_integrity.errors import ConfigurationError
from scholarly_integrity.registry.similarity import (
    DEFAULT_SIMILARITY_METRIC,
    EmbeddingSimilarity,
    JaccardSimilarity,
    SimilarityMetric,
    TokenContainmentSimilarity,
    content_tokens,
    fold_plural,
    get_similarity_metric,
    prepare_metric,
    tokenize,
)


MEMORY_CLAIM = "Memory consolidation occurs during REM sleep"
MEMORY_EXCERPT = "Memory consolidation during sleep strengthens newly encoded traces."


class AxisEmbeddings(Embeddings):
    """Embeds known texts onto fixed vectors."""

    VECTORS = {
        "north": [1.0, 0.0],
        "east": [0.0, 1.0],
        "south": [-1.0, 0.0],
        "northeast": [1.0, 1.0],
        "zero": [0.0, 0.0],
    }

    def __init__(self):
        self.calls = 0

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        self.calls += 1
        return self.VECTORS[text]


class AsyncOnlyEmbeddings(AxisEmbeddings):
    """Fails on synchronous embedding so scoring must hit the cache."""

    def embed_query(self, text: str) -> list[float]:
        raise AssertionError(f"synchronous embedding of {text!r}")

    async def aembed_query(self, text: str) -> list[float]:
        self.calls += 1
        return self.VECTORS[text]


# =============================================================================
# Tokenization Tests
# =============================================================================


class TestTokenization:
    """Tests for tokenization helpers."""

    def test_tokenize_lowercases_and_strips_punctuation(self):
        """Test tokens are lower-cased words without punctuation."""
        assert tokenize("Sleep, Memory; and REM!") == ["sleep", "memory", "and", "rem"]

    def test_tokenize_strips_accents(self):
        """Test accented characters are folded."""
        assert tokenize("Rodríguez") == ["rodriguez"]

    def test_content_tokens_drop_stop_words(self):
        """Test stop words are removed and plurals folded."""
        assert content_tokens("The sources are reliable") == ["source", "reliable"]

    def test_fold_plural(self):
        """Test light plural folding."""
        assert fold_plural("studies") == "study"
        assert fold_plural("traces") == "trace"
        assert fold_plural("analysis") == "analysis"
        assert fold_plural("process") == "process"
        assert fold_plural("rems") == "rems"


# =============================================================================
# Token Metric Tests
# =============================================================================


class TestTokenContainmentSimilarity:
    """Tests for the default token containment metric."""

    def test_identical_text_scores_one(self):
        """Test identical texts score 1.0."""
        metric = TokenContainmentSimilarity()
        assert metric.score(MEMORY_EXCERPT, MEMORY_EXCERPT) == 1.0

    def test_partial_overlap(self):
        """Test share of claim tokens found in the excerpt."""
        metric = TokenContainmentSimilarity()
        assert metric.score(MEMORY_CLAIM, MEMORY_EXCERPT) == pytest.approx(0.6)

    def test_empty_query_scores_zero(self):
        """Test an empty or stop-word-only query scores 0.0."""
        metric = TokenContainmentSimilarity()
        assert metric.score("", MEMORY_EXCERPT) == 0.0
        assert metric.score("the of and", MEMORY_EXCERPT) == 0.0

    def test_no_overlap_scores_zero(self):
        """Test disjoint vocabularies score 0.0."""
        metric = TokenContainmentSimilarity()
        assert metric.score("Quantum chromodynamics", MEMORY_EXCERPT) == 0.0

    def test_is_asymmetric(self):
        """Test a short claim contained in a long excerpt scores higher than the reverse."""
        metric = TokenContainmentSimilarity()
        assert metric.score("memory consolidation", MEMORY_EXCERPT) == 1.0
        assert metric.score(MEMORY_EXCERPT, "memory consolidation") < 1.0

    def test_satisfies_protocol(self):
        """Test the metric satisfies the SimilarityMetric protocol."""
        assert isinstance(TokenContainmentSimilarity(), SimilarityMetric)


class TestJaccardSimilarity:
    """Tests for the Jaccard metric."""

    def test_symmetric(self):
        """Test Jaccard is symmetric."""
        metric = JaccardSimilarity()
        assert metric.score(MEMORY_CLAIM, MEMORY_EXCERPT) == metric.score(MEMORY_EXCERPT, MEMORY_CLAIM)

    def test_value(self):
        """Test overlap divided by union."""
        metric = JaccardSimilarity()
        assert metric.score(MEMORY_CLAIM, MEMORY_EXCERPT) == pytest.approx(3 / 9, abs=1e-6)

    def test_both_empty(self):
        """Test two empty texts score 0.0."""
        assert JaccardSimilarity().score("", "") == 0.0


# =============================================================================
# Embedding Metric Tests
# =============================================================================


class TestEmbeddingSimilarity:
    """Tests for the embedding cosine metric."""

    def test_identical_vectors(self):
        """Test identical embeddings score 1.0."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert metric.score("north", "north") == 1.0

    def test_orthogonal_vectors(self):
        """Test orthogonal embeddings score 0.0."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert metric.score("north", "east") == 0.0

    def test_negative_cosine_is_clamped(self):
        """Test opposite embeddings are clamped to 0.0."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert metric.score("north", "south") == 0.0

    def test_rounded_cosine(self):
        """Test cosine is rounded to six places."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert metric.score("north", "northeast") == round(2 ** -0.5, 6)

    def test_zero_vector(self):
        """Test a zero vector scores 0.0 instead of dividing by zero."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert metric.score("north", "zero") == 0.0

    def test_vectors_are_cached(self):
        """Test each text is embedded once per metric instance."""
        embeddings = AxisEmbeddings()
        metric = EmbeddingSimilarity(embeddings)
        metric.score("north", "east")
        metric.score("north", "east")
        assert embeddings.calls == 2

    @pytest.mark.asyncio
    async def test_aprepare_embeds_off_the_loop(self):
        """Test prepared texts are scored without synchronous embedding calls."""
        embeddings = AsyncOnlyEmbeddings()
        metric = EmbeddingSimilarity(embeddings)
        await metric.aprepare(["north", "east", "north", "  "])

        assert embeddings.calls == 2
        assert metric.score("north", "east") == 0.0
        assert metric.score("north", "north") == 1.0

    @pytest.mark.asyncio
    async def test_aprepare_skips_cached_texts(self):
        """Test preparing twice embeds each text once."""
        embeddings = AsyncOnlyEmbeddings()
        metric = EmbeddingSimilarity(embeddings)
        await metric.aprepare(["north"])
        await metric.aprepare(["north", "northeast"])
        assert embeddings.calls == 2

    @pytest.mark.asyncio
    async def test_prepare_metric_ignores_token_metrics(self):
        """Test token metrics need no preparation."""
        metric = TokenContainmentSimilarity()
        await prepare_metric(metric, [MEMORY_CLAIM])
        assert metric.score(MEMORY_CLAIM, MEMORY_CLAIM) == 1.0


# =============================================================================
# Metric Resolution Tests
# =============================================================================


class TestGetSimilarityMetric:
    """Tests for metric resolution."""

    def test_default(self):
        """Test None resolves to the default metric."""
        metric = get_similarity_metric()
        assert metric.name == DEFAULT_SIMILARITY_METRIC == "token_containment"

    def test_by_name(self):
        """Test names are case-insensitive."""
        assert isinstance(get_similarity_metric(" Jaccard "), JaccardSimilarity)

    def test_instance_passthrough(self):
        """Test a metric instance is returned as-is."""
        metric = EmbeddingSimilarity(AxisEmbeddings())
        assert get_similarity_metric(metric) is metric

    def test_unknown_name(self):
        """Test unknown names raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_similarity_metric("levenshtein")
        assert exc_info.value.details["field"] == "similarity_metric"

    def test_embedding_name_needs_model(self):
        """Test the bare embedding name is rejected."""
        with pytest.raises(ConfigurationError):
            get_similarity_metric("embedding")

    def test_invalid_object(self):
        """Test objects without a score method are rejected."""
        with pytest.raises(ConfigurationError):
            get_similarity_metric(42)
