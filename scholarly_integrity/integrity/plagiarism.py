"""Verbatim overlap (plagiarism risk) detection.

A claim that reproduces a source excerpt nearly word-for-word without an
attribution that resolves to that source is flagged, even when the
excerpt corroborates it.
"""

import logging

from scholarly_integrity.registry.registry import SourceRegistry
from scholarly_integrity.registry.similarity import SimilarityMetric, tokenize
from scholarly_integrity.state.enums import FindingKind, FindingSeverity
from scholarly_integrity.state.models import Claim, Finding, SupportAssessment

logger = logging.getLogger(__name__)


def word_shingles(text: str, size: int = 5) -> set[tuple[str, ...]]:
    """
    Contiguous word n-grams of a text, stop words included.

    Texts shorter than `size` words yield a single shingle of the whole text.
    """
    tokens = tokenize(text)
    if not tokens:
        return set()
    if len(tokens) < size:
        return {tuple(tokens)}
    return {tuple(tokens[i:i + size]) for i in range(len(tokens) - size + 1)}


def shingle_overlap(claim_text: str, excerpt_text: str, size: int = 5) -> float:
    """Share of the claim's shingles that also occur in the excerpt."""
    claim_shingles = word_shingles(claim_text, size)
    if not claim_shingles:
        return 0.0
    excerpt_shingles = word_shingles(excerpt_text, size)
    return round(len(claim_shingles & excerpt_shingles) / len(claim_shingles), 6)


class VerbatimOverlapDetector:
    """
    Flag near-verbatim reuse of source excerpts.

    Args:
        registry: Registry to compare against.
        shingle_size: Words per shingle.
        threshold: Minimum shingle overlap ratio to flag.
        min_words: Claims shorter than this are never flagged.
        top_k: Candidate sources compared per claim.
        similarity: Metric that picks the candidates; the registry default
            when omitted.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        shingle_size: int = 5,
        threshold: float = 0.8,
        min_words: int = 8,
        top_k: int = 5,
        similarity: SimilarityMetric | None = None,
    ):
        self.registry = registry
        self.similarity = similarity
        self.shingle_size = shingle_size
        self.threshold = threshold
        self.min_words = min_words
        self.top_k = top_k

    @staticmethod
    def applies_to(assessment: SupportAssessment) -> bool:
        """Only claims with inferred or absent support are checked."""
        return assessment.matched_source_id is None or assessment.inferred

    def check(self, claim: Claim, assessment: SupportAssessment) -> Finding | None:
        """
        Check one claim for verbatim overlap.

        Returns:
            A HIGH-severity finding, or None.
        """
        if not self.applies_to(assessment):
            return None
        if len(tokenize(claim.text)) < self.min_words:
            return None

        best_id: str | None = None
        best_overlap = 0.0
        for record, _ in self.registry.search(claim.text, self.top_k, self.similarity):
            overlap = shingle_overlap(claim.text, record.excerpt_text, self.shingle_size)
            if overlap > best_overlap:
                best_id, best_overlap = record.id, overlap

        if best_id is None or best_overlap < self.threshold:
            return None

        logger.debug(
            f"Claim {claim.claim_id} overlaps source '{best_id}' ({best_overlap:.0%})"
        )
        return Finding(
            kind=FindingKind.VERBATIM_OVERLAP,
            severity=FindingSeverity.HIGH,
            message=(
                f"Claim reproduces {best_overlap:.0%} of its word sequences from "
                f"source '{best_id}' without a citation to it; quote and cite "
                f"the source or paraphrase"
            ),
            claim_id=claim.claim_id,
            section_id=claim.section_id,
            evidence={"source_id": best_id, "overlap": best_overlap},
        )
