"""Tests for verbatim overlap detection."""

import pytest

from scholarly_integrity.integrity import VerbatimOverlapDetector, shingle_overlap, word_shingles
from scholarly_integrity.state import Claim, FindingKind, FindingSeverity, RiskTier, SupportAssessment


COPIED = (
    "Stock price volatility is far too high to be attributed to new "
    "information about future real dividends."
)


def make_assessment(source_id=None, inferred=False, tier=RiskTier.MODERATE):
    return SupportAssessment(
        claim_id="r-c001",
        matched_source_id=source_id,
        support_score=0.9 if source_id else 0.0,
        risk_tier=tier,
        inferred=inferred,
    )


def make_claim(text: str) -> Claim:
    return Claim(claim_id="r-c001", section_id="r", text=text)


class TestShingles:
    """Tests for shingle helpers."""

    def test_short_text_single_shingle(self):
        """Test texts shorter than the shingle size form one shingle."""
        assert word_shingles("Markets are efficient", size=5) == {("markets", "are", "efficient")}

    def test_empty_text(self):
        """Test empty text has no shingles and no overlap."""
        assert word_shingles("") == set()
        assert shingle_overlap("", "anything at all") == 0.0

    def test_identical_text_full_overlap(self):
        """Test identical texts overlap completely."""
        assert shingle_overlap(COPIED, COPIED) == 1.0

    def test_reordered_text_low_overlap(self):
        """Test the same words in a different order barely overlap."""
        shuffled = (
            "Future real dividends and new information about stock price "
            "volatility are far too high to be attributed."
        )
        assert shingle_overlap(shuffled, COPIED) < 0.5


class TestVerbatimOverlapDetector:
    """Tests for VerbatimOverlapDetector.check."""

    def test_uncited_copy_flagged(self, registry):
        """Test an uncited verbatim copy produces a high finding."""
        detector = VerbatimOverlapDetector(registry)
        finding = detector.check(make_claim(COPIED), make_assessment())

        assert finding is not None
        assert finding.kind == FindingKind.VERBATIM_OVERLAP
        assert finding.severity == FindingSeverity.HIGH
        assert finding.evidence["source_id"] == "shiller1981"
        assert finding.evidence["overlap"] == pytest.approx(1.0)
        assert finding.claim_id == "r-c001"

    def test_inferred_match_still_flagged(self, registry):
        """Test corroboration does not excuse verbatim reuse."""
        detector = VerbatimOverlapDetector(registry)
        assessment = make_assessment("shiller1981", inferred=True, tier=RiskTier.MODERATE)
        assert detector.check(make_claim(COPIED), assessment) is not None

    def test_cited_copy_not_flagged(self, registry):
        """Test a claim whose citation resolves to the source is not flagged."""
        detector = VerbatimOverlapDetector(registry)
        assessment = make_assessment("shiller1981", tier=RiskTier.NONE)
        assert detector.check(make_claim(COPIED), assessment) is None

    def test_short_claim_ignored(self, registry):
        """Test claims below the word minimum are never flagged."""
        detector = VerbatimOverlapDetector(registry)
        assert detector.check(make_claim("Stock price volatility is far too high."), make_assessment()) is None

    def test_paraphrase_not_flagged(self, registry):
        """Test a paraphrase stays below the threshold."""
        detector = VerbatimOverlapDetector(registry)
        claim = make_claim(
            "Swings in equity prices exceed what later changes in dividends "
            "could plausibly justify."
        )
        assert detector.check(claim, make_assessment()) is None

    def test_empty_registry(self, empty_registry):
        """Test nothing is flagged without sources."""
        detector = VerbatimOverlapDetector(empty_registry)
        assert detector.check(make_claim(COPIED), make_assessment()) is None

    def test_candidates_ranked_by_given_metric(self, registry):
        """Test the detector ranks candidates with its own metric, not the registry default."""
        shiller_excerpt = registry.lookup("shiller1981").excerpt_text

        class AvoidShiller:
            name = "avoid_shiller"

            def score(self, query: str, candidate: str) -> float:
                return 0.0 if candidate == shiller_excerpt else 1.0

        claim = make_claim(COPIED)
        assert VerbatimOverlapDetector(registry, top_k=1).check(claim, make_assessment()) is not None

        detector = VerbatimOverlapDetector(registry, top_k=1, similarity=AvoidShiller())
        assert detector.check(claim, make_assessment()) is None
