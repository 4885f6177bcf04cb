"""Tests for the fabrication detector.

This module tests:
- Fabricated classification for uncited, uncorroborated claims
- Corroboration downgrades and cited-source exclusion
- External lookups with retries and deadlines
"""

import asyncio

import pytest

from scholarly_integrity.errors import LOOKUP_UNAVAILABLE_NOTE, SourceLookupError, create_lookup_retry_policy
from scholarly_integrity.integrity import FabricationDetector
from scholarly_integrity.registry import SourceRegistry, TokenContainmentSimilarity
from scholarly_integrity.state import Claim, RiskTier, SourceRecord, SupportAssessment


MEMORY_CLAIM = "Memory consolidation occurs during REM sleep."


def make_claim(text: str, marker: str | None = None) -> Claim:
    return Claim(claim_id="s-c001", section_id="s", text=text, citation_marker=marker)


def make_detector(registry: SourceRegistry, **kwargs) -> FabricationDetector:
    return FabricationDetector(registry, TokenContainmentSimilarity(), **kwargs)


class RecordingLookup:
    """Async lookup that replays a script of results and errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self, claim: Claim) -> list[SourceRecord]:
        self.calls += 1
        outcome = self.outcomes[min(self.calls - 1, len(self.outcomes) - 1)]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


# =============================================================================
# Local Corroboration Tests
# =============================================================================


class TestLocalCorroboration:
    """Tests using only the registry."""

    @pytest.mark.asyncio
    async def test_uncited_claim_empty_registry_is_fabricated(self, empty_registry):
        """Test an uncited claim with no sources is fabricated."""
        detector = make_detector(empty_registry)
        assessment = await detector.assess(make_claim("This fact is universally accepted"))

        assert assessment.risk_tier == RiskTier.FABRICATED
        assert assessment.matched_source_id is None
        assert assessment.support_score == 0.0

    @pytest.mark.asyncio
    async def test_uncited_claim_unrelated_sources_is_fabricated(self, registry):
        """Test weak candidates do not corroborate."""
        detector = make_detector(registry)
        assessment = await detector.assess(make_claim("Quantum chromodynamics explains confinement."))
        assert assessment.risk_tier == RiskTier.FABRICATED

    @pytest.mark.asyncio
    async def test_uncited_claim_corroborated(self, registry):
        """Test corroboration downgrades high to moderate and records the match."""
        detector = make_detector(registry)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))

        assert assessment.risk_tier == RiskTier.MODERATE
        assert assessment.matched_source_id == "rodriguez2023"
        assert assessment.inferred is True
        assert assessment.support_score == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_floor_is_strict(self, registry):
        """Test a candidate scoring exactly the floor does not corroborate."""
        detector = make_detector(registry, corroboration_floor=0.6)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))
        assert assessment.risk_tier == RiskTier.FABRICATED

    @pytest.mark.asyncio
    async def test_low_tier_passes_through(self, registry):
        """Test well-supported matcher results are returned unchanged."""
        low = SupportAssessment(
            claim_id="s-c001",
            matched_source_id="rodriguez2023",
            support_score=0.6,
            risk_tier=RiskTier.LOW,
        )
        detector = make_detector(registry)
        assert await detector.assess(make_claim(MEMORY_CLAIM, "[Rodriguez et al., 2023]"), low) is low

    @pytest.mark.asyncio
    async def test_resolved_citation_never_fabricated(self, memory_source):
        """Test a resolved but unsupported citation stays high."""
        registry = SourceRegistry([memory_source])
        high = SupportAssessment(
            claim_id="s-c001",
            matched_source_id="rodriguez2023",
            support_score=0.0,
            risk_tier=RiskTier.HIGH,
        )
        detector = make_detector(registry)
        assessment = await detector.assess(
            make_claim("Quantum chromodynamics explains confinement.", "[Rodriguez et al., 2023]"),
            high,
        )

        assert assessment.risk_tier == RiskTier.HIGH
        assert assessment.matched_source_id == "rodriguez2023"
        assert not assessment.inferred

    @pytest.mark.asyncio
    async def test_cited_source_excluded_from_corroboration(self, memory_source):
        """Test the cited source cannot corroborate its own claim."""
        registry = SourceRegistry([memory_source])
        high = SupportAssessment(
            claim_id="s-c001",
            matched_source_id="rodriguez2023",
            support_score=0.1,
            risk_tier=RiskTier.HIGH,
        )
        detector = make_detector(registry)
        assessment = await detector.assess(make_claim(memory_source.excerpt_text, "[x]"), high)

        assert assessment.risk_tier == RiskTier.HIGH
        assert assessment.inferred is False

    @pytest.mark.asyncio
    async def test_unresolved_marker_corroborated(self, registry):
        """Test an unresolved marker can be corroborated from moderate to low."""
        moderate = SupportAssessment(
            claim_id="s-c001",
            matched_source_id=None,
            support_score=0.0,
            risk_tier=RiskTier.MODERATE,
        )
        detector = make_detector(registry)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM, "[Nobody, 1999]"), moderate)

        assert assessment.risk_tier == RiskTier.LOW
        assert assessment.matched_source_id == "rodriguez2023"
        assert assessment.inferred

    @pytest.mark.asyncio
    async def test_unresolved_marker_uncorroborated_is_fabricated(self, empty_registry):
        """Test a citation to a non-existent source with no support is fabricated."""
        moderate = SupportAssessment(
            claim_id="s-c001",
            matched_source_id=None,
            support_score=0.0,
            risk_tier=RiskTier.MODERATE,
        )
        detector = make_detector(empty_registry)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM, "[Nobody, 1999]"), moderate)
        assert assessment.risk_tier == RiskTier.FABRICATED


# =============================================================================
# External Lookup Tests
# =============================================================================


class TestExternalLookup:
    """Tests for the optional asynchronous source lookup."""

    @pytest.mark.asyncio
    async def test_external_candidate_corroborates(self, empty_registry, memory_source):
        """Test external candidates are scored but never registered."""
        lookup = RecordingLookup([memory_source])
        detector = make_detector(empty_registry, source_lookup=lookup)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))

        assert assessment.risk_tier == RiskTier.MODERATE
        assert assessment.matched_source_id == "rodriguez2023"
        assert len(empty_registry) == 0

    @pytest.mark.asyncio
    async def test_timeout_marks_high(self, empty_registry):
        """Test a lookup exceeding its deadline leaves the claim high with a note."""

        async def slow_lookup(claim):
            await asyncio.sleep(5)
            return []

        detector = make_detector(empty_registry, source_lookup=slow_lookup, per_source_timeout_ms=20)
        assessment = await detector.assess(make_claim("This fact is universally accepted"))

        assert assessment.risk_tier == RiskTier.HIGH
        assert any(note.startswith(LOOKUP_UNAVAILABLE_NOTE) for note in assessment.notes)

    @pytest.mark.asyncio
    async def test_transient_errors_retried(self, empty_registry, memory_source):
        """Test transient lookup errors are retried within the deadline."""
        lookup = RecordingLookup(
            SourceLookupError("busy", service="index"),
            ConnectionError("reset"),
            [memory_source],
        )
        detector = make_detector(
            empty_registry,
            source_lookup=lookup,
            retry_policy=create_lookup_retry_policy(max_attempts=3, initial_interval=0.001),
        )
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))

        assert lookup.calls == 3
        assert assessment.matched_source_id == "rodriguez2023"

    @pytest.mark.asyncio
    async def test_non_transient_error_not_retried(self, empty_registry):
        """Test permanent errors fail fast and leave the claim high."""
        lookup = RecordingLookup(SourceLookupError("bad query", service="index", transient=False))
        detector = make_detector(empty_registry, source_lookup=lookup)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))

        assert lookup.calls == 1
        assert assessment.risk_tier == RiskTier.HIGH
        assert any("(index)" in note for note in assessment.notes)

    @pytest.mark.asyncio
    async def test_local_corroboration_skips_lookup(self, registry):
        """Test the lookup is not consulted when local corroboration succeeds."""
        lookup = RecordingLookup([])
        detector = make_detector(registry, source_lookup=lookup)
        assessment = await detector.assess(make_claim(MEMORY_CLAIM))

        assert lookup.calls == 0
        assert assessment.inferred

    @pytest.mark.asyncio
    async def test_lookup_with_no_candidates_is_fabricated(self, empty_registry):
        """Test a successful but empty lookup still allows fabrication."""
        lookup = RecordingLookup([])
        detector = make_detector(empty_registry, source_lookup=lookup)
        assessment = await detector.assess(make_claim("This fact is universally accepted"))
        assert assessment.risk_tier == RiskTier.FABRICATED
