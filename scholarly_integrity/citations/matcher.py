"""Citation matcher: resolve markers to sources and score textual support."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scholarly_integrity.citations.formatter import (
    author_surnames,
    format_inline_citation,
    normalize_surname,
)
from scholarly_integrity.citations.markers import (
    CitationReference,
    parse_citation_marker,
)
from scholarly_integrity.state.enums import RiskTier
from scholarly_integrity.state.models import (
    Claim,
    RiskThresholds,
    SourceRecord,
    SupportAssessment,
)

if TYPE_CHECKING:
    from scholarly_integrity.registry.registry import SourceRegistry
    from scholarly_integrity.registry.similarity import SimilarityMetric

logger = logging.getLogger(__name__)


class CitationMatcher:
    """
    Resolve citation markers against a source registry.

    Resolution policy, per parsed reference:
    1. A reference whose key equals a registered id resolves directly.
    2. Otherwise surname + year are matched against source metadata;
       sources whose first author carries the surname are preferred, then
       sources matching more of the cited surnames.

    When several sources qualify, the one with the best textual support
    wins, ties broken by ascending id. A resolved citation is never
    classified as fabricated.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        similarity: SimilarityMetric,
        thresholds: RiskThresholds | None = None,
    ):
        self.registry = registry
        self.similarity = similarity
        self.thresholds = thresholds or RiskThresholds()

    # =========================================================================
    # Resolution
    # =========================================================================

    def _author_year_candidates(self, reference: CitationReference) -> list[SourceRecord]:
        """Sources matching a reference's first surname and year, best first."""
        first = normalize_surname(reference.surnames[0])
        cited = {normalize_surname(s) for s in reference.surnames}
        candidates = self.registry.find_by_author_year(reference.surnames[0], reference.year)

        def priority(record: SourceRecord) -> tuple[int, int]:
            surnames = author_surnames(record.authors)
            first_author_match = 1 if surnames and surnames[0] == first else 0
            return first_author_match, len(cited & set(surnames))

        if not candidates:
            return []
        best = max(priority(c) for c in candidates)
        return [c for c in candidates if priority(c) == best]

    def resolve(self, marker: str) -> list[SourceRecord]:
        """
        Resolve a marker to every qualifying source.

        Args:
            marker: Verbatim citation marker.

        Returns:
            Candidate sources in ascending id order (empty if unresolvable).
        """
        found: dict[str, SourceRecord] = {}
        for reference in parse_citation_marker(marker):
            if reference.key is not None:
                record = self.registry.get(reference.key)
                if record is not None:
                    found[record.id] = record
            elif reference.is_author_year:
                for record in self._author_year_candidates(reference):
                    found[record.id] = record
        return [found[i] for i in sorted(found)]

    # =========================================================================
    # Assessment
    # =========================================================================

    def match(self, claim: Claim) -> SupportAssessment | None:
        """
        Assess a claim through its citation marker.

        Args:
            claim: Claim to assess.

        Returns:
            A SupportAssessment, or None when the claim carries no marker.
        """
        if not claim.citation_marker:
            return None

        candidates = self.resolve(claim.citation_marker)
        if not candidates:
            logger.debug(f"Unresolvable marker on {claim.claim_id}: {claim.citation_marker}")
            return SupportAssessment(
                claim_id=claim.claim_id,
                matched_source_id=None,
                support_score=0.0,
                risk_tier=RiskTier.MODERATE,
                notes=[
                    f"Citation marker '{claim.citation_marker}' could not be "
                    f"resolved to any registered source"
                ],
            )

        scored = sorted(
            ((self.similarity.score(claim.text, c.excerpt_text), c) for c in candidates),
            key=lambda pair: (-pair[0], pair[1].id),
        )
        score, source = scored[0]
        tier = self.thresholds.tier_for(score)

        notes = [
            f"Citation '{claim.citation_marker}' resolved to source '{source.id}' "
            f"{format_inline_citation(source.authors, source.publication_year)}; "
            f"support score {score:.2f} ({tier.value} risk)"
        ]
        if len(scored) > 1:
            notes.append(
                f"Marker matched {len(scored)} sources; kept the best supported"
            )

        return SupportAssessment(
            claim_id=claim.claim_id,
            matched_source_id=source.id,
            support_score=score,
            risk_tier=tier,
            notes=notes,
        )
