"""Fabrication detection through corroboration search.

Claims with no citation, or whose citation gave only moderate or high risk,
are searched against every registered source (and, optionally, an external
lookup). A claim that is neither cited nor corroborated is fabricated.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from scholarly_integrity.errors.exceptions import RegistryError
from scholarly_integrity.errors.handlers import describe_lookup_failure
from scholarly_integrity.errors.policies import RetryPolicy, create_lookup_retry_policy
from scholarly_integrity.registry.registry import SourceRegistry
from scholarly_integrity.registry.similarity import SimilarityMetric, prepare_metric
from scholarly_integrity.state.enums import RiskTier
from scholarly_integrity.state.models import (
    Claim,
    SourceRecord,
    SupportAssessment,
    downgrade_risk_tier,
)

logger = logging.getLogger(__name__)


# Async callable returning extra candidate sources for a claim
SourceLookup = Callable[[Claim], Awaitable[Sequence[SourceRecord]]]

CORROBORATION_TIERS = frozenset({RiskTier.MODERATE, RiskTier.HIGH})


class FabricationDetector:
    """
    Corroborate weakly supported claims and classify fabrication.

    Rules, applied to claims with no marker or a moderate/high matcher tier:
    - Uncited claims start at HIGH.
    - The best source other than the cited one is searched for. A score
      strictly above `corroboration_floor` downgrades the tier one step and
      records the candidate as an inferred match.
    - Without corroboration, a claim whose citation did not resolve and
      whose support is below `support_score_floor` is FABRICATED.
    - A resolved citation is never fabricated.
    - When the external lookup fails or times out and nothing local
      corroborated the claim, the claim is HIGH with an unavailability note.
    - Registry errors raised from inside the lookup are caller bugs and
      propagate.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        similarity: SimilarityMetric,
        support_score_floor: float = 0.25,
        corroboration_floor: float = 0.5,
        top_k: int = 5,
        source_lookup: SourceLookup | None = None,
        per_source_timeout_ms: int = 2000,
        retry_policy: RetryPolicy | None = None,
    ):
        self.registry = registry
        self.similarity = similarity
        self.support_score_floor = support_score_floor
        self.corroboration_floor = corroboration_floor
        self.top_k = top_k
        self.source_lookup = source_lookup
        self.per_source_timeout_ms = per_source_timeout_ms
        self.retry_policy = retry_policy or create_lookup_retry_policy()

    @staticmethod
    def needs_corroboration(assessment: SupportAssessment | None) -> bool:
        """Whether a matcher result should go through corroboration search."""
        return assessment is None or assessment.risk_tier in CORROBORATION_TIERS

    # =========================================================================
    # Candidate Search
    # =========================================================================

    def best_local_candidate(
        self,
        claim: Claim,
        exclude_id: str | None = None,
    ) -> tuple[SourceRecord, float] | None:
        """
        Best registered source for a claim, ignoring one source id.

        Returns:
            (record, score) or None when no other source is registered.
        """
        limit = self.top_k + (1 if exclude_id is not None else 0)
        candidates = [
            (record, score)
            for record, score in self.registry.search(claim.text, limit, self.similarity)
            if record.id != exclude_id
        ][:self.top_k]
        return candidates[0] if candidates else None

    def best_external_candidate(
        self,
        claim: Claim,
        records: Sequence[SourceRecord],
        exclude_id: str | None = None,
    ) -> tuple[SourceRecord, float] | None:
        """Score externally supplied candidates; they are never registered."""
        scored = [
            (record, self.similarity.score(claim.text, record.excerpt_text))
            for record in records
            if record.id != exclude_id
        ]
        if not scored:
            return None
        return min(scored, key=lambda pair: (-pair[1], pair[0].id))

    async def lookup_external(self, claim: Claim) -> list[SourceRecord]:
        """
        Run the external lookup with retries under the per-source deadline.

        Metric preparation for the returned records counts against the
        same deadline.

        Raises:
            asyncio.TimeoutError: If the deadline passes.
            Exception: The last lookup error once retries are exhausted.
        """
        policy = self.retry_policy
        timeout = self.per_source_timeout_ms / 1000
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        async def attempt_chain() -> list[SourceRecord]:
            attempt = 0
            while True:
                try:
                    return list(await self.source_lookup(claim))
                except Exception as e:
                    if not policy.should_attempt_retry(e, attempt):
                        raise
                    delay = policy.get_delay(attempt, deadline - loop.time())
                    logger.debug(
                        f"Lookup for {claim.claim_id} failed (attempt {attempt + 1}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        async def lookup_and_prepare() -> list[SourceRecord]:
            records = await attempt_chain()
            await prepare_metric(self.similarity, [r.excerpt_text for r in records])
            return records

        return await asyncio.wait_for(lookup_and_prepare(), timeout=timeout)

    # =========================================================================
    # Assessment
    # =========================================================================

    def _corroborate(
        self,
        assessment: SupportAssessment,
        candidate: tuple[SourceRecord, float] | None,
        origin: str,
    ) -> SupportAssessment | None:
        """Downgrade an assessment if the candidate clears the floor."""
        if candidate is None:
            return None
        record, score = candidate
        if score <= self.corroboration_floor:
            return None
        return assessment.supersede(
            matched_source_id=record.id,
            support_score=max(assessment.support_score, score),
            risk_tier=downgrade_risk_tier(assessment.risk_tier),
            inferred=True,
            add_notes=[
                f"Corroborated by {origin} source '{record.id}' "
                f"(score {score:.2f} > {self.corroboration_floor:.2f})"
            ],
        )

    async def assess(
        self,
        claim: Claim,
        assessment: SupportAssessment | None = None,
    ) -> SupportAssessment:
        """
        Assess a claim after citation matching.

        Args:
            claim: The claim.
            assessment: CitationMatcher result, or None for an uncited claim.

        Returns:
            The final assessment (the input itself when no check applies).
        """
        if not self.needs_corroboration(assessment):
            return assessment

        if assessment is None:
            assessment = SupportAssessment(
                claim_id=claim.claim_id,
                matched_source_id=None,
                support_score=0.0,
                risk_tier=RiskTier.HIGH,
                notes=["Claim carries no citation marker"],
            )

        cited_id = assessment.matched_source_id
        local = self.best_local_candidate(claim, exclude_id=cited_id)
        corroborated = self._corroborate(assessment, local, "registered")
        if corroborated is not None:
            return corroborated

        if self.source_lookup is not None:
            try:
                external = await self.lookup_external(claim)
            except RegistryError:
                raise
            except Exception as e:
                note = describe_lookup_failure(e, claim.claim_id, self.per_source_timeout_ms)
                return assessment.supersede(risk_tier=RiskTier.HIGH, add_notes=[note])

            corroborated = self._corroborate(
                assessment,
                self.best_external_candidate(claim, external, exclude_id=cited_id),
                "external",
            )
            if corroborated is not None:
                return corroborated

        if local is not None:
            floor_note = (
                f"Best corroborating candidate '{local[0].id}' scored "
                f"{local[1]:.2f}, not above {self.corroboration_floor:.2f}"
            )
        else:
            floor_note = "No other registered source to corroborate against"

        if cited_id is not None:
            return assessment.supersede(add_notes=[floor_note])

        if assessment.support_score < self.support_score_floor:
            logger.debug(f"Claim {claim.claim_id} classified as fabricated")
            return assessment.supersede(
                risk_tier=RiskTier.FABRICATED,
                add_notes=[
                    floor_note,
                    "No resolvable citation and no corroborating source",
                ],
            )

        return assessment.supersede(add_notes=[floor_note])
