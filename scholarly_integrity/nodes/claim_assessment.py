"""ASSESS_CLAIMS node: citation matching, corroboration, and overlap checks.

Every claim is assessed concurrently; results keep claim order.
"""

import asyncio
import logging

from scholarly_integrity.citations.matcher import CitationMatcher
from scholarly_integrity.errors.policies import create_lookup_retry_policy
from scholarly_integrity.integrity.fabrication import FabricationDetector
from scholarly_integrity.integrity.plagiarism import VerbatimOverlapDetector
from scholarly_integrity.registry.similarity import prepare_metric
from scholarly_integrity.state.enums import RiskTier, ValidationStatus
from scholarly_integrity.state.models import Claim, Finding, SupportAssessment
from scholarly_integrity.state.schema import ValidationState

logger = logging.getLogger(__name__)


async def assess_claim(
    claim: Claim,
    matcher: CitationMatcher,
    detector: FabricationDetector,
    overlap_detector: VerbatimOverlapDetector,
) -> tuple[SupportAssessment, Finding | None]:
    """
    Assess one claim.

    Args:
        claim: The claim.
        matcher: Citation matcher for the run.
        detector: Fabrication detector for the run.
        overlap_detector: Verbatim overlap detector for the run.

    Returns:
        The final assessment and an overlap finding (or None).
    """
    assessment = await detector.assess(claim, matcher.match(claim))
    return assessment, overlap_detector.check(claim, assessment)


async def claim_assessment_node(state: ValidationState) -> dict:
    """
    ASSESS_CLAIMS node.

    Runs the citation matcher, the fabrication detector (including the
    optional external lookup) and the verbatim overlap detector for every
    claim.

    Args:
        state: Workflow state with claims, registry and config

    Returns:
        Updated state with assessments and overlap findings
    """
    config = state["validation_config"]
    registry = state["registry"]
    claims = state.get("claims", [])

    logger.info(f"ASSESS_CLAIMS: Assessing {len(claims)} claims against {len(registry)} sources")

    metric = config.metric()
    await prepare_metric(
        metric,
        [claim.text for claim in claims]
        + [registry.lookup(source_id).excerpt_text for source_id in registry.ids()],
    )
    matcher = CitationMatcher(registry, metric, config.risk_thresholds)
    detector = FabricationDetector(
        registry,
        metric,
        support_score_floor=config.support_score_floor,
        corroboration_floor=config.corroboration_floor,
        top_k=config.corroboration_top_k,
        source_lookup=state.get("source_lookup"),
        per_source_timeout_ms=config.per_source_timeout_ms,
        retry_policy=create_lookup_retry_policy(max_attempts=config.lookup_max_attempts),
    )
    overlap_detector = VerbatimOverlapDetector(
        registry,
        shingle_size=config.shingle_size,
        threshold=config.verbatim_overlap_threshold,
        min_words=config.min_verbatim_words,
        top_k=config.corroboration_top_k,
        similarity=metric,
    )

    results = await asyncio.gather(*[
        assess_claim(claim, matcher, detector, overlap_detector)
        for claim in claims
    ])

    assessments = [assessment for assessment, _ in results]
    overlap_findings = [finding for _, finding in results if finding is not None]

    tiers = {tier.value: 0 for tier in RiskTier}
    for assessment in assessments:
        tiers[assessment.risk_tier.value] += 1
    logger.info(f"ASSESS_CLAIMS: Risk tiers {tiers}; {len(overlap_findings)} verbatim overlaps")

    return {
        "assessments": assessments,
        "overlap_findings": overlap_findings,
        "status": ValidationStatus.CLAIMS_ASSESSED,
    }
