"""EXTRACT_CLAIMS node: segment draft sections into claims."""

import logging

from scholarly_integrity.extraction.claims import ClaimExtractor
from scholarly_integrity.state.enums import ValidationStatus
from scholarly_integrity.state.schema import ValidationState

logger = logging.getLogger(__name__)


def claim_extraction_node(state: ValidationState) -> dict:
    """
    EXTRACT_CLAIMS node.

    Validates the caller's section partition and extracts claims in
    document order.

    Args:
        state: Workflow state with draft_sections and config

    Returns:
        Updated state with sections and claims

    Raises:
        InvalidDraftError: If the draft is malformed
    """
    config = state["validation_config"]
    draft_sections = state.get("draft_sections", [])

    logger.info(f"EXTRACT_CLAIMS: Segmenting {len(draft_sections)} sections")

    extractor = ClaimExtractor(policy=config.claim_policy)
    sections, claims = extractor.extract(draft_sections)

    cited = sum(1 for claim in claims if claim.citation_marker)
    logger.info(f"EXTRACT_CLAIMS: {len(claims)} claims extracted ({cited} with citation markers)")

    return {
        "sections": sections,
        "claims": claims,
        "status": ValidationStatus.CLAIMS_EXTRACTED,
    }
