"""ALIGN_SECTIONS node: paradigm/skill alignment and sequence checking."""

import asyncio
import logging

from scholarly_integrity.cognition.mapper import ParadigmCognitiveMapper
from scholarly_integrity.state.enums import ValidationStatus
from scholarly_integrity.state.models import Claim, DocumentSection, ParadigmAlignment
from scholarly_integrity.state.schema import ValidationState

logger = logging.getLogger(__name__)


async def section_alignment_node(state: ValidationState) -> dict:
    """
    ALIGN_SECTIONS node.

    Aligns every section concurrently, then runs the cognitive sequence
    state machine over the whole document.

    Args:
        state: Workflow state with sections, claims and config

    Returns:
        Updated state with alignments and sequence findings
    """
    config = state["validation_config"]
    sections = state.get("sections", [])
    claims = state.get("claims", [])
    declared_paradigm = state.get("declared_paradigm")

    logger.info(f"ALIGN_SECTIONS: Aligning {len(sections)} sections")

    mapper = ParadigmCognitiveMapper(
        paradigm_table=config.paradigm_table,
        skill_table=config.skill_table,
        section_catalog=config.section_catalog,
        cognitive_steps=config.cognitive_steps,
        default_paradigm=config.default_paradigm,
    )

    claims_by_section: dict[str, list[Claim]] = {}
    for claim in claims:
        claims_by_section.setdefault(claim.section_id, []).append(claim)

    async def align(section: DocumentSection) -> ParadigmAlignment:
        return mapper.align_section(
            section,
            claims_by_section.get(section.section_id, []),
            declared_paradigm,
        )

    alignments = list(await asyncio.gather(*[align(section) for section in sections]))
    sequence_findings = mapper.check_sequence(sections)

    conflicted = sum(1 for alignment in alignments if not alignment.consistent)
    logger.info(
        f"ALIGN_SECTIONS: {conflicted} sections with conflicts, "
        f"{len(sequence_findings)} sequence violations"
    )

    return {
        "alignments": alignments,
        "sequence_findings": sequence_findings,
        "status": ValidationStatus.SECTIONS_ALIGNED,
    }
