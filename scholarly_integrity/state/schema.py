"""ValidationState schema for the integrity workflow.

This module defines the state object that flows through every node of the
LangGraph validation workflow. It uses TypedDict with optional fields so
that each node only returns the keys it produces.
"""

from typing import Any

from typing_extensions import TypedDict

from scholarly_integrity.state.enums import ValidationStatus
from scholarly_integrity.state.models import (
    Claim,
    DocumentSection,
    DraftSection,
    Finding,
    IntegrityReport,
    ParadigmAlignment,
    SupportAssessment,
)


class ValidationState(TypedDict, total=False):
    """
    Central state schema for one validation run.

    The state is structured in logical groups:
    1. Run inputs - draft, registry and configuration
    2. Extraction - sections and claims
    3. Assessment - per-claim support and overlap findings
    4. Alignment - per-section paradigm/skill assignment
    5. Output - the aggregated report and run status

    Usage with LangGraph:
        ```python
        from langgraph.graph import StateGraph
        from scholarly_integrity.state import ValidationState

        graph = StateGraph(ValidationState)
        graph.add_node("extract_claims", claim_extraction_node)
        ```
    """

    # =========================================================================
    # Run Inputs
    # =========================================================================

    draft_sections: list[DraftSection]

    # SourceRegistry and ValidationConfig; typed loosely because LangGraph
    # resolves these annotations at graph construction time
    registry: Any
    validation_config: Any

    declared_paradigm: str | None

    # Optional async callable: (Claim) -> list[SourceRecord]
    source_lookup: Any

    # =========================================================================
    # Extraction
    # =========================================================================

    sections: list[DocumentSection]
    claims: list[Claim]

    # =========================================================================
    # Assessment
    # =========================================================================

    assessments: list[SupportAssessment]
    overlap_findings: list[Finding]

    # =========================================================================
    # Alignment
    # =========================================================================

    alignments: list[ParadigmAlignment]
    sequence_findings: list[Finding]

    # =========================================================================
    # Output
    # =========================================================================

    report: IntegrityReport
    status: ValidationStatus
