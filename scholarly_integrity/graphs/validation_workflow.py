"""Integrity validation workflow graph assembly.

This module wires the validation nodes into a LangGraph workflow and
exposes the public entry points:

    START -> EXTRACT_CLAIMS -> ASSESS_CLAIMS -> ALIGN_SECTIONS
          -> AGGREGATE_REPORT -> END
"""

import asyncio
import concurrent.futures
import logging
from typing import Any, Iterable, Mapping

from langgraph.graph import END, START, StateGraph

from scholarly_integrity.cognition.taxonomy import normalize_paradigm_name
from scholarly_integrity.config.settings import settings
from scholarly_integrity.config.validation import ValidationConfig, load_config
from scholarly_integrity.errors.exceptions import ConfigurationError, IntegrityEngineError
from scholarly_integrity.errors.handlers import log_error_with_context
from scholarly_integrity.integrity.fabrication import SourceLookup
from scholarly_integrity.nodes import (
    claim_assessment_node,
    claim_extraction_node,
    report_node,
    section_alignment_node,
)
from scholarly_integrity.registry.registry import SourceRegistry
from scholarly_integrity.state.enums import ValidationStatus
from scholarly_integrity.state.models import DraftSection, IntegrityReport
from scholarly_integrity.state.schema import ValidationState

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# All nodes in workflow order
VALIDATION_NODES = [
    "extract_claims",
    "assess_claims",
    "align_sections",
    "aggregate_report",
]


# =============================================================================
# Graph Construction
# =============================================================================


def create_validation_workflow(debug: bool = False):
    """
    Create the compiled validation workflow graph.

    Args:
        debug: Set the `scholarly_integrity` logger to DEBUG. The level is
            process-wide and stays in place after the run; a later call
            with debug=False does not reset it.

    Returns:
        Compiled StateGraph ready for `ainvoke`

    Example:
        workflow = create_validation_workflow()
        final_state = await workflow.ainvoke({
            "draft_sections": sections,
            "registry": registry,
            "validation_config": ValidationConfig(),
        })
    """
    if debug:
        logging.getLogger("scholarly_integrity").setLevel(logging.DEBUG)
        logger.debug("Creating validation workflow with debug enabled")

    workflow = StateGraph(ValidationState)

    workflow.add_node("extract_claims", claim_extraction_node)
    workflow.add_node("assess_claims", claim_assessment_node)
    workflow.add_node("align_sections", section_alignment_node)
    workflow.add_node("aggregate_report", report_node)

    workflow.add_edge(START, "extract_claims")
    workflow.add_edge("extract_claims", "assess_claims")
    workflow.add_edge("assess_claims", "align_sections")
    workflow.add_edge("align_sections", "aggregate_report")
    workflow.add_edge("aggregate_report", END)

    return workflow.compile()


# =============================================================================
# Entry Points
# =============================================================================


async def avalidate(
    draft_sections: Iterable[DraftSection | dict[str, Any]],
    registry: SourceRegistry,
    config: ValidationConfig | Mapping[str, Any] | None = None,
    *,
    declared_paradigm: str | None = None,
    source_lookup: SourceLookup | None = None,
) -> IntegrityReport:
    """
    Validate a draft against a source registry.

    The registry is read-only for the duration of the run. Cancelling the
    run discards all partial state.

    Args:
        draft_sections: Caller-partitioned draft sections.
        registry: Registry populated with the run's sources.
        config: Run configuration (ValidationConfig or mapping).
        declared_paradigm: Document-level paradigm, used for sections
            without a paradigm hint.
        source_lookup: Optional async callable returning extra candidate
            sources for a claim.

    Returns:
        The IntegrityReport for the draft.

    Raises:
        ConfigurationError: If the config or registry is invalid.
        InvalidDraftError: If the draft is malformed.
    """
    run_config = load_config(config)
    if not isinstance(registry, SourceRegistry):
        raise ConfigurationError(
            "registry must be a SourceRegistry",
            field="registry",
            value=type(registry).__name__,
        )

    workflow = create_validation_workflow(debug=settings.debug)
    initial_state: ValidationState = {
        "draft_sections": list(draft_sections),
        "registry": registry,
        "validation_config": run_config,
        "declared_paradigm": (
            normalize_paradigm_name(declared_paradigm) if declared_paradigm else None
        ),
        "source_lookup": source_lookup,
        "status": ValidationStatus.INITIALIZED,
    }

    with registry.validation_run():
        try:
            final_state = await workflow.ainvoke(initial_state)
        except IntegrityEngineError as e:
            log_error_with_context(e, stage="validation")
            raise

    return final_state["report"]


def validate(
    draft_sections: Iterable[DraftSection | dict[str, Any]],
    registry: SourceRegistry,
    config: ValidationConfig | Mapping[str, Any] | None = None,
    *,
    declared_paradigm: str | None = None,
    source_lookup: SourceLookup | None = None,
) -> IntegrityReport:
    """
    Synchronous wrapper for `avalidate`.

    Safe to call from inside a running event loop: the run then executes
    on a worker thread with its own loop.
    """
    run = avalidate(
        draft_sections,
        registry,
        config,
        declared_paradigm=declared_paradigm,
        source_lookup=source_lookup,
    )

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No event loop running in this thread
        return asyncio.run(run)

    # If in async context, run on a new loop in a worker thread
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(asyncio.run, run)
        return future.result()
