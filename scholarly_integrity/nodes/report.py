"""AGGREGATE_REPORT node: build the integrity report."""

import logging

from scholarly_integrity.review.aggregator import IntegrityReportAggregator
from scholarly_integrity.state.enums import ValidationStatus
from scholarly_integrity.state.schema import ValidationState

logger = logging.getLogger(__name__)


def report_node(state: ValidationState) -> dict:
    """
    AGGREGATE_REPORT node.

    Args:
        state: Workflow state after assessment and alignment

    Returns:
        Updated state with the report and COMPLETED status
    """
    config = state["validation_config"]

    aggregator = IntegrityReportAggregator(
        conflict_penalty=config.conflict_penalty,
        pass_threshold=config.pass_threshold,
    )
    report = aggregator.aggregate(
        sections=state.get("sections", []),
        claims=state.get("claims", []),
        assessments=state.get("assessments", []),
        alignments=state.get("alignments", []),
        structural_findings=(
            state.get("sequence_findings", []) + state.get("overlap_findings", [])
        ),
    )

    logger.info(
        f"AGGREGATE_REPORT: overall {report.overall_score:.2f}, "
        f"{len(report.findings)} findings, passed={report.passed}"
    )

    return {
        "report": report,
        "status": ValidationStatus.COMPLETED,
    }
