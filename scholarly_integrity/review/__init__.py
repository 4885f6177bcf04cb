"""Report aggregation for integrity validation."""

from scholarly_integrity.review.aggregator import (
    INTEGRITY_CATEGORIES,
    IntegrityReportAggregator,
    aggregate_report,
    claim_finding,
    compute_category_scores,
    compute_overall_score,
    conflict_findings,
    generate_recommendations,
)

__all__ = [
    "INTEGRITY_CATEGORIES",
    "IntegrityReportAggregator",
    "aggregate_report",
    "claim_finding",
    "compute_category_scores",
    "compute_overall_score",
    "conflict_findings",
    "generate_recommendations",
]
