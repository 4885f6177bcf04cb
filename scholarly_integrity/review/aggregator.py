"""Integrity report aggregation.

Combines per-claim assessments, per-section alignments, and structural
findings into one IntegrityReport.

Categories:
- Citation support: How well cited claims are backed by their sources
- Corroboration: Share of claims that are neither fabricated nor high risk
- Originality: Share of claims free of verbatim overlap
- Paradigm consistency: Share of sections without paradigm conflicts
- Sequence: Adherence to the cognitive step order
"""

import logging

from scholarly_integrity.state.enums import (
    FindingKind,
    FindingSeverity,
    RiskTier,
    SEVERITY_RANK,
)
from scholarly_integrity.state.models import (
    Claim,
    DocumentSection,
    Finding,
    IntegrityReport,
    ParadigmAlignment,
    SupportAssessment,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Category Configuration
# =============================================================================


INTEGRITY_CATEGORIES = {
    "citation_support": {
        "name": "Citation support",
        "threshold": 0.9,
        "recommendation": "Verify all citations and ensure each marker resolves to a registered source",
    },
    "corroboration": {
        "name": "Corroboration",
        "threshold": 0.9,
        "recommendation": "Review uncited and weakly supported claims for potential fabrication or errors",
    },
    "originality": {
        "name": "Originality",
        "threshold": 0.8,
        "recommendation": "Review flagged content for potential plagiarism and add proper citations",
    },
    "paradigm_consistency": {
        "name": "Paradigm consistency",
        "threshold": 1.0,
        "recommendation": "Align each section's vocabulary and intended skills with its declared paradigm",
    },
    "sequence": {
        "name": "Sequence",
        "threshold": 1.0,
        "recommendation": "Reorder sections to follow the cognitive step sequence",
    },
}

FABRICATION_RECOMMENDATION = "Remove or substantiate claims that no registered source supports"
EXCELLENT_RECOMMENDATION = "Excellent integrity score - document meets high academic standards"

SEQUENCE_PENALTY_PER_VIOLATION = 0.2

_TIER_FINDINGS: dict[RiskTier, tuple[FindingKind, FindingSeverity]] = {
    RiskTier.FABRICATED: (FindingKind.FABRICATED_CLAIM, FindingSeverity.FABRICATED),
    RiskTier.HIGH: (FindingKind.HIGH_RISK_CLAIM, FindingSeverity.HIGH),
    RiskTier.MODERATE: (FindingKind.MODERATE_RISK_CLAIM, FindingSeverity.MODERATE),
    RiskTier.LOW: (FindingKind.LOW_RISK_CLAIM, FindingSeverity.LOW),
}


# =============================================================================
# Findings
# =============================================================================


def claim_finding(claim: Claim, assessment: SupportAssessment) -> Finding | None:
    """Turn a claim's risk tier into a finding (none for NONE)."""
    if assessment.risk_tier not in _TIER_FINDINGS:
        return None
    kind, severity = _TIER_FINDINGS[assessment.risk_tier]

    if assessment.risk_tier == RiskTier.FABRICATED:
        message = "Claim has no resolvable citation and no corroborating source"
    elif assessment.matched_source_id is None:
        message = f"Claim is {assessment.risk_tier.value} risk with no supporting source"
    else:
        origin = "corroborating" if assessment.inferred else "cited"
        message = (
            f"Claim is {assessment.risk_tier.value} risk: {origin} source "
            f"'{assessment.matched_source_id}' gives support "
            f"{assessment.support_score:.2f}"
        )

    return Finding(
        kind=kind,
        severity=severity,
        message=message,
        claim_id=claim.claim_id,
        section_id=claim.section_id,
        evidence={
            "text": claim.text,
            "citation_marker": claim.citation_marker,
            "matched_source_id": assessment.matched_source_id,
            "support_score": assessment.support_score,
            "notes": list(assessment.notes),
        },
    )


def conflict_findings(alignment: ParadigmAlignment) -> list[Finding]:
    """One structural finding per paradigm conflict."""
    return [
        Finding(
            kind=FindingKind.PARADIGM_CONFLICT,
            severity=FindingSeverity.STRUCTURAL,
            message=conflict,
            section_id=alignment.section_id,
            evidence={"paradigm": alignment.paradigm, "skills": list(alignment.skills)},
        )
        for conflict in alignment.conflicts
    ]


def _document_ordered_findings(
    sections: list[DocumentSection],
    claims: list[Claim],
    assessments: dict[str, SupportAssessment],
    alignments: dict[str, ParadigmAlignment],
    structural: list[Finding],
) -> list[Finding]:
    """All findings in document order; section findings precede claim findings."""
    by_section: dict[str, list[Claim]] = {}
    for claim in claims:
        by_section.setdefault(claim.section_id, []).append(claim)

    section_ids = {section.section_id for section in sections}
    findings: list[Finding] = []

    for section in sorted(sections, key=lambda s: s.order):
        findings.extend(
            f for f in structural
            if f.section_id == section.section_id and f.claim_id is None
        )
        if section.section_id in alignments:
            findings.extend(conflict_findings(alignments[section.section_id]))

        for claim in sorted(by_section.get(section.section_id, []), key=lambda c: c.position):
            assessment = assessments.get(claim.claim_id)
            if assessment is not None:
                finding = claim_finding(claim, assessment)
                if finding is not None:
                    findings.append(finding)
            findings.extend(f for f in structural if f.claim_id == claim.claim_id)

    # Document-level findings (e.g. an incomplete sequence) close the list
    findings.extend(
        f for f in structural
        if f.claim_id is None and f.section_id not in section_ids
    )
    return findings


# =============================================================================
# Scores
# =============================================================================


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def compute_overall_score(
    assessments: list[SupportAssessment],
    conflict_count: int,
    conflict_penalty: float = 0.5,
) -> float:
    """
    Overall integrity score.

    overall = clamp((sum(support) - penalty * conflicts) / max(claims, 1)),
    with a numerator baseline of 1.0 when there are no claims.
    """
    if assessments:
        numerator = sum(a.support_score for a in assessments)
    else:
        numerator = 1.0
    numerator -= conflict_penalty * conflict_count
    return round(_clamp(numerator / max(len(assessments), 1)), 6)


def compute_category_scores(
    claims: list[Claim],
    assessments: list[SupportAssessment],
    alignments: list[ParadigmAlignment],
    findings: list[Finding],
) -> dict[str, float]:
    """Per-category scores in [0, 1]; an empty category scores 1.0."""
    by_claim = {a.claim_id: a for a in assessments}

    cited = [c for c in claims if c.citation_marker]
    if cited:
        citation_support = sum(
            by_claim[c.claim_id].support_score
            for c in cited
            if c.claim_id in by_claim
            and by_claim[c.claim_id].matched_source_id is not None
            and not by_claim[c.claim_id].inferred
        ) / len(cited)
    else:
        citation_support = 0.0 if claims else 1.0

    if assessments:
        risky = sum(
            1 for a in assessments
            if a.risk_tier in (RiskTier.FABRICATED, RiskTier.HIGH)
        )
        corroboration = 1 - risky / len(assessments)
        overlaps = sum(1 for f in findings if f.kind == FindingKind.VERBATIM_OVERLAP)
        originality = 1 - overlaps / len(assessments)
    else:
        corroboration = 1.0
        originality = 1.0

    if alignments:
        paradigm_consistency = sum(1 for a in alignments if a.consistent) / len(alignments)
    else:
        paradigm_consistency = 1.0

    violations = sum(1 for f in findings if f.kind == FindingKind.SEQUENCE_VIOLATION)
    sequence = 1 - SEQUENCE_PENALTY_PER_VIOLATION * violations

    return {
        "citation_support": round(_clamp(citation_support), 6),
        "corroboration": round(_clamp(corroboration), 6),
        "originality": round(_clamp(originality), 6),
        "paradigm_consistency": round(_clamp(paradigm_consistency), 6),
        "sequence": round(_clamp(sequence), 6),
    }


def generate_recommendations(
    category_scores: dict[str, float],
    overall_score: float,
    has_fabricated: bool,
) -> list[str]:
    """Recommendations for every category below its threshold."""
    recommendations = []

    if has_fabricated:
        recommendations.append(FABRICATION_RECOMMENDATION)

    for key, category in INTEGRITY_CATEGORIES.items():
        if category_scores.get(key, 1.0) < category["threshold"]:
            recommendations.append(category["recommendation"])

    if overall_score >= 0.9 and not recommendations:
        recommendations.append(EXCELLENT_RECOMMENDATION)

    return recommendations


# =============================================================================
# Aggregation
# =============================================================================


class IntegrityReportAggregator:
    """
    Build integrity reports.

    Aggregation is a pure function of its inputs: the same inputs always
    produce an equal report.

    Args:
        conflict_penalty: Score deducted per paradigm conflict.
        pass_threshold: Minimum overall score for a passing report.
    """

    def __init__(self, conflict_penalty: float = 0.5, pass_threshold: float = 0.7):
        self.conflict_penalty = conflict_penalty
        self.pass_threshold = pass_threshold

    def aggregate(
        self,
        sections: list[DocumentSection],
        claims: list[Claim],
        assessments: list[SupportAssessment],
        alignments: list[ParadigmAlignment],
        structural_findings: list[Finding] | None = None,
    ) -> IntegrityReport:
        """
        Aggregate a validation run into a report.

        Args:
            sections: Document sections.
            claims: Claims in document order.
            assessments: One final assessment per claim.
            alignments: One alignment per section.
            structural_findings: Sequence violations and verbatim overlaps.

        Returns:
            The IntegrityReport, findings sorted by severity with document
            order kept within each severity.
        """
        structural = list(structural_findings or [])

        findings = _document_ordered_findings(
            sections,
            claims,
            {a.claim_id: a for a in assessments},
            {a.section_id: a for a in alignments},
            structural,
        )
        findings.sort(key=lambda f: SEVERITY_RANK[f.severity])

        conflict_count = sum(len(a.conflicts) for a in alignments)
        overall_score = compute_overall_score(
            assessments, conflict_count, self.conflict_penalty
        )
        category_scores = compute_category_scores(claims, assessments, alignments, findings)
        has_fabricated = any(a.risk_tier == RiskTier.FABRICATED for a in assessments)
        passed = overall_score >= self.pass_threshold and not has_fabricated

        logger.debug(
            f"Aggregated {len(claims)} claims, {len(findings)} findings; "
            f"overall {overall_score:.2f}, passed={passed}"
        )

        return IntegrityReport(
            sections=sections,
            claims=claims,
            assessments=assessments,
            alignments=alignments,
            findings=findings,
            overall_score=overall_score,
            category_scores=category_scores,
            passed=passed,
            recommendations=generate_recommendations(
                category_scores, overall_score, has_fabricated
            ),
        )


def aggregate_report(
    sections: list[DocumentSection],
    claims: list[Claim],
    assessments: list[SupportAssessment],
    alignments: list[ParadigmAlignment],
    structural_findings: list[Finding] | None = None,
    conflict_penalty: float = 0.5,
    pass_threshold: float = 0.7,
) -> IntegrityReport:
    """Functional form of IntegrityReportAggregator.aggregate."""
    aggregator = IntegrityReportAggregator(conflict_penalty, pass_threshold)
    return aggregator.aggregate(
        sections, claims, assessments, alignments, structural_findings
    )
