"""State management for integrity validation runs."""

from scholarly_integrity.state.enums import (
    ValidationStatus,
    RegistryPhase,
    RiskTier,
    FindingSeverity,
    FindingKind,
    RISK_TIER_ORDER,
    SEVERITY_RANK,
)
from scholarly_integrity.state.models import (
    SourceRecord,
    DraftSection,
    DocumentSection,
    Claim,
    ParadigmProfile,
    SkillProfile,
    SectionProfile,
    RiskThresholds,
    SupportAssessment,
    ParadigmAlignment,
    Finding,
    IntegrityReport,
    downgrade_risk_tier,
    risk_tier_for_score,
)
from scholarly_integrity.state.schema import ValidationState

__all__ = [
    # Enums
    "ValidationStatus",
    "RegistryPhase",
    "RiskTier",
    "FindingSeverity",
    "FindingKind",
    "RISK_TIER_ORDER",
    "SEVERITY_RANK",
    # Models
    "SourceRecord",
    "DraftSection",
    "DocumentSection",
    "Claim",
    "ParadigmProfile",
    "SkillProfile",
    "SectionProfile",
    "RiskThresholds",
    "SupportAssessment",
    "ParadigmAlignment",
    "Finding",
    "IntegrityReport",
    "downgrade_risk_tier",
    "risk_tier_for_score",
    # Schema
    "ValidationState",
]
