"""Enums and constants for integrity validation state."""

from enum import Enum


class ValidationStatus(str, Enum):
    """Status of a validation run as it moves through the workflow."""

    INITIALIZED = "initialized"
    CLAIMS_EXTRACTED = "claims_extracted"
    CLAIMS_ASSESSED = "claims_assessed"
    SECTIONS_ALIGNED = "sections_aligned"
    COMPLETED = "completed"


class RegistryPhase(str, Enum):
    """Lifecycle phase of a source registry."""

    LOADING = "loading"        # Registration allowed
    VALIDATING = "validating"  # Read-only; a run is active


class RiskTier(str, Enum):
    """Ordinal citation/fabrication risk of a single claim."""

    NONE = "none"              # Well supported by a cited source
    LOW = "low"                # Supported, minor textual divergence
    MODERATE = "moderate"      # Weak support or unresolvable citation
    HIGH = "high"              # Little support, or lookup unavailable
    FABRICATED = "fabricated"  # No support and no corroborating source


class FindingSeverity(str, Enum):
    """Severity levels for report findings, most severe first."""

    FABRICATED = "fabricated"
    HIGH = "high"
    STRUCTURAL = "structural"  # Sequence violations and paradigm conflicts
    MODERATE = "moderate"
    LOW = "low"


class FindingKind(str, Enum):
    """What a report finding is about."""

    FABRICATED_CLAIM = "fabricated_claim"
    HIGH_RISK_CLAIM = "high_risk_claim"
    VERBATIM_OVERLAP = "verbatim_overlap"
    SEQUENCE_VIOLATION = "sequence_violation"
    PARADIGM_CONFLICT = "paradigm_conflict"
    MODERATE_RISK_CLAIM = "moderate_risk_claim"
    LOW_RISK_CLAIM = "low_risk_claim"


# Ascending risk; index is the ordinal used for downgrading
RISK_TIER_ORDER: list[RiskTier] = [
    RiskTier.NONE,
    RiskTier.LOW,
    RiskTier.MODERATE,
    RiskTier.HIGH,
    RiskTier.FABRICATED,
]

# Lower rank sorts first in a report
SEVERITY_RANK: dict[FindingSeverity, int] = {
    FindingSeverity.FABRICATED: 0,
    FindingSeverity.HIGH: 1,
    FindingSeverity.STRUCTURAL: 2,
    FindingSeverity.MODERATE: 3,
    FindingSeverity.LOW: 4,
}
