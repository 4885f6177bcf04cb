"""Scholarly integrity engine.

Validates the academic integrity and cognitive alignment of a scholarly
draft against a registry of retrieved sources, producing one explainable
IntegrityReport per run.

Example:
    from scholarly_integrity import SourceRegistry, SourceRecord, DraftSection, validate

    registry = SourceRegistry([SourceRecord(id="rod2023", title="...", ...)])
    report = validate([DraftSection(section_id="intro", name="Introduction", text="...")], registry)
"""

from scholarly_integrity.config.validation import ValidationConfig, load_config
from scholarly_integrity.errors.exceptions import (
    ConfigurationError,
    DuplicateIdError,
    IntegrityEngineError,
    InvalidDraftError,
    NotFoundError,
    RegistryError,
    RegistryFrozenError,
    SourceLookupError,
)
from scholarly_integrity.graphs.validation_workflow import avalidate, validate
from scholarly_integrity.registry.registry import SourceRegistry
from scholarly_integrity.state.enums import FindingKind, FindingSeverity, RiskTier
from scholarly_integrity.state.models import (
    Claim,
    DocumentSection,
    DraftSection,
    Finding,
    IntegrityReport,
    ParadigmAlignment,
    SourceRecord,
    SupportAssessment,
)

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "validate",
    "avalidate",
    "ValidationConfig",
    "load_config",
    "SourceRegistry",
    # Models
    "Claim",
    "DocumentSection",
    "DraftSection",
    "Finding",
    "IntegrityReport",
    "ParadigmAlignment",
    "SourceRecord",
    "SupportAssessment",
    "FindingKind",
    "FindingSeverity",
    "RiskTier",
    # Errors
    "IntegrityEngineError",
    "ConfigurationError",
    "RegistryError",
    "DuplicateIdError",
    "NotFoundError",
    "RegistryFrozenError",
    "InvalidDraftError",
    "SourceLookupError",
]
