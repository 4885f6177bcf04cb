"""Validation run configuration.

ValidationConfig gathers every tunable of a run: thresholds, the similarity
metric, taxonomy tables, and the claim policy. Invalid configuration is
rejected with ConfigurationError before a run starts.
"""

import logging
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from scholarly_integrity.cognition.taxonomy import (
    DEFAULT_COGNITIVE_STEPS,
    DEFAULT_PARADIGM,
    DEFAULT_PARADIGM_TABLE,
    DEFAULT_SECTION_CATALOG,
    DEFAULT_SKILL_TABLE,
    normalize_paradigm_name,
)
from scholarly_integrity.config.settings import Settings, settings as default_settings
from scholarly_integrity.errors.exceptions import ConfigurationError
from scholarly_integrity.extraction.claims import ClaimPolicy
from scholarly_integrity.registry.similarity import (
    DEFAULT_SIMILARITY_METRIC,
    SimilarityMetric,
    get_similarity_metric,
)
from scholarly_integrity.state.models import (
    ParadigmProfile,
    RiskThresholds,
    SectionProfile,
    SkillProfile,
)

logger = logging.getLogger(__name__)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors(include_url=False):
        location = ".".join(str(loc) for loc in item["loc"]) or "config"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class ValidationConfig(BaseModel):
    """
    Configuration of one validation run.

    Construction raises ConfigurationError (never a bare pydantic error).

    Example:
        config = ValidationConfig(support_score_floor=0.3, similarity_metric="jaccard")
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # =========================================================================
    # Support and Risk
    # =========================================================================

    support_score_floor: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Below this support, an uncited, uncorroborated claim is fabricated"
    )
    corroboration_floor: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="A corroborating source must score strictly above this"
    )
    similarity_metric: Any = Field(
        default=DEFAULT_SIMILARITY_METRIC,
        description="Metric name ('token_containment', 'jaccard') or a metric instance"
    )
    risk_thresholds: RiskThresholds = Field(default_factory=RiskThresholds)
    corroboration_top_k: int = Field(
        default=5,
        ge=1,
        description="Sources considered per corroboration search"
    )

    # =========================================================================
    # External Lookup
    # =========================================================================

    per_source_timeout_ms: int = Field(
        default=2000,
        gt=0,
        description="Deadline for one external source lookup, retries included"
    )
    lookup_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per external lookup within the deadline"
    )

    # =========================================================================
    # Taxonomy
    # =========================================================================

    paradigm_table: list[ParadigmProfile] = Field(
        default_factory=lambda: list(DEFAULT_PARADIGM_TABLE)
    )
    skill_table: list[SkillProfile] = Field(
        default_factory=lambda: list(DEFAULT_SKILL_TABLE)
    )
    section_catalog: list[SectionProfile] = Field(
        default_factory=lambda: list(DEFAULT_SECTION_CATALOG)
    )
    cognitive_steps: list[str] = Field(
        default_factory=lambda: list(DEFAULT_COGNITIVE_STEPS)
    )
    default_paradigm: str = Field(default=DEFAULT_PARADIGM)

    # =========================================================================
    # Extraction, Overlap, and Scoring
    # =========================================================================

    claim_policy: ClaimPolicy = Field(default_factory=ClaimPolicy)
    verbatim_overlap_threshold: float = Field(default=0.8, gt=0.0, le=1.0)
    shingle_size: int = Field(default=5, ge=2)
    min_verbatim_words: int = Field(default=8, ge=1)
    conflict_penalty: float = Field(default=0.5, ge=0.0)
    pass_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid validation config: {_format_validation_error(e)}",
                details={"errors": e.errors(include_url=False)},
            ) from e

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("similarity_metric")
    @classmethod
    def validate_similarity_metric(cls, v: Any) -> Any:
        """Metric names must be known; instances must have a score method."""
        try:
            get_similarity_metric(v)
        except ConfigurationError as e:
            raise ValueError(e.message) from e
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("default_paradigm")
    @classmethod
    def normalize_default_paradigm(cls, v: str) -> str:
        return normalize_paradigm_name(v)

    @model_validator(mode="after")
    def validate_taxonomy(self) -> "ValidationConfig":
        """Tables must be non-empty, unique, and cross-reference each other."""
        paradigm_names = [p.name for p in self.paradigm_table]
        skill_names = [s.name for s in self.skill_table]

        if not paradigm_names:
            raise ValueError("paradigm_table must not be empty")
        if len(set(paradigm_names)) != len(paradigm_names):
            raise ValueError("paradigm_table names must be unique")
        if len(set(skill_names)) != len(skill_names):
            raise ValueError("skill_table names must be unique")
        if len(set(self.cognitive_steps)) != len(self.cognitive_steps):
            raise ValueError("cognitive_steps must be unique")

        if self.default_paradigm not in paradigm_names:
            raise ValueError(
                f"default_paradigm '{self.default_paradigm}' is not in paradigm_table"
            )

        known_skills = set(skill_names)
        for profile in self.paradigm_table:
            unknown = [s for s in profile.skills if s not in known_skills]
            if unknown:
                raise ValueError(
                    f"paradigm '{profile.name}' references unknown skills {unknown}"
                )

        for section in self.section_catalog:
            unknown = [s for s in section.default_skills if s not in known_skills]
            if unknown:
                raise ValueError(
                    f"section '{section.name}' references unknown skills {unknown}"
                )
        return self

    # =========================================================================
    # Construction Helpers
    # =========================================================================

    def metric(self) -> SimilarityMetric:
        """A metric instance for one run (named metrics get a fresh instance)."""
        return get_similarity_metric(self.similarity_metric)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> "ValidationConfig":
        """
        Build a config from environment settings.

        Args:
            settings: Settings instance (defaults to the global settings).
            **overrides: Field values taking precedence over settings.

        Raises:
            ConfigurationError: If the resulting config is invalid.
        """
        settings = settings or default_settings
        errors = settings.validate()
        if errors:
            raise ConfigurationError(
                f"Invalid settings: {'; '.join(errors)}",
                details={"errors": errors},
            )

        values: dict[str, Any] = {
            "support_score_floor": settings.support_score_floor,
            "corroboration_floor": settings.corroboration_floor,
            "similarity_metric": settings.similarity_metric,
            "per_source_timeout_ms": settings.source_timeout_ms,
            "pass_threshold": settings.pass_threshold,
        }
        values.update(overrides)
        return cls(**values)


def load_config(
    config: "ValidationConfig | Mapping[str, Any] | None" = None,
) -> ValidationConfig:
    """
    Resolve a run configuration.

    Args:
        config: A ValidationConfig, a plain mapping of field values, or
            None for defaults.

    Returns:
        A validated ValidationConfig.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    if config is None:
        return ValidationConfig()
    if isinstance(config, ValidationConfig):
        return config
    if isinstance(config, Mapping):
        unknown = sorted(set(config) - set(ValidationConfig.model_fields))
        if unknown:
            raise ConfigurationError(
                f"Unknown config fields: {', '.join(unknown)}",
                details={"unknown": unknown},
            )
        return ValidationConfig(**dict(config))
    raise ConfigurationError(
        "config must be a ValidationConfig or a mapping",
        value=type(config).__name__,
    )
