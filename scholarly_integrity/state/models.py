"""Pydantic models for integrity validation state.

These models define the data structures that flow through a validation
run, from the draft sections supplied by the ingestion collaborator to the
final integrity report consumed by document generation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from scholarly_integrity.state.enums import (
    FindingKind,
    FindingSeverity,
    RiskTier,
    RISK_TIER_ORDER,
)


# =============================================================================
# Source Models
# =============================================================================


class SourceRecord(BaseModel):
    """A normalized source document retrieved by an academic API collaborator.

    Immutable once registered.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Stable identifier, unique within a registry"
    )
    title: str = Field(..., description="Title of the work")
    authors: list[str] = Field(
        default_factory=list,
        description="Author names ('Last, First' or 'First Last')"
    )
    excerpt_text: str = Field(
        default="",
        description="Text excerpt used for support scoring"
    )
    publication_year: int | None = Field(
        default=None,
        ge=1000,
        le=2100,
        description="Publication year"
    )
    venue: str | None = Field(
        default=None,
        description="Journal, conference or publisher"
    )
    discipline: str | None = Field(
        default=None,
        description="Academic discipline"
    )


# =============================================================================
# Draft and Section Models
# =============================================================================


class DraftSection(BaseModel):
    """A section of draft text as supplied by the ingestion collaborator."""

    section_id: str = Field(..., min_length=1, description="Section identifier")
    name: str = Field(..., description="Section name (e.g., 'Introduction')")
    text: str = Field(default="", description="Ordered section text")
    order: int | None = Field(
        default=None,
        description="Explicit position; defaults to position in the draft"
    )
    paradigm_hint: str | None = Field(
        default=None,
        description="Declared research paradigm for this section"
    )
    skill_hints: list[str] = Field(
        default_factory=list,
        description="Cognitive skills the author intends this section to exercise"
    )


class DocumentSection(BaseModel):
    """A document section known to the validation run."""

    model_config = ConfigDict(frozen=True)

    section_id: str = Field(..., description="Section identifier")
    name: str = Field(..., description="Section name")
    order: int = Field(..., description="Position in the document")
    paradigm_hint: str | None = Field(default=None)
    skill_hints: list[str] = Field(default_factory=list)


class Claim(BaseModel):
    """An atomic assertion extracted from a document section."""

    model_config = ConfigDict(frozen=True)

    claim_id: str = Field(..., description="Deterministic claim identifier")
    section_id: str = Field(..., description="Owning section")
    text: str = Field(..., description="Claim text with the citation marker removed")
    citation_marker: str | None = Field(
        default=None,
        description="Citation marker, verbatim as it appeared in the draft"
    )
    position: int = Field(
        default=0,
        ge=0,
        description="Zero-based position of the claim in the whole document"
    )


# =============================================================================
# Taxonomy Models
# =============================================================================


class ParadigmProfile(BaseModel):
    """One research paradigm and the vocabulary/skills associated with it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Paradigm identifier (e.g., 'positivist')")
    label: str = Field(default="", description="Display label")
    keywords: list[str] = Field(
        default_factory=list,
        description="Trigger vocabulary indicating this stance"
    )
    skills: list[str] = Field(
        default_factory=list,
        description="Cognitive skills characteristic of this paradigm"
    )


class SkillProfile(BaseModel):
    """One cognitive skill and its trigger vocabulary."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Skill identifier (e.g., 'synthesize')")
    label: str = Field(default="", description="Display label")
    triggers: list[str] = Field(
        default_factory=list,
        description="Word stems whose presence signals this skill"
    )


class SectionProfile(BaseModel):
    """A canonical document section in the section catalogue."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Canonical section name")
    aliases: list[str] = Field(
        default_factory=list,
        description="Alternative names mapping onto this section"
    )
    default_skills: list[str] = Field(
        default_factory=list,
        description="Skills assumed when the section text gives no signal"
    )


# =============================================================================
# Assessment Models
# =============================================================================


class RiskThresholds(BaseModel):
    """Support-score thresholds separating the non-fabricated risk tiers."""

    model_config = ConfigDict(frozen=True)

    none_at: float = Field(default=0.75, ge=0.0, le=1.0)
    low_at: float = Field(default=0.5, ge=0.0, le=1.0)
    moderate_at: float = Field(default=0.25, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_ordering(self) -> "RiskThresholds":
        """Thresholds must descend from none to moderate."""
        if not (self.none_at >= self.low_at >= self.moderate_at):
            raise ValueError(
                "risk thresholds must satisfy none_at >= low_at >= moderate_at"
            )
        return self

    def tier_for(self, score: float) -> RiskTier:
        """Map a support score onto a risk tier."""
        return risk_tier_for_score(
            score,
            none_at=self.none_at,
            low_at=self.low_at,
            moderate_at=self.moderate_at,
        )


class SupportAssessment(BaseModel):
    """Support and risk assessment for one claim.

    Immutable: later stages produce a superseding copy.
    """

    model_config = ConfigDict(frozen=True)

    claim_id: str = Field(..., description="Assessed claim")
    matched_source_id: str | None = Field(
        default=None,
        description="Source supporting the claim, if any"
    )
    support_score: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Textual support between claim and matched excerpt"
    )
    risk_tier: RiskTier = Field(..., description="Risk classification")
    inferred: bool = Field(
        default=False,
        description="True when the match came from corroboration, not the citation"
    )
    notes: list[str] = Field(
        default_factory=list,
        description="Explanations of how the tier was reached"
    )

    def supersede(self, **changes: Any) -> "SupportAssessment":
        """Return a new assessment with changes applied and notes appended."""
        notes = list(self.notes) + list(changes.pop("add_notes", []))
        return self.model_copy(update={**changes, "notes": notes})


class ParadigmAlignment(BaseModel):
    """Paradigm and skill assignment for one section."""

    model_config = ConfigDict(frozen=True)

    section_id: str = Field(..., description="Aligned section")
    paradigm: str = Field(..., description="Assigned paradigm (one per section)")
    skills: list[str] = Field(
        default_factory=list,
        description="Assigned cognitive skills"
    )
    consistent: bool = Field(
        default=True,
        description="False when any conflict was detected"
    )
    conflicts: list[str] = Field(
        default_factory=list,
        description="Human-readable conflict descriptions"
    )
    paradigm_scores: dict[str, float] = Field(
        default_factory=dict,
        description="Score of every paradigm considered, for explainability"
    )


# =============================================================================
# Report Models
# =============================================================================


class Finding(BaseModel):
    """A single human-readable finding in an integrity report."""

    model_config = ConfigDict(frozen=True)

    kind: FindingKind = Field(..., description="What the finding is about")
    severity: FindingSeverity = Field(..., description="Finding severity")
    message: str = Field(..., description="Why the claim or section was flagged")
    claim_id: str | None = Field(default=None)
    section_id: str | None = Field(default=None)
    evidence: dict[str, Any] = Field(
        default_factory=dict,
        description="Supporting values (scores, source ids, expected steps)"
    )


class IntegrityReport(BaseModel):
    """Complete result of one validation run."""

    model_config = ConfigDict(frozen=True)

    sections: list[DocumentSection] = Field(default_factory=list)
    claims: list[Claim] = Field(default_factory=list)
    assessments: list[SupportAssessment] = Field(default_factory=list)
    alignments: list[ParadigmAlignment] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    overall_score: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Weighted integrity score"
    )
    category_scores: dict[str, float] = Field(
        default_factory=dict,
        description="Per-category scores in [0, 1]"
    )
    passed: bool = Field(
        default=False,
        description="Whether the draft meets the pass threshold"
    )
    recommendations: list[str] = Field(default_factory=list)

    @field_validator("overall_score")
    @classmethod
    def round_overall_score(cls, v: float) -> float:
        """Keep the score stable across platforms."""
        return round(v, 6)

    @property
    def claim_count(self) -> int:
        """Number of claims assessed."""
        return len(self.claims)

    @property
    def section_count(self) -> int:
        """Number of sections aligned."""
        return len(self.sections)

    def get_assessment(self, claim_id: str) -> SupportAssessment | None:
        """Get the assessment for a claim."""
        for assessment in self.assessments:
            if assessment.claim_id == claim_id:
                return assessment
        return None

    def get_alignment(self, section_id: str) -> ParadigmAlignment | None:
        """Get the alignment for a section."""
        for alignment in self.alignments:
            if alignment.section_id == section_id:
                return alignment
        return None

    def get_findings_by_kind(self, kind: FindingKind) -> list[Finding]:
        """Get all findings of one kind, in report order."""
        return [f for f in self.findings if f.kind == kind]

    def has_fabricated_claims(self) -> bool:
        """Check if any claim was classified as fabricated."""
        return any(a.risk_tier == RiskTier.FABRICATED for a in self.assessments)


# =============================================================================
# Risk Tier Helpers
# =============================================================================


def downgrade_risk_tier(tier: RiskTier) -> RiskTier:
    """Lower a risk tier by one step (NONE stays NONE)."""
    index = RISK_TIER_ORDER.index(tier)
    return RISK_TIER_ORDER[max(index - 1, 0)]


def risk_tier_for_score(
    score: float,
    none_at: float = 0.75,
    low_at: float = 0.5,
    moderate_at: float = 0.25,
) -> RiskTier:
    """Map a support score onto a risk tier using ascending thresholds."""
    if score >= none_at:
        return RiskTier.NONE
    elif score >= low_at:
        return RiskTier.LOW
    elif score >= moderate_at:
        return RiskTier.MODERATE
    else:
        return RiskTier.HIGH
