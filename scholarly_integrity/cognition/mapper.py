"""Paradigm and cognitive-skill mapping for document sections.

Assigns each section exactly one research paradigm and a set of cognitive
skills from its claims' vocabulary, reports internal consistency
conflicts, and checks the document's cognitive step sequence.
"""

import logging

from scholarly_integrity.cognition.sequence import CognitiveSequenceTracker
from scholarly_integrity.cognition.taxonomy import (
    DEFAULT_COGNITIVE_STEPS,
    DEFAULT_PARADIGM,
    DEFAULT_PARADIGM_TABLE,
    DEFAULT_SECTION_CATALOG,
    DEFAULT_SKILL_TABLE,
    build_vocabulary_pattern,
    count_vocabulary_hits,
    find_section_profile,
    normalize_label,
    normalize_paradigm_name,
    normalize_skill_name,
)
from scholarly_integrity.state.models import (
    Claim,
    DocumentSection,
    Finding,
    ParadigmAlignment,
    ParadigmProfile,
    SectionProfile,
    SkillProfile,
)

logger = logging.getLogger(__name__)


HINT_BONUS = 2.0
SKILL_OVERLAP_WEIGHT = 0.5


class ParadigmCognitiveMapper:
    """
    Map sections to paradigms and skills.

    Paradigm score per section:
        hint bonus (2.0 if the paradigm is the section's hint, or the
        document's declared paradigm when the section has none)
        + keyword hits in the section's claims
        + 0.5 per paradigm skill among the detected skills

    The highest score wins, ties by table order. A section with no evidence
    at all gets the default paradigm.
    """

    def __init__(
        self,
        paradigm_table: list[ParadigmProfile] | None = None,
        skill_table: list[SkillProfile] | None = None,
        section_catalog: list[SectionProfile] | None = None,
        cognitive_steps: list[str] | None = None,
        default_paradigm: str = DEFAULT_PARADIGM,
    ):
        self.paradigm_table = paradigm_table or DEFAULT_PARADIGM_TABLE
        self.skill_table = skill_table or DEFAULT_SKILL_TABLE
        self.section_catalog = section_catalog or DEFAULT_SECTION_CATALOG
        self.cognitive_steps = cognitive_steps or DEFAULT_COGNITIVE_STEPS
        self.default_paradigm = normalize_paradigm_name(default_paradigm)

        self._paradigm_names = [p.name for p in self.paradigm_table]
        self._keyword_patterns = {
            p.name: build_vocabulary_pattern(p.keywords) for p in self.paradigm_table
        }
        self._skill_patterns = {
            s.name: build_vocabulary_pattern(s.triggers) for s in self.skill_table
        }
        self._skill_names = {normalize_skill_name(s.name): s.name for s in self.skill_table}

    # =========================================================================
    # Vocabulary
    # =========================================================================

    def keyword_hits(self, text: str) -> dict[str, int]:
        """Keyword occurrences per paradigm, in table order."""
        return {
            name: count_vocabulary_hits(pattern, text)
            for name, pattern in self._keyword_patterns.items()
        }

    def detect_skills(self, text: str) -> list[str]:
        """Skills whose trigger vocabulary appears in text, in table order."""
        return [
            name for name, pattern in self._skill_patterns.items()
            if count_vocabulary_hits(pattern, text) > 0
        ]

    def canonical_step(self, section: DocumentSection) -> str | None:
        """The cognitive step a section represents, or None."""
        wanted = normalize_label(section.name)
        for step in self.cognitive_steps:
            if normalize_label(step) == wanted:
                return step
        profile = find_section_profile(section.name, self.section_catalog)
        if profile is not None and profile.name in self.cognitive_steps:
            return profile.name
        return None

    # =========================================================================
    # Alignment
    # =========================================================================

    def resolve_skill_hints(self, hints: list[str]) -> tuple[list[str], list[str]]:
        """
        Split skill hints into table skills and unrecognised hints.

        Hints are compared case-insensitively; known hints come back in
        their table spelling, first occurrence wins.

        Returns:
            (known skills, unknown hints as given)
        """
        known: list[str] = []
        unknown: list[str] = []
        for hint in hints:
            name = self._skill_names.get(normalize_skill_name(hint))
            if name is None:
                unknown.append(hint)
            elif name not in known:
                known.append(name)
        return known, unknown

    def _assign_skills(
        self,
        section: DocumentSection,
        detected: list[str],
        hinted: list[str],
    ) -> list[str]:
        if detected:
            return detected
        profile = find_section_profile(section.name, self.section_catalog)
        if profile is not None:
            defaults, _ = self.resolve_skill_hints(profile.default_skills)
            if defaults:
                return defaults
        return hinted

    def align_section(
        self,
        section: DocumentSection,
        claims: list[Claim],
        declared_paradigm: str | None = None,
    ) -> ParadigmAlignment:
        """
        Align one section.

        Args:
            section: The section.
            claims: The section's claims.
            declared_paradigm: Document-level paradigm, used when the section
                carries no hint of its own.

        Returns:
            The section's ParadigmAlignment.
        """
        text = " ".join(claim.text for claim in claims)
        hits = self.keyword_hits(text)
        detected = self.detect_skills(text)

        raw_hint = section.paradigm_hint or declared_paradigm
        hint = normalize_paradigm_name(raw_hint) if raw_hint else None

        scores: dict[str, float] = {}
        for profile in self.paradigm_table:
            overlap = len(set(profile.skills) & set(detected))
            score = hits[profile.name] + SKILL_OVERLAP_WEIGHT * overlap
            if profile.name == hint:
                score += HINT_BONUS
            scores[profile.name] = round(score, 6)

        if any(score > 0 for score in scores.values()):
            paradigm = max(self._paradigm_names, key=lambda name: scores[name])
        else:
            paradigm = self.default_paradigm

        hinted, unknown_hints = self.resolve_skill_hints(section.skill_hints)
        skills = self._assign_skills(section, detected, hinted)
        conflicts = self._find_conflicts(
            hint, raw_hint, paradigm, hits, hinted, unknown_hints
        )

        if conflicts:
            logger.debug(f"Section '{section.section_id}': {len(conflicts)} conflicts")

        return ParadigmAlignment(
            section_id=section.section_id,
            paradigm=paradigm,
            skills=skills,
            consistent=not conflicts,
            conflicts=conflicts,
            paradigm_scores=scores,
        )

    def _find_conflicts(
        self,
        hint: str | None,
        raw_hint: str | None,
        paradigm: str,
        hits: dict[str, int],
        hinted: list[str],
        unknown_hints: list[str],
    ) -> list[str]:
        conflicts: list[str] = []

        if hint is not None and hint not in self._paradigm_names:
            conflicts.append(
                f"Declared paradigm '{raw_hint}' is not a recognised research paradigm"
            )
        elif hint is not None and hits[hint] == 0:
            others = {name: count for name, count in hits.items() if count > 0}
            if others:
                dominant = max(
                    self._paradigm_names,
                    key=lambda name: others.get(name, 0),
                )
                conflicts.append(
                    f"Declared paradigm '{hint}' has no supporting vocabulary, "
                    f"but the section reads as '{dominant}' "
                    f"({others[dominant]} keyword hits)"
                )

        if unknown_hints:
            conflicts.append(
                f"Intended skills {unknown_hints} are not recognised cognitive skills"
            )

        if hinted:
            profile = next((p for p in self.paradigm_table if p.name == paradigm), None)
            paradigm_skills = set(profile.skills) if profile else set()
            if not paradigm_skills & set(hinted):
                conflicts.append(
                    f"Intended skills {sorted(hinted)} share nothing "
                    f"with the skills of the assigned paradigm '{paradigm}'"
                )

        return conflicts

    # =========================================================================
    # Sequence
    # =========================================================================

    def check_sequence(self, sections: list[DocumentSection]) -> list[Finding]:
        """
        Check the cognitive step order of a document.

        Documents without any cognitive-step section are not checked.

        Returns:
            Sequence violation findings in document order.
        """
        ordered = sorted(sections, key=lambda s: s.order)
        steps = [self.canonical_step(section) for section in ordered]
        if not any(steps):
            return []

        tracker = CognitiveSequenceTracker(self.cognitive_steps)
        findings: list[Finding] = []
        for section, step in zip(ordered, steps):
            findings.extend(tracker.visit(section, step))
        findings.extend(tracker.finish())
        return findings
