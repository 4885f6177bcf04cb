"""Cognitive mapping: paradigms, skills, and the cognitive step sequence."""

from scholarly_integrity.cognition.mapper import ParadigmCognitiveMapper
from scholarly_integrity.cognition.sequence import CognitiveSequenceTracker
from scholarly_integrity.cognition.taxonomy import (
    DEFAULT_COGNITIVE_STEPS,
    DEFAULT_PARADIGM,
    DEFAULT_PARADIGM_TABLE,
    DEFAULT_SECTION_CATALOG,
    DEFAULT_SKILL_TABLE,
    find_section_profile,
    normalize_paradigm_name,
    normalize_skill_name,
)

__all__ = [
    "ParadigmCognitiveMapper",
    "CognitiveSequenceTracker",
    "DEFAULT_COGNITIVE_STEPS",
    "DEFAULT_PARADIGM",
    "DEFAULT_PARADIGM_TABLE",
    "DEFAULT_SECTION_CATALOG",
    "DEFAULT_SKILL_TABLE",
    "find_section_profile",
    "normalize_paradigm_name",
    "normalize_skill_name",
]
