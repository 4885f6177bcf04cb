"""Default paradigm, skill, and section tables.

These tables are configuration: every value here can be replaced through
ValidationConfig. Vocabulary entries are word stems and match any word
that starts with them ("measur" matches "measured" and "measurement").
"""

import re

from scholarly_integrity.state.models import ParadigmProfile, SectionProfile, SkillProfile


# =============================================================================
# Research Paradigms
# =============================================================================


DEFAULT_PARADIGM = "pragmatic"

DEFAULT_PARADIGM_TABLE: list[ParadigmProfile] = [
    ParadigmProfile(
        name="positivist",
        label="Positivist",
        keywords=[
            "hypothes", "measur", "experiment", "quantitative", "variable",
            "statistical", "causal", "objective", "sample", "control",
            "significan", "replicat",
        ],
        skills=["analyze", "classify", "evaluate", "apply"],
    ),
    ParadigmProfile(
        name="post-positivist",
        label="Post-positivist",
        keywords=[
            "probabilistic", "approximat", "falsif", "bias", "triangulat",
            "validity", "reliability", "critical realism",
        ],
        skills=["analyze", "evaluate", "interpret", "argue"],
    ),
    ParadigmProfile(
        name="constructivist",
        label="Constructivist",
        keywords=[
            "meaning", "interpretation", "experienc", "perspective",
            "participant", "narrative", "lived", "socially constructed",
            "understanding", "context", "subjective",
        ],
        skills=["interpret", "relate", "synthesize", "investigate"],
    ),
    ParadigmProfile(
        name="transformative",
        label="Transformative",
        keywords=[
            "empower", "social justice", "marginali", "equity", "advoca",
            "oppress", "participatory",
        ],
        skills=["argue", "evaluate", "investigate", "apply"],
    ),
    ParadigmProfile(
        name="pragmatic",
        label="Pragmatic",
        keywords=[
            "practical", "mixed method", "what works", "problem-solving",
            "outcome", "applied", "utility", "consequence",
        ],
        skills=["apply", "analyze", "synthesize", "organize"],
    ),
    ParadigmProfile(
        name="critical-theory",
        label="Critical theory",
        keywords=[
            "power", "ideolog", "critique", "dominat", "emancipat",
            "hegemon", "structures", "inequalit",
        ],
        skills=["argue", "evaluate", "relate", "interpret"],
    ),
    ParadigmProfile(
        name="feminist",
        label="Feminist",
        keywords=[
            "gender", "women", "patriarch", "standpoint", "intersectional",
            "reflexiv", "voice", "ethic of care",
        ],
        skills=["interpret", "relate", "argue", "investigate"],
    ),
]


# =============================================================================
# Cognitive Skills
# =============================================================================


DEFAULT_SKILL_TABLE: list[SkillProfile] = [
    SkillProfile(
        name="synthesize",
        label="Synthesize",
        triggers=["synthes", "integrat", "combin", "summar"],
    ),
    SkillProfile(
        name="inform",
        label="Inform",
        triggers=["report", "describ", "present", "overview", "background", "introduc"],
    ),
    SkillProfile(
        name="organize",
        label="Organize",
        triggers=["first", "second", "finally", "structur", "sequenc", "organiz", "outline"],
    ),
    SkillProfile(
        name="investigate",
        label="Investigate",
        triggers=["investigat", "explor", "examin", "inquir"],
    ),
    SkillProfile(
        name="interpret",
        label="Interpret",
        triggers=["interpret", "meaning", "suggest", "impli", "indicat", "understand"],
    ),
    SkillProfile(
        name="relate",
        label="Relate",
        triggers=["relationship", "relat", "associat", "correlat", "link", "connect"],
    ),
    SkillProfile(
        name="argue",
        label="Argue",
        triggers=["argu", "therefore", "because", "thus", "contend", "hence"],
    ),
    SkillProfile(
        name="analyze",
        label="Analyze",
        triggers=["analy", "measur", "regression", "test"],
    ),
    SkillProfile(
        name="classify",
        label="Classify",
        triggers=["classif", "categor", "taxonom", "group"],
    ),
    SkillProfile(
        name="conclude",
        label="Conclude",
        triggers=["conclu", "consequently"],
    ),
    SkillProfile(
        name="evaluate",
        label="Evaluate",
        triggers=["evaluat", "assess", "apprais", "validity", "rigor", "limitation"],
    ),
    SkillProfile(
        name="apply",
        label="Apply",
        triggers=["appl", "implement", "plan", "procedure", "protocol", "action"],
    ),
]


# =============================================================================
# Sections and Cognitive Steps
# =============================================================================


# Ordered cognitive sequence; documents must visit these in order
DEFAULT_COGNITIVE_STEPS: list[str] = [
    "Assessment",
    "Epistemological Inquiry",
    "Problem Formulation",
    "Methodological Evaluation",
    "Action Plan",
]

DEFAULT_SECTION_CATALOG: list[SectionProfile] = [
    SectionProfile(
        name="Assessment",
        aliases=["Initial Assessment", "Situation Assessment"],
        default_skills=["evaluate", "investigate"],
    ),
    SectionProfile(
        name="Epistemological Inquiry",
        aliases=["Epistemology", "Epistemological Stance"],
        default_skills=["investigate", "interpret", "relate"],
    ),
    SectionProfile(
        name="Problem Formulation",
        aliases=["Problem Statement", "Research Problem", "Research Questions"],
        default_skills=["investigate", "interpret", "relate", "argue"],
    ),
    SectionProfile(
        name="Methodological Evaluation",
        aliases=["Methodology Evaluation", "Methodological Review"],
        default_skills=["evaluate", "argue", "analyze"],
    ),
    SectionProfile(
        name="Action Plan",
        aliases=["Plan of Action", "Implementation Plan"],
        default_skills=["organize", "apply", "conclude"],
    ),
    SectionProfile(
        name="Introduction",
        aliases=["Background"],
        default_skills=["inform", "organize"],
    ),
    SectionProfile(
        name="Method",
        aliases=["Methods", "Methodology", "Materials and Methods"],
        default_skills=["argue", "apply"],
    ),
    SectionProfile(
        name="Results",
        aliases=["Findings"],
        default_skills=["analyze", "classify", "interpret"],
    ),
    SectionProfile(
        name="Discussion",
        aliases=["Conclusion", "Conclusions"],
        default_skills=["organize", "synthesize", "conclude", "evaluate"],
    ),
]


# =============================================================================
# Vocabulary Matching
# =============================================================================


def normalize_label(label: str) -> str:
    """Normalize a section or paradigm label for comparison."""
    return re.sub(r"[\s_\-]+", " ", label.strip().lower())


def normalize_paradigm_name(name: str) -> str:
    """
    Normalize a paradigm name to its table form.

    Examples:
        >>> normalize_paradigm_name("Critical Theory")
        'critical-theory'
    """
    return re.sub(r"[\s_]+", "-", name.strip().lower())


def normalize_skill_name(name: str) -> str:
    """
    Normalize a cognitive skill name to its table form.

    Examples:
        >>> normalize_skill_name(" Evaluate ")
        'evaluate'
    """
    return re.sub(r"[\s_\-]+", "_", name.strip().lower())


def build_vocabulary_pattern(stems: list[str]) -> re.Pattern | None:
    """Build a case-insensitive pattern matching words starting with any stem."""
    if not stems:
        return None
    sorted_stems = sorted(stems, key=len, reverse=True)
    escaped = [re.escape(s).replace(r"\ ", r"\s+") for s in sorted_stems]
    pattern = r"\b(?:" + "|".join(escaped) + r")\w*"
    return re.compile(pattern, re.IGNORECASE)


def count_vocabulary_hits(pattern: re.Pattern | None, text: str) -> int:
    """Number of vocabulary occurrences in text."""
    if pattern is None:
        return 0
    return len(pattern.findall(text))


def find_section_profile(
    name: str,
    catalog: list[SectionProfile],
) -> SectionProfile | None:
    """Find the catalogue entry whose name or alias matches a section name."""
    wanted = normalize_label(name)
    for profile in catalog:
        if normalize_label(profile.name) == wanted:
            return profile
        if any(normalize_label(alias) == wanted for alias in profile.aliases):
            return profile
    return None
