"""Claim extraction from caller-partitioned draft sections.

Segments each section into sentences, keeps the sentences that read as
assertions under a configurable claim policy, and attaches the first
citation marker found in each claim.
"""

import logging
import re
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from scholarly_integrity.citations.markers import (
    DEFAULT_MARKER_PATTERNS,
    MarkerPattern,
    find_citation_markers,
    strip_citation_markers,
)
from scholarly_integrity.errors.exceptions import InvalidDraftError
from scholarly_integrity.extraction.sentences import (
    DEFAULT_ABBREVIATIONS,
    is_heading,
    split_blocks,
    split_sentences,
)
from scholarly_integrity.state.models import Claim, DocumentSection, DraftSection

logger = logging.getLogger(__name__)


# Base forms; a trailing "s" on a draft word is folded before lookup
DEFAULT_VERB_LEXICON: frozenset[str] = frozenset({
    "is", "are", "was", "were", "be", "been", "has", "have", "had",
    "occur", "remain", "become", "show", "shown", "showed", "find", "found",
    "suggest", "indicate", "demonstrate", "reveal", "confirm", "support",
    "increase", "decrease", "reduce", "improve", "enhance", "affect",
    "cause", "lead", "led", "predict", "explain", "contribute", "influence",
    "produce", "appear", "seem", "tend", "depend", "relate", "require",
    "provide", "involve", "include", "exist", "emerge", "drive", "shape",
    "enable", "limit", "facilitate", "mediate", "moderate", "correlate",
    "differ", "vary", "account", "yield", "make", "made", "take", "took",
    "argue", "claim", "propose", "report", "note", "observe", "conclude",
    "use", "used", "measure", "examine", "test", "compare", "identify",
    "impair", "promote", "prevent", "allow", "help", "form", "hold", "grow",
    "decline", "rise", "fall", "matter", "work", "need", "serve",
    "can", "may", "might", "will", "would", "should", "must", "could",
})

DEFAULT_VERB_SUFFIXES: tuple[str, ...] = ("ed", "izes", "ises", "ifies", "ates")

_BULLET = re.compile(r"^\s*(?:[-*•]|\(?\d+[.)])\s+")
_WORD = re.compile(r"[A-Za-z][A-Za-z'\-]*")


class ClaimPolicy(BaseModel):
    """Rules deciding which sentences count as claims."""

    model_config = ConfigDict(frozen=True)

    min_words: int = Field(
        default=3,
        ge=1,
        description="Minimum words in a claim, citation marker excluded"
    )
    verb_lexicon: frozenset[str] = Field(
        default=DEFAULT_VERB_LEXICON,
        description="Verbs (base forms) that mark a sentence as an assertion"
    )
    verb_suffixes: tuple[str, ...] = Field(
        default=DEFAULT_VERB_SUFFIXES,
        description="Word endings treated as verb evidence"
    )
    skip_questions: bool = Field(
        default=True,
        description="Questions are not assertions"
    )
    max_heading_words: int = Field(
        default=12,
        ge=1,
        description="Longest single-line block still treated as a heading"
    )
    abbreviations: tuple[str, ...] = Field(
        default=DEFAULT_ABBREVIATIONS,
        description="Abbreviations that never end a sentence"
    )


def _has_verb(words: list[str], policy: ClaimPolicy) -> bool:
    for word in words:
        lowered = word.lower()
        if lowered in policy.verb_lexicon:
            return True
        if lowered.endswith("s") and lowered[:-1] in policy.verb_lexicon:
            return True
        if len(lowered) > 4 and lowered.endswith(policy.verb_suffixes):
            return True
    return False


def is_claim(sentence: str, policy: ClaimPolicy) -> bool:
    """
    Apply a claim policy to a sentence with its markers already removed.

    Args:
        sentence: Candidate sentence.
        policy: Claim policy.

    Returns:
        True if the sentence reads as an assertion.

    Examples:
        >>> is_claim("This fact is universally accepted", ClaimPolicy())
        True
        >>> is_claim("Why does sleep matter?", ClaimPolicy())
        False
    """
    stripped = sentence.strip()
    if not stripped:
        return False
    if policy.skip_questions and stripped.rstrip("\"'”’)]").endswith("?"):
        return False
    words = _WORD.findall(stripped)
    if len(words) < policy.min_words:
        return False
    return _has_verb(words, policy)


class ClaimExtractor:
    """
    Extract claims from draft sections.

    Example:
        extractor = ClaimExtractor()
        sections, claims = extractor.extract([
            DraftSection(section_id="intro", name="Introduction", text="..."),
        ])
    """

    def __init__(
        self,
        policy: ClaimPolicy | None = None,
        marker_patterns: tuple[MarkerPattern, ...] = DEFAULT_MARKER_PATTERNS,
    ):
        """
        Initialize the extractor.

        Args:
            policy: Claim policy; defaults to ClaimPolicy().
            marker_patterns: Citation marker pattern table.
        """
        self.policy = policy or ClaimPolicy()
        self.marker_patterns = marker_patterns

    # =========================================================================
    # Sections
    # =========================================================================

    def prepare_sections(
        self,
        draft_sections: Iterable[DraftSection | dict[str, Any]],
    ) -> list[tuple[DocumentSection, str]]:
        """
        Validate draft sections and order them for extraction.

        Sections without an explicit order take their position in the draft.

        Returns:
            (section, text) pairs sorted by order, ties by draft position.

        Raises:
            InvalidDraftError: If a section is malformed or an id repeats.
        """
        prepared: list[tuple[int, int, DocumentSection, str]] = []
        seen: set[str] = set()

        for index, raw in enumerate(draft_sections):
            try:
                draft = raw if isinstance(raw, DraftSection) else DraftSection.model_validate(raw)
            except ValidationError as e:
                raise InvalidDraftError(
                    f"Draft section at position {index} is malformed",
                    details={"errors": e.errors(include_url=False)},
                ) from e

            if draft.section_id in seen:
                raise InvalidDraftError(
                    f"Duplicate section id '{draft.section_id}'",
                    section_id=draft.section_id,
                )
            seen.add(draft.section_id)

            order = draft.order if draft.order is not None else index
            section = DocumentSection(
                section_id=draft.section_id,
                name=draft.name,
                order=order,
                paradigm_hint=draft.paradigm_hint,
                skill_hints=list(draft.skill_hints),
            )
            prepared.append((order, index, section, draft.text))

        prepared.sort(key=lambda item: (item[0], item[1]))
        return [(section, text) for _, _, section, text in prepared]

    # =========================================================================
    # Claims
    # =========================================================================

    def extract_section_claims(
        self,
        section: DocumentSection,
        text: str,
        start_position: int = 0,
    ) -> list[Claim]:
        """
        Extract the claims of one section in text order.

        Args:
            section: The section the text belongs to.
            text: Section text.
            start_position: Document-wide position of the first claim.

        Returns:
            Claims with ids "<section_id>-c001", "<section_id>-c002", ...
        """
        claims: list[Claim] = []

        for block, _ in split_blocks(text):
            if is_heading(block, self.policy.max_heading_words):
                continue

            for sentence, _, _ in split_sentences(block, self.policy.abbreviations):
                sentence = _BULLET.sub("", sentence)
                markers = find_citation_markers(sentence, self.marker_patterns)
                claim_text = strip_citation_markers(sentence, self.marker_patterns)

                if not is_claim(claim_text, self.policy):
                    continue

                claims.append(Claim(
                    claim_id=f"{section.section_id}-c{len(claims) + 1:03d}",
                    section_id=section.section_id,
                    text=claim_text,
                    citation_marker=markers[0].marker if markers else None,
                    position=start_position + len(claims),
                ))

        return claims

    def extract(
        self,
        draft_sections: Iterable[DraftSection | dict[str, Any]],
    ) -> tuple[list[DocumentSection], list[Claim]]:
        """
        Extract sections and claims from a draft.

        Args:
            draft_sections: Caller-partitioned sections.

        Returns:
            Sections in document order and every claim in document order.

        Raises:
            InvalidDraftError: If a section is malformed or an id repeats.
        """
        sections: list[DocumentSection] = []
        claims: list[Claim] = []

        for section, text in self.prepare_sections(draft_sections):
            section_claims = self.extract_section_claims(section, text, len(claims))
            logger.debug(
                f"Section '{section.section_id}': {len(section_claims)} claims, "
                f"{sum(1 for c in section_claims if c.citation_marker)} cited"
            )
            sections.append(section)
            claims.extend(section_claims)

        return sections, claims
