"""Citation marker detection and parsing.

Both steps are pure functions over a pattern table so that marker policy
can be tested and extended without touching the extractor or matcher.

Detected marker forms:
- Bracketed author-year: [Rodriguez et al., 2023]
- Parenthetical author-year: (Fama and French 1993; Jensen 1986)
- Narrative: Rodriguez et al. (2023)
- Bracketed citation key: [rodriguez2023], [12]

A bracket or parenthesis that matches none of these (for instance
"[Rodriguez et al.,]" with no year) is treated as plain text.
"""

import re
from dataclasses import dataclass

from scholarly_integrity.citations.formatter import AuthorName, normalize_surname


_YEAR = r"(?:1[5-9]|20)\d{2}[a-z]?"
_SURNAME = r"[A-Z][A-Za-z'\-]+"

# Capitalized words that open a sentence or clause before a bare year
NON_SURNAME_WORDS = (
    "In", "On", "At", "By", "For", "From", "Since", "Until", "During",
    "After", "Before", "Around", "Circa", "Through", "Between", "Of", "To",
    "As", "And", "But", "Or", "The", "This", "That", "These", "Those",
    "Year", "Years", "Spring", "Summer", "Autumn", "Fall", "Winter",
)
_LEAD_SURNAME = rf"(?!(?:{'|'.join(NON_SURNAME_WORDS)})\b){_SURNAME}"

YEAR_PATTERN = re.compile(r"\b((?:1[5-9]|20)\d{2})[a-z]?\b")
KEY_PATTERN = re.compile(r"^[A-Za-z0-9_:\-]+$")


@dataclass(frozen=True)
class MarkerPattern:
    """A named citation marker pattern.

    The pattern must define a `body` group holding the citation content.
    """

    name: str
    pattern: re.Pattern


@dataclass(frozen=True)
class MarkerMatch:
    """A citation marker found in a sentence."""

    marker: str  # Verbatim marker text
    body: str
    start: int
    end: int
    pattern_name: str


@dataclass(frozen=True)
class CitationReference:
    """One reference parsed out of a marker (markers may hold several)."""

    raw: str
    surnames: tuple[str, ...] = ()
    year: int | None = None
    key: str | None = None

    @property
    def is_author_year(self) -> bool:
        """Whether the reference carries both a surname and a year."""
        return bool(self.surnames) and self.year is not None


DEFAULT_MARKER_PATTERNS: tuple[MarkerPattern, ...] = (
    MarkerPattern(
        name="bracketed_author_year",
        pattern=re.compile(
            rf"\[(?P<body>[^\[\]]*?[A-Za-z][^\[\]]*?\b{_YEAR}\b[^\[\]]*)\]"
        ),
    ),
    MarkerPattern(
        name="parenthetical_author_year",
        pattern=re.compile(
            rf"\((?P<body>{_LEAD_SURNAME}[^()]*?\b{_YEAR}\b[^()]*)\)"
        ),
    ),
    MarkerPattern(
        name="narrative",
        pattern=re.compile(
            rf"(?P<body>\b{_LEAD_SURNAME}(?:\s+(?:and|&)\s+{_SURNAME}|\s+et\s+al\.?)?"
            rf"\s+\({_YEAR}\))"
        ),
    ),
    MarkerPattern(
        name="bracketed_key",
        pattern=re.compile(
            r"\[(?P<body>[A-Za-z0-9_:\-]+(?:\s*,\s*[A-Za-z0-9_:\-]+)*)\]"
        ),
    ),
)


# =============================================================================
# Detection
# =============================================================================


def find_citation_markers(
    text: str,
    patterns: tuple[MarkerPattern, ...] = DEFAULT_MARKER_PATTERNS,
) -> list[MarkerMatch]:
    """
    Find all non-overlapping citation markers in text.

    Earlier matches win; at the same position, earlier patterns in the
    table win.

    Args:
        text: Sentence or passage to scan.
        patterns: Marker pattern table.

    Returns:
        Markers in text order.
    """
    candidates: list[tuple[int, int, MarkerMatch]] = []
    for priority, marker_pattern in enumerate(patterns):
        for match in marker_pattern.pattern.finditer(text):
            candidates.append((
                match.start(),
                priority,
                MarkerMatch(
                    marker=match.group(0),
                    body=match.group("body"),
                    start=match.start(),
                    end=match.end(),
                    pattern_name=marker_pattern.name,
                ),
            ))

    candidates.sort(key=lambda c: (c[0], c[1]))

    selected: list[MarkerMatch] = []
    last_end = -1
    for start, _, marker_match in candidates:
        if start >= last_end:
            selected.append(marker_match)
            last_end = marker_match.end
    return selected


def detect_citation_marker(
    text: str,
    patterns: tuple[MarkerPattern, ...] = DEFAULT_MARKER_PATTERNS,
) -> MarkerMatch | None:
    """Return the first citation marker in text, or None."""
    markers = find_citation_markers(text, patterns)
    return markers[0] if markers else None


def strip_citation_markers(
    text: str,
    patterns: tuple[MarkerPattern, ...] = DEFAULT_MARKER_PATTERNS,
) -> str:
    """
    Remove every citation marker and tidy the remaining whitespace.

    Examples:
        >>> strip_citation_markers("Sleep aids memory [Smith, 2020].")
        'Sleep aids memory.'
    """
    markers = find_citation_markers(text, patterns)
    pieces = []
    cursor = 0
    for marker_match in markers:
        pieces.append(text[cursor:marker_match.start])
        cursor = marker_match.end
    pieces.append(text[cursor:])

    stripped = " ".join("".join(pieces).split())
    return re.sub(r"\s+([.,;:!?])", r"\1", stripped).strip()


# =============================================================================
# Parsing
# =============================================================================


def _marker_body(marker: str) -> str:
    """Strip the outer brackets of a marker; flatten narrative parentheses."""
    marker = marker.strip()
    if len(marker) >= 2 and (marker[0], marker[-1]) in {("[", "]"), ("(", ")")}:
        return marker[1:-1]
    return marker.replace("(", " ").replace(")", " ")


def _parse_surnames(author_text: str) -> tuple[str, ...]:
    """Extract surnames from the author part of an author-year reference."""
    author_text = re.sub(r"\bet\s+al\.?", " ", author_text)
    author_text = author_text.strip(" ,.;:")
    surnames = []
    for chunk in re.split(r"\s*(?:,|&|\band\b)\s*", author_text):
        chunk = chunk.strip(" .")
        if not chunk:
            continue
        surname = AuthorName.from_string(chunk).surname.strip(" .")
        # Initials such as "J." are not surnames
        if len(normalize_surname(surname)) >= 2:
            surnames.append(surname)
    return tuple(surnames)


def parse_citation_marker(marker: str) -> list[CitationReference]:
    """
    Parse a marker into the references it contains.

    Never raises: unparseable parts are skipped, and a marker with no
    usable part yields an empty list.

    Args:
        marker: Verbatim marker text, e.g. "[Rodriguez et al., 2023]".

    Returns:
        Parsed references in marker order.

    Examples:
        >>> parse_citation_marker("(Fama and French 1993; Jensen 1986)")[0].surnames
        ('Fama', 'French')
    """
    body = _marker_body(marker)
    references: list[CitationReference] = []

    for part in body.split(";"):
        part = part.strip()
        if not part:
            continue

        year_match = YEAR_PATTERN.search(part)
        if year_match:
            surnames = _parse_surnames(part[:year_match.start()])
            references.append(CitationReference(
                raw=part,
                surnames=surnames,
                year=int(year_match.group(1)),
            ))
            continue

        # Key-style markers may list several keys separated by commas
        for key in (k.strip() for k in part.split(",")):
            if key and KEY_PATTERN.match(key):
                references.append(CitationReference(raw=key, key=key))

    return references
