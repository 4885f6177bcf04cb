"""Citation marker detection, parsing, and resolution against sources."""

from scholarly_integrity.citations.formatter import (
    AuthorName,
    author_surnames,
    format_inline_citation,
    normalize_surname,
)
from scholarly_integrity.citations.markers import (
    DEFAULT_MARKER_PATTERNS,
    CitationReference,
    MarkerMatch,
    MarkerPattern,
    detect_citation_marker,
    find_citation_markers,
    parse_citation_marker,
    strip_citation_markers,
)
from scholarly_integrity.citations.matcher import CitationMatcher

__all__ = [
    # Formatter
    "AuthorName",
    "author_surnames",
    "format_inline_citation",
    "normalize_surname",
    # Markers
    "DEFAULT_MARKER_PATTERNS",
    "CitationReference",
    "MarkerMatch",
    "MarkerPattern",
    "detect_citation_marker",
    "find_citation_markers",
    "parse_citation_marker",
    "strip_citation_markers",
    # Matching
    "CitationMatcher",
]
