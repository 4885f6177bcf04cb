"""Author-name parsing and author-date citation rendering.

Used on both sides of citation resolution: source metadata is reduced to
surnames for the registry's author/year index, draft markers are reduced
to surnames for lookup, and resolved sources are rendered back in
author-date form for report notes.
"""

import re
import unicodedata
from dataclasses import dataclass


# Lower-case particles that belong to the surname ("van der Berg", "de Souza")
SURNAME_PARTICLES = frozenset({
    "van", "von", "der", "den", "de", "del", "della", "di", "da", "du",
    "la", "le", "ter", "ten", "dos", "das", "bin", "al",
})

_GENERATIONAL = re.compile(r",?\s*\b(?:Jr|Sr|II|III|IV)\.?$")


@dataclass(frozen=True)
class AuthorName:
    """An author name split into surname and given names."""

    surname: str
    given: str = ""

    @classmethod
    def from_string(cls, name: str) -> "AuthorName":
        """
        Parse "Surname, Given" or "Given Surname" forms.

        Generational suffixes are dropped; lower-case particles directly
        before the surname stay with it.

        Examples:
            >>> AuthorName.from_string("Fama, Eugene F.").surname
            'Fama'
            >>> AuthorName.from_string("Ludwig van Beethoven").surname
            'van Beethoven'
        """
        name = _GENERATIONAL.sub("", " ".join(name.split()))
        if not name:
            return cls(surname="")

        if "," in name:
            surname, given = (part.strip() for part in name.split(",", 1))
            return cls(surname=surname, given=given)

        words = name.split()
        start = len(words) - 1
        while start > 0 and words[start - 1] in SURNAME_PARTICLES:
            start -= 1
        return cls(surname=" ".join(words[start:]), given=" ".join(words[:start]))


def normalize_surname(surname: str) -> str:
    """
    Normalize a surname for comparison.

    Strips accents, case, and non-letter characters so that
    "Rodríguez", "RODRIGUEZ" and "Rodriguez," compare equal.
    """
    decomposed = unicodedata.normalize("NFKD", surname)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z]", "", stripped.lower())


def author_surnames(authors: list[str]) -> list[str]:
    """Normalized surnames of an author list, in author order."""
    return [normalize_surname(AuthorName.from_string(a).surname) for a in authors]


def format_inline_citation(authors: list[str], year: int | None) -> str:
    """
    Render a source in author-date form.

    Examples:
        >>> format_inline_citation(["Fama, Eugene F."], 1970)
        '(Fama 1970)'
        >>> format_inline_citation(["Fama, E.", "French, K."], 1993)
        '(Fama and French 1993)'
        >>> format_inline_citation(["Rodriguez, Ana", "Chen, Li", "Okafor, Ben"], 2023)
        '(Rodriguez et al. 2023)'
    """
    year_text = str(year) if year is not None else "n.d."
    surnames = [AuthorName.from_string(a).surname for a in authors]
    surnames = [s for s in surnames if s]

    if not surnames:
        return f"({year_text})"
    if len(surnames) == 1:
        return f"({surnames[0]} {year_text})"
    if len(surnames) == 2:
        return f"({surnames[0]} and {surnames[1]} {year_text})"
    return f"({surnames[0]} et al. {year_text})"
