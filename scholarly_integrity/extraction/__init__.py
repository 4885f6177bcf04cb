"""Claim extraction: sentence segmentation and claim policy."""

from scholarly_integrity.extraction.claims import (
    DEFAULT_VERB_LEXICON,
    DEFAULT_VERB_SUFFIXES,
    ClaimExtractor,
    ClaimPolicy,
    is_claim,
)
from scholarly_integrity.extraction.sentences import (
    DEFAULT_ABBREVIATIONS,
    is_heading,
    split_blocks,
    split_sentences,
)

__all__ = [
    "DEFAULT_VERB_LEXICON",
    "DEFAULT_VERB_SUFFIXES",
    "ClaimExtractor",
    "ClaimPolicy",
    "is_claim",
    "DEFAULT_ABBREVIATIONS",
    "is_heading",
    "split_blocks",
    "split_sentences",
]
