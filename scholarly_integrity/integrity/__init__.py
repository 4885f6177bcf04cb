"""Integrity checks: fabrication and verbatim overlap detection."""

from scholarly_integrity.integrity.fabrication import (
    CORROBORATION_TIERS,
    FabricationDetector,
    SourceLookup,
)
from scholarly_integrity.integrity.plagiarism import (
    VerbatimOverlapDetector,
    shingle_overlap,
    word_shingles,
)

__all__ = [
    "CORROBORATION_TIERS",
    "FabricationDetector",
    "SourceLookup",
    "VerbatimOverlapDetector",
    "shingle_overlap",
    "word_shingles",
]
