"""In-memory registry of normalized source records.

One registry instance belongs to one validation session. It is populated by
the academic-API collaborators before a run and is read-only while a run is
active; registration during a run is a caller error, enforced by a phase
flag rather than a lock.
"""

import heapq
import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

from scholarly_integrity.citations.formatter import author_surnames, normalize_surname
from scholarly_integrity.errors.exceptions import (
    DuplicateIdError,
    NotFoundError,
    RegistryFrozenError,
)
from scholarly_integrity.registry.similarity import (
    SimilarityMetric,
    TokenContainmentSimilarity,
)
from scholarly_integrity.state.enums import RegistryPhase
from scholarly_integrity.state.models import SourceRecord

logger = logging.getLogger(__name__)


class SearchResults:
    """
    Lazy, finite, restartable ranking of sources against a query.

    Nothing is scored until iteration starts, and every new iteration
    recomputes the ranking from the registry snapshot taken at creation.
    Results are ordered by descending score, ties broken by ascending id.
    """

    def __init__(
        self,
        records: tuple[SourceRecord, ...],
        query_text: str,
        top_k: int,
        similarity: SimilarityMetric,
    ):
        self._records = records
        self.query_text = query_text
        self.top_k = top_k
        self.similarity = similarity

    def __iter__(self) -> Iterator[tuple[SourceRecord, float]]:
        if self.top_k <= 0 or not self._records:
            return iter(())
        scored = (
            (record, self.similarity.score(self.query_text, record.excerpt_text))
            for record in self._records
        )
        ranked = heapq.nsmallest(
            self.top_k,
            scored,
            key=lambda pair: (-pair[1], pair[0].id),
        )
        return iter(ranked)

    def best(self) -> tuple[SourceRecord, float] | None:
        """Return the top-ranked result, or None if there are no sources."""
        for pair in self:
            return pair
        return None


class SourceRegistry:
    """
    Store of source records keyed by a stable identifier.

    Supports:
    - Registration with duplicate detection
    - Lookup by id
    - Author-surname/year index for citation marker resolution
    - Deterministic similarity search

    Example:
        registry = SourceRegistry()
        registry.register(SourceRecord(id="rod2023", title="...", ...))
        with registry.validation_run():
            for record, score in registry.search("memory consolidation", 5):
                ...
    """

    def __init__(
        self,
        records: Iterable[SourceRecord] | None = None,
        similarity: SimilarityMetric | None = None,
    ):
        """
        Initialize the registry.

        Args:
            records: Optional records to register immediately.
            similarity: Default metric for `search`.
        """
        self._records: dict[str, SourceRecord] = {}
        self._author_year_index: dict[tuple[str, int], list[str]] = {}
        self._phase = RegistryPhase.LOADING
        self._active_runs = 0
        self.similarity = similarity or TokenContainmentSimilarity()

        if records is not None:
            self.register_many(records)

    # =========================================================================
    # Registration
    # =========================================================================

    @property
    def phase(self) -> RegistryPhase:
        """Current lifecycle phase."""
        return self._phase

    def register(self, record: SourceRecord) -> None:
        """
        Register a source record.

        Args:
            record: The record to add.

        Raises:
            RegistryFrozenError: If a validation run is active.
            DuplicateIdError: If a record with the same id exists.
        """
        if self._phase == RegistryPhase.VALIDATING:
            raise RegistryFrozenError(record.id)
        if record.id in self._records:
            raise DuplicateIdError(record.id)

        self._records[record.id] = record

        if record.publication_year is not None:
            for surname in author_surnames(record.authors):
                if surname:
                    key = (surname, record.publication_year)
                    self._author_year_index.setdefault(key, []).append(record.id)

    def register_many(self, records: Iterable[SourceRecord]) -> None:
        """Register multiple source records."""
        for record in records:
            self.register(record)

    @contextmanager
    def validation_run(self) -> Iterator["SourceRegistry"]:
        """
        Mark the registry read-only for the duration of a run.

        Runs may overlap; the registry returns to loading only when the
        last active run exits, including when a run fails or is cancelled.
        """
        self._active_runs += 1
        self._phase = RegistryPhase.VALIDATING
        logger.debug(
            f"Registry frozen for validation ({len(self)} sources, "
            f"{self._active_runs} active runs)"
        )
        try:
            yield self
        finally:
            self._active_runs -= 1
            if self._active_runs == 0:
                self._phase = RegistryPhase.LOADING

    # =========================================================================
    # Lookup
    # =========================================================================

    def lookup(self, source_id: str) -> SourceRecord:
        """
        Get a source record by id.

        Raises:
            NotFoundError: If no record has this id.
        """
        try:
            return self._records[source_id]
        except KeyError:
            raise NotFoundError(source_id) from None

    def get(self, source_id: str) -> SourceRecord | None:
        """Get a source record by id, or None if absent."""
        return self._records.get(source_id)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def ids(self) -> list[str]:
        """All registered ids in ascending order."""
        return sorted(self._records)

    def find_by_author_year(self, surname: str, year: int) -> list[SourceRecord]:
        """
        Find sources with an author of this surname published in this year.

        Surname comparison ignores case and accents.

        Returns:
            Matching records in ascending id order.
        """
        ids = self._author_year_index.get((normalize_surname(surname), year), [])
        return [self._records[i] for i in sorted(set(ids))]

    # =========================================================================
    # Search
    # =========================================================================

    def search(
        self,
        query_text: str,
        top_k: int = 5,
        similarity: SimilarityMetric | None = None,
    ) -> SearchResults:
        """
        Rank registered sources by similarity to a query.

        Args:
            query_text: Text to match against source excerpts.
            top_k: Maximum number of results.
            similarity: Metric override for this search.

        Returns:
            Lazy, restartable iterable of (record, score) pairs.
        """
        snapshot = tuple(self._records[i] for i in sorted(self._records))
        return SearchResults(
            snapshot,
            query_text,
            top_k,
            similarity or self.similarity,
        )
