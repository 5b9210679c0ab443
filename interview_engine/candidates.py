"""
Candidate Repository.

Append-only collection of completed interviews, persisted as one JSON list,
with the filter/sort query used by the ranking view.

Last Grunted: 10/17/2026
"""

import logging
from enum import Enum
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from .models import Candidate
from .storage import KeyValueStore


__all__ = ["CandidateRepository", "CandidateSort", "CANDIDATES_KEY"]


logger = logging.getLogger(__name__)


CANDIDATES_KEY = "ai_candidates"

_CANDIDATE_LIST = TypeAdapter(list[Candidate])


class CandidateSort(str, Enum):
    """Orderings supported by CandidateRepository.query."""

    SCORE = "score"
    DATE = "date"
    NAME = "name"


class CandidateRepository:
    """
    Stores completed candidates and answers ranking queries.

    Example:
        >>> repo = CandidateRepository(InMemoryKeyValueStore())
        >>> repo.append(candidate)
        True
        >>> [c.name for c in repo.query("ada", sort="name")]
        ['Ada']
    """

    def __init__(self, backend: KeyValueStore, key: str = CANDIDATES_KEY) -> None:
        self._backend = backend
        self._key = key

    def _load_all(self) -> list[Candidate]:
        raw = self._backend.get(self._key, [])
        try:
            return _CANDIDATE_LIST.validate_python(raw)
        except ValidationError as e:
            logger.warning(
                "Ignoring corrupt candidate list under %s (%d errors)",
                self._key,
                e.error_count(),
            )
            return []

    def append(self, candidate: Candidate) -> bool:
        """
        Add a candidate to the end of the collection.

        Returns:
            True if stored, False if a candidate with the same id already
            exists (a session is recorded at most once).
        """
        candidates = self._load_all()
        if any(existing.id == candidate.id for existing in candidates):
            logger.warning("Candidate %s already recorded; skipping", candidate.id)
            return False

        candidates.append(candidate)
        self._backend.set(
            self._key,
            _CANDIDATE_LIST.dump_python(candidates, mode="json", by_alias=True),
        )
        logger.info(
            "Stored candidate %s (%s) total=%d",
            candidate.id,
            candidate.name,
            candidate.total,
        )
        return True

    def get(self, candidate_id: str) -> Optional[Candidate]:
        return next((c for c in self._load_all() if c.id == candidate_id), None)

    def query(
        self,
        text: Optional[str] = None,
        sort: Union[CandidateSort, str, None] = CandidateSort.SCORE,
    ) -> list[Candidate]:
        """
        Filter and order candidates.

        Args:
            text: Case-insensitive substring matched against name or email.
                Empty or None matches everything.
            sort: "date" (newest first), "name" (ascending) or "score"
                (highest total first). Unknown values sort by score.

        Returns:
            A new list. Sorting is stable, so ties keep insertion order.
        """
        candidates = self._load_all()

        if text:
            needle = text.lower()
            candidates = [
                c for c in candidates
                if needle in c.name.lower() or needle in c.email.lower()
            ]

        try:
            order = CandidateSort(sort)
        except ValueError:
            order = CandidateSort.SCORE

        if order is CandidateSort.DATE:
            return sorted(candidates, key=lambda c: c.created_at, reverse=True)
        if order is CandidateSort.NAME:
            return sorted(candidates, key=lambda c: c.name.casefold())
        return sorted(candidates, key=lambda c: c.total, reverse=True)
