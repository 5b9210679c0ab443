"""
Tests for CandidateRepository ranking queries.
"""

from __future__ import annotations

import pytest

from interview_engine.candidates import CANDIDATES_KEY, CandidateRepository, CandidateSort
from tests.mock_data import BASE_TIME_MS, generate_candidate


@pytest.fixture
def populated(candidates: CandidateRepository) -> CandidateRepository:
    """Four candidates appended in a known order."""
    candidates.append(generate_candidate("c1", "Grace Hopper", total=70, created_at=BASE_TIME_MS))
    candidates.append(generate_candidate("c2", "ada Lovelace", total=90, created_at=BASE_TIME_MS + 3000))
    candidates.append(generate_candidate("c3", "Alan Turing", total=70, created_at=BASE_TIME_MS + 1000))
    candidates.append(
        generate_candidate(
            "c4", "Barbara Liskov", email="liskov@mit.edu", total=55, created_at=BASE_TIME_MS + 2000
        )
    )
    return candidates


def _ids(results) -> list[str]:
    return [c.id for c in results]


class TestAppend:
    """Tests for append and get."""

    def test_append_and_get(self, candidates):
        candidate = generate_candidate("c1")

        assert candidates.append(candidate) is True
        assert candidates.get("c1") == candidate
        assert candidates.get("missing") is None

    def test_duplicate_id_rejected(self, candidates):
        """A session is recorded as a candidate at most once."""
        candidates.append(generate_candidate("c1", total=10))

        assert candidates.append(generate_candidate("c1", total=99)) is False
        assert len(candidates.query()) == 1
        assert candidates.get("c1").total == 10

    def test_persisted_with_wire_names(self, candidates, backend):
        candidates.append(generate_candidate("c1"))
        stored = backend.get(CANDIDATES_KEY)

        assert isinstance(stored, list)
        assert {"qa", "createdAt", "total", "avg", "summary"} <= set(stored[0])

    def test_corrupt_collection_reads_as_empty(self, candidates, backend):
        backend.set(CANDIDATES_KEY, {"not": "a list"})

        assert candidates.query() == []
        assert candidates.get("anything") is None

    def test_append_after_corruption_starts_fresh(self, candidates, backend):
        backend._values[CANDIDATES_KEY] = "[{broken"

        assert candidates.append(generate_candidate("c9")) is True
        assert _ids(candidates.query()) == ["c9"]


class TestQuery:
    """Tests for filter and sort."""

    def test_default_sort_is_score_descending_and_stable(self, populated):
        """Ties on total keep insertion order (c1 before c3)."""
        assert _ids(populated.query()) == ["c2", "c1", "c3", "c4"]
        assert _ids(populated.query(sort="score")) == ["c2", "c1", "c3", "c4"]

    def test_sort_by_name_ascending(self, populated):
        names = [c.name for c in populated.query(sort=CandidateSort.NAME)]

        assert names == ["ada Lovelace", "Alan Turing", "Barbara Liskov", "Grace Hopper"]

    def test_sort_by_date_newest_first(self, populated):
        assert _ids(populated.query(sort="date")) == ["c2", "c4", "c3", "c1"]

    def test_unknown_sort_falls_back_to_score(self, populated):
        assert _ids(populated.query(sort="shoe-size")) == ["c2", "c1", "c3", "c4"]
        assert _ids(populated.query(sort=None)) == ["c2", "c1", "c3", "c4"]

    def test_filter_matches_name_case_insensitively(self, populated):
        assert _ids(populated.query("ADA")) == ["c2"]

    def test_filter_matches_email(self, populated):
        assert _ids(populated.query("mit.edu")) == ["c4"]

    def test_filter_combined_with_sort(self, populated):
        """'a' matches every name; 'ing' narrows to Turing only."""
        assert _ids(populated.query("a", sort="name")) == ["c2", "c3", "c4", "c1"]
        assert _ids(populated.query("ing")) == ["c3"]

    def test_empty_filter_matches_all(self, populated):
        assert len(populated.query("")) == 4

    def test_query_does_not_mutate_storage(self, populated, backend):
        before = backend.get(CANDIDATES_KEY)

        populated.query("ada", sort="name")
        populated.query(sort="date")

        assert backend.get(CANDIDATES_KEY) == before
        assert _ids(populated.query(sort="bogus")) == ["c2", "c1", "c3", "c4"]
