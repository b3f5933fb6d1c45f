"""Tests for final ordering and top-match selection."""

from __future__ import annotations

from jobrank.normalize.schema import ScoredCandidate
from jobrank.rank.aggregate import select_top_matches, sort_candidates
from conftest import make_candidate


def _scored(cid: str, score: int, reason: str = "Located near you", **job) -> ScoredCandidate:
    return ScoredCandidate(make_candidate(cid=cid, **job), score=score, primary_reason=reason)


def test_sort_is_stable_descending() -> None:
    items = [_scored("a", 5), _scored("b", 10), _scored("c", 5), _scored("d", 10)]
    assert [s.id for s in sort_candidates(items)] == ["b", "d", "a", "c"]


def test_top_matches_prefer_education_reasons() -> None:
    items = [
        _scored("a", 30, "Located near you"),
        _scored("b", 20, "Matches your technical education"),
        _scored("c", 10, "Matches your nursing/healthcare education"),
    ]
    assert [s.id for s in select_top_matches(items)] == ["b", "c"]


def test_top_matches_fall_back_to_healthcare_jobs() -> None:
    items = [_scored(f"h{i}", 10 - i, title="Hospital Aide") for i in range(4)]
    assert [s.id for s in select_top_matches(items)] == ["h0", "h1", "h2"]


def test_top_matches_background_reason_or_empty() -> None:
    items = [
        _scored("a", 10, "Located near you"),
        _scored("b", 5, "Your education field (Accountancy) matches the job"),
    ]
    assert [s.id for s in select_top_matches(items)] == ["b"]
    assert select_top_matches([_scored("x", 1)]) == []
