"""Tests for the candidate aggregator and the in-memory store."""

from __future__ import annotations

from pathlib import Path

import pytest  # type: ignore

from jobrank.ingest.candidates import aggregate_candidates, posting_to_candidate, template_to_candidate
from jobrank.ingest.stores import InMemoryStore, load_raw_profile
from jobrank.normalize.schema import CandidateSource


def _postings(n: int):
    return [{"id": f"p{i}", "title": f"Job {i}", "created_at": f"2024-01-0{i + 1}T00:00:00Z"} for i in range(n)]


TEMPLATES = [{"id": 1, "title": "Staff Nurse", "requirements": "Valid PRC license"}]


def test_posting_defaults() -> None:
    candidate = posting_to_candidate({"id": 7})
    assert candidate.title == "Untitled Position"
    assert candidate.company == "IntelliJob"
    assert candidate.location == "Remote"
    assert candidate.description == "No description provided"
    assert candidate.url == "/job/7"
    assert candidate.source is CandidateSource.POSTING


def test_posting_company_prefers_employer_profile() -> None:
    row = {"id": 1, "company_name": "Row Co", "profiles": {"company_name": "Employer Co"}}
    assert posting_to_candidate(row).company == "Employer Co"


def test_template_mapping() -> None:
    candidate = template_to_candidate(TEMPLATES[0])
    assert candidate.id == "template-1"
    assert candidate.description == "Valid PRC license"
    assert candidate.source is CandidateSource.TEMPLATE


def test_templates_pad_thin_seeker_pool() -> None:
    pool = aggregate_candidates(_postings(2), TEMPLATES, is_employer=False)
    assert [c.id for c in pool.candidates] == ["p0", "p1", "template-1"]
    assert pool.template_count == 1
    assert not pool.use_fallback


def test_templates_skipped_when_enough_postings() -> None:
    pool = aggregate_candidates(_postings(5), TEMPLATES, is_employer=False)
    assert all(c.source is CandidateSource.POSTING for c in pool.candidates)
    assert len(pool.candidates) == 5


def test_employer_never_gets_templates() -> None:
    pool = aggregate_candidates([], TEMPLATES, is_employer=True)
    assert pool.candidates == []
    assert not pool.use_fallback


def test_empty_seeker_pool_requests_fallback() -> None:
    pool = aggregate_candidates([], [], is_employer=False)
    assert pool.candidates == []
    assert pool.use_fallback


def test_duplicate_ids_keep_first() -> None:
    postings = [{"id": "a", "title": "First"}, {"id": "a", "title": "Second"}]
    pool = aggregate_candidates(postings, [], is_employer=False)
    assert [c.title for c in pool.candidates] == ["First"]


def test_store_orders_postings_newest_first_and_filters() -> None:
    store = InMemoryStore(
        {
            "postings": [
                {"id": "old", "employer_id": "e1", "created_at": "2024-01-01"},
                {"id": "new", "employer_id": "e1", "created_at": "2024-03-01"},
                {"id": "other", "employer_id": "e2", "created_at": "2024-02-01"},
            ]
        }
    )
    assert [r["id"] for r in store.list_postings()] == ["new", "other", "old"]
    assert [r["id"] for r in store.list_postings({"employer_id": "e1"})] == ["new", "old"]


def test_store_falls_back_to_assessment_and_skills_picker() -> None:
    store = InMemoryStore(
        {
            "assessments": {"u1": {"education": "BS Nursing", "experience": "Caregiver"}},
            "user_skills": {"u1": [{"skills": {"name": "First Aid"}, "skill_type": "Clinical"}]},
        }
    )
    raw = load_raw_profile(store, "u1")
    assert raw.education == ["BS Nursing"]
    assert raw.work_experience == ["Caregiver"]
    assert raw.skills[0]["skills"]["name"] == "First Aid"
    assert raw.profile is None


def test_store_from_file(tmp_path: Path) -> None:
    path = tmp_path / "data.yaml"
    path.write_text("postings:\n  - id: p1\n    title: Nurse\n", encoding="utf-8")
    store = InMemoryStore.from_file(str(path))
    assert store.list_postings()[0]["title"] == "Nurse"


def test_store_from_file_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "data.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        InMemoryStore.from_file(str(path))


def test_non_mapping_rows_are_skipped() -> None:
    postings = [None, {"id": "p1", "title": "Nurse", "profiles": None}, "junk"]
    pool = aggregate_candidates(postings, [None, TEMPLATES[0]], is_employer=False)
    assert [c.id for c in pool.candidates] == ["p1", "template-1"]
    assert pool.posting_count == 1
    assert pool.candidates[0].company == "IntelliJob"
