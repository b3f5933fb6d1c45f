"""Tests for the fallback catalog."""

from __future__ import annotations

from pathlib import Path

from jobrank.normalize.schema import CandidateSource, NormalizedProfile
from jobrank.rank.fallback import FallbackCatalog


def test_packaged_catalog_by_category() -> None:
    catalog = FallbackCatalog.from_yaml()
    healthcare = catalog.fallback(NormalizedProfile(education_keywords=("bs nursing",)))
    general = catalog.fallback(NormalizedProfile())
    assert healthcare and general
    assert healthcare[0].title == "Registered Nurse"
    assert {c.id for c in healthcare}.isdisjoint({c.id for c in general})
    assert all(c.source is CandidateSource.FALLBACK for c in healthcare + general)


def test_scored_entries_carry_curated_reason() -> None:
    scored = FallbackCatalog.from_yaml().scored(NormalizedProfile(education_keywords=("bsn",)))
    assert scored[0].score == 0
    assert scored[0].primary_reason == "Matches your nursing education"


def test_custom_catalog(tmp_path: Path) -> None:
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "general:\n"
        "  - id: g1\n"
        "    title: Barista\n"
        "    company: Cafe\n",
        encoding="utf-8",
    )
    catalog = FallbackCatalog.from_yaml(str(path))
    scored = catalog.scored(NormalizedProfile(education_keywords=("bsn",)))
    assert scored == []
    general = catalog.scored(NormalizedProfile())
    assert general[0].candidate.location == "Remote"
    assert general[0].primary_reason == "Potential match based on your profile"
