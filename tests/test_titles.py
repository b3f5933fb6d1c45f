"""Tests for job-title suggestion."""

from __future__ import annotations

from jobrank.errors import UpstreamError
from jobrank.normalize.schema import NormalizedProfile
from jobrank.rank.titles import DEFAULT_JOB_TITLES, parse_title_list, resolve_job_titles, suggest_job_titles
from conftest import ScriptedGenerator


def test_parse_embedded_array() -> None:
    text = 'Sure! Here are some titles:\n["Staff Nurse", "Clinic Nurse"]\nGood luck.'
    assert parse_title_list(text) == ["Staff Nurse", "Clinic Nurse"]


def test_parse_rejects_non_list() -> None:
    assert parse_title_list('{"titles": "Nurse"}') == []
    assert parse_title_list("not json") == []


def test_suggestions_are_limited() -> None:
    answer = '["A", "B", "C", "D"]'
    assert suggest_job_titles(NormalizedProfile(), ScriptedGenerator([answer]), limit=2) == ["A", "B"]


def test_failure_falls_back_to_held_titles() -> None:
    profile = NormalizedProfile(experience_titles=("staff nurse",))
    assert suggest_job_titles(profile, ScriptedGenerator([UpstreamError("down")])) == ["staff nurse"]


def test_failure_without_history_uses_defaults() -> None:
    assert suggest_job_titles(NormalizedProfile(), ScriptedGenerator(["nothing useful"])) == DEFAULT_JOB_TITLES


def test_resolve_without_generator_uses_held_titles() -> None:
    profile = NormalizedProfile(experience_titles=("cashier", "clerk"))
    assert resolve_job_titles(profile) == ["cashier", "clerk"]
    assert resolve_job_titles(NormalizedProfile()) == []
