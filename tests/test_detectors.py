"""Tests for the individual match detectors."""

from __future__ import annotations

from jobrank.normalize.schema import NormalizedProfile
from jobrank.rank import detectors
from conftest import make_candidate


def test_education_degree_abbreviation(nurse_profile, nurse_job) -> None:
    result = detectors.detect_education(nurse_profile, nurse_job)
    assert result.points == 20
    assert result.reason == "Your bachelor of science in nursing degree matches the job requirements"


def test_education_field_branch() -> None:
    profile = NormalizedProfile(education_field="Accountancy")
    job = make_candidate(education="Graduate of Accountancy or Finance")
    result = detectors.detect_education(profile, job)
    assert result.points == 15
    assert result.reason == "Your education field (Accountancy) matches the job"


def test_education_requires_job_education(nurse_profile) -> None:
    assert not detectors.detect_education(nurse_profile, make_candidate()).matched


def test_field_category_and_industry_fallback(nurse_profile, nurse_job) -> None:
    assert detectors.detect_field(nurse_profile, nurse_job).points == 15
    profile = NormalizedProfile(industry="Logistics")
    job = make_candidate(field="Logistics and Supply Chain")
    result = detectors.detect_field(profile, job)
    assert result.points == 10
    assert result.reason == "Matches your industry: Logistics"


def test_field_requires_job_field(nurse_profile) -> None:
    assert not detectors.detect_field(nurse_profile, make_candidate(title="Nurse")).matched


def test_skills_reason_lists_two_with_ellipsis() -> None:
    profile = NormalizedProfile(skill_names=("python", "sql", "docker"))
    job = make_candidate(description="Python, SQL and Docker experience")
    result = detectors.detect_skills(profile, job)
    assert result.points == 6
    assert result.reason == "Uses your skills: python, sql..."


def test_skills_cap_at_fifteen() -> None:
    skills = tuple(f"skill{i}" for i in range(10))
    job = make_candidate(description=" ".join(skills))
    assert detectors.detect_skills(NormalizedProfile(skill_names=skills), job).points == 15


def test_experience_substring_either_way() -> None:
    profile = NormalizedProfile(experience_titles=("nurse",))
    result = detectors.detect_experience(profile, make_candidate(title="Senior Nurse"))
    assert result.points == 10
    assert result.reason == "Relevant to your experience as nurse"


def test_remote_short_circuits_location() -> None:
    for tokens in ((), ("remote",), ("quezon city",)):
        result = detectors.detect_location(NormalizedProfile(location_tokens=tokens), make_candidate(location="Remote"))
        assert result.points == 5
        assert result.reason == "Remote work opportunity"


def test_location_nearby_and_no_match(nurse_profile) -> None:
    assert detectors.detect_location(nurse_profile, make_candidate(location="Quezon City")).points == 10
    assert not detectors.detect_location(nurse_profile, make_candidate(location="Cebu City")).matched
    assert not detectors.detect_location(NormalizedProfile(), make_candidate(location="Cebu City")).matched


def test_certificate_and_reference_bonuses() -> None:
    profile = NormalizedProfile(certificate_count=7, reference_count=9)
    cert = detectors.certificate_bonus(profile)
    assert cert.points == 10
    assert cert.reason == "You have 7 relevant certification(s)"
    ref = detectors.reference_bonus(profile)
    assert ref.points == 5
    assert ref.reason == ""
