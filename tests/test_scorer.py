"""Tests for the rule scorer."""

from __future__ import annotations

from jobrank.normalize.schema import GENERIC_REASON, NormalizedProfile
from jobrank.rank.scorer import score_candidate, score_candidates
from conftest import make_candidate


def test_nursing_end_to_end_score(nurse_profile, nurse_job) -> None:
    scored = score_candidate(nurse_profile, nurse_job)
    assert scored.score == 47
    assert scored.primary_reason == "Your bachelor of science in nursing degree matches the job requirements"
    assert scored.reasons == (
        "Your bachelor of science in nursing degree matches the job requirements",
        "Matches your nursing/healthcare education",
        "Uses your skills: patient care",
        "Located near you",
    )


def test_certificates_only() -> None:
    scored = score_candidate(NormalizedProfile(certificate_count=2), make_candidate())
    assert scored.score == 4
    assert scored.reasons == ("You have 2 relevant certification(s)",)
    assert scored.primary_reason == "You have 2 relevant certification(s)"


def test_references_add_points_without_reason() -> None:
    scored = score_candidate(NormalizedProfile(reference_count=3), make_candidate())
    assert scored.score == 3
    assert scored.reasons == ()
    assert scored.primary_reason == GENERIC_REASON


def test_empty_profile_gets_generic_reason() -> None:
    scored = score_candidate(NormalizedProfile(), make_candidate())
    assert scored.score == 0
    assert scored.primary_reason == GENERIC_REASON


def test_remote_profile_never_gets_proximity_bonus() -> None:
    profile = NormalizedProfile(location_tokens=("remote",))
    scored = score_candidate(profile, make_candidate(location="Remote"))
    assert scored.score == 5
    assert scored.reasons == ("Remote work opportunity",)


def test_score_is_sum_of_contributions() -> None:
    profile = NormalizedProfile(
        skill_names=("excel",),
        experience_titles=("clerk",),
        certificate_count=1,
        reference_count=1,
    )
    job = make_candidate(title="Accounting Clerk", description="Excel reports", location="Remote")
    assert score_candidate(profile, job).score == 2 + 10 + 5 + 2 + 1


def test_scoring_does_not_mutate_and_keeps_order(nurse_profile, nurse_job) -> None:
    other = make_candidate(cid="other")
    results = score_candidates(nurse_profile, [other, nurse_job])
    assert [r.id for r in results] == ["other", "rn-1"]
    assert results[1].candidate is nurse_job
