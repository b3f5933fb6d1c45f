"""
Rule-based match detectors.

Each detector compares a `NormalizedProfile` with one `Candidate` and
returns a `DetectorResult`.  A detector that does not match contributes
no points and no reason.  The point values are fixed; scores are only
meaningful relative to other candidates in the same run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Tuple

from ..normalize.categories import match_category
from ..normalize.schema import Candidate, NormalizedProfile

logger = logging.getLogger(__name__)

EDUCATION_DEGREE_POINTS = 20
EDUCATION_FIELD_POINTS = 15
INDUSTRY_POINTS = 10
SKILL_POINTS_EACH = 2
SKILL_POINTS_CAP = 15
EXPERIENCE_POINTS = 10
REMOTE_POINTS = 5
NEARBY_POINTS = 10
CERTIFICATE_POINTS_EACH = 2
CERTIFICATE_POINTS_CAP = 10
REFERENCE_POINTS_CAP = 5


@dataclass(frozen=True)
class DetectorResult:
    matched: bool = False
    points: int = 0
    reason: str = ""


NO_MATCH = DetectorResult()

# Short forms job posters use for spelled-out degrees.
DEGREE_ABBREVIATIONS = {
    "bachelor of science in nursing": ("bsn", "bs nursing"),
    "bachelor of science in computer science": ("bscs", "bs computer science"),
    "bachelor of science in information technology": ("bsit", "bs information technology"),
    "bachelor of science in business administration": ("bsba", "bs business administration"),
    "bachelor of secondary education": ("bsed",),
    "bachelor of elementary education": ("beed",),
    "master of business administration": ("mba",),
}

Detector = Callable[[NormalizedProfile, Candidate], DetectorResult]


def _overlaps(a: str, b: str) -> bool:
    """True when either string contains the other."""
    return a in b or b in a


def detect_education(profile: NormalizedProfile, candidate: Candidate) -> DetectorResult:
    """Degree named in the job's education requirement (or vice versa)."""
    if not candidate.education:
        return NO_MATCH
    job_education = candidate.education.lower()
    for degree in profile.education_keywords:
        spellings = (degree,) + DEGREE_ABBREVIATIONS.get(degree, ())
        if any(_overlaps(spelling, job_education) for spelling in spellings):
            return DetectorResult(
                True,
                EDUCATION_DEGREE_POINTS,
                f"Your {degree} degree matches the job requirements",
            )
    education_field = profile.education_field or profile.industry
    if education_field and education_field.lower() in job_education:
        return DetectorResult(
            True,
            EDUCATION_FIELD_POINTS,
            f"Your education field ({education_field}) matches the job",
        )
    return NO_MATCH


def detect_field(profile: NormalizedProfile, candidate: Candidate) -> DetectorResult:
    """Broad category alignment, falling back to the user's industry."""
    if not candidate.field:
        return NO_MATCH
    category = match_category(profile.education_keywords, f"{candidate.title} {candidate.field}")
    if category is not None:
        return DetectorResult(True, category.points, category.reason)
    if profile.industry and _overlaps(profile.industry.lower(), candidate.field.lower()):
        return DetectorResult(True, INDUSTRY_POINTS, f"Matches your industry: {profile.industry}")
    return NO_MATCH


def job_text(candidate: Candidate) -> str:
    parts = (candidate.title, candidate.description, candidate.requirements, candidate.field)
    return " ".join(part or "" for part in parts).lower()


def detect_skills(profile: NormalizedProfile, candidate: Candidate) -> DetectorResult:
    """Skills named anywhere in the job text, two points each up to the cap."""
    text = job_text(candidate)
    matched = [skill for skill in profile.skill_names if skill in text]
    if not matched:
        return NO_MATCH
    listed = ", ".join(matched[:2])
    suffix = "..." if len(matched) > 2 else ""
    return DetectorResult(
        True,
        min(len(matched) * SKILL_POINTS_EACH, SKILL_POINTS_CAP),
        f"Uses your skills: {listed}{suffix}",
    )


def detect_experience(profile: NormalizedProfile, candidate: Candidate) -> DetectorResult:
    title = candidate.title.lower()
    for held in profile.experience_titles:
        if _overlaps(held, title):
            return DetectorResult(True, EXPERIENCE_POINTS, f"Relevant to your experience as {held}")
    return NO_MATCH


def _location_parts(text: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in text.lower().split(",") if part.strip())


def detect_location(profile: NormalizedProfile, candidate: Candidate) -> DetectorResult:
    """Remote jobs get a flat bonus; otherwise any shared city/province/country."""
    location = (candidate.location or "").strip()
    if not location:
        return NO_MATCH
    if location.lower() == "remote":
        return DetectorResult(True, REMOTE_POINTS, "Remote work opportunity")
    user_parts = _location_parts(", ".join(profile.location_tokens))
    job_parts = _location_parts(location)
    if any(_overlaps(u, j) for u in user_parts for j in job_parts):
        return DetectorResult(True, NEARBY_POINTS, "Located near you")
    return NO_MATCH


def certificate_bonus(profile: NormalizedProfile) -> DetectorResult:
    count = profile.certificate_count
    if count <= 0:
        return NO_MATCH
    return DetectorResult(
        True,
        min(count * CERTIFICATE_POINTS_EACH, CERTIFICATE_POINTS_CAP),
        f"You have {count} relevant certification(s)",
    )


def reference_bonus(profile: NormalizedProfile) -> DetectorResult:
    # References add points but never a reason.
    count = profile.reference_count
    if count <= 0:
        return NO_MATCH
    return DetectorResult(True, min(count, REFERENCE_POINTS_CAP), "")


DETECTORS: Tuple[Tuple[str, Detector], ...] = (
    ("education", detect_education),
    ("field", detect_field),
    ("skills", detect_skills),
    ("experience", detect_experience),
    ("location", detect_location),
)
