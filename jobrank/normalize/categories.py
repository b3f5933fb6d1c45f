"""
Broad education / job category classifier.

Each category pairs a pattern applied to the user's degrees with a
pattern applied to a job's ``title + field``.  Categories are checked
in priority order and the first category that matches both sides wins,
so a job is never credited under two categories.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple


@dataclass(frozen=True)
class Category:
    name: str
    profile_pattern: Pattern[str]
    job_pattern: Pattern[str]
    points: int
    reason: str


HEALTHCARE_PROFILE = re.compile(
    r"nursing|bs nursing|bachelor of science in nursing|bsn|rn|healthcare|medical|health|medicine|pharma|dental",
    re.I,
)

CATEGORIES: Tuple[Category, ...] = (
    Category(
        "healthcare",
        HEALTHCARE_PROFILE,
        re.compile(r"nurse|nursing|healthcare|medical|clinical|patient|health|hospital|doctor|pharma", re.I),
        15,
        "Matches your nursing/healthcare education",
    ),
    Category(
        "business",
        re.compile(r"business|finance|accounting|marketing|management|mba|economics", re.I),
        re.compile(r"business|finance|accounting|marketing|management|analyst|consultant", re.I),
        10,
        "Matches your business education",
    ),
    Category(
        "engineering",
        re.compile(r"engineering|computer science|information technology|software|it|programming|development", re.I),
        re.compile(r"engineer|developer|software|IT|programming|technical|technology", re.I),
        10,
        "Matches your technical education",
    ),
    Category(
        "education",
        re.compile(r"education|teaching|pedagogy|instructional", re.I),
        re.compile(r"teacher|professor|instructor|educator|tutor|school|education", re.I),
        10,
        "Matches your education background",
    ),
    Category(
        "arts",
        re.compile(r"arts|design|creative|music|film|theater|media", re.I),
        re.compile(r"design|creative|artist|writer|content|media|art", re.I),
        10,
        "Matches your creative education",
    ),
)


def classify_profile(education_keywords: Iterable[str]) -> Tuple[str, ...]:
    """Return the names of every category the user's degrees fall into."""
    keywords = list(education_keywords)
    return tuple(
        category.name
        for category in CATEGORIES
        if any(category.profile_pattern.search(k) for k in keywords)
    )


def match_category(education_keywords: Iterable[str], job_text: str) -> Optional[Category]:
    """Return the first category shared by the user's degrees and the job text."""
    profile_categories = classify_profile(education_keywords)
    for category in CATEGORIES:
        if category.name in profile_categories and category.job_pattern.search(job_text):
            return category
    return None


def is_healthcare_profile(education_keywords: Iterable[str]) -> bool:
    return any(HEALTHCARE_PROFILE.search(k) for k in education_keywords)
