"""
Data model for a ranking run.

`RawProfile` is the only loosely typed record: it holds whatever the
profile store returned.  Everything downstream of the normalizer works
on the frozen records below.  Scoring never mutates a `Candidate`; it
builds a parallel `ScoredCandidate`, and the refiner derives new
`ScoredCandidate` values with `dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

GENERIC_REASON = "Potential match based on your profile"


class CandidateSource(str, Enum):
    POSTING = "posting"
    TEMPLATE = "template"
    FALLBACK = "fallback"


@dataclass
class RawProfile:
    """Untrusted profile data as read from the profile store.

    Every field is optional.  List items may be dicts, JSON-encoded
    strings or plain strings.
    """

    user_id: str
    profile: Optional[Dict[str, Any]] = None
    skills: List[Any] = field(default_factory=list)
    education: List[Any] = field(default_factory=list)
    work_experience: List[Any] = field(default_factory=list)
    certificates: List[Any] = field(default_factory=list)
    references: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class NormalizedProfile:
    """Comparable view of a user's profile, lower-cased and de-duplicated.

    The keyword and skill collections are ordered tuples without
    duplicates so that "first match" lookups are reproducible.
    """

    education_keywords: Tuple[str, ...] = ()
    skill_names: Tuple[str, ...] = ()
    skill_categories: Tuple[str, ...] = ()
    experience_titles: Tuple[str, ...] = ()
    location_tokens: Tuple[str, ...] = ()
    industry: Optional[str] = None
    education_field: Optional[str] = None
    certificate_count: int = 0
    reference_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not (
            self.education_keywords
            or self.skill_names
            or self.experience_titles
            or self.location_tokens
        )


@dataclass(frozen=True)
class Candidate:
    """A job posting, job template or fallback example in one shape."""

    id: str
    title: str
    company: str
    location: str
    description: str
    source: CandidateSource
    posted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    field: Optional[str] = None
    education: Optional[str] = None
    salary: Optional[str] = None
    requirements: Optional[str] = None
    url: str = "#"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "description": self.description,
            "field": self.field,
            "education": self.education,
            "salary": self.salary,
            "requirements": self.requirements,
            "postedAt": self.posted_at.isoformat(),
            "source": self.source.value,
            "url": self.url,
        }


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate together with its score and the reasons behind it."""

    candidate: Candidate
    score: int = 0
    reasons: Tuple[str, ...] = ()
    primary_reason: str = GENERIC_REASON
    ai_score: Optional[int] = None
    ai_reason: Optional[str] = None

    @property
    def id(self) -> str:
        return self.candidate.id

    @property
    def title(self) -> str:
        return self.candidate.title

    def to_dict(self) -> Dict[str, Any]:
        data = self.candidate.to_dict()
        data.update(
            {
                "score": self.score,
                "reasons": list(self.reasons),
                "primaryReason": self.primary_reason,
                "aiScore": self.ai_score,
                "aiReason": self.ai_reason,
            }
        )
        return data
