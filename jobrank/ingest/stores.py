"""
Profile and posting store interfaces.

The hosted backend is not part of this package.  The pipeline only
depends on the two abstract classes below, which mirror the queries the
web application issues: the profile row, the résumé columns (with the
onboarding assessment and the skills picker as fallbacks) and the
posting / template tables.

`InMemoryStore` implements both interfaces over a plain dictionary so
the pipeline can run from a fixture file and in tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml  # type: ignore

from ..normalize.schema import RawProfile

logger = logging.getLogger(__name__)


class ProfileStore(ABC):
    """Read access to everything known about a user."""

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the profile row (location, industry, ...) or ``None``."""
        raise NotImplementedError

    @abstractmethod
    def get_resume_skills(self, user_id: str) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def get_education(self, user_id: str) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def get_work_experience(self, user_id: str) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def get_certificates(self, user_id: str) -> List[Any]:
        raise NotImplementedError

    @abstractmethod
    def get_references(self, user_id: str) -> List[Any]:
        raise NotImplementedError


class PostingStore(ABC):
    """Read access to live job postings and job templates."""

    @abstractmethod
    def list_postings(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return posting rows, newest first.

        Args:
            filters: Optional equality filters, e.g. ``{"employer_id": ...}``.
        """
        raise NotImplementedError

    @abstractmethod
    def list_templates(self) -> List[Dict[str, Any]]:
        raise NotImplementedError


def load_raw_profile(store: ProfileStore, user_id: str) -> RawProfile:
    """Collect every profile fragment for ``user_id`` into a `RawProfile`.

    Store exceptions propagate; the pipeline decides how to recover.
    """
    return RawProfile(
        user_id=user_id,
        profile=store.get_profile(user_id),
        skills=store.get_resume_skills(user_id) or [],
        education=store.get_education(user_id) or [],
        work_experience=store.get_work_experience(user_id) or [],
        certificates=store.get_certificates(user_id) or [],
        references=store.get_references(user_id) or [],
    )


class InMemoryStore(ProfileStore, PostingStore):
    """Profile and posting store backed by a dictionary.

    The dictionary uses the table names of the hosted backend:
    ``profiles`` (keyed by user id), ``resumes`` and ``assessments``
    (keyed by user id), ``user_skills`` (user id -> list of rows),
    ``postings`` and ``templates`` (lists of rows).
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        data = data or {}
        self.profiles: Dict[str, Dict[str, Any]] = dict(data.get("profiles") or {})
        self.resumes: Dict[str, Dict[str, Any]] = dict(data.get("resumes") or {})
        self.assessments: Dict[str, Dict[str, Any]] = dict(data.get("assessments") or {})
        self.user_skills: Dict[str, List[Any]] = dict(data.get("user_skills") or {})
        self.postings: List[Dict[str, Any]] = list(data.get("postings") or [])
        self.templates: List[Dict[str, Any]] = list(data.get("templates") or [])

    @classmethod
    def from_file(cls, path: str) -> "InMemoryStore":
        """Load a YAML or JSON fixture file."""
        with open(Path(path), "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Fixture {path} must contain a mapping at the top level")
        logger.info(
            "Loaded fixture %s: %d profiles, %d postings, %d templates",
            path,
            len(data.get("profiles") or {}),
            len(data.get("postings") or []),
            len(data.get("templates") or []),
        )
        return cls(data)

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.profiles.get(user_id)

    def get_resume_skills(self, user_id: str) -> List[Any]:
        resume = self.resumes.get(user_id) or {}
        skills = resume.get("skills")
        if skills:
            return list(skills)
        return list(self.user_skills.get(user_id) or [])

    def get_education(self, user_id: str) -> List[Any]:
        resume = self.resumes.get(user_id)
        if resume is not None:
            return list(resume.get("education") or [])
        assessment = self.assessments.get(user_id) or {}
        education = assessment.get("education")
        return [education] if education else []

    def get_work_experience(self, user_id: str) -> List[Any]:
        resume = self.resumes.get(user_id)
        if resume is not None:
            return list(resume.get("work_experience") or [])
        assessment = self.assessments.get(user_id) or {}
        experience = assessment.get("experience")
        return [experience] if experience else []

    def get_certificates(self, user_id: str) -> List[Any]:
        resume = self.resumes.get(user_id) or {}
        return list(resume.get("certificates") or [])

    def get_references(self, user_id: str) -> List[Any]:
        resume = self.resumes.get(user_id) or {}
        return list(resume.get("reference_list") or resume.get("references") or [])

    def list_postings(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        rows = [
            row for row in self.postings
            if all(row.get(key) == value for key, value in (filters or {}).items())
        ]
        # Stable sort: rows without created_at keep their relative order at the end.
        rows.sort(key=lambda row: str(row.get("created_at") or ""), reverse=True)
        return rows

    def list_templates(self) -> List[Dict[str, Any]]:
        return list(self.templates)
