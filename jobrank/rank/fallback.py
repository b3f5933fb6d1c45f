"""
Fallback catalog.

A fixed set of realistic example postings served to job seekers when
the candidate pool is empty or the stores cannot be read, so the
dashboard never shows a blank state.  Entries carry
`CandidateSource.FALLBACK` so the presentation layer can flag them as
examples.  The catalog is plain data loaded from YAML and injected into
the pipeline; employers never receive it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml  # type: ignore

from ..normalize.categories import is_healthcare_profile
from ..normalize.schema import GENERIC_REASON, Candidate, CandidateSource, NormalizedProfile, ScoredCandidate

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "fallback_catalog.yaml"


@dataclass(frozen=True)
class FallbackEntry:
    candidate: Candidate
    reason: str


def _entry(row: Dict[str, Any]) -> FallbackEntry:
    candidate = Candidate(
        id=str(row["id"]),
        title=str(row["title"]),
        company=str(row["company"]),
        location=str(row.get("location") or "Remote"),
        description=str(row.get("description") or ""),
        source=CandidateSource.FALLBACK,
        field=row.get("field"),
        education=row.get("education"),
        salary=row.get("salary"),
        requirements=row.get("requirements"),
    )
    return FallbackEntry(candidate=candidate, reason=str(row.get("reason") or ""))


class FallbackCatalog:
    """Category-keyed example postings: ``healthcare`` and ``general``."""

    def __init__(self, healthcare: Tuple[FallbackEntry, ...], general: Tuple[FallbackEntry, ...]) -> None:
        self.healthcare = healthcare
        self.general = general

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "FallbackCatalog":
        catalog_path = Path(path) if path else DEFAULT_CATALOG_PATH
        with open(catalog_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        catalog = cls(
            healthcare=tuple(_entry(row) for row in data.get("healthcare") or []),
            general=tuple(_entry(row) for row in data.get("general") or []),
        )
        logger.debug(
            "Loaded fallback catalog %s: %d healthcare, %d general",
            catalog_path,
            len(catalog.healthcare),
            len(catalog.general),
        )
        return catalog

    def entries(self, profile: NormalizedProfile) -> Tuple[FallbackEntry, ...]:
        if is_healthcare_profile(profile.education_keywords):
            return self.healthcare
        return self.general

    def fallback(self, profile: NormalizedProfile) -> List[Candidate]:
        """Return the example postings for the user's education category."""
        return [entry.candidate for entry in self.entries(profile)]

    def scored(self, profile: NormalizedProfile) -> List[ScoredCandidate]:
        """Example postings as unscored results carrying their curated reason."""
        results = []
        for entry in self.entries(profile):
            reasons = (entry.reason,) if entry.reason else ()
            results.append(
                ScoredCandidate(
                    candidate=entry.candidate,
                    reasons=reasons,
                    primary_reason=entry.reason or GENERIC_REASON,
                )
            )
        return results
