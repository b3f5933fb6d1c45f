"""
Final ordering of scored candidates.

`sort_candidates` is a stable descending sort on score, so ties keep
aggregation order (postings before templates, each in source order).
`select_top_matches` picks the short "Top Matches For You" list shown
above the full recommendations.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from ..normalize.schema import ScoredCandidate

logger = logging.getLogger(__name__)

EDUCATION_REASON_RE = re.compile(
    r"match.*education|match.*degree|match.*nursing|match.*healthcare|match.*medical", re.I
)
HEALTH_JOB_RE = re.compile(
    r"healthcare|medical|health|nurse|hospital|clinic|patient|therapy|pharma", re.I
)
BACKGROUND_REASON_RE = re.compile(r"education|degree|background|field", re.I)


def sort_candidates(scored: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """Sort by score, highest first; equal scores keep their input order."""
    ordered = sorted(scored, key=lambda item: item.score, reverse=True)
    logger.debug("Sorted %d candidates", len(ordered))
    return ordered


def select_top_matches(scored: List[ScoredCandidate], limit: int = 3) -> List[ScoredCandidate]:
    """Pick the highlighted matches from an already sorted list.

    Preference order: candidates whose primary reason cites an education
    match; otherwise healthcare jobs when at least ``limit`` exist;
    otherwise candidates whose reason mentions the user's education,
    degree, background or field.  May return an empty list.
    """
    education_matched = [s for s in scored if EDUCATION_REASON_RE.search(s.primary_reason)]
    if education_matched:
        return education_matched[:limit]
    health_jobs = [
        s for s in scored
        if HEALTH_JOB_RE.search(f"{s.candidate.title} {s.candidate.field or ''} {s.candidate.description}")
    ]
    if len(health_jobs) >= limit:
        return health_jobs[:limit]
    return [s for s in scored if BACKGROUND_REASON_RE.search(s.primary_reason)][:limit]
