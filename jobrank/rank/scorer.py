"""
Rule scorer.

Runs the five detectors in their fixed order, then the certificate and
reference bonuses, and folds the results into a `ScoredCandidate`.
Scoring is pure: no I/O and no mutation of the candidate.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..normalize.schema import GENERIC_REASON, Candidate, NormalizedProfile, ScoredCandidate
from .detectors import DETECTORS, certificate_bonus, reference_bonus

logger = logging.getLogger(__name__)


def score_candidate(profile: NormalizedProfile, candidate: Candidate) -> ScoredCandidate:
    """Score one candidate against the profile."""
    score = 0
    reasons: List[str] = []
    results = [(name, detector(profile, candidate)) for name, detector in DETECTORS]
    results.append(("certificates", certificate_bonus(profile)))
    results.append(("references", reference_bonus(profile)))
    for name, result in results:
        if not result.matched:
            continue
        score += result.points
        if result.reason and result.reason not in reasons:
            reasons.append(result.reason)
        logger.debug("%s: %s +%d", candidate.id, name, result.points)
    return ScoredCandidate(
        candidate=candidate,
        score=score,
        reasons=tuple(reasons),
        primary_reason=reasons[0] if reasons else GENERIC_REASON,
    )


def score_candidates(profile: NormalizedProfile, candidates: Iterable[Candidate]) -> List[ScoredCandidate]:
    """Score every candidate, preserving pool order."""
    scored = [score_candidate(profile, candidate) for candidate in candidates]
    logger.info("Scored %d candidates", len(scored))
    return scored
