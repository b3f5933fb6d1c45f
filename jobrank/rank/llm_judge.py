"""
LLM refinement stage.

Sends the top rule-scored candidates, one at a time, to a text-generation
provider together with the user's normalized profile, parses the
labelled answer and blends it back into the rule-based result.  The
refiner is best effort: a timeout, provider error or unreadable answer
for one candidate is logged and that candidate keeps its rule-based
score and reason.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from ..errors import RefinementFailure
from ..normalize.schema import NormalizedProfile, ScoredCandidate
from .llm_providers import TextGenerator
from .llm_schema import AIAssessment, parse_assessment

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5
ALIGNMENT_DIVISOR = 5
OVERRIDE_ABOVE = 80
OVERRIDE_BELOW = 30

PROMPT_TEMPLATE = """\
You are a recruiting assistant. Assess how well the candidate below fits the job.

Candidate profile:
Education: {education}
Skills: {skills}
Previous job titles: {titles}
Location: {location}
Industry: {industry}

Job:
Title: {title}
Field: {field}
Education required: {job_education}
Requirements: {requirements}
Description: {description}

Answer with exactly these four lines and nothing else:
Score: <integer from 0 to 100>
Reason: <one sentence explaining the fit>
Title Alignment: <Yes if the job title fits the candidate's background, otherwise No>
Qualified: <Yes, No or Partially>
"""


def _join(values: Iterable[str]) -> str:
    return ", ".join(values) or "Not specified"


def build_prompt(profile: NormalizedProfile, scored: ScoredCandidate) -> str:
    candidate = scored.candidate
    return PROMPT_TEMPLATE.format(
        education=_join(profile.education_keywords),
        skills=_join(profile.skill_names),
        titles=_join(profile.experience_titles),
        location=_join(profile.location_tokens),
        industry=profile.industry or "Not specified",
        title=candidate.title,
        field=candidate.field or "Not specified",
        job_education=candidate.education or "Not specified",
        requirements=candidate.requirements or "Not specified",
        description=candidate.description,
    )


def apply_assessment(scored: ScoredCandidate, assessment: AIAssessment) -> ScoredCandidate:
    """Blend an AI assessment into a rule-scored candidate.

    A title-aligned assessment adds ``floor(score / 5)`` points.  The AI
    reason replaces the primary reason only at the extremes (above 80 or
    below 30) and only when the model gave one.
    """
    score = scored.score
    if assessment.title_alignment:
        score += assessment.score // ALIGNMENT_DIVISOR
    primary_reason = scored.primary_reason
    extreme = assessment.score > OVERRIDE_ABOVE or assessment.score < OVERRIDE_BELOW
    if extreme and assessment.reason:
        primary_reason = assessment.reason
    return replace(
        scored,
        score=score,
        primary_reason=primary_reason,
        ai_score=assessment.score,
        ai_reason=assessment.reason,
    )


async def _generate(
    generator: TextGenerator,
    prompt: str,
    timeout: float,
    executor: Optional[Executor] = None,
) -> str:
    loop = asyncio.get_running_loop()
    result = await asyncio.wait_for(
        loop.run_in_executor(executor, generator.generate, prompt),
        timeout=timeout,
    )
    return result.text


async def assess_candidate(
    profile: NormalizedProfile,
    scored: ScoredCandidate,
    generator: TextGenerator,
    timeout: float = 20.0,
    retries: int = 0,
    executor: Optional[Executor] = None,
) -> AIAssessment:
    """Ask the provider about one candidate.

    The provider call runs on ``executor`` (the loop default when
    omitted).  A timed-out call is abandoned, not interrupted.

    Raises:
        RefinementFailure: When every attempt times out, errors or yields
            an unreadable answer.
    """
    prompt = build_prompt(profile, scored)
    last_error: Optional[BaseException] = None
    for attempt in range(retries + 1):
        try:
            text = await _generate(generator, prompt, timeout, executor)
            return parse_assessment(text)
        except asyncio.TimeoutError as exc:
            last_error = exc
            logger.warning("Refinement of %s timed out after %.1fs (attempt %d)", scored.id, timeout, attempt + 1)
        except Exception as exc:  # noqa: BLE001
            last_error = exc
            logger.warning("Refinement of %s failed (attempt %d): %s", scored.id, attempt + 1, exc)
    raise RefinementFailure(f"Could not refine {scored.id}: {last_error}", candidate_id=scored.id)


def select_for_refinement(scored: List[ScoredCandidate], top_n: int = DEFAULT_TOP_N) -> List[ScoredCandidate]:
    """Return the ``min(top_n, len(scored))`` best rule-scored candidates."""
    ranked = sorted(scored, key=lambda item: item.score, reverse=True)
    return ranked[: max(top_n, 0)]


async def refine_candidates(
    profile: NormalizedProfile,
    scored: List[ScoredCandidate],
    generator: TextGenerator,
    top_n: int = DEFAULT_TOP_N,
    timeout: float = 20.0,
    retries: int = 0,
    executor: Optional[Executor] = None,
) -> Dict[str, ScoredCandidate]:
    """Refine the top candidates sequentially.

    Returns:
        A mapping from candidate id to its refined `ScoredCandidate`.
        Candidates whose refinement failed are absent from the mapping.
    """
    updates: Dict[str, ScoredCandidate] = {}
    for item in select_for_refinement(scored, top_n):
        try:
            assessment = await assess_candidate(profile, item, generator, timeout, retries, executor)
        except RefinementFailure as exc:
            logger.warning("Keeping rule-based result for %s: %s", item.id, exc)
            continue
        updates[item.id] = apply_assessment(item, assessment)
        logger.debug(
            "Refined %s: ai_score=%d aligned=%s score %d -> %d",
            item.id,
            assessment.score,
            assessment.title_alignment,
            item.score,
            updates[item.id].score,
        )
    logger.info("Refined %d of %d top candidates", len(updates), min(top_n, len(scored)))
    return updates
