"""
Job-title suggestion.

Asks the text-generation provider for a handful of job titles that fit
the user's education, experience and skills.  The answer is expected to
contain a JSON array; the first ``[...]`` block is decoded, and failing
that the whole answer.  Any failure falls back to the titles the user
has held, and then to a fixed default list.
"""

from __future__ import annotations

import json
import logging
import re
from typing import List, Optional

from ..normalize.schema import NormalizedProfile
from .llm_providers import TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_JOB_TITLES = [
    "Software Developer",
    "Web Developer",
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
]

TITLES_PROMPT = """\
Based on the following profile, suggest 5-7 job titles that would be a good fit:

Education: {education}
Experience: {experience}
Skills: {skills}

Return ONLY an array of job titles in JSON format, like this: ["Job Title 1", "Job Title 2", "Job Title 3"]
No explanation, ONLY the JSON array.
"""

_ARRAY_RE = re.compile(r"\[.*\]", re.S)


def parse_title_list(text: str) -> List[str]:
    """Extract a list of title strings from a model answer (may be empty)."""
    content = (text or "").strip()
    candidates = []
    match = _ARRAY_RE.search(content)
    if match:
        candidates.append(match.group(0))
    candidates.append(content)
    for chunk in candidates:
        try:
            decoded = json.loads(chunk)
        except ValueError:
            continue
        if isinstance(decoded, list):
            titles = [str(item).strip() for item in decoded if str(item).strip()]
            if titles:
                return titles
    return []


def suggest_job_titles(
    profile: NormalizedProfile,
    generator: TextGenerator,
    limit: int = 7,
) -> List[str]:
    """Return suggested titles.

    When the provider fails the held titles are returned instead, or
    `DEFAULT_JOB_TITLES` if the user has none.
    """
    prompt = TITLES_PROMPT.format(
        education=", ".join(profile.education_keywords) or "Not specified",
        experience=", ".join(profile.experience_titles) or "Not specified",
        skills=", ".join(profile.skill_names) or "Not specified",
    )
    try:
        titles = parse_title_list(generator.generate(prompt).text)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Job title suggestion failed: %s", exc)
        titles = []
    if not titles:
        fallback = list(profile.experience_titles) or list(DEFAULT_JOB_TITLES)
        logger.info("Using fallback job titles: %s", fallback)
        return fallback
    return titles[:limit]


def resolve_job_titles(
    profile: NormalizedProfile,
    generator: Optional[TextGenerator] = None,
    limit: int = 7,
) -> List[str]:
    """Titles that steered this run: suggestions if enabled, else held titles."""
    if generator is not None:
        return suggest_job_titles(profile, generator, limit)
    return list(profile.experience_titles)
