"""
LLM assessment schema.

Defines the `AIAssessment` dataclass and the parser that extracts it
from a model's free-text answer.  The model is asked to reply with four
labelled lines::

    Score: <0-100 integer>
    Reason: <text>
    Title Alignment: Yes|No
    Qualified: Yes|No|Partially

Every field is optional.  A missing or unreadable field takes its
default; only an answer in which none of the four labels can be found
is rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..errors import RefinementFailure

# Labels may be decorated as markdown ("**Score:** 85", "- Reason: ...").
_LINE_PREFIX = r"^[\s>*_#-]*"
_LABEL_SUFFIX = r"[*_]*\s*:[*_]*\s*"

SCORE_RE = re.compile(_LINE_PREFIX + r"score" + _LABEL_SUFFIX + r"(\d{1,3})", re.I | re.M)
REASON_RE = re.compile(_LINE_PREFIX + r"reason" + _LABEL_SUFFIX + r"(.+?)\s*$", re.I | re.M)
ALIGNMENT_RE = re.compile(_LINE_PREFIX + r"title alignment" + _LABEL_SUFFIX + r"(yes|no)\b", re.I | re.M)
QUALIFIED_RE = re.compile(_LINE_PREFIX + r"qualified" + _LABEL_SUFFIX + r"(yes|no|partially)\b", re.I | re.M)


@dataclass(frozen=True)
class AIAssessment:
    """Parsed answer of the text-generation scorer for one candidate."""

    score: int = 0
    reason: str = ""
    title_alignment: bool = False
    qualified: str = "No"


def _group(pattern: "re.Pattern[str]", text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def parse_assessment(text: Optional[str]) -> AIAssessment:
    """Parse a free-text model answer into an `AIAssessment`.

    Scores above 100 are clamped.  ``qualified`` is normalised to
    ``"Yes"``, ``"No"`` or ``"Partially"``.

    Raises:
        RefinementFailure: If none of the four labelled fields is present.
    """
    text = text or ""
    score = _group(SCORE_RE, text)
    reason = _group(REASON_RE, text)
    alignment = _group(ALIGNMENT_RE, text)
    qualified = _group(QUALIFIED_RE, text)
    if score is None and reason is None and alignment is None and qualified is None:
        raise RefinementFailure("No labelled fields found in model answer")
    return AIAssessment(
        score=min(int(score), 100) if score is not None else 0,
        reason=reason or "",
        title_alignment=(alignment or "no").lower() == "yes",
        qualified=(qualified or "no").capitalize(),
    )
