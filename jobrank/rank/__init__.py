"""
Ranking subsystem for jobrank.

The `rank` package turns a candidate pool into an ordered, explained
recommendation list.  The stages include:

* `detectors` – Five independent rule-based match detectors (education,
  field, skills, experience, location) plus certificate and reference
  bonuses.
* `scorer` – Runs the detectors in their fixed order and folds the
  results into a score, a reason list and a primary reason.
* `llm_judge` – Optionally asks an LLM about the top few candidates and
  blends its answer back in as a bounded nudge.
* `titles` – Suggests the job titles a run was steered by.
* `fallback` – Static example postings for seekers with an empty pool.
* `aggregate` – Stable final ordering and the "top matches" selection.
"""

from .scorer import score_candidate, score_candidates  # noqa: F401
from .llm_judge import apply_assessment, refine_candidates  # noqa: F401
from .llm_schema import AIAssessment, parse_assessment  # noqa: F401
from .fallback import FallbackCatalog  # noqa: F401
from .aggregate import select_top_matches, sort_candidates  # noqa: F401
