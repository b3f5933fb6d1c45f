"""
Normalization subsystem for jobrank.

Profiles arrive from the profile store in whatever shape the résumé
editor, the onboarding assessment or the skills picker saved them:
dicts, JSON-encoded strings, free text, or nothing at all.  This
package converts them into a strict `NormalizedProfile` once per
ranking run and defines the candidate records the rest of the pipeline
works on.

The broad category classifier used by the field detector and the
fallback catalog is defined in `categories.py`.
"""

from .schema import (  # noqa: F401
    Candidate,
    CandidateSource,
    NormalizedProfile,
    RawProfile,
    ScoredCandidate,
)
from .profile import normalize_profile  # noqa: F401
from .categories import classify_profile, is_healthcare_profile  # noqa: F401
