"""
Profile normalizer.

This module is the single boundary between the loosely shaped records
kept by the profile store and the strict `NormalizedProfile` used for
scoring.  Résumé rows store education, work experience, skills,
certificates and references as lists of JSON-encoded strings; the
onboarding assessment stores free text; the skills picker stores
``{"skills": {"name": ...}, "skill_type": ...}`` rows.  All of these
are accepted, and missing or malformed data yields empty collections
rather than an error.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .schema import NormalizedProfile, RawProfile

logger = logging.getLogger(__name__)


def _clean(value: Any) -> str:
    """Lower-case and trim a value, mapping ``None`` to an empty string."""
    if value is None:
        return ""
    return str(value).strip().lower()


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    """Drop empty strings and duplicates while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return tuple(seen)


def _as_list(value: Any) -> List[Any]:
    """Coerce a stored column into a list.

    Columns may hold a list, a JSON-encoded list, a single string or
    ``None``.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except ValueError:
                logger.debug("Column is not a JSON list, keeping as text: %.60s", text)
            else:
                if isinstance(decoded, list):
                    return decoded
        return [text]
    return [value]


def _as_record(item: Any) -> Optional[Dict[str, Any]]:
    """Decode one list item into a dict, or return ``None`` for plain text."""
    if isinstance(item, dict):
        return item
    if isinstance(item, str):
        text = item.strip()
        if text.startswith("{"):
            try:
                decoded = json.loads(text)
            except ValueError:
                logger.debug("Skipping malformed JSON item: %.60s", text)
                return {}
            return decoded if isinstance(decoded, dict) else {}
    return None


def _field_values(items: Any, key: str) -> List[str]:
    """Extract ``key`` from every record; plain strings are taken verbatim."""
    values: List[str] = []
    for item in _as_list(items):
        record = _as_record(item)
        if record is None:
            if isinstance(item, str):
                values.append(_clean(item))
            continue
        values.append(_clean(record.get(key)))
    return values


def _skill_entries(items: Any) -> Tuple[List[str], List[str]]:
    """Return (names, types) for résumé skills and skills-picker rows."""
    names: List[str] = []
    types: List[str] = []
    for item in _as_list(items):
        record = _as_record(item)
        if record is None:
            if isinstance(item, str):
                names.append(_clean(item))
            continue
        nested = record.get("skills")
        if isinstance(nested, dict):
            names.append(_clean(nested.get("name")))
        else:
            names.append(_clean(record.get("name")))
        types.append(_clean(record.get("type") or record.get("skill_type")))
    return names, types


def _count_items(items: Any) -> int:
    """Count non-empty certificate / reference entries."""
    count = 0
    for item in _as_list(items):
        record = _as_record(item)
        if record is None:
            if isinstance(item, str) and item.strip():
                count += 1
        elif any(str(v).strip() for v in record.values() if v is not None):
            count += 1
    return count


def _location_tokens(profile: Dict[str, Any]) -> Tuple[str, ...]:
    parts: List[str] = []
    for key in ("city", "province", "country"):
        for piece in _clean(profile.get(key)).split(","):
            parts.append(piece.strip())
    return _unique(parts)


def _optional(profile: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = profile.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def normalize_profile(raw: Optional[RawProfile]) -> NormalizedProfile:
    """Build a `NormalizedProfile` from whatever the profile store returned.

    Args:
        raw: The raw profile.  ``None`` is treated as an empty profile.

    Returns:
        An immutable, lower-cased view of the profile.  ``industry`` and
        ``education_field`` keep the user's own casing because they are
        quoted back in match reasons.
    """
    if raw is None:
        return NormalizedProfile()
    profile = raw.profile or {}
    skill_names, skill_types = _skill_entries(raw.skills)
    normalized = NormalizedProfile(
        education_keywords=_unique(_field_values(raw.education, "degree")),
        skill_names=_unique(skill_names),
        skill_categories=_unique(skill_types),
        experience_titles=_unique(_field_values(raw.work_experience, "title")),
        location_tokens=_location_tokens(profile),
        industry=_optional(profile, "industry"),
        education_field=_optional(profile, "education_field", "educationField"),
        certificate_count=_count_items(raw.certificates),
        reference_count=_count_items(raw.references),
    )
    logger.debug(
        "Normalized profile %s: %d degrees, %d skills, %d titles, %d location parts",
        raw.user_id,
        len(normalized.education_keywords),
        len(normalized.skill_names),
        len(normalized.experience_titles),
        len(normalized.location_tokens),
    )
    return normalized
