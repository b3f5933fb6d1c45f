"""
Candidate aggregator.

Merges live job postings and job templates into one candidate pool.
Templates only pad a thin seeker pool: they are added when fewer than
``template_pool_threshold`` postings exist, and never for employers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..normalize.schema import Candidate, CandidateSource

logger = logging.getLogger(__name__)

TEMPLATE_POOL_THRESHOLD = 5
TEMPLATE_ID_PREFIX = "template-"
DEFAULT_COMPANY = "IntelliJob"


@dataclass(frozen=True)
class CandidatePool:
    """Result of aggregation.

    ``use_fallback`` is set when the pool is empty for a job seeker and
    the pipeline should serve the fallback catalog instead.
    """

    candidates: List[Candidate]
    posting_count: int
    template_count: int
    use_fallback: bool = False


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        text = value.strip().replace("Z", "+00:00")
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp %r, using now", value)
        else:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def posting_to_candidate(row: Dict[str, Any]) -> Candidate:
    """Map a posting row (optionally joined with the employer profile)."""
    employer = row.get("profiles")
    if not isinstance(employer, Mapping):
        employer = {}
    company = _text(employer.get("company_name")) or _text(row.get("company_name")) or DEFAULT_COMPANY
    posting_id = str(row.get("id"))
    return Candidate(
        id=posting_id,
        title=_text(row.get("title")) or "Untitled Position",
        company=company,
        location=_text(row.get("location")) or "Remote",
        description=_text(row.get("description")) or "No description provided",
        source=CandidateSource.POSTING,
        posted_at=_parse_timestamp(row.get("created_at")),
        field=_text(row.get("field")),
        education=_text(row.get("education")),
        salary=_text(row.get("salary")),
        requirements=_text(row.get("requirements")),
        url=f"/job/{posting_id}",
    )


def template_to_candidate(row: Dict[str, Any]) -> Candidate:
    """Map a job template row; its requirements double as the description."""
    return Candidate(
        id=f"{TEMPLATE_ID_PREFIX}{row.get('id')}",
        title=_text(row.get("title")) or "Untitled Position",
        company=_text(row.get("company")) or DEFAULT_COMPANY,
        location=_text(row.get("location")) or "Remote",
        description=_text(row.get("requirements")) or "No description provided",
        source=CandidateSource.TEMPLATE,
        posted_at=_parse_timestamp(row.get("created_at")),
        field=_text(row.get("field")),
        education=_text(row.get("education")),
        salary=_text(row.get("salary")),
    )


def _rows(rows: Optional[Iterable[Any]], kind: str) -> List[Dict[str, Any]]:
    """Keep the mapping rows; stores may hand back nulls or junk."""
    kept = []
    for row in rows or []:
        if isinstance(row, Mapping):
            kept.append(dict(row))
        else:
            logger.debug("Skipping non-mapping %s row: %r", kind, row)
    return kept


def _dedupe(candidates: Iterable[Candidate]) -> List[Candidate]:
    seen = set()
    unique: List[Candidate] = []
    for candidate in candidates:
        if candidate.id in seen:
            logger.debug("Dropping duplicate candidate %s", candidate.id)
            continue
        seen.add(candidate.id)
        unique.append(candidate)
    return unique


def aggregate_candidates(
    postings: Iterable[Dict[str, Any]],
    templates: Iterable[Dict[str, Any]],
    is_employer: bool,
    template_pool_threshold: int = TEMPLATE_POOL_THRESHOLD,
) -> CandidatePool:
    """Merge postings and templates into one de-duplicated pool.

    Args:
        postings: Raw posting rows in store order.
        templates: Raw template rows in store order.
        is_employer: Employers never see templates or fallback data.
        template_pool_threshold: Templates are added only below this
            many postings.

    Returns:
        A `CandidatePool`.  Postings come first, then templates, each
        in source order; the first occurrence of an id wins.
    """
    posting_rows = _rows(postings, "posting")
    merged = [posting_to_candidate(row) for row in posting_rows]
    template_rows: List[Dict[str, Any]] = []
    if not is_employer and len(posting_rows) < template_pool_threshold:
        template_rows = _rows(templates, "template")
        merged.extend(template_to_candidate(row) for row in template_rows)
    candidates = _dedupe(merged)
    pool = CandidatePool(
        candidates=candidates,
        posting_count=len(posting_rows),
        template_count=len(template_rows),
        use_fallback=not candidates and not is_employer,
    )
    logger.info(
        "Aggregated %d candidates (%d postings, %d templates)",
        len(candidates),
        pool.posting_count,
        pool.template_count,
    )
    return pool
