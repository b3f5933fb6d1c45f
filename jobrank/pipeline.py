"""
Ranking pipeline.

Runs one recommendation request end to end as an explicit state
machine::

    IDLE -> NORMALIZING -> AGGREGATING -> SCORING -> REFINING -> SORTING -> DONE
    NORMALIZING / AGGREGATING --(store failure)--> FAILED

The profile, posting and template reads are issued concurrently.  A
store failure moves the run to FAILED, where job seekers get the
fallback catalog and employers an empty list, together with a soft
error message.  Only a missing user id is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import Settings, load_settings
from .errors import DataUnavailable, InvalidInput
from .ingest.candidates import aggregate_candidates
from .ingest.stores import PostingStore, ProfileStore, load_raw_profile
from .normalize.profile import normalize_profile
from .normalize.schema import NormalizedProfile, ScoredCandidate
from .rank.aggregate import sort_candidates
from .rank.fallback import FallbackCatalog
from .rank.llm_judge import refine_candidates
from .rank.llm_providers import PlaceholderProvider, TextGenerator, get_default_provider
from .rank.scorer import score_candidates
from .rank.titles import DEFAULT_JOB_TITLES, resolve_job_titles

logger = logging.getLogger(__name__)

SEEKER_SOFT_ERROR = "Failed to load job recommendations. Using default suggestions instead."
EMPLOYER_SOFT_ERROR = "Failed to load job recommendations."


class PipelineState(str, Enum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    AGGREGATING = "aggregating"
    SCORING = "scoring"
    REFINING = "refining"
    SORTING = "sorting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RecommendationResult:
    candidates: List[ScoredCandidate]
    job_titles_used: List[str]
    soft_error: Optional[str] = None
    user_fields: List[str] = field(default_factory=list)
    state: PipelineState = PipelineState.DONE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "candidates": [c.to_dict() for c in self.candidates],
            "jobTitlesUsed": list(self.job_titles_used),
            "userFields": list(self.user_fields),
        }
        if self.soft_error:
            data["softError"] = self.soft_error
        return data


class _Deadline:
    """Remaining-time bookkeeping for an optional whole-run timeout."""

    def __init__(self, seconds: Optional[float]) -> None:
        loop = asyncio.get_running_loop()
        self._loop = loop
        self._end = loop.time() + seconds if seconds else None

    def remaining(self) -> Optional[float]:
        if self._end is None:
            return None
        return max(self._end - self._loop.time(), 0.0)

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


class RankingPipeline:
    """Produces ranked, explained job recommendations for one user.

    Args:
        profile_store: Source of profile, résumé and assessment data.
        posting_store: Source of postings and templates.  Defaults to
            ``profile_store`` when it implements both interfaces.
        settings: Runtime settings; loaded from the packaged defaults
            and the environment when omitted.
        generator: Text-generation provider for refinement and title
            suggestion.  Resolved from the settings when needed.
        catalog: Fallback catalog; the packaged one when omitted.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        posting_store: Optional[PostingStore] = None,
        settings: Optional[Settings] = None,
        generator: Optional[TextGenerator] = None,
        catalog: Optional[FallbackCatalog] = None,
    ) -> None:
        if posting_store is None:
            if not isinstance(profile_store, PostingStore):
                raise TypeError("posting_store is required when profile_store is not a PostingStore")
            posting_store = profile_store
        self.profile_store = profile_store
        self.posting_store = posting_store
        self.settings = settings or load_settings()
        self._generator = generator
        self.catalog = catalog or FallbackCatalog.from_yaml()
        self.state = PipelineState.IDLE
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = get_default_provider(self.settings)
        return self._generator

    def _enter(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state

    async def _read(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def _fetch(self, user_id: str, is_employer: bool, deadline: _Deadline) -> Tuple[Any, Any, Any]:
        filters = {"employer_id": user_id} if is_employer else None
        reads = asyncio.gather(
            self._read(load_raw_profile, self.profile_store, user_id),
            self._read(self.posting_store.list_postings, filters),
            self._read(self.posting_store.list_templates),
            return_exceptions=True,
        )
        try:
            return await asyncio.wait_for(reads, timeout=deadline.remaining())
        except asyncio.TimeoutError as exc:
            raise DataUnavailable("Timed out reading from the data stores", stage="normalizing") from exc

    def _failed(self, profile: NormalizedProfile, is_employer: bool, error: Exception) -> RecommendationResult:
        self._enter(PipelineState.FAILED)
        logger.exception("Recommendation run failed: %s", error)
        if is_employer:
            return RecommendationResult([], [], EMPLOYER_SOFT_ERROR, state=PipelineState.FAILED)
        titles = list(profile.experience_titles)
        if not titles and self.settings.suggest_titles:
            # Suggestion was enabled but never got to run.
            titles = list(DEFAULT_JOB_TITLES)
        return RecommendationResult(
            self.catalog.scored(profile),
            titles,
            SEEKER_SOFT_ERROR,
            user_fields=_user_fields(profile),
            state=PipelineState.FAILED,
        )

    async def _job_titles(self, profile: NormalizedProfile, deadline: _Deadline) -> List[str]:
        if not self.settings.suggest_titles:
            return resolve_job_titles(profile)
        timeout = self.settings.refine_timeout
        remaining = deadline.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        try:
            return await asyncio.wait_for(
                self._read(resolve_job_titles, profile, self.generator, self.settings.max_suggested_titles),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Job title suggestion timed out; using held titles")
            return list(profile.experience_titles) or list(DEFAULT_JOB_TITLES)

    async def _refine(
        self,
        profile: NormalizedProfile,
        scored: List[ScoredCandidate],
        deadline: _Deadline,
    ) -> List[ScoredCandidate]:
        if not self.settings.refine_enabled or not scored:
            return scored
        if isinstance(self.generator, PlaceholderProvider):
            logger.info("No LLM provider configured; skipping refinement")
            return scored
        if deadline.expired:
            logger.warning("Deadline reached before refinement; returning rule-based results")
            return scored
        self._enter(PipelineState.REFINING)
        try:
            updates = await asyncio.wait_for(
                refine_candidates(
                    profile,
                    scored,
                    self.generator,
                    top_n=self.settings.refine_top_n,
                    timeout=self.settings.refine_timeout,
                    retries=self.settings.refine_retries,
                    executor=self._executor,
                ),
                timeout=deadline.remaining(),
            )
        except asyncio.TimeoutError:
            logger.warning("Deadline reached during refinement; returning rule-based results")
            return scored
        return [updates.get(item.id, item) for item in scored]

    async def run(self, user_id: str, is_employer: bool = False) -> RecommendationResult:
        """Run the full pipeline for one user.

        Store reads and provider calls run on a thread pool owned by this
        run.  The pool is released without joining its threads, so a hung
        call that was abandoned on timeout does not delay the result.

        Raises:
            InvalidInput: If ``user_id`` is missing or blank.
        """
        if not user_id or not str(user_id).strip():
            raise InvalidInput("Missing user ID")
        user_id = str(user_id).strip()
        self._executor = ThreadPoolExecutor(thread_name_prefix="jobrank")
        try:
            return await self._run(user_id, is_employer)
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    async def _run(self, user_id: str, is_employer: bool) -> RecommendationResult:
        self.state = PipelineState.IDLE
        deadline = _Deadline(self.settings.pipeline_timeout)
        logger.info("Recommending jobs for %s (employer=%s)", user_id, is_employer)

        profile = NormalizedProfile()
        self._enter(PipelineState.NORMALIZING)
        try:
            raw_profile, postings, templates = await self._fetch(user_id, is_employer, deadline)
            if isinstance(raw_profile, Exception):
                raise DataUnavailable(f"Profile store failed: {raw_profile}", stage="normalizing") from raw_profile
            profile = normalize_profile(raw_profile)
            self._enter(PipelineState.AGGREGATING)
            for rows in (postings, templates):
                if isinstance(rows, Exception):
                    raise DataUnavailable(f"Posting store failed: {rows}", stage="aggregating") from rows
            pool = aggregate_candidates(
                postings,
                templates,
                is_employer,
                template_pool_threshold=self.settings.template_pool_threshold,
            )
        except DataUnavailable as exc:
            return self._failed(profile, is_employer, exc)
        except Exception as exc:  # noqa: BLE001
            failure = DataUnavailable(f"Unreadable store data: {exc}", stage=self.state.value)
            failure.__cause__ = exc
            return self._failed(profile, is_employer, failure)

        job_titles = await self._job_titles(profile, deadline)
        if pool.use_fallback:
            logger.info("No candidates available; serving the fallback catalog")
            self._enter(PipelineState.DONE)
            return RecommendationResult(self.catalog.scored(profile), job_titles, user_fields=_user_fields(profile))

        self._enter(PipelineState.SCORING)
        scored = score_candidates(profile, pool.candidates)
        scored = await self._refine(profile, scored, deadline)

        self._enter(PipelineState.SORTING)
        ranked = sort_candidates(scored)
        self._enter(PipelineState.DONE)
        logger.info("Returning %d recommendations", len(ranked))
        return RecommendationResult(ranked, job_titles, user_fields=_user_fields(profile))

    def get_recommendations(self, user_id: str, is_employer: bool = False) -> RecommendationResult:
        return asyncio.run(self.run(user_id, is_employer))

    def refresh_recommendations(self, user_id: str, is_employer: bool = False) -> RecommendationResult:
        """Force a fresh run; nothing is cached between runs."""
        return asyncio.run(self.run(user_id, is_employer))


def _user_fields(profile: NormalizedProfile) -> List[str]:
    """Skill names and skill categories, as listed on the dashboard."""
    return list(dict.fromkeys(profile.skill_names + profile.skill_categories))


def get_recommendations(
    user_id: str,
    is_employer: bool,
    profile_store: ProfileStore,
    posting_store: Optional[PostingStore] = None,
    settings: Optional[Settings] = None,
    generator: Optional[TextGenerator] = None,
) -> RecommendationResult:
    """Convenience wrapper: build a `RankingPipeline` and run it once."""
    pipeline = RankingPipeline(profile_store, posting_store, settings=settings, generator=generator)
    return pipeline.get_recommendations(user_id, is_employer)


def refresh_recommendations(
    user_id: str,
    is_employer: bool,
    profile_store: ProfileStore,
    posting_store: Optional[PostingStore] = None,
    settings: Optional[Settings] = None,
    generator: Optional[TextGenerator] = None,
) -> RecommendationResult:
    pipeline = RankingPipeline(profile_store, posting_store, settings=settings, generator=generator)
    return pipeline.refresh_recommendations(user_id, is_employer)
