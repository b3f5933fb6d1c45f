"""
Error taxonomy for the ranking pipeline.

Only `InvalidInput` ever reaches a caller of `get_recommendations`.
`DataUnavailable` is converted into a soft error message by the
pipeline, `RefinementFailure` is swallowed by the refiner, and
`UpstreamError` is what text-generation providers raise when the remote
model cannot be reached or returns nothing usable.
"""

from __future__ import annotations

from typing import Optional


class JobRankError(Exception):
    """Base class for all jobrank errors."""


class InvalidInput(JobRankError):
    """Raised before any pipeline stage runs, e.g. for a missing user id."""


class DataUnavailable(JobRankError):
    """A profile or posting store could not be read."""

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class RefinementFailure(JobRankError):
    """The LLM refiner could not produce an assessment for one candidate."""

    def __init__(self, message: str, candidate_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.candidate_id = candidate_id


class UpstreamError(JobRankError):
    """A text-generation provider failed (network, quota, empty answer)."""
