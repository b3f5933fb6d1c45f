"""Shared fixtures and fakes for the jobrank test suite."""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest  # type: ignore

from jobrank.normalize.schema import Candidate, CandidateSource, NormalizedProfile
from jobrank.rank.llm_providers import GeneratedText, TextGenerator


class ScriptedGenerator(TextGenerator):
    """Returns canned answers in order and records every prompt."""

    def __init__(self, answers: List[object]) -> None:
        self.answers = list(answers)
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> GeneratedText:
        self.prompts.append(prompt)
        answer = self.answers.pop(0) if self.answers else ""
        if isinstance(answer, Exception):
            raise answer
        return GeneratedText(text=str(answer))


def make_candidate(
    cid: str = "job-1",
    title: str = "Warehouse Associate",
    location: str = "Cebu City, Philippines",
    description: str = "Sort and pack parcels",
    source: CandidateSource = CandidateSource.POSTING,
    **kwargs,
) -> Candidate:
    return Candidate(
        id=cid,
        title=title,
        company="Acme",
        location=location,
        description=description,
        source=source,
        **kwargs,
    )


@pytest.fixture
def nurse_profile() -> NormalizedProfile:
    return NormalizedProfile(
        education_keywords=("bachelor of science in nursing",),
        skill_names=("patient care",),
        location_tokens=("quezon city", "ncr", "philippines"),
    )


@pytest.fixture
def nurse_job() -> Candidate:
    return make_candidate(
        cid="rn-1",
        title="Registered Nurse",
        location="Quezon City, Philippines",
        description="Provide patient care on the medical ward",
        education="BSN required",
        field="Healthcare",
    )


@pytest.fixture
def scripted() -> Callable[[List[object]], ScriptedGenerator]:
    return ScriptedGenerator


@pytest.fixture
def candidate_factory() -> Callable[..., Candidate]:
    return make_candidate


def assessment_text(score: int, reason: Optional[str] = "AI says so", aligned: str = "Yes") -> str:
    lines = [f"Score: {score}"]
    if reason is not None:
        lines.append(f"Reason: {reason}")
    lines.append(f"Title Alignment: {aligned}")
    lines.append("Qualified: Yes")
    return "\n".join(lines)
