"""Tests for provider resolution.

Only the placeholder path is exercised; the real providers would need
API keys and network access.
"""

from __future__ import annotations

import pytest  # type: ignore

from jobrank.config import Settings
from jobrank.rank.llm_providers import PlaceholderProvider, get_default_provider


@pytest.fixture(autouse=True)
def no_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_placeholder_without_keys() -> None:
    provider = get_default_provider(Settings())
    assert isinstance(provider, PlaceholderProvider)
    assert provider.generate("hello").text == ""


@pytest.mark.parametrize("name", ["openai", "gemini", "placeholder", "something-else"])
def test_explicit_provider_without_keys_degrades(name: str) -> None:
    assert isinstance(get_default_provider(Settings(llm_provider=name)), PlaceholderProvider)
