"""
Text-generation provider abstractions.

The refiner and the job-title suggester only need one capability from a
large language model: turn a prompt into free text.  `TextGenerator`
captures that contract.  Concrete implementations are provided for the
OpenAI and Gemini (Google Generative AI) APIs; `PlaceholderProvider`
never leaves the process and is used when no API key is configured.
Provider failures are raised as `UpstreamError` so callers can apply
their own recovery policy.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..config import Settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedText:
    text: str


class TextGenerator(ABC):
    """Abstract base class for text-generation providers."""

    @abstractmethod
    def generate(self, prompt: str) -> GeneratedText:
        """Generate a completion for ``prompt``.

        Raises:
            UpstreamError: On network, quota or empty-response problems.
        """
        raise NotImplementedError


class PlaceholderProvider(TextGenerator):
    """Fallback provider that does not call any external API."""

    def generate(self, prompt: str) -> GeneratedText:
        logger.debug("Placeholder provider ignoring prompt of %d chars", len(prompt))
        return GeneratedText(text="")


class OpenAIProvider(TextGenerator):
    """Provider that uses the OpenAI chat completions API."""

    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o-mini") -> None:
        try:
            from openai import OpenAI  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "openai package is required for OpenAIProvider. Install it via pip."
            ) from exc
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not provided")
        self.model = model
        self.client = OpenAI(api_key=self.api_key)

    def generate(self, prompt: str) -> GeneratedText:
        logger.debug("Sending prompt to OpenAI: %s", prompt[:200])
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.0,
            )
        except Exception as exc:  # noqa: BLE001
            raise UpstreamError(f"OpenAI API call failed: {exc}") from exc
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise UpstreamError("OpenAI returned an empty completion")
        return GeneratedText(text=content)


class GeminiProvider(TextGenerator):
    """Provider that uses Google Generative AI (Gemini) via google-generativeai."""

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-1.5-pro") -> None:
        try:
            import google.generativeai as genai  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "google-generativeai package is required for GeminiProvider. Install it via pip."
            ) from exc
        self.genai = genai
        self.api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY/GOOGLE_API_KEY not provided")
        self.model_name = model
        self.genai.configure(api_key=self.api_key)
        try:
            self.model = self.genai.GenerativeModel(self.model_name)
        except Exception as exc:  # noqa: BLE001
            raise RuntimeError(f"Failed to load Gemini model {self.model_name}: {exc}") from exc

    def generate(self, prompt: str) -> GeneratedText:
        logger.debug("Sending prompt to Gemini: %s", prompt[:200])
        try:
            response = self.model.generate_content(prompt)
            content = response.text
        except Exception as exc:  # noqa: BLE001
            raise UpstreamError(f"Gemini API call failed: {exc}") from exc
        if not content:
            raise UpstreamError("Gemini returned an empty completion")
        return GeneratedText(text=content)


def get_default_provider(settings: Optional[Settings] = None) -> TextGenerator:
    """Return a `TextGenerator` based on configuration and API keys.

    The resolution order is:

    1. If ``settings.llm_provider`` is ``"openai"``, ``"gemini"`` or
       ``"placeholder"``, the corresponding provider is selected.  If it
       cannot be initialised (missing key or package), a warning is
       logged and automatic detection is used.
    2. If ``OPENAI_API_KEY`` is present, return `OpenAIProvider`.
    3. If ``GEMINI_API_KEY`` or ``GOOGLE_API_KEY`` is present, return
       `GeminiProvider`.
    4. Otherwise, return `PlaceholderProvider`.
    """
    settings = settings or Settings()
    preferred = (settings.llm_provider or "auto").lower()
    if preferred == "openai":
        try:
            return OpenAIProvider(model=settings.openai_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("llm_provider=openai but failed to initialise OpenAIProvider: %s", exc)
    elif preferred == "gemini":
        try:
            return GeminiProvider(model=settings.gemini_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("llm_provider=gemini but failed to initialise GeminiProvider: %s", exc)
    elif preferred == "placeholder":
        logger.info("llm_provider=placeholder; using placeholder provider")
        return PlaceholderProvider()
    elif preferred != "auto":
        logger.warning("Unknown llm_provider value '%s'; falling back to automatic detection", preferred)
    if os.getenv("OPENAI_API_KEY"):
        try:
            return OpenAIProvider(model=settings.openai_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to initialise OpenAIProvider: %s", exc)
    if os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"):
        try:
            return GeminiProvider(model=settings.gemini_model)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to initialise GeminiProvider: %s", exc)
    logger.info("No LLM API keys found; using placeholder provider")
    return PlaceholderProvider()
