"""
Runtime configuration.

Defaults live in ``config.yaml`` next to this module.  A user YAML file
overlays them, and environment variables (optionally from a ``.env``
file) override both.  The detector weights are deliberately not
configurable; see `jobrank.rank.detectors`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml  # type: ignore
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).with_name("config.yaml")
MAX_REFINE_RETRIES = 1


@dataclass(frozen=True)
class Settings:
    template_pool_threshold: int = 5
    refine_enabled: bool = False
    refine_top_n: int = 5
    refine_timeout: float = 20.0
    refine_retries: int = 0
    suggest_titles: bool = False
    max_suggested_titles: int = 7
    pipeline_timeout: Optional[float] = None
    llm_provider: str = "auto"
    openai_model: str = "gpt-4o-mini"
    gemini_model: str = "gemini-1.5-pro"


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _overlay(settings: Settings, values: Dict[str, Any], origin: str) -> Settings:
    known = {f.name for f in fields(Settings)}
    updates = {}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown setting %r from %s", key, origin)
            continue
        updates[key] = value
    return replace(settings, **updates)


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if os.getenv("JOBRANK_REFINE"):
        overrides["refine_enabled"] = _flag(os.environ["JOBRANK_REFINE"])
    if os.getenv("JOBRANK_SUGGEST_TITLES"):
        overrides["suggest_titles"] = _flag(os.environ["JOBRANK_SUGGEST_TITLES"])
    provider = os.getenv("JOBRANK_PROVIDER") or os.getenv("LLM_PROVIDER")
    if provider:
        overrides["llm_provider"] = provider.lower()
    if os.getenv("OPENAI_MODEL"):
        overrides["openai_model"] = os.environ["OPENAI_MODEL"]
    gemini_model = os.getenv("GEMINI_MODEL") or os.getenv("GOOGLE_MODEL")
    if gemini_model:
        overrides["gemini_model"] = gemini_model
    return overrides


def _validate(settings: Settings) -> Settings:
    if settings.refine_retries > MAX_REFINE_RETRIES:
        logger.warning(
            "refine_retries=%d exceeds the maximum of %d; clamping",
            settings.refine_retries,
            MAX_REFINE_RETRIES,
        )
        settings = replace(settings, refine_retries=MAX_REFINE_RETRIES)
    if settings.refine_top_n < 0:
        raise ValueError("refine_top_n must not be negative")
    if settings.refine_timeout <= 0:
        raise ValueError("refine_timeout must be positive")
    return settings


def load_settings(config_path: Optional[str] = None, use_env: bool = True) -> Settings:
    """Load settings from the packaged defaults, a user file and the environment.

    Args:
        config_path: Optional YAML file overlaying the defaults.
        use_env: Apply ``JOBRANK_*`` / provider environment variables.

    Returns:
        A frozen `Settings` instance.
    """
    settings = _overlay(Settings(), _read_yaml(DEFAULT_CONFIG_PATH), str(DEFAULT_CONFIG_PATH))
    if config_path:
        settings = _overlay(settings, _read_yaml(Path(config_path)), config_path)
    if use_env:
        load_dotenv(override=False)
        settings = _overlay(settings, _env_overrides(), "environment")
    return _validate(settings)
