"""Centralized application configuration.

This module provides a single source of truth for all configurable values,
loaded from environment variables with sensible defaults.

Usage:
    from config import settings
    print(settings.llm.default_model)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent


def _get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.getenv(key, default)


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable with default."""
    return int(os.getenv(key, str(default)))


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable with default."""
    return float(os.getenv(key, str(default)))


def _get_env_path(key: str, default: Path) -> Path:
    """Get path environment variable with default."""
    value = os.getenv(key)
    return Path(value) if value else default


def _get_env_list(key: str, default: str, separator: str = ",") -> List[str]:
    """Get list environment variable with default."""
    value = os.getenv(key, default)
    return [item.strip() for item in value.split(separator) if item.strip()]


@dataclass(frozen=True)
class LLMSettings:
    """Chat model provider configuration."""
    api_key: str = field(default_factory=lambda: _get_env("OPENAI_API_KEY"))
    base_url: str = field(default_factory=lambda: _get_env("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    default_model: str = field(default_factory=lambda: _get_env("DEFAULT_LLM_MODEL", "gpt-4.1"))
    default_temperature: float = field(default_factory=lambda: _get_env_float("LLM_TEMPERATURE", 0.7))
    default_max_tokens: int = field(default_factory=lambda: _get_env_int("LLM_MAX_TOKENS", 2048))
    max_tool_iterations: int = field(default_factory=lambda: _get_env_int("MAX_TOOL_ITERATIONS", 5))


@dataclass(frozen=True)
class PromptSettings:
    """Locations of the static prompt documents."""
    system_prompt_path: Path = field(
        default_factory=lambda: _get_env_path("SYSTEM_PROMPT_PATH", BASE_DIR / "prompts" / "prompt.md")
    )
    greeting_path: Path = field(
        default_factory=lambda: _get_env_path("GREETING_PATH", BASE_DIR / "prompts" / "greetings.md")
    )


@dataclass(frozen=True)
class PlotSettings:
    """Dataset and chart rendering configuration.

    ``auto_smoothing_threshold`` is the row count below which an automatic
    smoothing method resolves to loess; at or above it, to a linear model.
    """
    dataset_path: Path = field(
        default_factory=lambda: _get_env_path("DATASET_PATH", BASE_DIR / "data" / "mtcars.csv")
    )
    density_points: int = field(default_factory=lambda: _get_env_int("DENSITY_POINTS", 512))
    auto_smoothing_threshold: int = field(default_factory=lambda: _get_env_int("AUTO_SMOOTHING_THRESHOLD", 1000))


@dataclass(frozen=True)
class CORSSettings:
    """CORS configuration."""
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_env_list("ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    )


@dataclass(frozen=True)
class Settings:
    """Application settings container."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    prompts: PromptSettings = field(default_factory=PromptSettings)
    plots: PlotSettings = field(default_factory=PlotSettings)
    cors: CORSSettings = field(default_factory=CORSSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()


# Convenience alias for direct import
settings = get_settings()
