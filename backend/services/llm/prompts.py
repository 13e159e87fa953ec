"""Prompt documents for the chat model.

The system prompt and the greeting are plain markdown files, read once and
cached for the lifetime of the process.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from config import settings


def _read_text(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8").strip()


@lru_cache(maxsize=4)
def load_system_prompt(path: Optional[Path] = None) -> str:
    """Read the system prompt describing the dataset and the chart tools."""
    return _read_text(path or settings.prompts.system_prompt_path)


@lru_cache(maxsize=4)
def load_greeting(path: Optional[Path] = None) -> str:
    """Read the greeting shown as the first assistant message."""
    return _read_text(path or settings.prompts.greeting_path)
