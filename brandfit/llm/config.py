from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class LLMConfig:
    """Groq settings for menu analysis."""

    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("BRANDFIT_MENU_MODEL", "llama-3.3-70b-versatile")
    timeout: float = 10.0
    max_tokens: int = 1000
    temperature: float = 0.2
    enabled: bool = _env_flag("BRANDFIT_MENU_ANALYSIS", True)


DEFAULT_LLM_CONFIG = LLMConfig()
