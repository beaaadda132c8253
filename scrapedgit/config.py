"""Configuration helpers for the product-search assistant core."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env if present to simplify local development.
load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Holds configuration derived from environment variables."""

    openai_api_key: str | None
    openai_base_url: str | None
    nlu_model: str
    nlu_timeout_seconds: float
    history_window: int
    session_ttl_seconds: int
    session_max_entries: int
    default_location: str

    @property
    def delegate_configured(self) -> bool:
        """Return ``True`` when credentials for the language-model delegate exist."""

        return bool(self.openai_api_key or self.openai_base_url)


def _int_from_env(key: str, default: int) -> int:
    """Parse a positive integer from the environment."""

    raw_value = os.getenv(key)
    if raw_value is None:
        return default

    try:
        value = int(raw_value)
    except ValueError as exc:  # pragma: no cover - defensive programming
        raise RuntimeError(f"Environment variable '{key}' must be an integer") from exc

    if value <= 0:
        raise RuntimeError(f"Environment variable '{key}' must be greater than zero")

    return value


def _positive_float_from_env(key: str, default: float) -> float:
    """Parse a strictly positive floating-point value from the environment."""

    raw_value = os.getenv(key)
    if raw_value is None:
        return default

    try:
        value = float(raw_value)
    except ValueError as exc:  # pragma: no cover - defensive programming
        raise RuntimeError(
            f"Environment variable '{key}' must be a floating-point number"
        ) from exc

    if value <= 0:
        raise RuntimeError(f"Environment variable '{key}' must be greater than zero")

    return value


def get_settings() -> Settings:
    """Create settings populated from the environment."""

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        nlu_model=(
            os.getenv("SCRAPEDGIT_NLU_MODEL")
            or os.getenv("OPENAI_MODEL")
            or "gpt-4o-mini"
        ),
        nlu_timeout_seconds=_positive_float_from_env(
            "SCRAPEDGIT_NLU_TIMEOUT_SECONDS", 10.0
        ),
        history_window=_int_from_env("SCRAPEDGIT_HISTORY_WINDOW", 6),
        session_ttl_seconds=_int_from_env("SCRAPEDGIT_SESSION_TTL_SECONDS", 30 * 60),
        session_max_entries=_int_from_env("SCRAPEDGIT_SESSION_MAX_ENTRIES", 1024),
        default_location=os.getenv("SCRAPEDGIT_DEFAULT_LOCATION", "Jakarta"),
    )


settings = get_settings()


__all__ = ["Settings", "get_settings", "settings"]
