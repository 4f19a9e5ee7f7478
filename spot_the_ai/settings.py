from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

from spot_the_ai.agents.ollama_backend import DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL
from spot_the_ai.agents.responder import DEFAULT_FALLBACK_RESPONSE
from spot_the_ai.players import MAX_REAL_PLAYERS

AI_BACKENDS = ("ollama", "ag2")


@dataclass(frozen=True, slots=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    max_real_players: int = MAX_REAL_PLAYERS

    ai_backend: str = "ollama"
    ollama_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    # Only used by the ag2 backend.
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    openai_api_key: str | None = None
    ai_timeout_s: float = 30.0
    ai_fallback_response: str = DEFAULT_FALLBACK_RESPONSE

    @property
    def is_dev(self) -> bool:
        return self.app_env == "development"


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from e


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got {raw!r}") from e


def settings_from_env(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables (or an explicit mapping, for tests)."""

    e = os.environ if env is None else env
    defaults = Settings()

    origins = tuple(o.strip() for o in e.get("CORS_ORIGINS", ",".join(defaults.cors_origins)).split(",") if o.strip())

    ai_backend = e.get("AI_BACKEND", defaults.ai_backend).strip().lower()
    if ai_backend not in AI_BACKENDS:
        raise ValueError(f"AI_BACKEND must be one of {', '.join(AI_BACKENDS)}, got {ai_backend!r}")

    max_real_players = _int(e, "MAX_REAL_PLAYERS", defaults.max_real_players)
    if max_real_players < 1:
        raise ValueError("MAX_REAL_PLAYERS must be at least 1")

    ai_timeout_s = _float(e, "AI_TIMEOUT_SECONDS", defaults.ai_timeout_s)
    if ai_timeout_s <= 0:
        raise ValueError("AI_TIMEOUT_SECONDS must be positive")

    return Settings(
        host=e.get("HOST", defaults.host),
        port=_int(e, "PORT", defaults.port),
        app_env=e.get("APP_ENV", defaults.app_env),
        log_level=e.get("LOG_LEVEL", defaults.log_level).upper(),
        cors_origins=origins,
        max_real_players=max_real_players,
        ai_backend=ai_backend,
        ollama_url=e.get("OLLAMA_URL", defaults.ollama_url),
        ollama_model=e.get("OLLAMA_MODEL", defaults.ollama_model),
        openai_model=e.get("OPENAI_MODEL", defaults.openai_model),
        openai_base_url=e.get("OPENAI_BASE_URL") or None,
        openai_api_key=e.get("OPENAI_API_KEY") or None,
        ai_timeout_s=ai_timeout_s,
        ai_fallback_response=e.get("AI_FALLBACK_RESPONSE", defaults.ai_fallback_response),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return settings_from_env()
