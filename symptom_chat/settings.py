# symptom_chat/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass

from symptom_chat.errors import ConfigError


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Model service (Ollama-compatible)
    ollama_base_url: str
    ollama_model: str
    ollama_timeout: float
    ollama_max_retries: int

    # Persistence
    database_url: str
    sql_echo: bool
    session_key_prefix: str

    # Turn policy
    context_limit: int

    log_level: str

    def session_key(self, session_id: str) -> str:
        return f"{self.session_key_prefix}:{session_id}"


def load_settings() -> Settings:
    return Settings(
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3"),
        ollama_timeout=_get_float("OLLAMA_TIMEOUT", 60.0),
        ollama_max_retries=_get_int("OLLAMA_MAX_RETRIES", 0),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./symptom_chat.db"),
        sql_echo=os.getenv("SQL_ECHO", "0") == "1",
        session_key_prefix=os.getenv("SESSION_KEY_PREFIX", "symptom_chat_v1"),
        context_limit=_get_int("CONTEXT_LIMIT", 8),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
