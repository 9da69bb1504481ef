"""환경 변수/.env 설정 로더."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ENV_PATH = _PROJECT_ROOT / ".env"

# .env가 존재하면 우선 로드 (없어도 조용히 무시)
load_dotenv(_ENV_PATH, override=False)

DEFAULT_SERVER_URL = "http://127.0.0.1:8081/"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_POLL_INTERVAL_MS = 5000
DEFAULT_STATE_PATH = Path.home() / ".bangarang_console.json"

_SERVER_URL_OVERRIDE: str | None = None


@dataclass(frozen=True)
class Settings:
    server_url: str = DEFAULT_SERVER_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    state_path: Path = DEFAULT_STATE_PATH
    log_level: str = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def _load_env_settings() -> Settings:
    """Read the console settings from the environment only once."""

    state_path = (os.getenv("BANGARANG_STATE_PATH") or "").strip()
    return Settings(
        server_url=(os.getenv("BANGARANG_URL") or "").strip() or DEFAULT_SERVER_URL,
        timeout=_env_float("BANGARANG_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        poll_interval_ms=int(_env_float("BANGARANG_POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS)),
        state_path=Path(state_path).expanduser() if state_path else DEFAULT_STATE_PATH,
        log_level=(os.getenv("BANGARANG_LOG_LEVEL") or "INFO").strip().upper(),
    )


def get_settings() -> Settings:
    """Return the console settings, honoring a runtime server URL override."""

    settings = _load_env_settings()
    if _SERVER_URL_OVERRIDE:
        return Settings(
            server_url=_SERVER_URL_OVERRIDE,
            timeout=settings.timeout,
            poll_interval_ms=settings.poll_interval_ms,
            state_path=settings.state_path,
            log_level=settings.log_level,
        )
    return settings


def set_server_url(value: str | None) -> None:
    """Override the bangarang server URL at runtime (empty clears override)."""

    global _SERVER_URL_OVERRIDE
    sanitized = (value or "").strip()
    _SERVER_URL_OVERRIDE = sanitized or None
