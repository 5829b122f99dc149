from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE_URL = "http://127.0.0.1:5000"
DEFAULT_SESSION_FILE = Path.home() / ".student_portal" / "session.json"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return float(default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_BASE_URL
    session_file: Path = DEFAULT_SESSION_FILE
    session_max_age_hours: float = 24.0
    request_timeout: float = 15.0
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Read settings from the environment (and .env, loaded on import)."""
    session_file = os.getenv("PORTAL_SESSION_FILE")
    return Settings(
        api_base_url=(os.getenv("API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/"),
        session_file=Path(session_file).expanduser() if session_file else DEFAULT_SESSION_FILE,
        session_max_age_hours=_env_float("PORTAL_SESSION_MAX_AGE_HOURS", 24),
        request_timeout=_env_float("PORTAL_REQUEST_TIMEOUT", 15),
        log_level=(os.getenv("PORTAL_LOG_LEVEL") or "WARNING").upper(),
    )


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
