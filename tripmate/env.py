import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 15.0
DEFAULT_MATCH_LIMIT = 15


def load_env() -> None:
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise SystemExit(f"{name} must be a number, got {raw!r}")


def load_settings() -> Dict[str, Any]:
    """
    Read runtime settings from the environment.

    Keys: api_url, api_token, timeout, match_limit, display_limit,
    log_level, log_dir.
    """
    log_dir = os.getenv("TRIPMATE_LOG_DIR")
    return {
        "api_url": os.getenv("TRIPMATE_API_URL", DEFAULT_API_URL).rstrip("/"),
        "api_token": os.getenv("TRIPMATE_API_TOKEN") or None,
        "timeout": _float_env("TRIPMATE_TIMEOUT", DEFAULT_TIMEOUT),
        "match_limit": _int_env("TRIPMATE_MATCH_LIMIT", DEFAULT_MATCH_LIMIT),
        "display_limit": _int_env("TRIPMATE_DISPLAY_LIMIT", None),
        "log_level": os.getenv("TRIPMATE_LOG_LEVEL", "INFO"),
        "log_dir": Path(log_dir) if log_dir else None,
    }
