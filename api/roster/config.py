"""Runtime configuration read from the environment.

Every value is read at call time so tests can override it with monkeypatch.
"""

from __future__ import annotations

import os

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = "contributor-roster/1.0"

DEFAULT_MAX_CONTRIBUTORS = 50
DEFAULT_MAX_EXTERNAL_REPOS = 5
CONTRIBUTORS_PER_PAGE = 100


def _int_env(name: str, default: int, *, low: int, high: int) -> int:
    raw = (os.environ.get(name) or str(default)).strip()
    try:
        value = int(raw)
    except ValueError:
        value = default
    return max(low, min(value, high))


def _float_env(name: str, default: float, *, low: float, high: float) -> float:
    raw = (os.environ.get(name) or str(default)).strip()
    try:
        value = float(raw)
    except ValueError:
        value = default
    return max(low, min(value, high))


def github_api_base_url() -> str:
    raw = (os.environ.get("GITHUB_API_BASE_URL") or "").strip()
    return (raw or DEFAULT_GITHUB_API_BASE_URL).rstrip("/")


def github_timeout_seconds() -> float:
    return _float_env("GITHUB_TIMEOUT_SECONDS", 20.0, low=1.0, high=120.0)


def github_max_connections() -> int:
    return _int_env("GITHUB_MAX_CONNECTIONS", 20, low=1, high=200)


def max_contributors() -> int:
    """Cap on contributors processed per run (bounds outbound calls)."""
    return _int_env("ROSTER_MAX_CONTRIBUTORS", DEFAULT_MAX_CONTRIBUTORS, low=1, high=CONTRIBUTORS_PER_PAGE)


def max_external_repos() -> int:
    return _int_env("ROSTER_MAX_EXTERNAL_REPOS", DEFAULT_MAX_EXTERNAL_REPOS, low=1, high=100)


def allowed_origins() -> list[str]:
    raw = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def slow_request_ms_threshold() -> float:
    raw = os.getenv("API_SLOW_REQUEST_MS", "1500").strip()
    try:
        return max(25.0, float(raw))
    except ValueError:
        return 1500.0


def log_level() -> str:
    raw = (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    return raw if raw in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO"
