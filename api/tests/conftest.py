"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from github_fakes import FakeGitHub  # noqa: E402


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture(autouse=True)
def _reset_env_and_app_state(monkeypatch: pytest.MonkeyPatch):
    for key in (
        "GITHUB_API_BASE_URL",
        "GITHUB_TIMEOUT_SECONDS",
        "GITHUB_MAX_CONNECTIONS",
        "API_SLOW_REQUEST_MS",
        "ROSTER_MAX_CONTRIBUTORS",
        "ROSTER_MAX_EXTERNAL_REPOS",
        "GITHUB_TOKEN",
        "GH_TOKEN",
    ):
        monkeypatch.delenv(key, raising=False)
    from roster.main import app

    app.state.github_transport = None
    yield
    app.state.github_transport = None
