"""Shared pytest fixtures for linear-context tests."""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest
from click.testing import CliRunner

from tests._fake_linear import FakeLinear, make_issue

_LINEAR_ENV = (
    "LINEAR_API_KEY",
    "LINEAR_API_URL",
    "LINEAR_SEARCH_CASE_SENSITIVE",
    "LINEAR_CONTEXT_LOG_DIR",
    "LINEAR_CONTEXT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_linear_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> Generator[None, None, None]:
    """Isolate tests from the developer's environment and any ./.env file."""
    for name in _LINEAR_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    yield
    # load_dotenv writes os.environ directly, bypassing monkeypatch.
    for name in _LINEAR_ENV:
        os.environ.pop(name, None)


@pytest.fixture
def fake_linear() -> FakeLinear:
    """FakeLinear with one team and no issues."""
    return FakeLinear()


@pytest.fixture
def populated_linear() -> FakeLinear:
    """FakeLinear pre-populated with a representative issue set.

    Creates:
    - 2 assigned issues (iss-1 "Fix auth bug" Todo, iss-2 "Write docs" In Progress)
    - iss-1 and iss-2 resolvable by id
    - search results mirror the assigned issues
    """
    a = make_issue("iss-1", "Fix auth bug", identifier="ENG-1", description="Login fails", priority=2)
    b = make_issue("iss-2", "Write docs", identifier="ENG-2", state="In Progress", priority=3)
    return FakeLinear(
        assigned=[a, b],
        issues={"iss-1": a, "iss-2": b},
        search_results=[a, b],
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
