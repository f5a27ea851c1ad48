from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from tests._fixtures.github_api import FakeGitHubAPI
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a git repository builder rooted at the pytest tmp_path."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return RepoBuilder(tmp_path)


@pytest.fixture
def github_api() -> FakeGitHubAPI:
    """Provide canned GitHub REST responses usable as a urlopen replacement."""
    return FakeGitHubAPI()


@pytest.fixture(autouse=True)
def _no_github_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("SCRUTINIZER_GITHUB_TOKEN", raising=False)
