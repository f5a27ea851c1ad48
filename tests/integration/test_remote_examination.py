"""End-to-end remote examinations against a canned GitHub API."""

from __future__ import annotations

import pytest

import scrutinizer.backends.github as github_module
from scrutinizer import remote
from scrutinizer.errors import ReferenceNotFoundError
from tests._fixtures.github_api import FakeGitHubAPI


@pytest.fixture(autouse=True)
def _patched_urlopen(github_api: FakeGitHubAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(github_module, "urlopen", github_api)


def test_changelog_falls_back_to_markdown(github_api: FakeGitHubAPI) -> None:
    github_api.add_repository(files={"CHANGELOG.md": "# Changelog\n\n## 1.0.0\n- First release\n"})

    result = remote("https://github.com/octo/project", reference="main", plugins=["changelog"])

    assert result == {"changelog": "# Changelog\n\n## 1.0.0\n- First release\n"}
    assert "/repos/octo/project/contents/.versionbot/CHANGELOG.yml?ref=abc123" in github_api.paths()


def test_every_plugin_gets_its_own_backend(github_api: FakeGitHubAPI) -> None:
    github_api.add_repository(
        files={"LICENSE": "MIT License\n", "README.md": "# Project\n"},
        info={"description": "A project"},
    )

    result = remote("octo/project", reference="main", plugins=["readme", "license", "github-metadata"])

    assert result == {
        "license": "MIT License\n",
        "readme": "# Project\n",
        "name": "project",
        "description": "A project",
        "defaultBranch": "main",
    }
    assert github_api.paths().count("/repos/octo/project/commits/main") == 3


def test_unknown_reference_fails_without_result(github_api: FakeGitHubAPI) -> None:
    github_api.add_repository()
    executed: list[str] = []

    with pytest.raises(ReferenceNotFoundError):
        remote(
            "https://github.com/octo/project",
            reference="missing",
            plugins=["license"],
            progress=lambda event: executed.append(event.plugin),
        )

    assert executed == ["license"]
    assert not any("/contents/" in path for path in github_api.paths())
