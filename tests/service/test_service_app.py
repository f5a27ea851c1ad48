"""Tests for the FastAPI service."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from scrutinizer.errors import (
    BackendIOError,
    BackendUnavailableError,
    CloneError,
    ReferenceNotFoundError,
)
from scrutinizer.service import create_app


class StubExaminer:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def _examine(self, mode: str, target: str, reference: str, plugins: List[str]) -> Dict[str, Any]:
        self.calls.append({"mode": mode, "target": target, "reference": reference, "plugins": plugins})
        if self.error is not None:
            raise self.error
        return {"license": "MIT License\n", "mode": mode}

    def local(self, path: str, *, reference: str, plugins: List[str]) -> Dict[str, Any]:
        return self._examine("local", path, reference, plugins)

    def remote(self, url: str, *, reference: str, plugins: List[str]) -> Dict[str, Any]:
        return self._examine("remote", url, reference, plugins)


def _client(examiner: StubExaminer) -> TestClient:
    return TestClient(create_app(lambda: examiner))  # type: ignore[arg-type, return-value]


def test_health() -> None:
    response = _client(StubExaminer()).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_examine_local() -> None:
    examiner = StubExaminer()

    response = _client(examiner).post(
        "/examine/local",
        json={"target": "/work/project", "reference": "main", "plugins": ["license"]},
    )

    assert response.status_code == 200
    assert response.json() == {
        "target": "/work/project",
        "reference": "main",
        "result": {"license": "MIT License\n", "mode": "local"},
    }
    assert examiner.calls == [
        {"mode": "local", "target": "/work/project", "reference": "main", "plugins": ["license"]}
    ]


def test_examine_remote_uses_default_reference() -> None:
    examiner = StubExaminer()

    response = _client(examiner).post("/examine/remote", json={"target": "octo/project"})

    assert response.status_code == 200
    assert response.json()["reference"] == "master"
    assert examiner.calls[0]["plugins"] == []


def test_missing_target_is_rejected() -> None:
    response = _client(StubExaminer()).post("/examine/remote", json={"reference": "main"})

    assert response.status_code == 422


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (ReferenceNotFoundError("Reference 'nope' not found"), 404),
        (BackendUnavailableError("octo/missing is not reachable"), 404),
        (CloneError("Failed to clone /work/project"), 400),
        (BackendIOError("GitHub API request failed with status 500"), 502),
    ],
)
def test_errors_map_to_status_codes(error: Exception, status: int) -> None:
    response = _client(StubExaminer(error=error)).post("/examine/remote", json={"target": "octo/project"})

    assert response.status_code == status
    assert response.json() == {"detail": str(error)}
