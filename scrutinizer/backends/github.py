"""Backend querying a GitHub-hosted repository through the REST API."""

from __future__ import annotations

import base64
import http.client
import json
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from urllib.error import HTTPError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from ..errors import (
    BackendIOError,
    BackendUnavailableError,
    ReferenceNotFoundError,
)
from ..logging import get_logger
from .base import Backend

_AUTO_TOKEN = object()

_JSON_MEDIA_TYPE = "application/vnd.github+json"
_RAW_MEDIA_TYPE = "application/vnd.github.raw+json"
_USER_AGENT = "scrutinizer"
_LATEST_ISSUES = 5
_RELEASES_PAGE = 30

_URL_PATTERNS = (
    re.compile(r"^https?://(?:www\.)?github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^(?:ssh://)?git@github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^github\.com/([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^([A-Za-z0-9][A-Za-z0-9-]*)/([A-Za-z0-9._-]+?)(?:\.git)?$"),
)


@dataclass(frozen=True)
class GitHubRepo:
    """Owner and name of a GitHub repository."""

    owner: str
    repo: str

    @property
    def path(self) -> str:
        return f"/repos/{quote(self.owner, safe='')}/{quote(self.repo, safe='')}"


def parse_github_url(url: str) -> Optional[GitHubRepo]:
    """Parse HTTPS, SSH, scheme-less and ``owner/repo`` GitHub locators."""
    candidate = url.strip()
    for pattern in _URL_PATTERNS:
        match = pattern.match(candidate)
        if match:
            return GitHubRepo(owner=match.group(1), repo=match.group(2))
    return None


class GitHubBackend(Backend):
    """Reads repository contents and metadata from the GitHub API.

    A token from the environment is sent as a bearer credential to raise the
    API rate limit; without one, requests are anonymous.
    """

    DEFAULT_API_URL = "https://api.github.com"
    ENV_TOKEN_KEYS = ("SCRUTINIZER_GITHUB_TOKEN", "GITHUB_TOKEN")

    def __init__(
        self,
        repository: str,
        reference: str,
        *,
        token: str | None | object = _AUTO_TOKEN,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        retries: int = 2,
        backoff: float = 0.5,
        opener: Callable[..., Any] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(repository, reference)
        self.token = self._resolve_token(token)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(0, retries)
        self.backoff = backoff
        self._opener = opener or urlopen
        self._sleep = sleep
        self._repo: Optional[GitHubRepo] = None
        self._repo_info: Dict[str, Any] = {}
        self._commit: Dict[str, Any] = {}
        self.logger = get_logger("backends.github")

    @property
    def commit(self) -> Optional[str]:
        sha = self._commit.get("sha")
        return sha if isinstance(sha, str) else None

    def _initialize(self) -> None:
        repo = parse_github_url(self.repository)
        if repo is None:
            raise BackendUnavailableError(f"{self.repository} is not a GitHub repository URL")

        info = self._get_json(repo.path)
        if not isinstance(info, dict):
            raise BackendUnavailableError(f"GitHub repository {repo.owner}/{repo.repo} not found")

        commit = self._get_json(
            f"{repo.path}/commits/{quote(self.reference, safe='')}",
            missing=(404, 422),
        )
        if not isinstance(commit, dict) or not isinstance(commit.get("sha"), str):
            raise ReferenceNotFoundError(
                f"Reference {self.reference!r} not found in {repo.owner}/{repo.repo}"
            )

        self._repo = repo
        self._repo_info = info
        self._commit = commit
        self.logger.debug(
            "Resolved %s/%s@%s to %s", repo.owner, repo.repo, self.reference, commit["sha"][:12]
        )

    def read_file(self, path: str) -> str:
        self._ensure_initialized()
        payload = self._get_json(self._contents_path(path), params={"ref": self.commit})
        if not isinstance(payload, dict) or payload.get("type") != "file":
            return ""
        content = payload.get("content")
        if payload.get("encoding") == "base64" and isinstance(content, str) and content:
            return base64.b64decode(content).decode("utf-8", errors="replace")
        # Large files are served without inline content.
        raw = self._request(
            self._contents_path(path),
            params={"ref": self.commit},
            accept=_RAW_MEDIA_TYPE,
        )
        return raw.decode("utf-8", errors="replace") if raw else ""

    def list_directory(self, path: str) -> List[str]:
        self._ensure_initialized()
        payload = self._get_json(self._contents_path(path), params={"ref": self.commit})
        if not isinstance(payload, list):
            return []
        return sorted(
            entry["name"] for entry in payload if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        )

    def get_metadata(self) -> Dict[str, Any]:
        self._ensure_initialized()
        info = self._repo_info
        metadata: Dict[str, Any] = {}
        for key, source in (
            ("name", "name"),
            ("description", "description"),
            ("homepage", "homepage"),
            ("default_branch", "default_branch"),
            ("stars", "stargazers_count"),
            ("topics", "topics"),
        ):
            value = info.get(source)
            if value not in (None, "", []):
                metadata[key] = value
        return metadata

    def get_contributors(self) -> List[Dict[str, Any]]:
        self._ensure_initialized()
        payload = self._get_json(f"{self._repo_path}/contributors", params={"per_page": 100})
        if not isinstance(payload, list):
            return []
        contributors: List[Dict[str, Any]] = []
        for entry in payload:
            if not isinstance(entry, dict) or not entry.get("login"):
                continue
            contributor: Dict[str, Any] = {
                "username": entry["login"],
                "contributions": entry.get("contributions", 0),
            }
            if entry.get("avatar_url"):
                contributor["avatar"] = entry["avatar_url"]
            contributors.append(contributor)
        return contributors

    def get_open_issues(self) -> Dict[str, Any]:
        self._ensure_initialized()
        if not self._repo_info.get("has_issues", True):
            return {}
        payload = self._get_json(
            f"{self._repo_path}/issues",
            params={"state": "open", "per_page": _LATEST_ISSUES * 2},
        )
        issues = payload if isinstance(payload, list) else []
        latest: List[Dict[str, Any]] = []
        for entry in issues:
            # The issues endpoint also returns pull requests.
            if not isinstance(entry, dict) or "pull_request" in entry:
                continue
            latest.append(
                {
                    "title": entry.get("title"),
                    "number": entry.get("number"),
                    "url": entry.get("html_url"),
                    "created_at": entry.get("created_at"),
                }
            )
            if len(latest) == _LATEST_ISSUES:
                break
        count = self._repo_info.get("open_issues_count")
        return {"count": count if isinstance(count, int) else len(latest), "latest": latest}

    def get_last_commit_date(self) -> Optional[str]:
        self._ensure_initialized()
        commit = self._commit.get("commit")
        if not isinstance(commit, dict):
            return None
        for role in ("committer", "author"):
            person = commit.get(role)
            if isinstance(person, dict) and isinstance(person.get("date"), str):
                return person["date"]
        return None

    def get_latest_release(self) -> Optional[Dict[str, Any]]:
        self._ensure_initialized()
        payload = self._get_json(f"{self._repo_path}/releases/latest")
        return _release(payload)

    def get_latest_prerelease(self) -> Optional[Dict[str, Any]]:
        self._ensure_initialized()
        payload = self._get_json(
            f"{self._repo_path}/releases", params={"per_page": _RELEASES_PAGE}
        )
        # Releases are listed newest first.
        for entry in payload if isinstance(payload, list) else []:
            if isinstance(entry, dict) and entry.get("prerelease") and not entry.get("draft"):
                return _release(entry)
        return None

    # ------------------------------------------------------------------
    # HTTP helpers

    @property
    def _repo_path(self) -> str:
        assert self._repo is not None
        return self._repo.path

    def _contents_path(self, path: str) -> str:
        cleaned = path.strip("/")
        return f"{self._repo_path}/contents/{quote(cleaned)}"

    def _get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        missing: Sequence[int] = (404,),
    ) -> Any:
        raw = self._request(path, params=params, missing=missing)
        if raw is None or not raw.strip():
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BackendIOError(f"GitHub API returned invalid JSON for {path}") from exc

    def _request(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        accept: str = _JSON_MEDIA_TYPE,
        missing: Sequence[int] = (404,),
    ) -> Optional[bytes]:
        """Return the response body, or None when the status is in ``missing``."""
        url = f"{self.api_url}{path}"
        query = {key: value for key, value in (params or {}).items() if value is not None}
        if query:
            url = f"{url}?{urlencode(query)}"
        request = Request(url, headers=self._headers(accept), method="GET")

        attempt = 0
        while True:
            try:
                with self._opener(request, timeout=self.timeout) as response:
                    return response.read()
            except HTTPError as exc:
                if exc.code in missing:
                    return None
                if exc.code >= 500 and attempt < self.retries:
                    self._wait(attempt, url, f"status {exc.code}")
                    attempt += 1
                    continue
                raise BackendIOError(
                    f"GitHub API request {url} failed with status {exc.code}: {_http_detail(exc)}"
                ) from exc
            except (OSError, http.client.HTTPException) as exc:
                if attempt < self.retries:
                    self._wait(attempt, url, str(exc))
                    attempt += 1
                    continue
                raise BackendIOError(f"GitHub API request {url} failed: {exc}") from exc

    def _wait(self, attempt: int, url: str, reason: str) -> None:
        delay = self.backoff * (2**attempt)
        self.logger.debug("Retrying %s in %.2fs after %s", url, delay, reason)
        if delay > 0:
            self._sleep(delay)

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {
            "Accept": accept,
            "User-Agent": _USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _resolve_token(self, token: str | None | object) -> str | None:
        if token is _AUTO_TOKEN:
            for key in self.ENV_TOKEN_KEYS:
                value = os.getenv(key)
                if value:
                    return value
            return None
        return token  # type: ignore[return-value]


def _release(payload: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(payload, dict) or not payload.get("tag_name"):
        return None
    release: Dict[str, Any] = {"tag_name": payload["tag_name"]}
    for key in ("name", "published_at", "html_url"):
        if payload.get(key):
            release[key] = payload[key]
    return release


def _http_detail(exc: HTTPError) -> str:
    try:
        body = exc.read().decode("utf-8", errors="ignore")
    except (OSError, AttributeError):
        body = ""
    if body:
        try:
            message = json.loads(body).get("message")
        except (json.JSONDecodeError, AttributeError):
            message = None
        if isinstance(message, str) and message:
            return message
    return str(exc.reason)


__all__ = ["GitHubBackend", "GitHubRepo", "parse_github_url"]
