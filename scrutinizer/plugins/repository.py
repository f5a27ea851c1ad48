"""Plugins reporting repository metadata exposed by the backend."""

from __future__ import annotations

from typing import Any, Dict

from ..backends.base import Backend

_METADATA_FIELDS = (
    ("name", "name"),
    ("description", "description"),
    ("homepage", "homepage"),
    ("stars", "stars"),
    ("topics", "topics"),
    ("default_branch", "defaultBranch"),
)


def github_metadata(backend: Backend) -> Dict[str, Any]:
    metadata = backend.get_metadata()
    return {
        field: metadata[key]
        for key, field in _METADATA_FIELDS
        if metadata.get(key) not in (None, "", [])
    }


def contributors(backend: Backend) -> Dict[str, Any]:
    found = backend.get_contributors()
    return {"contributors": found} if found else {}


def last_commit_date(backend: Backend) -> Dict[str, Any]:
    date = backend.get_last_commit_date()
    return {"lastCommitDate": date} if date else {}


def _release_fields(release: Dict[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {"tagName": release["tag_name"]}
    if release.get("published_at"):
        result["publishedAt"] = release["published_at"]
    if release.get("name"):
        result["name"] = release["name"]
    if release.get("html_url"):
        result["url"] = release["html_url"]
    return result


def latest_release(backend: Backend) -> Dict[str, Any]:
    release = backend.get_latest_release()
    return {"latestRelease": _release_fields(release)} if release else {}


def latest_prerelease(backend: Backend) -> Dict[str, Any]:
    release = backend.get_latest_prerelease()
    return {"latestPrerelease": _release_fields(release)} if release else {}


def open_issues(backend: Backend) -> Dict[str, Any]:
    """Report the open issue count and the most recent open issues."""
    issues = backend.get_open_issues()
    if not issues:
        return {}
    latest = [
        {
            "title": issue.get("title"),
            "number": issue.get("number"),
            "url": issue.get("url"),
            "createdAt": issue.get("created_at"),
        }
        for issue in issues.get("latest", [])
    ]
    return {"openIssues": {"count": issues.get("count", len(latest)), "latest": latest}}


__all__ = [
    "contributors",
    "github_metadata",
    "last_commit_date",
    "latest_prerelease",
    "latest_release",
    "open_issues",
]
