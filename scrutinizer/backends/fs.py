"""Backend reading a local git working copy."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..errors import BackendIOError, BackendUnavailableError, ReferenceNotFoundError
from ..logging import get_logger
from .base import Backend

_SHORTLOG_LINE = re.compile(r"^\s*(\d+)\s+(.+?)(?:\s+<([^>]*)>)?\s*$")


class LocalBackend(Backend):
    """Checks out the bound reference inside a working copy and reads it from disk.

    The working copy is modified (forced detached checkout), so it should be
    an isolated clone rather than the caller's repository.
    """

    def __init__(
        self,
        repository: str,
        reference: str,
        *,
        runner: Callable[..., str] | None = None,
    ) -> None:
        super().__init__(repository, reference)
        self.root = Path(repository).expanduser().resolve()
        self._runner = runner or self._default_runner
        self._commit: Optional[str] = None
        self.logger = get_logger("backends.fs")

    @property
    def commit(self) -> Optional[str]:
        return self._commit

    def _initialize(self) -> None:
        if not self.root.is_dir():
            raise BackendUnavailableError(f"{self.root} is not a directory")
        try:
            self._git(["rev-parse", "--git-dir"])
        except FileNotFoundError as exc:
            raise BackendUnavailableError("git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            raise BackendUnavailableError(f"{self.root} is not a git repository") from exc

        commit = self._resolve_reference()
        try:
            self._git(["checkout", "--force", "--quiet", "--detach", commit])
        except subprocess.CalledProcessError as exc:
            raise BackendIOError(
                f"Failed to check out {self.reference} in {self.root}: {_stderr(exc)}"
            ) from exc
        self._commit = commit
        self.logger.debug("Checked out %s (%s) in %s", self.reference, commit[:12], self.root)

    def read_file(self, path: str) -> str:
        self._ensure_initialized()
        try:
            target = self._resolve(path)
            if target is None or not target.is_file():
                return ""
            return target.read_bytes().decode("utf-8", errors="replace")
        except FileNotFoundError:
            return ""
        except OSError as exc:
            raise BackendIOError(f"Failed to read {path}: {exc}") from exc

    def list_directory(self, path: str) -> List[str]:
        self._ensure_initialized()
        try:
            target = self._resolve(path)
            if target is None or not target.is_dir():
                return []
            return sorted(entry.name for entry in target.iterdir() if entry.name != ".git")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise BackendIOError(f"Failed to list {path}: {exc}") from exc

    def get_metadata(self) -> Dict[str, Any]:
        self._ensure_initialized()
        metadata: Dict[str, Any] = {}
        origin = self._git_optional(["config", "--get", "remote.origin.url"])
        name = _repository_name(origin) if origin else None
        metadata["name"] = name or self.root.name
        head = self._git_optional(["symbolic-ref", "--quiet", "--short", "refs/remotes/origin/HEAD"])
        if head:
            metadata["default_branch"] = head.split("/", 1)[-1]
        return metadata

    def get_contributors(self) -> List[Dict[str, Any]]:
        self._ensure_initialized()
        output = self._git_optional(["shortlog", "-sne", "HEAD"])
        if not output:
            return []
        contributors: List[Dict[str, Any]] = []
        for line in output.splitlines():
            match = _SHORTLOG_LINE.match(line)
            if not match:
                continue
            entry: Dict[str, Any] = {
                "username": match.group(2),
                "contributions": int(match.group(1)),
            }
            if match.group(3):
                entry["email"] = match.group(3)
            contributors.append(entry)
        return contributors

    def get_last_commit_date(self) -> Optional[str]:
        self._ensure_initialized()
        return self._git_optional(["log", "-1", "--format=%cI", "HEAD"]) or None

    def get_latest_release(self) -> Optional[Dict[str, Any]]:
        self._ensure_initialized()
        tag = self._git_optional(["describe", "--tags", "--abbrev=0", "HEAD"])
        if not tag:
            return None
        release: Dict[str, Any] = {"tag_name": tag}
        published = self._git_optional(["log", "-1", "--format=%cI", tag])
        if published:
            release["published_at"] = published
        return release

    # ------------------------------------------------------------------
    # Internals

    def _resolve_reference(self) -> str:
        for candidate in (self.reference, f"origin/{self.reference}"):
            try:
                output = self._git(["rev-parse", "--verify", "--quiet", f"{candidate}^{{commit}}"])
            except subprocess.CalledProcessError:
                continue
            commit = output.strip()
            if commit:
                return commit
        raise ReferenceNotFoundError(f"Reference {self.reference!r} not found in {self.root}")

    def _resolve(self, path: str) -> Optional[Path]:
        target = (self.root / path).resolve()
        if target != self.root and not target.is_relative_to(self.root):
            return None
        return target

    def _git(self, args: Iterable[str]) -> str:
        return self._runner(["git", *args], cwd=self.root, capture_output=True)

    def _git_optional(self, args: Iterable[str]) -> str:
        try:
            return self._git(args).strip()
        except subprocess.CalledProcessError:
            return ""

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def _repository_name(url: str) -> Optional[str]:
    stripped = url.rstrip("/")
    if stripped.endswith(".git"):
        stripped = stripped[:-4]
    name = re.split(r"[/:\\]", stripped)[-1]
    return name or None


def _stderr(exc: subprocess.CalledProcessError) -> str:
    stderr = exc.stderr or ""
    return stderr.strip() or f"exit code {exc.returncode}"


__all__ = ["LocalBackend"]
