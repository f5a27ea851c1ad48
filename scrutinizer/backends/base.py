"""Base class for repository backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from ..errors import BackendNotInitializedError


class Backend(ABC):
    """Uniform read access to a repository tree at a single reference.

    A backend is bound to one ``(repository, reference)`` pair, must be
    initialised exactly once before it is read, and is discarded after the
    plugin that received it returns. Missing files and missing optional
    metadata are reported as empty values rather than errors.
    """

    def __init__(self, repository: str, reference: str) -> None:
        self.repository = repository
        self.reference = reference
        self._initialized = False

    def init(self) -> None:
        """Resolve the bound reference and prepare the handle for reads."""
        if self._initialized:
            raise BackendNotInitializedError(
                f"{self.__class__.__name__} for {self.repository} is single-use and was already initialised"
            )
        self._initialize()
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise BackendNotInitializedError(
                f"{self.__class__.__name__} for {self.repository} must be initialised before use"
            )

    @abstractmethod
    def _initialize(self) -> None:
        """Backend specific reference resolution."""

    @abstractmethod
    def read_file(self, path: str) -> str:
        """Return file contents at the reference, or an empty string if absent."""

    @abstractmethod
    def list_directory(self, path: str) -> List[str]:
        """Return sorted entry names of a directory, or an empty list if absent."""

    def get_metadata(self) -> Dict[str, Any]:
        """Return repository metadata; unknown keys are omitted."""
        self._ensure_initialized()
        return {}

    def get_contributors(self) -> List[Dict[str, Any]]:
        self._ensure_initialized()
        return []

    def get_open_issues(self) -> Dict[str, Any]:
        self._ensure_initialized()
        return {}

    def get_last_commit_date(self) -> Optional[str]:
        self._ensure_initialized()
        return None

    def get_latest_release(self) -> Optional[Dict[str, Any]]:
        self._ensure_initialized()
        return None

    def get_latest_prerelease(self) -> Optional[Dict[str, Any]]:
        """Return the newest release flagged as a prerelease, if the host tracks them."""
        self._ensure_initialized()
        return None


BackendFactory = Callable[[str, str], Backend]
