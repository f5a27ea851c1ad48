"""Exception hierarchy raised by examinations."""

from __future__ import annotations


class ScrutinizerError(RuntimeError):
    """Base class for all scrutinizer failures."""


class BackendError(ScrutinizerError):
    """Raised by repository backends."""


class ReferenceNotFoundError(BackendError):
    """The git reference bound to a backend does not exist."""


class BackendUnavailableError(BackendError):
    """The repository cannot be reached or opened."""


class BackendIOError(BackendError):
    """Unexpected I/O failure distinct from a missing file."""


class BackendNotInitializedError(BackendError):
    """A backend was read before ``init()`` or initialised twice."""


class CloneError(ScrutinizerError):
    """Creating the isolated local clone failed."""


class ConfigError(ScrutinizerError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "BackendError",
    "BackendIOError",
    "BackendNotInitializedError",
    "BackendUnavailableError",
    "CloneError",
    "ConfigError",
    "ReferenceNotFoundError",
    "ScrutinizerError",
]
