"""Extract a git repository's metadata relying on open source conventions."""

from __future__ import annotations

from .errors import (
    BackendError,
    BackendIOError,
    BackendNotInitializedError,
    BackendUnavailableError,
    CloneError,
    ConfigError,
    ReferenceNotFoundError,
    ScrutinizerError,
)
from .models import ExaminationRequest, ProgressEvent
from .orchestrator import Examiner, local, remote

__version__ = "2.4.0"

__all__ = [
    "BackendError",
    "BackendIOError",
    "BackendNotInitializedError",
    "BackendUnavailableError",
    "CloneError",
    "ConfigError",
    "ExaminationRequest",
    "Examiner",
    "ProgressEvent",
    "ReferenceNotFoundError",
    "ScrutinizerError",
    "local",
    "remote",
]
