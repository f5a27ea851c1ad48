"""Core data models shared across scrutinizer components."""

from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted to the progress sink before each plugin runs."""

    percentage: int
    plugin: str


ProgressSink = Callable[[ProgressEvent], object]


@dataclass(frozen=True)
class ExaminationRequest:
    """Parameters of a single examination run."""

    repository: str
    reference: str
    plugins: Tuple[str, ...] = field(default_factory=tuple)
    progress: Optional[ProgressSink] = None
