"""Git helpers used for local examinations."""

from .clone import CloneManager

__all__ = ["CloneManager"]
