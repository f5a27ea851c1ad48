"""Deep merge used to fold plugin results into the examination report."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, MutableMapping


def deep_merge(target: MutableMapping[str, Any], source: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Merge ``source`` into ``target`` in place and return ``target``.

    Mappings merge key by key and lists merge element-wise by index, so a
    shorter list in ``source`` leaves the trailing elements of ``target``
    untouched. Any other value in ``source`` replaces the one in ``target``.
    Values copied from ``source`` are deep copies; ``target`` never aliases
    plugin output.
    """
    for key, value in source.items():
        if key in target:
            target[key] = _merge_value(target[key], value)
        else:
            target[key] = _clone(value)
    return target


def _merge_value(existing: Any, incoming: Any) -> Any:
    if isinstance(existing, dict) and isinstance(incoming, Mapping):
        return deep_merge(existing, incoming)
    if isinstance(existing, list) and _is_sequence(incoming):
        return _merge_sequence(existing, incoming)
    return _clone(incoming)


def _merge_sequence(existing: List[Any], incoming: Any) -> List[Any]:
    for index, item in enumerate(incoming):
        if index < len(existing):
            existing[index] = _merge_value(existing[index], item)
        else:
            existing.append(_clone(item))
    return existing


def _clone(value: Any) -> Any:
    if isinstance(value, Mapping):
        cloned: Dict[str, Any] = {}
        return deep_merge(cloned, value)
    if _is_sequence(value):
        return [_clone(item) for item in value]
    return copy.deepcopy(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


__all__ = ["deep_merge"]
