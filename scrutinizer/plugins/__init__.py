"""Built-in extraction plugins, whitelist selection and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..backends.base import Backend
from ..logging import get_logger
from .changelog import changelog
from .docs import blog, docs
from .documents import (
    architecture,
    code_of_conduct,
    contributing,
    faq,
    license,
    maintainers,
    readme,
    readme_sections,
    security,
)
from .manifest import dependencies, version
from .repository import (
    contributors,
    github_metadata,
    last_commit_date,
    latest_prerelease,
    latest_release,
    open_issues,
)

Plugin = Callable[[Backend], Mapping[str, Any]]

_ENTRY_POINT_GROUP = "scrutinizer.plugins"

# Canonical execution order; later plugins win scalar conflicts when merged.
BUILTIN_PLUGINS: Mapping[str, Plugin] = {
    "license": license,
    "blog": blog,
    "changelog": changelog,
    "contributing": contributing,
    "contributors": contributors,
    "docs": docs,
    "security": security,
    "faq": faq,
    "code-of-conduct": code_of_conduct,
    "architecture": architecture,
    "maintainers": maintainers,
    "readme": readme,
    "readme-sections": readme_sections,
    "github-metadata": github_metadata,
    "dependencies": dependencies,
    "last-commit-date": last_commit_date,
    "latest-release": latest_release,
    "latest-prerelease": latest_prerelease,
    "open-issues": open_issues,
    "version": version,
}

logger = get_logger("plugins")


def select_plugins(
    plugins: Mapping[str, Plugin],
    whitelist: Optional[Iterable[str]] = None,
) -> List[Tuple[str, Plugin]]:
    """Return ``(name, plugin)`` pairs to run, in the canonical order of ``plugins``.

    An empty or missing whitelist selects everything. Unknown names are
    dropped without error.
    """
    wanted = set(whitelist or ())
    if not wanted:
        return list(plugins.items())

    unknown = wanted.difference(plugins)
    if unknown:
        logger.debug("Ignoring unknown plugins: %s", ", ".join(sorted(unknown)))
    return [(name, plugin) for name, plugin in plugins.items() if name in wanted]


def discover_plugins(base: Mapping[str, Plugin] = BUILTIN_PLUGINS) -> dict[str, Plugin]:
    """Return ``base`` followed by plugins registered under the entry point group.

    Entry points whose name collides with an existing plugin are ignored.
    """
    plugins = dict(base)
    for entry in _iter_entry_points():
        if entry.name in plugins:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed packages
            raise RuntimeError(f"Failed to load plugin entry point '{entry.name}': {exc}") from exc
        if not callable(loaded):
            raise TypeError(f"Plugin entry point '{entry.name}' is not callable")
        plugins[entry.name] = loaded
    return plugins


def _iter_entry_points() -> Sequence[metadata.EntryPoint]:
    return list(metadata.entry_points(group=_ENTRY_POINT_GROUP))


__all__ = [
    "BUILTIN_PLUGINS",
    "Plugin",
    "discover_plugins",
    "select_plugins",
]
