"""Plugins reading package manifests."""

from __future__ import annotations

import json
import re
import tomllib
from typing import Any, Dict, List, Optional

from ..backends.base import Backend
from ..logging import get_logger

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")

logger = get_logger("plugins.manifest")


def _load_json(backend: Backend, path: str) -> Dict[str, Any]:
    contents = backend.read_file(path)
    if not contents.strip():
        return {}
    try:
        data = json.loads(contents)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unparsable %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_toml(backend: Backend, path: str) -> Dict[str, Any]:
    contents = backend.read_file(path)
    if not contents.strip():
        return {}
    try:
        return tomllib.loads(contents)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ignoring unparsable %s: %s", path, exc)
        return {}


def _requirement_names(contents: str) -> List[str]:
    names: List[str] = []
    for line in contents.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        match = _REQUIREMENT_NAME.match(stripped)
        if match and match.group(1) not in names:
            names.append(match.group(1))
    return names


def dependencies(backend: Backend) -> Dict[str, Any]:
    """List direct runtime dependencies from package.json or requirements.txt."""
    package = _load_json(backend, "package.json")
    declared = package.get("dependencies")
    if isinstance(declared, dict) and declared:
        return {"dependencies": sorted(declared)}

    names = _requirement_names(backend.read_file("requirements.txt"))
    return {"dependencies": names} if names else {}


def version(backend: Backend) -> Dict[str, Any]:
    """Report the project version declared by its manifest."""
    found: Optional[str] = None
    package_version = _load_json(backend, "package.json").get("version")
    if isinstance(package_version, str) and package_version.strip():
        found = package_version.strip()

    if found is None:
        project = _load_toml(backend, "pyproject.toml").get("project")
        if isinstance(project, dict) and isinstance(project.get("version"), str):
            found = project["version"].strip() or None

    if found is None:
        found = backend.read_file("VERSION").strip() or None

    return {"version": found} if found else {}


__all__ = ["dependencies", "version"]
