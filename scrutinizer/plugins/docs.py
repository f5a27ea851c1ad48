"""Plugins collecting markdown documents from well-known directories."""

from __future__ import annotations

import posixpath
from typing import Any, Dict, List

from ..backends.base import Backend

_MARKDOWN_SUFFIXES = (".md", ".markdown")


def _markdown_files(backend: Backend, directory: str) -> List[str]:
    return [name for name in backend.list_directory(directory) if name.lower().endswith(_MARKDOWN_SUFFIXES)]


def docs(backend: Backend) -> Dict[str, Any]:
    """Return every markdown file under ``docs/`` with its contents."""
    entries: List[Dict[str, str]] = []
    for name in _markdown_files(backend, "docs"):
        contents = backend.read_file(posixpath.join("docs", name))
        if contents.strip():
            entries.append({"filename": name, "contents": contents})
    return {"docs": entries} if entries else {}


def blog(backend: Backend) -> Dict[str, Any]:
    """Return the names of blog posts kept under ``blog/``."""
    posts = _markdown_files(backend, "blog")
    return {"blog": posts} if posts else {}


__all__ = ["blog", "docs"]
