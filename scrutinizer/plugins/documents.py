"""Plugins returning well-known community documents."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Sequence, Tuple

from ..backends.base import Backend

README_PATHS = ("README.md", "README", "readme.md")

_HEADING = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^\s*(```|~~~)")
_SLUG_DROP = re.compile(r"[^\w\s-]")


def first_non_empty(backend: Backend, paths: Sequence[str]) -> str:
    """Return the contents of the first candidate path that has any text."""
    for path in paths:
        contents = backend.read_file(path)
        if contents.strip():
            return contents
    return ""


def _document(field: str, *paths: str, strip: bool = False):
    def plugin(backend: Backend) -> Dict[str, Any]:
        contents = first_non_empty(backend, paths)
        if strip:
            contents = contents.strip()
        return {field: contents} if contents else {}

    plugin.__name__ = field
    plugin.__doc__ = f"Return ``{field}`` from the first of {', '.join(paths)}."
    return plugin


license = _document("license", "LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")
contributing = _document("contributing", "CONTRIBUTING.md", "docs/CONTRIBUTING.md")
security = _document("security", "SECURITY.md", "docs/SECURITY.md")
faq = _document("faq", "FAQ.md", "docs/FAQ.md")
code_of_conduct = _document("codeOfConduct", "CODE_OF_CONDUCT.md", "docs/CODE_OF_CONDUCT.md")
architecture = _document("architecture", "ARCHITECTURE.md", "docs/ARCHITECTURE.md", strip=True)
readme = _document("readme", *README_PATHS)


def _slug(title: str) -> str:
    return re.sub(r"\s+", "-", _SLUG_DROP.sub("", title).strip().lower())


def split_sections(text: str) -> Dict[str, str]:
    """Split markdown into sections keyed by heading anchor.

    A section runs until the next heading of the same or a higher level, so a
    parent section includes its subsections. Headings inside fenced code are
    ignored and repeated anchors get ``-1``, ``-2``... suffixes.
    """
    lines = text.splitlines()
    headings: List[Tuple[int, int, str]] = []
    in_fence = False
    for index, line in enumerate(lines):
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _HEADING.match(line)
        if match:
            headings.append((index, len(match.group(1)), match.group(2)))

    sections: Dict[str, str] = {}
    seen: Dict[str, int] = {}
    for position, (start, level, title) in enumerate(headings):
        end = len(lines)
        for other_start, other_level, _ in headings[position + 1 :]:
            if other_level <= level:
                end = other_start
                break
        anchor = _slug(title) or "section"
        count = seen.get(anchor, 0)
        seen[anchor] = count + 1
        key = anchor if count == 0 else f"{anchor}-{count}"
        sections[key] = "\n".join(lines[start + 1 : end]).strip()
    return sections


def readme_sections(backend: Backend) -> Dict[str, Any]:
    """Return the README split into heading-keyed sections."""
    sections = split_sections(first_non_empty(backend, README_PATHS))
    return {"readmeSections": sections} if sections else {}


def maintainers(backend: Backend) -> Dict[str, Any]:
    """List the people named in a MAINTAINERS file, one per line."""
    names = [
        line.strip()
        for line in backend.read_file("MAINTAINERS").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    return {"maintainers": names} if names else {}


__all__ = [
    "README_PATHS",
    "architecture",
    "code_of_conduct",
    "contributing",
    "faq",
    "first_non_empty",
    "license",
    "maintainers",
    "readme",
    "readme_sections",
    "security",
    "split_sections",
]
