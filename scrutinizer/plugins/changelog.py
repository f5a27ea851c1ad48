"""Changelog plugin."""

from __future__ import annotations

from typing import Any, Dict

import yaml

from ..backends.base import Backend
from ..logging import get_logger

VERSIONBOT_CHANGELOG = ".versionbot/CHANGELOG.yml"
MARKDOWN_CHANGELOG = "CHANGELOG.md"

logger = get_logger("plugins.changelog")


class _ChangelogLoader(yaml.SafeLoader):
    """Safe loader that keeps dates as the strings written in the file."""


_ChangelogLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def changelog(backend: Backend) -> Dict[str, Any]:
    """Prefer the machine readable versionbot changelog, else the markdown one.

    An empty list is reported when neither file has content.
    """
    contents = backend.read_file(VERSIONBOT_CHANGELOG)
    if contents.strip():
        try:
            entries = yaml.load(contents, Loader=_ChangelogLoader)
        except yaml.YAMLError as exc:
            logger.warning("Ignoring unparsable %s: %s", VERSIONBOT_CHANGELOG, exc)
        else:
            # Comment-only or bare "---" documents load as None.
            if entries is not None:
                return {"changelog": entries}

    markdown = backend.read_file(MARKDOWN_CHANGELOG)
    if not markdown.strip():
        return {"changelog": []}
    return {"changelog": markdown}


__all__ = ["changelog"]
