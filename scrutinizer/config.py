"""Configuration loading for scrutinizer (scrutinizer.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "scrutinizer.yml"
DEFAULT_REFERENCE = "master"


@dataclass
class GitHubConfig:
    """Hosted repository access settings."""

    api_url: str = "https://api.github.com"
    token: Optional[str] = None
    timeout: float = 10.0
    retries: int = 2
    backoff: float = 0.5


@dataclass
class CloneConfig:
    """Where isolated local clones are created."""

    base_dir: Optional[Path] = None
    prefix: str = "scrutinizer_"


@dataclass
class ScrutinizerConfig:
    """Represents the settings defined in scrutinizer.yml."""

    reference: str = DEFAULT_REFERENCE
    plugins: List[str] = field(default_factory=list)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    clone: CloneConfig = field(default_factory=CloneConfig)


def load_config(config_path: Path | None = None) -> ScrutinizerConfig:
    """Load configuration from disk, returning defaults when the file is missing."""
    if config_path is None:
        return ScrutinizerConfig()

    config_file = _resolve_config_path(Path(config_path))
    if not config_file.exists():
        return ScrutinizerConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = ScrutinizerConfig()
    reference = _as_str(data.get("reference"))
    if reference:
        config.reference = reference
    config.plugins = _as_str_list(data.get("plugins"))

    github_data = _as_dict(data.get("github"))
    if github_data:
        github = config.github
        github.api_url = (_as_str(github_data.get("api_url")) or github.api_url).rstrip("/")
        github.token = _as_str(github_data.get("token"))
        timeout = _as_float(github_data.get("timeout"))
        if timeout is not None and timeout > 0:
            github.timeout = timeout
        retries = _as_int(github_data.get("retries"))
        if retries is not None and retries >= 0:
            github.retries = retries
        backoff = _as_float(github_data.get("backoff"))
        if backoff is not None and backoff >= 0:
            github.backoff = backoff

    clone_data = _as_dict(data.get("clone"))
    if clone_data:
        base_dir = _as_str(clone_data.get("base_dir"))
        if base_dir:
            config.clone.base_dir = (config_file.parent / base_dir).expanduser().resolve()
        prefix = _as_str(clone_data.get("prefix"))
        if prefix:
            config.clone.prefix = prefix

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_REFERENCE",
    "CloneConfig",
    "ConfigError",
    "GitHubConfig",
    "ScrutinizerConfig",
    "load_config",
]
