"""Repository backends giving plugins uniform read access."""

from .base import Backend, BackendFactory
from .fs import LocalBackend
from .github import GitHubBackend, GitHubRepo, parse_github_url

__all__ = [
    "Backend",
    "BackendFactory",
    "GitHubBackend",
    "GitHubRepo",
    "LocalBackend",
    "parse_github_url",
]
