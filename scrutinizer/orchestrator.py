"""Examination pipeline running plugins against repository backends."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .backends import Backend, BackendFactory, GitHubBackend, LocalBackend
from .config import GitHubConfig, ScrutinizerConfig
from .git.clone import CloneManager
from .logging import get_logger
from .merge import deep_merge
from .models import ExaminationRequest, ProgressEvent, ProgressSink
from .plugins import Plugin, discover_plugins, select_plugins


class Examiner:
    """Runs plugins one after another and folds their results into one report.

    Every plugin gets a freshly constructed and initialised backend. The first
    failure aborts the run and propagates unchanged; no partial report is
    returned. Without an explicit plugin table the built-ins are used,
    followed by plugins registered under the ``scrutinizer.plugins`` entry
    point group.
    """

    def __init__(
        self,
        plugins: Mapping[str, Plugin] | None = None,
        *,
        clone_manager: CloneManager | None = None,
        local_backend: BackendFactory | None = None,
        remote_backend: BackendFactory | None = None,
        github: GitHubConfig | None = None,
    ) -> None:
        self.plugins: Mapping[str, Plugin] = dict(plugins) if plugins is not None else discover_plugins()
        self.clone_manager = clone_manager or CloneManager()
        self.local_backend: BackendFactory = local_backend or LocalBackend
        self.github = github or GitHubConfig()
        self.remote_backend: BackendFactory = remote_backend or self._github_backend
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(
        cls, config: ScrutinizerConfig, plugins: Mapping[str, Plugin] | None = None
    ) -> "Examiner":
        clone_manager = CloneManager(base_dir=config.clone.base_dir, prefix=config.clone.prefix)
        return cls(plugins, clone_manager=clone_manager, github=config.github)

    def run(self, request: ExaminationRequest, backend_factory: BackendFactory) -> Dict[str, Any]:
        """Execute the selected plugins in canonical order and return the merged report."""
        selected = select_plugins(self.plugins, request.plugins)
        total = len(selected)
        accumulator: Dict[str, Any] = {}
        self.logger.info(
            "Examining %s@%s with %d plugin(s)", request.repository, request.reference, total
        )

        for index, (name, plugin) in enumerate(selected):
            if request.progress is not None:
                request.progress(ProgressEvent(percentage=index * 100 // total, plugin=name))

            self.logger.debug("Running plugin %s (%d/%d)", name, index + 1, total)
            try:
                backend = backend_factory(request.repository, request.reference)
                backend.init()
            except Exception as exc:
                self._annotate(exc, f"backend init failed for plugin '{name}'")
                raise

            try:
                partial = plugin(backend)
                if not isinstance(partial, Mapping):
                    raise TypeError(
                        f"Plugin '{name}' returned {type(partial).__name__}, expected a mapping"
                    )
            except Exception as exc:
                self._annotate(exc, f"plugin '{name}' failed")
                raise

            deep_merge(accumulator, partial)

        self.logger.info("Examination of %s finished", request.repository)
        return accumulator

    def local(
        self,
        path: str,
        *,
        reference: str,
        plugins: Optional[Iterable[str]] = None,
        progress: ProgressSink | None = None,
    ) -> Dict[str, Any]:
        """Examine a local repository through an isolated temporary clone."""
        with self.clone_manager.prepare(path) as clone:
            request = ExaminationRequest(
                repository=str(clone),
                reference=reference,
                plugins=_whitelist(plugins),
                progress=progress,
            )
            return self.run(request, self.local_backend)

    def remote(
        self,
        url: str,
        *,
        reference: str,
        plugins: Optional[Iterable[str]] = None,
        progress: ProgressSink | None = None,
    ) -> Dict[str, Any]:
        """Examine a hosted repository without cloning it."""
        request = ExaminationRequest(
            repository=url,
            reference=reference,
            plugins=_whitelist(plugins),
            progress=progress,
        )
        return self.run(request, self.remote_backend)

    # ------------------------------------------------------------------
    # Internals

    def _github_backend(self, repository: str, reference: str) -> Backend:
        github = self.github
        token: Dict[str, Any] = {"token": github.token} if github.token else {}
        return GitHubBackend(
            repository,
            reference,
            api_url=github.api_url,
            timeout=github.timeout,
            retries=github.retries,
            backoff=github.backoff,
            **token,
        )

    def _annotate(self, exc: BaseException, stage: str) -> None:
        self.logger.error("Examination aborted: %s: %s", stage, exc)
        exc.add_note(f"scrutinizer: {stage}")


def _whitelist(plugins: Optional[Iterable[str]]) -> Tuple[str, ...]:
    # A bare name is one plugin, not an iterable of characters.
    if isinstance(plugins, str):
        return (plugins,)
    return tuple(plugins or ())


def local(
    path: str,
    *,
    reference: str,
    plugins: Optional[Iterable[str]] = None,
    progress: ProgressSink | None = None,
) -> Dict[str, Any]:
    """Examine a local git repository directory using all registered plugins."""
    return Examiner().local(path, reference=reference, plugins=plugins, progress=progress)


def remote(
    url: str,
    *,
    reference: str,
    plugins: Optional[Iterable[str]] = None,
    progress: ProgressSink | None = None,
) -> Dict[str, Any]:
    """Examine a GitHub repository URL using all registered plugins.

    ``$GITHUB_TOKEN`` is used, when set, to authenticate with GitHub.
    """
    return Examiner().remote(url, reference=reference, plugins=plugins, progress=progress)


__all__ = ["Examiner", "local", "remote"]
