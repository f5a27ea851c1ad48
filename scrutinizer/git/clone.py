"""Isolated clones of local repositories."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator

from ..errors import CloneError
from ..logging import get_logger


class CloneManager:
    """Materialises a disposable clone so examinations never touch the caller's tree.

    ``prepare`` is a context manager; the clone directory and all of its
    contents are removed when the ``with`` block exits, whether it returns,
    raises, or is interrupted.
    """

    def __init__(
        self,
        *,
        base_dir: Path | None = None,
        prefix: str = "scrutinizer_",
        runner: Callable[..., str] | None = None,
    ) -> None:
        self.base_dir = base_dir
        self.prefix = prefix
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.clone")

    @contextmanager
    def prepare(self, source_path: str | Path) -> Iterator[Path]:
        """Clone ``source_path`` into a fresh temporary directory and yield its path."""
        source = Path(source_path).expanduser().resolve()
        if not source.is_dir():
            raise CloneError(f"{source} is not a directory")

        if self.base_dir is not None:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        try:
            temporary = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.base_dir))
        except OSError as exc:
            raise CloneError(f"Failed to create temporary directory: {exc}") from exc

        try:
            self.logger.debug("Cloning %s to %s", source, temporary)
            self._clone(source, temporary)
            yield temporary
        finally:
            self._cleanup(temporary)

    def _clone(self, source: Path, destination: Path) -> None:
        args = ["git", "clone", "--quiet", "--no-hardlinks", str(source), str(destination)]
        try:
            self._runner(args, cwd=destination.parent)
        except FileNotFoundError as exc:
            raise CloneError("git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit code {exc.returncode}"
            raise CloneError(f"Failed to clone {source}: {detail}") from exc

    def _cleanup(self, path: Path) -> None:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            self.logger.warning("Unable to remove temporary clone %s", path)
        else:
            self.logger.debug("Removed temporary clone %s", path)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = True,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


__all__ = ["CloneManager"]
