"""CLI entrypoints for scrutinizer commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import ScrutinizerError
from .logging import configure_logging
from .models import ProgressEvent
from .orchestrator import Examiner


def _add_global_options(parser: argparse.ArgumentParser, *, subcommand: bool = False) -> None:
    """Register options accepted both before and after the subcommand.

    On subcommands the defaults are suppressed so a value given before the
    subcommand is not overwritten by the subparser's default.
    """

    def default(value: object) -> object:
        return argparse.SUPPRESS if subcommand else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default(False),
        help="Log debug details, including which component emitted each line.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=default(None),
        help="Path to scrutinizer.yml (or a directory containing it).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=default(None),
        help="Also write debug logs to this file.",
    )


def _add_examination_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--reference",
        "-r",
        default=None,
        help="Git branch, tag or commit to examine (defaults to the configured reference).",
    )
    parser.add_argument(
        "--plugins",
        "-p",
        default=None,
        help="Comma separated list of plugins to run. Runs every plugin when omitted.",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Print progress percentages to stderr.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scrutinizer",
        description="Extract a git repository's metadata relying on open source conventions.",
    )
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    local_parser = subparsers.add_parser(
        "local",
        help="Examine a local git repository through an isolated clone.",
    )
    _add_global_options(local_parser, subcommand=True)
    local_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository (defaults to current directory).",
    )
    _add_examination_options(local_parser)

    remote_parser = subparsers.add_parser(
        "remote",
        help="Examine a GitHub repository through the GitHub API.",
    )
    _add_global_options(remote_parser, subcommand=True)
    remote_parser.add_argument("url", help="GitHub repository URL or owner/name.")
    _add_examination_options(remote_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing examinations.",
    )
    _add_global_options(serve_parser, subcommand=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _print_progress(event: ProgressEvent) -> None:
    print(f"{event.percentage:3d}% {event.plugin}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for scrutinizer commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ScrutinizerError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .service import run_service

        run_service(args.host, args.port, examiner_factory=lambda: Examiner.from_config(config))
        return

    examiner = Examiner.from_config(config)
    reference = args.reference or config.reference
    plugins = _split_plugins(args.plugins) if args.plugins is not None else config.plugins
    progress = _print_progress if args.progress else None

    try:
        if args.command == "local":
            result = examiner.local(args.path, reference=reference, plugins=plugins, progress=progress)
        elif args.command == "remote":
            result = examiner.remote(args.url, reference=reference, plugins=plugins, progress=progress)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ScrutinizerError as exc:
        parser.exit(
            1, f"scrutinizer {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )

    if progress is not None:
        print("100% done", file=sys.stderr)
    print(json.dumps(result, indent=2, sort_keys=True, ensure_ascii=False))


def _split_plugins(value: str) -> list[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


if __name__ == "__main__":
    main(sys.argv[1:])
