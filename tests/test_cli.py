"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json
import logging

import pytest

import scrutinizer.cli as cli_module
from scrutinizer.cli import _build_parser, main
from scrutinizer.errors import ReferenceNotFoundError
from scrutinizer.models import ProgressEvent


class _StubExaminer:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, str, dict]] = []

    def _record(self, kind: str, target: str, **kwargs):  # type: ignore[no-untyped-def]
        self.calls.append((kind, target, kwargs))
        if self.error is not None:
            raise self.error
        progress = kwargs.get("progress")
        if progress is not None:
            progress(ProgressEvent(percentage=0, plugin="license"))
        return {"license": "MIT", "changelog": []}

    def local(self, path, **kwargs):  # type: ignore[no-untyped-def]
        return self._record("local", path, **kwargs)

    def remote(self, url, **kwargs):  # type: ignore[no-untyped-def]
        return self._record("remote", url, **kwargs)


@pytest.fixture(autouse=True)
def _reset_logging():  # type: ignore[no-untyped-def]
    yield
    logger = logging.getLogger("scrutinizer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def stub_examiner(monkeypatch) -> _StubExaminer:  # type: ignore[no-untyped-def]
    examiner = _StubExaminer()
    monkeypatch.setattr(cli_module.Examiner, "from_config", classmethod(lambda cls, config: examiner))
    return examiner


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "local"])
    assert args.verbose is True
    assert args.command == "local"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["remote", "octo/project", "--verbose"])
    assert args.verbose is True
    assert args.url == "octo/project"


def test_cli_accepts_config_on_either_side_of_command(tmp_path) -> None:  # type: ignore[no-untyped-def]
    parser = _build_parser()
    before = parser.parse_args(["--config", str(tmp_path), "serve"])
    after = parser.parse_args(["serve", "--config", str(tmp_path), "--log-file", str(tmp_path / "x.log")])
    assert before.config == tmp_path
    assert after.config == tmp_path
    assert after.log_file == tmp_path / "x.log"
    assert after.verbose is False


def test_cli_parses_examination_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["local", "repo", "--reference", "v1.0", "--plugins", "license,readme", "--progress"])
    assert args.reference == "v1.0"
    assert args.plugins == "license,readme"
    assert args.progress is True


def test_main_prints_json_report(stub_examiner: _StubExaminer, capsys) -> None:  # type: ignore[no-untyped-def]
    main(["local", "repo", "--reference", "main", "--plugins", "license, changelog"])

    output = json.loads(capsys.readouterr().out)
    assert output == {"license": "MIT", "changelog": []}
    kind, target, kwargs = stub_examiner.calls[0]
    assert (kind, target) == ("local", "repo")
    assert kwargs["reference"] == "main"
    assert kwargs["plugins"] == ["license", "changelog"]
    assert kwargs["progress"] is None


def test_main_uses_configured_reference_and_plugins(stub_examiner: _StubExaminer, tmp_path, capsys) -> None:  # type: ignore[no-untyped-def]
    (tmp_path / "scrutinizer.yml").write_text("reference: develop\nplugins: [readme]\n", encoding="utf-8")

    main(["--config", str(tmp_path), "remote", "octo/project"])

    capsys.readouterr()
    _, _, kwargs = stub_examiner.calls[0]
    assert kwargs["reference"] == "develop"
    assert kwargs["plugins"] == ["readme"]


def test_main_reports_progress_on_stderr(stub_examiner: _StubExaminer, capsys) -> None:  # type: ignore[no-untyped-def]
    main(["remote", "octo/project", "--progress"])

    captured = capsys.readouterr()
    assert "0% license" in captured.err
    assert "100% done" in captured.err
    assert json.loads(captured.out)["license"] == "MIT"


def test_main_exits_with_error_message(stub_examiner: _StubExaminer, capsys) -> None:  # type: ignore[no-untyped-def]
    stub_examiner.error = ReferenceNotFoundError("Reference 'nope' not found")

    with pytest.raises(SystemExit) as excinfo:
        main(["remote", "octo/project", "--reference", "nope"])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "scrutinizer remote failed: Reference 'nope' not found" in captured.err
    assert captured.out == ""
