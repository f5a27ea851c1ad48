"""Tests for scrutinizer.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from scrutinizer.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_logging():  # type: ignore[no-untyped-def]
    yield
    logger = logging.getLogger("scrutinizer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_get_logger_nests_under_package() -> None:
    assert get_logger("backends.fs").name == "scrutinizer.backends.fs"
    assert get_logger().name == "scrutinizer"


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_verbose_console_names_the_component(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(verbose=True)

    get_logger("orchestrator").debug("Running plugin license")

    assert "[scrutinizer] DEBUG orchestrator: Running plugin license" in capsys.readouterr().err


def test_log_file_receives_debug_records(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_file = tmp_path / "logs" / "scrutinizer.log"
    configure_logging(log_file=log_file)

    get_logger("git.clone").debug("Removed temporary clone /tmp/x")
    get_logger("orchestrator").info("Examination finished")

    contents = log_file.read_text(encoding="utf-8")
    assert "DEBUG scrutinizer.git.clone: Removed temporary clone /tmp/x" in contents
    assert "INFO scrutinizer.orchestrator: Examination finished" in contents
    err = capsys.readouterr().err
    assert "Removed temporary clone" not in err
    assert "[scrutinizer] INFO Examination finished" in err
