# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `tedit.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Keeps the console quiet unless `log_to_console` is set.
- Routes key tracing to keytrace.log only when TEDIT_KEYTRACE is set.
- Falls back to the temp directory when the log directory cannot be made.

Every test writes its log files under `tmp_path`.
"""

import logging
import logging.handlers
import os
import tempfile

import pytest

from tedit.utils import logging_config

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def _config(log_file, **overrides) -> dict:
    section = {
        "file_level": "INFO",
        "console_level": "ERROR",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": str(log_file),
    }
    section.update(overrides)
    return {"logging": section}


def test_setup_logging_creates_handlers(tmp_path, monkeypatch) -> None:
    """`setup_logging` should add rotating file handlers with proper levels.

    Scenario:
    - Console logging is disabled.
    - Separate error log is requested.
    - File handler level is INFO.
    - Error file handler level is ERROR.

    Assertions:
    - Both a main rotating file handler (`editor.log`) and a separate error
      rotating file handler (`error.log`) are attached to the root logger.
    - The total number of handlers equals 2 (main + error).
    - Handler levels match the configuration.
    """
    monkeypatch.delenv(logging_config.KEYTRACE_ENV, raising=False)
    log_file = tmp_path / "logs" / "editor.log"
    logging_config.setup_logging(_config(log_file, separate_error_log=True))

    root = logging.getLogger()
    assert len(root.handlers) == 2
    assert all(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)

    by_file = {os.path.basename(h.baseFilename): h for h in root.handlers}
    assert by_file["editor.log"].level == logging.INFO
    assert by_file["error.log"].level == logging.ERROR
    assert log_file.parent.is_dir()


def test_console_handler_is_opt_in(tmp_path) -> None:
    logging_config.setup_logging(_config(tmp_path / "editor.log", log_to_console=True))

    root = logging.getLogger()
    console = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(console) == 1
    assert console[0].level == logging.ERROR


def test_messages_reach_the_log_file(tmp_path) -> None:
    log_file = tmp_path / "editor.log"
    logging_config.setup_logging(_config(log_file))

    logging.getLogger("tedit").info("hello from the editor")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello from the editor" in log_file.read_text(encoding="utf-8")


def test_key_trace_disabled_by_default(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv(logging_config.KEYTRACE_ENV, raising=False)
    logging_config.setup_logging(_config(tmp_path / "editor.log"))

    key_logger = logging.getLogger("tedit.keyevents")
    assert key_logger.disabled is True
    assert key_logger.propagate is False
    assert not (tmp_path / "keytrace.log").exists()


def test_key_trace_enabled_by_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(logging_config.KEYTRACE_ENV, "1")
    logging_config.setup_logging(_config(tmp_path / "editor.log"))

    key_logger = logging.getLogger("tedit.keyevents")
    assert key_logger.disabled is False
    assert len(key_logger.handlers) == 1
    handler = key_logger.handlers[0]
    assert handler.baseFilename == str(tmp_path / "keytrace.log")

    logging_config.KEY_LOGGER.debug("raw=27 key=1004")
    handler.flush()
    assert "raw=27 key=1004" in (tmp_path / "keytrace.log").read_text(encoding="utf-8")


def test_unusable_log_dir_falls_back_to_tempdir(tmp_path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    logging_config.setup_logging(_config(blocker / "sub" / "editor.log"))

    root = logging.getLogger()
    assert root.handlers[0].baseFilename == os.path.join(tempfile.gettempdir(), "tedit.log")


def test_setup_is_repeatable(tmp_path) -> None:
    config = _config(tmp_path / "editor.log")
    logging_config.setup_logging(config)
    logging_config.setup_logging(config)
    assert len(logging.getLogger().handlers) == 1
