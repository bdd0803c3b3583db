"""Tests for logging configuration."""

import io
import logging
from pathlib import Path

import pytest

from ancestry.foundation.logging import (
    KEPT_SESSIONS,
    _parse_level,
    _prune_session_logs,
    configure_logging,
    resolve_level,
)


def console_handler() -> logging.Handler:
    return logging.getLogger().handlers[0]


class TestConfigureLogging:
    def test_default_is_quiet(self) -> None:
        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.WARNING

    def test_debug_flag(self) -> None:
        stream = io.StringIO()
        configure_logging(debug=True, stream=stream)

        logging.getLogger("ancestry.test").debug("hello")

        assert console_handler().level == logging.DEBUG
        assert "ancestry.test [DEBUG] hello" in stream.getvalue()

    def test_noisy_loggers_are_quieted(self) -> None:
        configure_logging(debug=True, stream=io.StringIO())

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_env_level_beats_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANCESTRY_LOG_LEVEL", "INFO")

        configure_logging(debug=True, stream=io.StringIO())

        assert console_handler().level == logging.INFO

    def test_env_debug(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANCESTRY_DEBUG", "1")

        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.DEBUG

    def test_explicit_level_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANCESTRY_LOG_LEVEL", "DEBUG")

        configure_logging(level="ERROR", stream=io.StringIO())

        assert console_handler().level == logging.ERROR

    def test_config_file_debug(self) -> None:
        Path(".ancestry").mkdir()
        Path(".ancestry/config.yaml").write_text("server:\n  url: x\ndebug: true  # on\n")

        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.DEBUG

    def test_config_flow_mapping(self) -> None:
        Path(".ancestry").mkdir()
        Path(".ancestry/config.yaml").write_text("{server: {url: x}, debug: yes}\n")

        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.DEBUG

    def test_commented_debug_is_ignored(self) -> None:
        Path(".ancestry").mkdir()
        Path(".ancestry/config.yaml").write_text("# debug: true\nserver:\n  url: x\n")

        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.WARNING

    def test_broken_config_stays_quiet(self) -> None:
        Path(".ancestry").mkdir()
        Path(".ancestry/config.yaml").write_text("debug: [unclosed\n")

        configure_logging(stream=io.StringIO())

        assert console_handler().level == logging.WARNING

    def test_persist_writes_session_log(self) -> None:
        session_log = configure_logging(stream=io.StringIO(), persist=True)
        logging.getLogger("ancestry.test").info("persisted")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert session_log is not None
        assert session_log.parent == Path(".ancestry/logs")
        assert "persisted" in session_log.read_text()
        assert console_handler().level == logging.WARNING

    def test_persist_prunes_old_sessions(self) -> None:
        log_dir = Path(".ancestry/logs")
        log_dir.mkdir(parents=True)
        for i in range(KEPT_SESSIONS + 2):
            (log_dir / f"session-20000101-0000{i:02d}-000000.log").write_text("")

        session_log = configure_logging(stream=io.StringIO(), persist=True)

        remaining = sorted(log_dir.glob("session-*.log"))
        assert len(remaining) == KEPT_SESSIONS
        assert remaining[-1] == session_log
        assert not (log_dir / "session-20000101-000002-000000.log").exists()

    def test_without_persist_returns_none(self) -> None:
        assert configure_logging(stream=io.StringIO()) is None
        assert not Path(".ancestry/logs").exists()



class TestHelpers:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("debug", logging.DEBUG),
            ("WARNING", logging.WARNING),
            (logging.ERROR, logging.ERROR),
            ("15", 15),
            ("nonsense", logging.WARNING),
        ],
    )
    def test_parse_level(self, level, expected: int) -> None:
        assert _parse_level(level) == expected

    def test_parse_level_rejects_non_ascii_digits(self) -> None:
        assert _parse_level("١٥") == logging.WARNING

    @pytest.mark.parametrize(
        ("env", "debug", "expected"),
        [
            ({}, False, (logging.WARNING, "default")),
            ({}, True, (logging.DEBUG, "--debug")),
            ({"ANCESTRY_DEBUG": "on"}, False, (logging.DEBUG, "ANCESTRY_DEBUG")),
            ({"ANCESTRY_LOG_LEVEL": "error"}, True, (logging.ERROR, "ANCESTRY_LOG_LEVEL")),
        ],
    )
    def test_resolve_level_names_source(
        self, monkeypatch: pytest.MonkeyPatch, env: dict, debug: bool, expected: tuple
    ) -> None:
        for key, value in env.items():
            monkeypatch.setenv(key, value)

        assert resolve_level(debug=debug) == expected

    def test_prune_keeps_newest(self, tmp_path: Path) -> None:
        for i in range(12):
            (tmp_path / f"session-{i:02d}.log").write_text("")
        (tmp_path / "notes.log").write_text("")

        removed = _prune_session_logs(tmp_path, keep=10)

        remaining = sorted(p.name for p in tmp_path.glob("session-*.log"))
        assert remaining == [f"session-{i:02d}.log" for i in range(2, 12)]
        assert sorted(p.name for p in removed) == ["session-00.log", "session-01.log"]
        assert (tmp_path / "notes.log").exists()
