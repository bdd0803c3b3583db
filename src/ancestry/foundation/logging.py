"""Logging setup for the ancestry CLI.

The console level is resolved once per invocation; the first source that
says something wins::

    level argument
    ANCESTRY_LOG_LEVEL       any level name or number
    ANCESTRY_DEBUG           true / 1 / yes
    --debug
    debug: true              in the loaded ancestry config
    WARNING

``--log-file`` additionally records everything at DEBUG into
``.ancestry/logs/session-<timestamp>.log``. Only the newest
``KEPT_SESSIONS`` files survive.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

LOG_DIR = Path(".ancestry") / "logs"
KEPT_SESSIONS = 10

CONSOLE_FORMAT = "%(name)s: %(message)s"
DETAILED_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

# httpx logs one INFO line per request
_QUIET_LOGGERS = ("httpx", "httpcore")

_TRUTHY = {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def configure_logging(
    *,
    debug: bool = False,
    level: int | str | None = None,
    stream: TextIO | None = None,
    persist: bool = False,
) -> Path | None:
    """Install the console handler and, with ``persist``, a session log file.

    Any handlers already on the root logger are replaced.

    Returns:
        Path of the session log, or None when nothing is persisted
    """
    console_level, source = resolve_level(debug=debug, level=level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    # The session file wants every record, the console filters on its own
    root.setLevel(logging.DEBUG if persist else console_level)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setLevel(console_level)
    detailed = console_level <= logging.DEBUG
    console.setFormatter(logging.Formatter(DETAILED_FORMAT if detailed else CONSOLE_FORMAT))
    root.addHandler(console)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    session_log = None
    if persist:
        try:
            session_log = _open_session_log(root)
        except OSError as e:
            logger.warning("Session log disabled: %s", e)
        else:
            _prune_session_logs(session_log.parent)

    logger.debug(
        "Console logging at %s (from %s), session log: %s",
        logging.getLevelName(console_level),
        source,
        session_log or "off",
    )
    return session_log


def resolve_level(*, debug: bool = False, level: int | str | None = None) -> tuple[int, str]:
    """Pick the console level and name the source it came from."""
    if level is not None:
        return _parse_level(level), "argument"
    if env_level := os.environ.get("ANCESTRY_LOG_LEVEL"):
        return _parse_level(env_level), "ANCESTRY_LOG_LEVEL"
    if os.environ.get("ANCESTRY_DEBUG", "").strip().lower() in _TRUTHY:
        return logging.DEBUG, "ANCESTRY_DEBUG"
    if debug:
        return logging.DEBUG, "--debug"
    if _config_requests_debug():
        return logging.DEBUG, "config"
    return logging.WARNING, "default"


def _config_requests_debug() -> bool:
    """Whether the ancestry config sets ``debug: true``.

    A config that fails to load counts as no; the CLI reports the ConfigError
    itself once logging is up.
    """
    # Deferred so importing this module never touches config files
    from ancestry.config import get_config
    from ancestry.foundation.errors import ConfigError

    try:
        return get_config().debug
    except ConfigError:
        return False


def _open_session_log(root: logging.Logger) -> Path:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    path = LOG_DIR / f"session-{stamp}.log"

    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
    root.addHandler(handler)
    return path


def _prune_session_logs(log_dir: Path, keep: int = KEPT_SESSIONS) -> list[Path]:
    """Delete all but the ``keep`` newest session logs and return the deleted paths.

    The timestamp in the file name orders sessions.
    """
    sessions = sorted(log_dir.glob("session-*.log"), reverse=True)
    removed = []
    for path in sessions[keep:]:
        # A concurrent invocation may have pruned it first
        path.unlink(missing_ok=True)
        removed.append(path)
    return removed


def _parse_level(value: int | str) -> int:
    """Level from a number or a name such as ``"info"``; unknown names mean WARNING."""
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isascii() and text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text.upper(), logging.WARNING)
