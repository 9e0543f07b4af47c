"""
Logging setup shared by every Snake Assist module.

Outside of tests each process gets its own timestamped log file, written to
``./logs`` or to the directory named by ``SNAKEASSIST_LOG_DIR``. If that file
cannot be opened, logging falls back to stderr at WARNING. Tests only get
stderr logging.
"""

import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DIR_ENV = "SNAKEASSIST_LOG_DIR"
LOG_FILE_PREFIX = "assist"


def is_testing() -> bool:
    """Tell whether the interpreter is running under pytest."""
    # Env vars may not be set yet at import time
    return bool(
        "PYTEST_CURRENT_TEST" in os.environ
        or os.environ.get("TESTING") == "1"
        or "pytest" in sys.modules
        or (sys.argv and sys.argv[0].endswith("pytest")),
    )


def resolve_log_dir() -> Path:
    """Return the directory log files go to."""
    override = os.environ.get(LOG_DIR_ENV)
    return Path(override) if override else Path.cwd() / "logs"


def build_file_handler(log_dir: Path) -> logging.FileHandler | None:
    """
    Open a fresh timestamped log file in ``log_dir``.

    Returns
    -------
    logging.FileHandler | None
        The handler, or None when the directory or file cannot be created.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        handler = logging.FileHandler(log_dir / f"{LOG_FILE_PREFIX}_{stamp}.log")
    except OSError as exc:
        logging.getLogger(__name__).warning(
            "Failed to initialize file logging in %s: %s. Falling back to stderr logging.",
            log_dir,
            exc,
        )
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging() -> None:
    """Install the root handlers once for the process."""
    if is_testing():
        logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
        return

    handler = build_file_handler(resolve_log_dir())
    if handler is None:
        logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
    else:
        logging.basicConfig(format=LOG_FORMAT, handlers=[handler])


configure_logging()

logger = logging.getLogger("snakeassist")
