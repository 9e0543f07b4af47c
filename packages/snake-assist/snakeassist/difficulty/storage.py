"""Difficulty snapshot storage backends.

Stores hold an opaque JSON-compatible snapshot of the difficulty state.
They absorb their own read and write failures: failures are logged and
reported as a missing snapshot or a skipped write.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from snakeassist.errors import ERROR_STORE_CLEAR, ERROR_STORE_READ, ERROR_STORE_WRITE
from snakeassist.logging_config import logger

DEFAULT_STORE_FILENAME = "difficulty.json"


class DifficultyStore(Protocol):
    """Key-value persistence for a single difficulty snapshot."""

    def load(self) -> dict[str, Any] | None:
        """Return the stored snapshot, or None when nothing usable is stored."""
        ...

    def save(self, snapshot: dict[str, Any]) -> None:
        """Replace the stored snapshot."""
        ...

    def clear(self) -> None:
        """Remove the stored snapshot."""
        ...


class InMemoryDifficultyStore:
    """Store that keeps the snapshot in memory, for tests and throwaway sessions."""

    def __init__(self, snapshot: dict[str, Any] | None = None) -> None:
        self.snapshot = snapshot
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        """Return a copy of the stored snapshot, or None unless it is a dict."""
        if self.snapshot is None:
            return None
        if not isinstance(self.snapshot, dict):
            logger.warning(
                ERROR_STORE_READ.format(
                    location="memory",
                    error=f"expected a dict, got {type(self.snapshot).__name__}",
                ),
            )
            return None
        return dict(self.snapshot)

    def save(self, snapshot: dict[str, Any]) -> None:
        """Keep a copy of ``snapshot``."""
        self.snapshot = dict(snapshot)
        self.save_count += 1

    def clear(self) -> None:
        """Drop the stored snapshot."""
        self.snapshot = None


class JsonFileDifficultyStore:
    """
    Store that persists the snapshot as a JSON file.

    Parameters
    ----------
    path : Path | None
        Location of the JSON file. Parent directories are created on save.
        Defaults to ``difficulty.json`` in the working directory at
        construction time.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else Path.cwd() / DEFAULT_STORE_FILENAME

    def load(self) -> dict[str, Any] | None:
        """
        Read the snapshot from disk.

        Returns
        -------
        dict[str, Any] | None
            The decoded snapshot, or None if the file is missing, unreadable,
            or does not hold a JSON object.
        """
        if not self.path.exists():
            return None

        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(ERROR_STORE_READ.format(location=self.path, error=e))
            return None

        if not isinstance(data, dict):
            logger.warning(
                ERROR_STORE_READ.format(
                    location=self.path,
                    error=f"expected a JSON object, got {type(data).__name__}",
                ),
            )
            return None

        return data

    def save(self, snapshot: dict[str, Any]) -> None:
        """Write ``snapshot`` atomically through a temporary file."""
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(snapshot, f, indent=2, default=str)
            temp_path.replace(self.path)
            logger.debug(f"Difficulty data saved to {self.path}")
        except (OSError, TypeError, ValueError) as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            logger.warning(ERROR_STORE_WRITE.format(location=self.path, error=e))

    def clear(self) -> None:
        """Delete the snapshot file if it exists."""
        try:
            self.path.unlink(missing_ok=True)
            logger.info(f"Cleared difficulty data at {self.path}")
        except OSError as e:
            logger.warning(ERROR_STORE_CLEAR.format(location=self.path, error=e))
