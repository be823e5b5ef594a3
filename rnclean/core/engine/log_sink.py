"""
Run log — the durable transcript of one cleanup run.

The file is truncated and given a header line when the run starts and
is append-only afterwards. The failure classifier reads its tail, and
humans read it after a failure.
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_HEADER = "React Native Clean Script Log - {stamp}"


class LogSink:
    """Append-only text log with tail reads."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def start(self) -> None:
        """Truncate (or create) the log and write the header line."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%a %b %d %H:%M:%S %Y")
        self._path.write_text(LOG_HEADER.format(stamp=stamp) + "\n", encoding="utf-8")
        logger.debug("Run log started at %s", self._path)

    def append(self, text: str) -> None:
        """Append text; each line of ``text`` becomes one log line."""
        if not text:
            return
        if not text.endswith("\n"):
            text += "\n"
        with self._path.open("a", encoding="utf-8") as f:
            f.write(text)

    def tail(self, n: int = 20) -> list[str]:
        """Return the last ``n`` lines, oldest first."""
        if n <= 0 or not self._path.is_file():
            return []
        with self._path.open("r", encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\n") for line in deque(f, maxlen=n)]
