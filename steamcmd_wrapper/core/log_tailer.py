"""Tails the steamcmd log directory while a command runs.

steamcmd writes its console output to ``<data_dir>/logs/*.txt``. The tailer
polls the directory from a background thread and hands every new complete
line, with its leading ``[YYYY-MM-DD HH:MM:SS]`` stamp removed, to a callback.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from pathlib import Path

from steamcmd_wrapper.utils.i18n import t

logger = logging.getLogger("steamcmdw.log_tailer")

__all__ = ["LogTailer", "strip_timestamp", "truncate_logs"]

_TIMESTAMP_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2}[^\]]*\]\s?")


def strip_timestamp(line: str) -> str:
    """Remove the leading bracketed date stamp from a steamcmd log line."""
    return _TIMESTAMP_RE.sub("", line, count=1)


def truncate_logs(log_dir: Path) -> int:
    """Empty every file in the log directory.

    The directory is created if steamcmd has not written logs yet.

    Args:
        log_dir: The steamcmd log directory.

    Returns:
        Number of files truncated.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    count = 0
    for path in log_dir.iterdir():
        if path.is_file():
            path.write_bytes(b"")
            count += 1

    logger.debug(t("logs.log_tailer.truncated", count=count, path=log_dir))
    return count


class LogTailer:
    """Background poller that streams appended log lines.

    Attributes:
        log_dir: Directory being watched.
        poll_interval: Seconds between directory scans.
    """

    def __init__(self, log_dir: Path, on_line: Callable[[str], None], poll_interval: float = 0.25) -> None:
        """Initializes the tailer.

        Args:
            log_dir: Directory to watch. Files present at start are read
                from the beginning, so truncate them first.
            on_line: Called with each new, timestamp-stripped, non-empty line.
            poll_interval: Seconds between directory scans.
        """
        self.log_dir = log_dir
        self.poll_interval = poll_interval
        self._on_line = on_line
        self._offsets: dict[Path, int] = {}
        self._partial: dict[Path, bytes] = {}
        self._stop_event = threading.Event()
        self._scan_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start polling in a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="steamcmd-log-tailer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and deliver anything written since the last scan."""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
        self.scan(flush=True)

    def _run(self) -> None:
        while not self._stop_event.wait(self.poll_interval):
            self.scan()

    def scan(self, flush: bool = False) -> None:
        """Read new content from every file in the directory once.

        Args:
            flush: Also deliver a trailing line without a newline.
        """
        with self._scan_lock:
            try:
                paths = sorted(p for p in self.log_dir.iterdir() if p.is_file())
            except OSError as e:
                logger.debug(t("logs.log_tailer.scan_failed", path=self.log_dir, error=e))
                return

            for path in paths:
                for line in self._read_new_lines(path, flush):
                    self._on_line(line)

    def _read_new_lines(self, path: Path, flush: bool) -> list[str]:
        offset = self._offsets.get(path, 0)
        try:
            size = path.stat().st_size
            if size < offset:
                # File was truncated or rotated
                offset = 0
                self._partial.pop(path, None)
            if size == offset and not (flush and self._partial.get(path)):
                return []
            with open(path, "rb") as f:
                f.seek(offset)
                chunk = f.read()
        except OSError as e:
            logger.debug(t("logs.log_tailer.read_failed", path=path, error=e))
            return []

        self._offsets[path] = offset + len(chunk)
        data = self._partial.pop(path, b"") + chunk

        raw_lines = data.split(b"\n")
        tail = raw_lines.pop()
        if flush:
            raw_lines.append(tail)
        elif tail:
            self._partial[path] = tail

        lines = []
        for raw in raw_lines:
            line = strip_timestamp(raw.decode("utf-8", errors="replace").rstrip("\r"))
            if line.strip():
                lines.append(line)
        return lines
