"""
loglane_core.handlers
~~~~~~~~~~~~~~~~~~~~~
Log sinks built on :mod:`logging.handlers`.

DailyRotatingFileHandler
    File sink whose name embeds the current calendar day
    (``logs/%DATE%-combined.log``).  Rolls over at day change, optionally
    when the active file would exceed a size cap, gzip-compresses rolled
    files on request and prunes files older than a retention window.

RichConsoleHandler
    Console sink that prints one line per record, the level token colored
    with the level's display color via :mod:`rich`.
"""

from __future__ import annotations

import gzip
import logging
import os
import re
import shutil
from datetime import date, datetime, timedelta
from logging.handlers import BaseRotatingHandler
from pathlib import Path

from rich.console import Console
from rich.text import Text

from loglane_core.levels import COLORS

DATE_TOKEN = "%DATE%"
DATE_FORMAT = "%Y-%m-%d"

logger = logging.getLogger(__name__)


class DailyRotatingFileHandler(BaseRotatingHandler):
    """Append records to a per-day file, rotating by date and size.

    Args:
        pattern: File path containing ``%DATE%``, replaced with the
            current day as ``YYYY-MM-DD``.
        max_bytes: Roll the active file to ``<name>.<n>`` once it would
            grow past this many bytes.  ``None`` disables the size cap.
        retention_days: Delete rolled files whose day is older than this
            many days.  ``None`` keeps everything.
        compress: Gzip rolled files (``.gz`` suffix).
    """

    def __init__(
        self,
        pattern: str | os.PathLike[str],
        *,
        max_bytes: int | None = None,
        retention_days: int | None = None,
        compress: bool = False,
        encoding: str = "utf-8",
        delay: bool = False,
    ) -> None:
        self.pattern = str(pattern)
        if DATE_TOKEN not in self.pattern:
            raise ValueError(f"pattern must contain {DATE_TOKEN}: {self.pattern!r}")
        self.max_bytes = max_bytes
        self.retention_days = retention_days
        self.compress = compress
        self.current_day = self._today()
        path = self._path_for(self.current_day)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(str(path), "a", encoding=encoding, delay=delay)
        self._prune()

    # ------------------------------------------------------------------
    # Rotation hooks
    # ------------------------------------------------------------------

    def shouldRollover(self, record: logging.LogRecord) -> bool:  # noqa: N802
        if self._today() != self.current_day:
            return True
        if not self.max_bytes:
            return False
        if self.stream is None:
            self.stream = self._open()
        msg = f"{self.format(record)}\n"
        self.stream.seek(0, 2)
        return self.stream.tell() > 0 and self.stream.tell() + len(msg) >= self.max_bytes

    def doRollover(self) -> None:  # noqa: N802
        if self.stream:
            self.stream.close()
            self.stream = None  # type: ignore[assignment]

        finished = Path(self.baseFilename)
        today = self._today()
        if today != self.current_day:
            if self.compress and finished.exists():
                self.rotate(str(finished), self.rotation_filename(str(finished)))
            self.current_day = today
            new_path = self._path_for(today)
            new_path.parent.mkdir(parents=True, exist_ok=True)
            self.baseFilename = os.path.abspath(new_path)
        elif finished.exists():
            self.rotate(str(finished), self.rotation_filename(self._next_index_name(finished)))

        self._prune()
        if not self.delay:
            self.stream = self._open()

    def rotation_filename(self, default_name: str) -> str:
        name = super().rotation_filename(default_name)
        return f"{name}.gz" if self.compress and not name.endswith(".gz") else name

    def rotate(self, source: str, dest: str) -> None:
        if not self.compress or callable(self.rotator):
            super().rotate(source, dest)
            return
        with open(source, "rb") as f_in, gzip.open(dest, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)
        os.remove(source)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _today(self) -> date:
        return datetime.now().date()

    def _path_for(self, day: date) -> Path:
        return Path(self.pattern.replace(DATE_TOKEN, day.strftime(DATE_FORMAT)))

    def _next_index_name(self, path: Path) -> str:
        index = 1
        while any(
            Path(f"{path}.{index}{suffix}").exists() for suffix in ("", ".gz")
        ):
            index += 1
        return f"{path}.{index}"

    def _file_regex(self) -> re.Pattern[str]:
        name = Path(self.pattern).name
        head, _, tail = name.partition(DATE_TOKEN)
        return re.compile(
            rf"^{re.escape(head)}(?P<day>\d{{4}}-\d{{2}}-\d{{2}}){re.escape(tail)}"
            r"(?:\.\d+)?(?:\.gz)?$"
        )

    def _prune(self) -> None:
        """Delete files older than the retention window."""
        if self.retention_days is None:
            return
        directory = Path(self.pattern).parent
        if not directory.is_dir():
            return
        cutoff = self.current_day - timedelta(days=self.retention_days)
        regex = self._file_regex()
        for candidate in directory.iterdir():
            match = regex.match(candidate.name)
            if match is None:
                continue
            day = datetime.strptime(match.group("day"), DATE_FORMAT).date()
            if day < cutoff:
                try:
                    candidate.unlink()
                except OSError:
                    logger.warning("Could not remove expired log file %s", candidate)


class RichConsoleHandler(logging.Handler):
    """Print formatted records to the terminal with colored level tokens."""

    def __init__(self, console: Console | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.console = console or Console(stderr=False, highlight=False)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            text = Text(line)
            severity = getattr(record, "loglane_level", record.levelname.lower())
            token = f"[{severity}]"
            start = line.find(token)
            if start >= 0:
                text.stylize(COLORS.get(severity, ""), start, start + len(token))
            self.console.print(text, soft_wrap=True)
        except Exception:
            self.handleError(record)
