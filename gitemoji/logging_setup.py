"""Root logger setup shared by the CLI and the HTTP server."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import LoggingSettings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class SafeEncodingStreamHandler(logging.StreamHandler):
    def emit(self, record):
        """Schreibt Logzeilen robust unter Erhalt nicht-ASCII-Zeichen."""
        try:
            msg = self.format(record)
            stream = self.stream
            # terminals without UTF-8 would otherwise choke on emoji glyphs
            encoding = getattr(stream, "encoding", None) or "utf-8"
            stream.write(msg.encode(encoding, errors="replace").decode(encoding, errors="ignore") + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


class SafeRotatingFileHandler(RotatingFileHandler):
    """Rotating handler that tolerates Windows file locks (e.g. OneDrive/AV)."""

    def rotate(self, source: str, dest: str) -> None:
        try:
            super().rotate(source, dest)
            return
        except PermissionError as exc:
            if getattr(exc, "winerror", None) != 32:
                raise
        # Fallback: copy current log and truncate instead of renaming
        try:
            if os.path.exists(source):
                shutil.copy2(source, dest)
            with open(source, "w", encoding=self.encoding or "utf-8") as fh:
                fh.truncate(0)
        except OSError:
            return


def _level(name: str, default: int) -> int:
    return logging._nameToLevel.get(name.upper(), default)


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    verbosity: int = 0,
    log_file: Optional[Path] = None,
) -> List[logging.Handler]:
    """Replace the root handlers according to ``settings``.

    ``verbosity`` (``-v`` count) lowers the console level to INFO or DEBUG.
    ``log_file`` forces a file log regardless of ``settings``.
    """

    settings = settings or LoggingSettings()
    console_level = _level(settings.console_level, logging.WARNING)
    if verbosity == 1:
        console_level = min(console_level, logging.INFO)
    elif verbosity >= 2:
        console_level = logging.DEBUG

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    console = SafeEncodingStreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.setLevel(console_level)
    handlers: List[logging.Handler] = [console]

    file_path = str(log_file) if log_file else (settings.file_path if settings.file_enabled else "")
    file_level = _level(settings.file_level or settings.console_level, console_level)
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = SafeRotatingFileHandler(
            path,
            maxBytes=settings.file_max_bytes,
            backupCount=settings.file_backup_count,
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(min(h.level for h in handlers))
    return handlers
