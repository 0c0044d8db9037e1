"""Deliver a composed commit message to its destination.

An action is either one of the fixed :class:`Destination` values or a
:class:`CustomEmit` carrying its own handler. :class:`Emitter` must be given a
handler for every destination, so dispatch never falls back to a default.
"""

from __future__ import annotations

import logging
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, TextIO, Union

logger = logging.getLogger(__name__)

Handler = Callable[[str], object]


class EmitError(RuntimeError):
    """Raised when a message cannot be delivered."""


class Destination(str, Enum):
    COPY = "copy"
    TERMINAL = "terminal"
    GIT_MESSAGE = "git-message"
    NEW_DOCUMENT = "new-document"


@dataclass(frozen=True)
class CustomEmit:
    """Caller-defined destination."""

    handler: Handler
    label: str = "custom"


EmitAction = Union[Destination, CustomEmit]


def copy_to_clipboard(text: str) -> None:
    """Put ``text`` on the system clipboard through Tk."""

    try:
        import tkinter as tk
    except Exception as exc:  # pragma: no cover - depends on the interpreter build
        raise EmitError(f"tkinter not available: {exc}") from exc
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        raise EmitError(f"Clipboard not available: {exc}") from exc
    try:
        root.withdraw()
        root.clipboard_clear()
        root.clipboard_append(text)
        # the clipboard content is lost with the window unless Tk processes it first
        root.update()
    finally:
        root.destroy()
    logger.info("Copied: %s", text)


def terminal_writer(stream: Optional[TextIO] = None) -> Handler:
    def write(text: str) -> None:
        out = stream or sys.stdout
        out.write(text + "\n")
        out.flush()

    return write


def find_commit_message_file(cwd: str | Path | None = None) -> Path:
    """Return git's ``COMMIT_EDITMSG`` path for the repository at ``cwd``."""

    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--git-path", "COMMIT_EDITMSG"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise EmitError(f"Not inside a git repository: {exc}") from exc
    path = Path(proc.stdout.strip())
    if not path.is_absolute() and cwd is not None:
        path = Path(cwd) / path
    return path


def commit_message_writer(path: str | Path | None = None) -> Handler:
    """Return a handler writing the message to ``path`` or git's message file.

    ``path`` is what git passes to a ``prepare-commit-msg`` hook.
    """

    def write(text: str) -> Path:
        target = Path(path) if path else find_commit_message_file()
        try:
            target.write_text(text + "\n", encoding="utf-8")
        except OSError as exc:
            raise EmitError(f"Cannot write commit message to {target}: {exc}") from exc
        logger.info("Commit message written to %s", target)
        return target

    return write


def new_document_writer(directory: str | Path | None = None) -> Handler:
    """Return a handler saving each message to a fresh file in ``directory``."""

    def write(text: str) -> Path:
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                prefix="commit-message-",
                suffix=".txt",
                dir=directory,
                delete=False,
            ) as fh:
                fh.write(text)
        except OSError as exc:
            raise EmitError(f"Cannot create document: {exc}") from exc
        logger.info("Message saved as %s", fh.name)
        return Path(fh.name)

    return write


class Emitter:
    """Dispatch emit actions to their handlers."""

    def __init__(self, handlers: Mapping[Destination, Handler]) -> None:
        missing = [d.value for d in Destination if d not in handlers]
        if missing:
            raise ValueError(f"No handler for destination(s): {', '.join(missing)}")
        self._handlers: Dict[Destination, Handler] = dict(handlers)

    @classmethod
    def default(
        cls,
        *,
        stream: Optional[TextIO] = None,
        message_file: str | Path | None = None,
        output_dir: str | Path | None = None,
    ) -> "Emitter":
        return cls({
            Destination.COPY: copy_to_clipboard,
            Destination.TERMINAL: terminal_writer(stream),
            Destination.GIT_MESSAGE: commit_message_writer(message_file),
            Destination.NEW_DOCUMENT: new_document_writer(output_dir),
        })

    def emit(self, action: EmitAction, value: str) -> object:
        """Deliver ``value`` and return whatever the handler returned."""

        if isinstance(action, CustomEmit):
            handler, label = action.handler, action.label
        elif isinstance(action, Destination):
            handler, label = self._handlers[action], action.value
        else:
            raise TypeError(f"Unsupported emit action: {action!r}")

        logger.debug("Emitting %r via %s", value, label)
        try:
            return handler(value)
        except EmitError:
            raise
        except Exception as exc:
            raise EmitError(f"{label} failed: {exc}") from exc
