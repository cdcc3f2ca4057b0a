# topmark:header:start
#
#   project      : Trailmark
#   file         : io.py
#   file_relpath : src/trailmark/cli/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Input/output helpers for CLI commands.

Documents are read and written as bytes and decoded as UTF-8 so that line
endings (``\\r\\n``) survive unchanged. OS errors are translated into CLI
errors carrying the matching exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from trailmark.cli.errors import (
    TrailmarkCliError,
    TrailmarkEncodingError,
    TrailmarkFileNotFoundError,
    TrailmarkIOError,
    TrailmarkPermissionDeniedError,
)
from trailmark.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from trailmark.config.logging import TrailmarkLogger

logger: TrailmarkLogger = get_logger(__name__)

STDIN_NAME: str = "<stdin>"


def complete_line(text: str) -> str:
    """Append a final newline to non-empty text that lacks one."""
    if text and not text.endswith("\n"):
        return text + "\n"
    return text


def decode_document(data: bytes, *, name: str) -> str:
    """Decode ``data`` as UTF-8.

    Raises:
        TrailmarkEncodingError: If ``data`` is not valid UTF-8.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.error("Encoding error while reading %s: %s", name, exc)
        raise TrailmarkEncodingError(f"{name}: input is not valid UTF-8 ({exc.reason})") from exc


def os_error_to_cli(exc: OSError, *, name: str, action: str) -> TrailmarkCliError:
    """Map an `OSError` raised while reading or writing ``name`` to a CLI error."""
    message: str = f"Could not {action} {name}: {exc.strerror or exc}"
    if isinstance(exc, (FileNotFoundError, IsADirectoryError)):
        return TrailmarkFileNotFoundError(message)
    if isinstance(exc, PermissionError):
        return TrailmarkPermissionDeniedError(message)
    return TrailmarkIOError(message)


def read_stdin() -> str:
    """Read the whole of STDIN as UTF-8 text, keeping line endings."""
    data: bytes = click.get_binary_stream("stdin").read()
    return decode_document(data, name=STDIN_NAME)


def read_document(path: Path) -> str:
    """Read ``path`` as UTF-8 text, keeping line endings.

    Raises:
        TrailmarkCliError: With the exit code matching the failure.
    """
    try:
        data: bytes = path.read_bytes()
    except OSError as exc:
        logger.error("Filesystem error while reading %s: %s", path, exc)
        raise os_error_to_cli(exc, name=str(path), action="read") from exc
    return decode_document(data, name=str(path))


def write_document(path: Path, text: str) -> None:
    """Replace the contents of ``path`` with ``text`` (UTF-8).

    Raises:
        TrailmarkCliError: With the exit code matching the failure.
    """
    try:
        path.write_bytes(text.encode("utf-8"))
    except OSError as exc:
        logger.error("Filesystem error while writing %s: %s", path, exc)
        raise os_error_to_cli(exc, name=str(path), action="write") from exc
