# topmark:header:start
#
#   project      : Trailmark
#   file         : errors.py
#   file_relpath : src/trailmark/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the Trailmark CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from trailmark.cli.exit_codes import ExitCode


class TrailmarkCliError(click.ClickException):
    """Base class for all Trailmark CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:
        """Display the error using the project console if available."""
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(f"Error: {self.format_message()}")
                return
        super().show(file)


class TrailmarkUsageError(TrailmarkCliError):
    """Error for command-line invocation errors (invalid flag combinations)."""

    exit_code = ExitCode.USAGE_ERROR


class TrailmarkConfigError(TrailmarkCliError):
    """Error for configuration errors (invalid values, alias conflicts)."""

    exit_code = ExitCode.CONFIG_ERROR


class TrailmarkFileNotFoundError(TrailmarkCliError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class TrailmarkPermissionDeniedError(TrailmarkCliError):
    """Error for insufficient permissions (read/write)."""

    exit_code = ExitCode.PERMISSION_DENIED


class TrailmarkIOError(TrailmarkCliError):
    """Error for I/O errors reading/writing files."""

    exit_code = ExitCode.IO_ERROR


class TrailmarkEncodingError(TrailmarkCliError):
    """Error for text decoding errors (input is not UTF-8)."""

    exit_code = ExitCode.ENCODING_ERROR


class TrailmarkPipelineError(TrailmarkCliError):
    """Error for trailer specs rejected by the engine."""

    exit_code = ExitCode.PIPELINE_ERROR


class TrailmarkUnexpectedError(TrailmarkCliError):
    """Error for unhandled/unknown errors (last-resort)."""

    exit_code = ExitCode.UNEXPECTED_ERROR
