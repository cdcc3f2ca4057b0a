# topmark:header:start
#
#   project      : Trailmark
#   file         : options.py
#   file_relpath : src/trailmark/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared Click options and order-sensitive trailer option scanning.

Besides the common verbosity/color/config decorators, this module provides
`TrailerCommand`, a `click.Command` that records the *order* of ``--where``,
``--if-exists``, ``--if-missing`` (and their ``--no-*`` resets) relative to
``--trailer``. Click collects repeated options into lists and loses their
interleaving; the policy options only apply to the trailers that follow them
on the command line, so the raw arguments are scanned before Click parses them.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Final, ParamSpec, TypeVar

import click

from trailmark.cli.errors import TrailmarkUsageError
from trailmark.config.logging import TRACE_LEVEL, get_logger

if TYPE_CHECKING:
    from trailmark.config.logging import TrailmarkLogger

P = ParamSpec("P")
R = TypeVar("R")

# Custom verbosity levels, mapped to standard logging levels
LOG_LEVELS: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

logger: TrailmarkLogger = get_logger(__name__)


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the final logging level based on verbose and quiet counts.

    Args:
        verbose_count (int): Number of times the verbose flag (-v) is passed.
        quiet_count (int): Number of times the quiet flag (-q) is passed.

    Returns:
        int: The logging level.

    Raises:
        TrailmarkUsageError: If both verbose and quiet flags are used simultaneously.

    Behavior:
        Three or more -v flags set TRACE level.
        Two -v flags set DEBUG level.
        One -v flag sets INFO level.
        One or more -q flags set ERROR level.
        Default level is WARNING.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise TrailmarkUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:  # -vvv
        return LOG_LEVELS["TRACE"]
    if verbose_count == 2:  # -vv
        return LOG_LEVELS["DEBUG"]
    if verbose_count == 1:  # -v
        return LOG_LEVELS["INFO"]

    if quiet_count >= 1:  # -q
        return LOG_LEVELS["ERROR"]

    return LOG_LEVELS["WARNING"]


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` (counted, mutually exclusive)."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress warnings.",
    )(f)
    return f


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(*, cli_mode: ColorMode | None, stdout_isatty: bool | None = None) -> bool:
    """Determine whether color output should be enabled.

    Behavior:
        Honors --color and --no-color CLI flags.
        Honors FORCE_COLOR and NO_COLOR environment variables.
        Defaults to enabling color if stdout is a TTY.
    """
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        stdout_isatty = sys.stdout.isatty()
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` (auto, always, never) and ``--no-color``."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--no-config`` and ``--config`` (repeatable)."""
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Ignore user and project config files (only use built-in defaults).",
    )(f)
    f = click.option(
        "--config",
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
        help="Additional config file(s) to load and merge.",
    )(f)
    return f


# ---------------------------------------------------------------------------
# Order-sensitive --trailer scanning
# ---------------------------------------------------------------------------

TRAILER_OPTION: Final[str] = "--trailer"
TRAILER_RESET_OPTION: Final[str] = "--no-trailer"

POLICY_OPTIONS: Final[dict[str, str]] = {
    "--where": "where",
    "--if-exists": "if_exists",
    "--if-missing": "if_missing",
}

POLICY_RESET_OPTIONS: Final[dict[str, str]] = {
    "--no-where": "where",
    "--no-if-exists": "if_exists",
    "--no-if-missing": "if_missing",
}

# ctx.meta key holding the scanned ``(raw_trailer, policy_state)`` pairs
TRAILER_ARGS_META_KEY: Final[str] = "trailmark.trailer_args"

PolicyState = dict[str, "str | None"]


def scan_trailer_args(args: list[str]) -> list[tuple[str, PolicyState]]:
    """Pair each ``--trailer`` value with the policy options in effect at that point.

    Both ``--opt value`` and ``--opt=value`` forms are recognized; scanning
    stops at ``--``. ``--no-trailer`` drops the trailers collected so far. Values
    are returned raw; Click validates them separately.

    Args:
        args (list[str]): Raw command arguments (after the subcommand name).

    Returns:
        list[tuple[str, PolicyState]]: ``(trailer, {"where": ..., "if_exists": ...,
            "if_missing": ...})`` in command-line order; ``None`` means unset.
    """
    state: PolicyState = {"where": None, "if_exists": None, "if_missing": None}
    out: list[tuple[str, PolicyState]] = []
    i = 0
    while i < len(args):
        arg: str = args[i]
        if arg == "--":
            break
        name, eq, inline = arg.partition("=")
        if name == TRAILER_OPTION or name in POLICY_OPTIONS:
            if eq:
                value: str = inline
            elif i + 1 < len(args):
                i += 1
                value = args[i]
            else:
                break  # Click reports the missing value
            if name == TRAILER_OPTION:
                out.append((value, dict(state)))
            else:
                state[POLICY_OPTIONS[name]] = value
        elif not eq and name == TRAILER_RESET_OPTION:
            out = []
        elif not eq and name in POLICY_RESET_OPTIONS:
            state[POLICY_RESET_OPTIONS[name]] = None
        i += 1
    return out


class TrailerCommand(click.Command):
    """`click.Command` that records ``--trailer`` order in ``ctx.meta``."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        """Scan the raw arguments, then let Click parse them as usual."""
        ctx.meta[TRAILER_ARGS_META_KEY] = scan_trailer_args(list(args))
        logger.trace("Scanned trailer args: %s", ctx.meta[TRAILER_ARGS_META_KEY])
        return super().parse_args(ctx, args)


def get_scanned_trailer_args(ctx: click.Context) -> list[tuple[str, PolicyState]] | None:
    """Return the pairs recorded by `TrailerCommand` (``None`` when no scan ran)."""
    scanned: Any = ctx.meta.get(TRAILER_ARGS_META_KEY)
    return None if scanned is None else list(scanned)
