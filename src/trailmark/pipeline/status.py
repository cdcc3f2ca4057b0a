# topmark:header:start
#
#   project      : Trailmark
#   file         : status.py
#   file_relpath : src/trailmark/pipeline/status.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Status enums for each axis of the Trailmark pipeline.

Each enum captures one phase (locate, parse, merge, render). Steps **must
only** write to the axes listed in their ``axes_written`` contract.

Conventions:
  * All enums inherit from `EnumIntrospectionMixin` and `ColoredStrEnum` for
    shared utilities and colors.
  * Values are human-readable strings used in CLI/diagnostics; prefer
    equality (`==`) over identity checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from yachalk import chalk

from trailmark.core.enum_mixins import EnumIntrospectionMixin
from trailmark.rendering.colored_enum import ColoredStrEnum


class Axis(EnumIntrospectionMixin, str, Enum):
    """Pipeline axes, one per step."""

    LOCATE = "locate"
    PARSE = "parse"
    MERGE = "merge"
    RENDER = "render"


class LocateStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Outcome of the block locator."""

    PENDING = ("locate pending", chalk.gray)
    FOUND = ("trailer block found", chalk.green)
    WHOLE_INPUT = ("whole input used as block", chalk.cyan)
    NOT_FOUND = ("no trailer block", chalk.yellow)


class ParseStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Outcome of the line parser."""

    PENDING = ("parse pending", chalk.gray)
    PARSED = ("trailers parsed", chalk.green)
    EMPTY = ("no trailers", chalk.yellow)


class MergeStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Outcome of the policy merge engine."""

    PENDING = ("merge pending", chalk.gray)
    UNCHANGED = ("trailers unchanged", chalk.green)
    CHANGED = ("trailers changed", chalk.blue)


class RenderStatus(EnumIntrospectionMixin, ColoredStrEnum):
    """Outcome of the renderer."""

    PENDING = ("render pending", chalk.gray)
    RENDERED = ("document rendered", chalk.green)
    TRAILERS_ONLY = ("trailers rendered", chalk.green)


@dataclass
class ProcessingStatus:
    """Current status of every axis for one document.

    Attributes:
        locate (LocateStatus): Block locator outcome.
        parse (ParseStatus): Line parser outcome.
        merge (MergeStatus): Merge engine outcome.
        render (RenderStatus): Renderer outcome.
    """

    locate: LocateStatus = LocateStatus.PENDING
    parse: ParseStatus = ParseStatus.PENDING
    merge: MergeStatus = MergeStatus.PENDING
    render: RenderStatus = RenderStatus.PENDING

    def get(self, axis: Axis) -> ColoredStrEnum:
        """Return the status recorded for ``axis``."""
        return getattr(self, axis.value)

    def summary(self) -> str:
        """Return a colored one-line summary, e.g. for verbose CLI output."""
        return ", ".join(f"{axis.value}: {self.get(axis).colored()}" for axis in Axis)
