# topmark:header:start
#
#   project      : Trailmark
#   file         : views.py
#   file_relpath : src/trailmark/pipeline/views.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

r"""Views over the document split performed by the block locator.

A `DocumentView` keeps the original lines (with their line endings) and three
indices that cut them into body, block and tail:

    lines[:block_start]           body
    lines[block_start:block_end]  block (may be empty)
    lines[block_end:]             tail (trailing blank lines, divider, rest)

When no block was found ``block_start == block_end`` marks the insertion
point right after the last non-blank eligible line.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DocumentView:
    """Line-indexed split of a document.

    Attributes:
        lines (tuple[str, ...]): Physical lines, line endings kept.
        block_start (int): Index of the first block line (insertion point if empty).
        block_end (int): Index one past the last block line.
        eligible_end (int): Index of the divider line, or ``len(lines)`` when none.
        divider_consumed (bool): True when a divider line ended the eligible region.
        newline (str): Newline sequence used for generated lines.
    """

    lines: tuple[str, ...]
    block_start: int
    block_end: int
    eligible_end: int
    divider_consumed: bool = False
    newline: str = "\n"

    @property
    def body(self) -> tuple[str, ...]:
        """Lines before the block."""
        return self.lines[: self.block_start]

    @property
    def block(self) -> tuple[str, ...]:
        """Lines of the trailer block."""
        return self.lines[self.block_start : self.block_end]

    @property
    def tail(self) -> tuple[str, ...]:
        """Lines after the block."""
        return self.lines[self.block_end :]

    @property
    def has_block(self) -> bool:
        """True when the locator found a non-empty block."""
        return self.block_end > self.block_start

    @property
    def ends_with_newline(self) -> bool:
        """True when the document's last line carries a line ending."""
        return bool(self.lines) and self.lines[-1].endswith(("\n", "\r"))


def detect_newline(lines: tuple[str, ...] | list[str]) -> str:
    r"""Return the line ending of the first terminated line (``"\n"`` when none)."""
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
        if line.endswith("\r"):
            return "\r"
    return "\n"
