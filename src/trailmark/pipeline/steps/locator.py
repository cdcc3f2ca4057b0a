# topmark:header:start
#
#   project      : Trailmark
#   file         : locator.py
#   file_relpath : src/trailmark/pipeline/steps/locator.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Block locator step for the Trailmark pipeline.

Finds the trailer block at the end of a document and splits the document into
body, block and tail (see `DocumentView`).

Rules, in order:

1. The first divider line (``---``) ends the region that may hold trailers,
   unless dividers are disabled.
2. Trailing blank lines of that region belong to the tail.
3. Scanning backward from the last non-blank line, a line qualifies if it is
   a trailer token, starts with whitespace, or directly follows a token line.
   The last paragraph is the candidate block only if every line in it
   qualifies; a single non-qualifying line means there is no block.
4. The run must contain at least one token.
5. The document's first paragraph (its title) is never part of the block.

In whole-input mode the whole eligible region (minus trailing blank lines) is
the block.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.constants import DEFAULT_SEPARATORS
from trailmark.pipeline.status import Axis, LocateStatus
from trailmark.pipeline.steps.base import BaseStep
from trailmark.pipeline.tokens import (
    is_blank,
    is_divider,
    parse_token,
    split_lines,
    starts_with_whitespace,
)
from trailmark.pipeline.views import DocumentView, detect_newline

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.pipeline.context import ProcessingContext

logger: TrailmarkLogger = get_logger(__name__)


def _eligible_end(lines: Sequence[str], no_divider: bool) -> int:
    if no_divider:
        return len(lines)
    for i, line in enumerate(lines):
        if is_divider(line):
            return i
    return len(lines)


def _title_end(lines: Sequence[str], end: int) -> int:
    """Return the index of the first blank line after the title paragraph (``end`` if none)."""
    i = 0
    while i < end and is_blank(lines[i]):
        i += 1
    while i < end and not is_blank(lines[i]):
        i += 1
    return i


def locate_block(
    text: str,
    *,
    separators: str = DEFAULT_SEPARATORS,
    no_divider: bool = False,
    whole_input: bool = False,
) -> DocumentView:
    """Split ``text`` into body, trailer block and tail.

    Args:
        text (str): The full document.
        separators (str): Accepted key/value separator characters.
        no_divider (bool): Ignore ``---`` divider lines.
        whole_input (bool): Use the whole eligible region as the block.

    Returns:
        DocumentView: The split. ``has_block`` is False when no block qualifies.
    """
    lines: tuple[str, ...] = tuple(split_lines(text))
    eligible_end: int = _eligible_end(lines, no_divider)
    divider_consumed: bool = eligible_end < len(lines)
    newline: str = detect_newline(lines)

    content_end: int = eligible_end
    while content_end > 0 and is_blank(lines[content_end - 1]):
        content_end -= 1

    def view(start: int, end: int) -> DocumentView:
        return DocumentView(
            lines=lines,
            block_start=start,
            block_end=end,
            eligible_end=eligible_end,
            divider_consumed=divider_consumed,
            newline=newline,
        )

    if whole_input:
        return view(0, content_end)

    is_token: list[bool] = [parse_token(line, separators) is not None for line in lines[:content_end]]

    title_end: int = _title_end(lines, content_end)
    start: int = content_end
    i: int = content_end - 1
    while i >= title_end and not is_blank(lines[i]):
        line: str = lines[i]
        qualifies: bool = (
            is_token[i] or starts_with_whitespace(line) or (i > 0 and is_token[i - 1])
        )
        if not qualifies:
            logger.trace("Line %d is neither a token nor a continuation; no block", i + 1)
            return view(content_end, content_end)
        start = i
        i -= 1

    if not any(is_token[start:content_end]):
        logger.trace("No trailer token in trailing run; no block")
        return view(content_end, content_end)

    return view(start, content_end)


class LocatorStep(BaseStep):
    """Locate the trailer block and record the document split.

    Axes written:
      - locate

    Sets:
      - LocateStatus: {FOUND, WHOLE_INPUT, NOT_FOUND}

    Args:
        halt_without_block (bool): Halt the pipeline when no block is found
            (used when nothing downstream needs to run on an empty block).
    """

    def __init__(self, *, halt_without_block: bool = False) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.LOCATE,
            axes_written=(Axis.LOCATE,),
        )
        self.halt_without_block = halt_without_block

    def run(self, ctx: ProcessingContext) -> None:
        """Split ``ctx.text`` and set ``ctx.document``."""
        doc: DocumentView = locate_block(
            ctx.text,
            separators=ctx.separators,
            no_divider=ctx.options.no_divider,
            whole_input=ctx.options.whole_input,
        )
        ctx.document = doc
        if ctx.options.whole_input:
            ctx.status.locate = LocateStatus.WHOLE_INPUT
        elif doc.has_block:
            ctx.status.locate = LocateStatus.FOUND
        else:
            ctx.status.locate = LocateStatus.NOT_FOUND
        logger.debug(
            "Block lines [%d:%d) of %d (divider: %s)",
            doc.block_start,
            doc.block_end,
            len(doc.lines),
            doc.divider_consumed,
        )
        if self.halt_without_block and not doc.has_block:
            ctx.request_halt("no-block", self)
