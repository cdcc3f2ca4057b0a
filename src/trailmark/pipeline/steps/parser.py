# topmark:header:start
#
#   project      : Trailmark
#   file         : parser.py
#   file_relpath : src/trailmark/pipeline/steps/parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line parser step for the Trailmark pipeline.

Turns the block lines found by the locator into an ordered list of
`ExistingTrailer` and `PassThroughLine` entries:

* a whitespace-led line following an open trailer continues it;
* a token line opens a new trailer (next position index);
* any other non-blank line continues the open trailer, or is passed through
  when no trailer is open;
* a blank line is passed through and closes the open trailer.

Continuation lines are appended to the value with ``\\n`` and mark the
entry as folded.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.pipeline.model import ExistingTrailer, PassThroughLine
from trailmark.pipeline.status import Axis, ParseStatus
from trailmark.pipeline.steps.base import BaseStep
from trailmark.pipeline.tokens import (
    is_blank,
    parse_token,
    starts_with_whitespace,
    strip_line_ending,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.config.registry import KeyRegistry
    from trailmark.pipeline.context import ProcessingContext
    from trailmark.pipeline.model import BlockItem, TrailerToken

logger: TrailmarkLogger = get_logger(__name__)


def parse_block(lines: Iterable[str], registry: KeyRegistry) -> list[BlockItem]:
    """Parse block lines into trailer entries and pass-through lines.

    Args:
        lines (Iterable[str]): Block lines, with or without line endings.
        registry (KeyRegistry): Registry used for separators and canonical keys.

    Returns:
        list[BlockItem]: Entries in document order.
    """
    items: list[BlockItem] = []
    open_idx: int | None = None
    position: int = 0

    for line in lines:
        text: str = strip_line_ending(line)

        if is_blank(text):
            items.append(PassThroughLine(text))
            open_idx = None
            continue

        if open_idx is not None and starts_with_whitespace(text):
            items[open_idx] = _fold(items[open_idx], text)
            continue

        token: TrailerToken | None = parse_token(text, registry.separators)
        if token is not None:
            canonical: str = token.key if token.is_legacy_cc else registry.canonical(token.key)
            items.append(
                ExistingTrailer(
                    key=token.key,
                    separator=token.separator,
                    value=token.value,
                    canonical_key=canonical,
                    position=position,
                    raw_lines=(text,),
                    is_legacy_cc=token.is_legacy_cc,
                )
            )
            position += 1
            open_idx = len(items) - 1
        elif open_idx is not None:
            items[open_idx] = _fold(items[open_idx], text)
        else:
            items.append(PassThroughLine(text))

    return items


def _fold(item: BlockItem, continuation: str) -> ExistingTrailer:
    assert isinstance(item, ExistingTrailer)
    return replace(
        item,
        value=f"{item.value}\n{continuation}",
        raw_lines=(*item.raw_lines, continuation),
        folded=True,
    )


class ParserStep(BaseStep):
    """Parse the located block into entries.

    Axes written:
      - parse

    Sets:
      - ParseStatus: {PARSED, EMPTY}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.PARSE,
            axes_written=(Axis.PARSE,),
        )

    def may_proceed(self, ctx: ProcessingContext) -> bool:
        """Run once the locator produced a document view."""
        return not ctx.is_halted and ctx.document is not None

    def run(self, ctx: ProcessingContext) -> None:
        """Parse ``ctx.document.block`` into ``ctx.items``."""
        assert ctx.document is not None
        ctx.items = parse_block(ctx.document.block, ctx.registry)
        ctx.status.parse = ParseStatus.PARSED if ctx.trailers else ParseStatus.EMPTY
        logger.debug("Parsed %d entr(y/ies), %d trailer(s)", len(ctx.items), len(ctx.trailers))
