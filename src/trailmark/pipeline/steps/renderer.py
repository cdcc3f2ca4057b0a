# topmark:header:start
#
#   project      : Trailmark
#   file         : renderer.py
#   file_relpath : src/trailmark/pipeline/steps/renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Renderer step for the Trailmark pipeline.

Reassembles the output from the document split and the merged block entries:

* full document: body verbatim, then the block, then the tail verbatim;
* trailers only: one normalized ``key<sep> value`` line per trailer.

Untouched entries are re-emitted from their original lines; entries added by
the merge engine are rendered with their key's separator. When nothing in the
block changed, the original block lines are emitted byte-for-byte.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.pipeline.model import ExistingTrailer
from trailmark.pipeline.status import Axis, RenderStatus
from trailmark.pipeline.steps.base import BaseStep
from trailmark.pipeline.tokens import is_blank, strip_line_ending, unfold_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.config.options import ProcessOptions
    from trailmark.pipeline.context import ProcessingContext
    from trailmark.pipeline.model import BlockItem
    from trailmark.pipeline.views import DocumentView

logger: TrailmarkLogger = get_logger(__name__)


def format_trailer(key: str, separator: str, value: str) -> str:
    """Return the normalized text of a trailer (``key<sep> value``).

    An empty value renders as ``key<sep>`` without trailing space.
    """
    return f"{key}{separator} {value}".rstrip()


def is_empty_trailer(trailer: ExistingTrailer) -> bool:
    """True when the trailer's value is empty once unfolded."""
    return not trailer.is_legacy_cc and not unfold_value(trailer.value).strip()


def render_trailer(trailer: ExistingTrailer, *, unfold: bool, normalize: bool) -> list[str]:
    """Return the physical lines (without line endings) of one trailer.

    Args:
        trailer (ExistingTrailer): The entry to render.
        unfold (bool): Join a folded value onto one line.
        normalize (bool): Re-render untouched entries as ``key<sep> value``.

    Returns:
        list[str]: One or more lines.
    """
    if trailer.is_legacy_cc and trailer.raw_lines:
        return list(trailer.raw_lines)
    if not trailer.is_new and not normalize and not (unfold and trailer.folded):
        return list(trailer.raw_lines)
    value: str = unfold_value(trailer.value) if unfold else trailer.value
    return format_trailer(trailer.key, trailer.separator, value).split("\n")


def render_block_lines(items: Sequence[BlockItem], options: ProcessOptions) -> list[str]:
    """Return the block's physical lines (without line endings).

    Pass-through lines are dropped in ``only_trailers`` mode; empty trailers are
    dropped with ``trim_empty``.
    """
    lines: list[str] = []
    for item in items:
        if isinstance(item, ExistingTrailer):
            if options.trim_empty and is_empty_trailer(item):
                logger.trace("Dropping empty trailer %s", item.key)
                continue
            lines.extend(
                render_trailer(item, unfold=options.unfold, normalize=options.only_trailers)
            )
        elif not options.only_trailers:
            lines.append(item.text)
    return lines


def render_document(doc: DocumentView, items: Sequence[BlockItem], options: ProcessOptions) -> str:
    """Render the full output text for ``doc`` with the block replaced by ``items``."""
    nl: str = doc.newline
    block_lines: list[str] = render_block_lines(items, options)

    if options.only_trailers:
        return "".join(f"{line}{nl}" for line in block_lines)

    if block_lines == [strip_line_ending(line) for line in doc.block]:
        return "".join(doc.lines)

    body: str = "".join(doc.body)
    tail: str = "".join(doc.tail)
    block: str = "".join(f"{line}{nl}" for line in block_lines)

    if block and not doc.has_block and body:
        # Separate a new block from the body text by exactly one blank line.
        if not body.endswith(("\n", "\r")):
            body += nl
        if not is_blank(doc.body[-1]):
            body += nl

    if block and not tail and doc.lines and not doc.ends_with_newline:
        block = block[: -len(nl)]

    return body + block + tail


def render(ctx: ProcessingContext) -> str:
    """Render the output for a processed context.

    Args:
        ctx (ProcessingContext): Context after locating, parsing and merging.

    Returns:
        str: The rewritten document, or the trailer lines only.
    """
    assert ctx.document is not None
    return render_document(ctx.document, ctx.result_items, ctx.options)


class RendererStep(BaseStep):
    """Render the output text.

    Axes written:
      - render

    Sets:
      - RenderStatus: {RENDERED, TRAILERS_ONLY}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.RENDER,
            axes_written=(Axis.RENDER,),
        )

    def may_proceed(self, ctx: ProcessingContext) -> bool:
        """Run once the locator produced a document view."""
        return not ctx.is_halted and ctx.document is not None

    def run(self, ctx: ProcessingContext) -> None:
        """Set ``ctx.output``."""
        ctx.output = render(ctx)
        ctx.status.render = (
            RenderStatus.TRAILERS_ONLY if ctx.options.only_trailers else RenderStatus.RENDERED
        )
