# topmark:header:start
#
#   project      : Trailmark
#   file         : merger.py
#   file_relpath : src/trailmark/pipeline/steps/merger.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Merger step for the Trailmark pipeline.

Applies the caller's trailer specs, followed by the registry's auto-added
trailers (unless ``only_input`` is set), to the parsed block entries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.pipeline.merge import merge
from trailmark.pipeline.status import Axis, MergeStatus
from trailmark.pipeline.steps.base import BaseStep

if TYPE_CHECKING:
    from trailmark.config.logging import TrailmarkLogger
    from trailmark.pipeline.context import ProcessingContext
    from trailmark.pipeline.model import NewTrailerSpec

logger: TrailmarkLogger = get_logger(__name__)


class MergerStep(BaseStep):
    """Merge new trailers into the block.

    Axes written:
      - merge

    Sets:
      - MergeStatus: {UNCHANGED, CHANGED}
    """

    def __init__(self) -> None:
        super().__init__(
            name=self.__class__.__name__,
            primary_axis=Axis.MERGE,
            axes_written=(Axis.MERGE,),
        )

    def may_proceed(self, ctx: ProcessingContext) -> bool:
        """Run once the locator produced a document view."""
        return not ctx.is_halted and ctx.document is not None

    def run(self, ctx: ProcessingContext) -> None:
        """Compute ``ctx.merged`` from ``ctx.items`` and the specs.

        Raises:
            MalformedSpecError: Propagated from the merge engine.
        """
        specs: list[NewTrailerSpec] = list(ctx.specs)
        if not ctx.options.only_input:
            auto: list[NewTrailerSpec] = ctx.registry.auto_add_specs()
            if auto:
                logger.debug("Adding %d configured trailer(s)", len(auto))
            specs.extend(auto)

        ctx.merged = merge(ctx.items, specs, ctx.registry)
        ctx.status.merge = (
            MergeStatus.UNCHANGED if ctx.merged == ctx.items else MergeStatus.CHANGED
        )
