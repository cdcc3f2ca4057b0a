# topmark:header:start
#
#   project      : Trailmark
#   file         : runner.py
#   file_relpath : src/trailmark/pipeline/runner.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run a Trailmark pipeline for a single document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.pipeline.context import ProcessingContext
    from trailmark.pipeline.steps.base import BaseStep

logger: TrailmarkLogger = get_logger(__name__)


def run(ctx: ProcessingContext, steps: Sequence[BaseStep]) -> ProcessingContext:
    """Execute the pipeline sequentially.

    Args:
        ctx (ProcessingContext): Mutable processing context.
        steps (Sequence[BaseStep]): Ordered sequence of pipeline steps.
            Each step takes and returns a context.

    Returns:
        ProcessingContext: The final processing context after all steps have run.
    """
    logger.trace("Running %d step(s) with options %s", len(steps), ctx.options)
    for step in steps:
        ctx = step(ctx)
    logger.debug("Pipeline finished: %s", ctx.status)
    return ctx
