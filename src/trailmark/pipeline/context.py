# topmark:header:start
#
#   project      : Trailmark
#   file         : context.py
#   file_relpath : src/trailmark/pipeline/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Processing context for the Trailmark pipeline.

A `ProcessingContext` carries the complete, mutable state of one document as
it flows through the steps: the input text and options, the frozen key
registry, the caller's trailer specs, per-axis status, and the intermediate
results written by each step.

Sections:
    FlowControl:
        Lets a step request early, graceful termination of the pipeline.

    ProcessingContext:
        Per-document state shared by the steps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.config.options import ProcessOptions
from trailmark.config.registry import KeyRegistry, default_registry
from trailmark.pipeline.model import ExistingTrailer, trailers_of
from trailmark.pipeline.status import ProcessingStatus

if TYPE_CHECKING:
    from trailmark.config.logging import TrailmarkLogger
    from trailmark.pipeline.model import BlockItem, NewTrailerSpec
    from trailmark.pipeline.steps.base import BaseStep
    from trailmark.pipeline.views import DocumentView

logger: TrailmarkLogger = get_logger(__name__)

__all__: list[str] = [
    "FlowControl",
    "ProcessingContext",
]


@dataclass
class FlowControl:
    """Execution flow control for the current document."""

    halt: bool = False
    reason: str = ""  # short code, e.g. "no-block"
    at_step: str = ""  # step name that requested the halt


@dataclass
class ProcessingContext:
    """Per-document state for the Trailmark pipeline.

    Attributes:
        text (str): The input document.
        options (ProcessOptions): Options of this run.
        registry (KeyRegistry): Key registry used for alias and default resolution.
        specs (list[NewTrailerSpec]): Trailers to merge, in application order.
        status (ProcessingStatus): Per-axis status.
        flow (FlowControl): Early termination flags.
        steps (list[BaseStep]): Steps that have been invoked, in order.
        document (DocumentView | None): Body/block/tail split (locator).
        items (list[BlockItem]): Parsed block entries (parser).
        merged (list[BlockItem] | None): Block entries after merging (merger).
        output (str | None): Rendered document (renderer).
    """

    text: str
    options: ProcessOptions = field(default_factory=ProcessOptions)
    registry: KeyRegistry = field(default_factory=default_registry)
    specs: list[NewTrailerSpec] = field(default_factory=lambda: [])
    status: ProcessingStatus = field(default_factory=ProcessingStatus)
    flow: FlowControl = field(default_factory=FlowControl)
    steps: list[BaseStep] = field(default_factory=lambda: [])

    document: DocumentView | None = None
    items: list[BlockItem] = field(default_factory=lambda: [])
    merged: list[BlockItem] | None = None
    output: str | None = None

    @property
    def is_halted(self) -> bool:
        """True once a step requested the pipeline to stop."""
        return self.flow.halt

    @property
    def separators(self) -> str:
        """Separator characters accepted in this document."""
        return self.registry.separators

    @property
    def result_items(self) -> list[BlockItem]:
        """Block entries after merging, or the parsed ones if no merge ran."""
        return self.merged if self.merged is not None else self.items

    @property
    def trailers(self) -> list[ExistingTrailer]:
        """Trailer entries of `result_items`, in order."""
        return trailers_of(self.result_items)

    def request_halt(self, reason: str, at_step: BaseStep) -> None:
        """Ask the runner to skip the remaining steps for this document."""
        logger.debug("Halt requested by %s: %s", at_step.name, reason)
        self.flow.halt = True
        self.flow.reason = reason
        self.flow.at_step = at_step.name
