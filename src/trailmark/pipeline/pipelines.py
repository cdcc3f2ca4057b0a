# topmark:header:start
#
#   project      : Trailmark
#   file         : pipelines.py
#   file_relpath : src/trailmark/pipeline/pipelines.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Named pipeline variants for Trailmark (immutable, typed step sequences).

Overview
--------
- ``PARSE``: locate → parse (halts after locate when there is no block)
- ``PROCESS``: locate → parse → merge → render

Notes:
* Pipelines are immutable (``Final[tuple[BaseStep, ...]]``) and steps are
  instantiated objects (not functions). Steps hold no per-document state, so
  one instance serves every document.
* Steps only write to the status axes they declare.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from trailmark.pipeline.steps.base import BaseStep

from .steps import locator, merger, parser, renderer

# Parse only; stops after the locator when the document has no block.
PARSE_PIPELINE: Final[tuple[BaseStep, ...]] = (
    locator.LocatorStep(halt_without_block=True),  # Find the trailer block
    parser.ParserStep(),  # Parse block lines into entries
)

PROCESS_PIPELINE: Final[tuple[BaseStep, ...]] = (
    locator.LocatorStep(),  # Find the trailer block
    parser.ParserStep(),  # Parse block lines into entries
    merger.MergerStep(),  # Apply new trailers per policy
    renderer.RendererStep(),  # Reassemble the output text
)


class Pipeline(tuple[BaseStep, ...], Enum):
    """Available execution pipelines, mapped to their step sequences."""

    PARSE = PARSE_PIPELINE
    PROCESS = PROCESS_PIPELINE

    @property
    def steps(self) -> tuple[BaseStep, ...]:
        """Return the instantiated, ordered step sequence for this pipeline."""
        return self.value
