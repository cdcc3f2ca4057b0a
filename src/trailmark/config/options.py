# topmark:header:start
#
#   project      : Trailmark
#   file         : options.py
#   file_relpath : src/trailmark/config/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-invocation processing options.

`ProcessOptions` is the frozen set of switches that shape one run of the
pipeline. It is independent of the key registry: the registry says *what*
each key means, the options say *how* a document is rewritten.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class ProcessOptions:
    """Switches for one processing run.

    Attributes:
        in_place (bool): Rewrite input files instead of printing (honored by the CLI only).
        trim_empty (bool): Drop trailers whose value is empty after unfolding.
        only_trailers (bool): Emit the trailer lines only, without body and tail.
        only_input (bool): Ignore per-key configured policies and auto-added trailers.
        unfold (bool): Join folded (multi-line) values onto one line.
        no_divider (bool): Do not treat a ``---`` line as the end of the trailer region.
        whole_input (bool): Treat all eligible input as the trailer block.
    """

    in_place: bool = False
    trim_empty: bool = False
    only_trailers: bool = False
    only_input: bool = False
    unfold: bool = False
    no_divider: bool = False
    whole_input: bool = False

    @classmethod
    def for_parse(cls, **overrides: bool) -> ProcessOptions:
        """Return the options used to list trailers (only trailers, only input, unfolded)."""
        return replace(cls(only_trailers=True, only_input=True, unfold=True), **overrides)
