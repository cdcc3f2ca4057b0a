# topmark:header:start
#
#   project      : Trailmark
#   file         : strategies_trailmark.py
#   file_relpath : tests/strategies_trailmark.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

# pyright: strict

"""Hypothesis strategies for generating trailer blocks and trailer specs.

Keys and values are drawn from tiny alphabets so that collisions (the
interesting case for the existence policies) are frequent.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hypothesis import strategies as st

from trailmark.config.policy import ExistsPolicy, MissingPolicy, Placement, TrailerPolicy
from trailmark.pipeline.model import BlockItem, ExistingTrailer, PassThroughLine

Draw = Callable[[st.SearchStrategy[Any]], Any]

KEYS: tuple[str, ...] = ("Signed-off-by", "Acked-by", "Fixes")
VALUES: tuple[str, ...] = ("a", "b", "c")
LINE_ENDINGS: tuple[str, ...] = ("\n", "\r\n")


@st.composite
def s_block_items(draw: Draw, max_size: int = 6) -> list[BlockItem]:
    """A small sequence of existing trailers, with the odd pass-through line."""
    size: int = draw(st.integers(min_value=0, max_value=max_size))
    items: list[BlockItem] = []
    position = 0
    for _ in range(size):
        if draw(st.integers(min_value=0, max_value=5)) == 0:
            items.append(PassThroughLine(draw(st.sampled_from(("note", "")))))
            continue
        key: str = draw(st.sampled_from(KEYS))
        value: str = draw(st.sampled_from(VALUES))
        items.append(
            ExistingTrailer(
                key=key,
                separator=":",
                value=value,
                canonical_key=key,
                position=position,
                raw_lines=(f"{key}: {value}",),
            )
        )
        position += 1
    return items


def s_policy() -> st.SearchStrategy[TrailerPolicy]:
    """Every Placement x ExistsPolicy x MissingPolicy combination."""
    return st.builds(
        TrailerPolicy,
        where=st.sampled_from(list(Placement)),
        if_exists=st.sampled_from(list(ExistsPolicy)),
        if_missing=st.sampled_from(list(MissingPolicy)),
    )


def s_new_trailer() -> st.SearchStrategy[ExistingTrailer]:
    """A trailer as the merge engine builds it for a spec (no position)."""
    return st.builds(
        lambda key, value: ExistingTrailer(key=key, separator=":", value=value, canonical_key=key),  # type: ignore[misc]
        st.sampled_from(KEYS),
        st.sampled_from(VALUES),
    )


@st.composite
def s_message(draw: Draw) -> tuple[str, str]:
    """A commit-message-like document and its line ending."""
    nl: str = draw(st.sampled_from(LINE_ENDINGS))
    lines: list[str] = [draw(st.sampled_from(("Fix bug", "Add feature", "Refactor")))]
    if draw(st.booleans()):
        lines += ["", draw(st.sampled_from(("Some prose.", "More details: here", "  indented")))]
    trailers: list[str] = draw(
        st.lists(
            st.builds(
                lambda k, v, sep: f"{k}{sep} {v}",  # type: ignore[misc]
                st.sampled_from(KEYS),
                st.sampled_from(VALUES),
                st.sampled_from((":", "=")),
            ),
            max_size=4,
        )
    )
    if trailers:
        lines += ["", *trailers]
    text: str = nl.join(lines)
    if draw(st.booleans()):
        text += nl
    return text, nl
