# topmark:header:start
#
#   project      : Trailmark
#   file         : test_parser.py
#   file_relpath : tests/pipeline/steps/test_parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the line parser: trailers, continuations and pass-through lines."""

from __future__ import annotations

from tests.conftest import SOB_REGISTRY_DATA, mark_pipeline, make_registry
from trailmark.config.registry import KeyRegistry, default_registry
from trailmark.pipeline.context import ProcessingContext
from trailmark.pipeline.model import BlockItem, ExistingTrailer, PassThroughLine
from trailmark.pipeline.status import ParseStatus
from trailmark.pipeline.steps.locator import LocatorStep
from trailmark.pipeline.steps.parser import ParserStep, parse_block


@mark_pipeline
def test_tokens_get_positions_and_canonical_keys() -> None:
    registry: KeyRegistry = make_registry(SOB_REGISTRY_DATA)
    items: list[BlockItem] = parse_block(["sob: A\n", "Acked-by = B\n"], registry)

    assert items == [
        ExistingTrailer(
            key="sob",
            separator=":",
            value="A",
            canonical_key="Signed-off-by",
            position=0,
            raw_lines=("sob: A",),
        ),
        ExistingTrailer(
            key="Acked-by",
            separator="=",
            value="B",
            canonical_key="Acked-by",
            position=1,
            raw_lines=("Acked-by = B",),
        ),
    ]


@mark_pipeline
def test_whitespace_led_line_continues_the_open_trailer() -> None:
    items: list[BlockItem] = parse_block(
        ["Key: first\n", "   second\n", "\tthird\n"], default_registry()
    )

    assert len(items) == 1
    trailer = items[0]
    assert isinstance(trailer, ExistingTrailer)
    assert trailer.folded
    assert trailer.value == "first\n   second\n\tthird"
    assert trailer.raw_lines == ("Key: first", "   second", "\tthird")


@mark_pipeline
def test_non_token_line_after_trailer_is_folded() -> None:
    items: list[BlockItem] = parse_block(["Key: v", "free text"], default_registry())

    assert len(items) == 1
    assert isinstance(items[0], ExistingTrailer)
    assert items[0].value == "v\nfree text"


@mark_pipeline
def test_pass_through_lines_and_blank_lines() -> None:
    items: list[BlockItem] = parse_block(
        ["free text\n", "Key: v\n", "\n", "  indented\n"], default_registry()
    )

    assert isinstance(items[0], PassThroughLine) and items[0].text == "free text"
    assert isinstance(items[1], ExistingTrailer) and not items[1].folded
    assert items[2] == PassThroughLine("")
    # A blank line closes the open trailer; the indented line parses on its own.
    assert items[3] == PassThroughLine("  indented")


@mark_pipeline
def test_legacy_cherry_pick_keeps_its_raw_key() -> None:
    items: list[BlockItem] = parse_block(
        ["(cherry picked from commit abc)\n"], make_registry(SOB_REGISTRY_DATA)
    )

    trailer = items[0]
    assert isinstance(trailer, ExistingTrailer)
    assert trailer.is_legacy_cc
    assert trailer.canonical_key == "(cherry picked from commit"
    assert trailer.value == "abc)"


@mark_pipeline
def test_parser_step_sets_items_and_status() -> None:
    ctx = ProcessingContext(text="T\n\nKey: v\n")
    for step in (LocatorStep(), ParserStep()):
        ctx = step(ctx)

    assert ctx.status.parse is ParseStatus.PARSED
    assert [t.key for t in ctx.trailers] == ["Key"]

    empty = ProcessingContext(text="T\n")
    for step in (LocatorStep(), ParserStep()):
        empty = step(empty)
    assert empty.status.parse is ParseStatus.EMPTY
    assert empty.items == []


@mark_pipeline
def test_parser_step_skips_without_document() -> None:
    ctx: ProcessingContext = ParserStep()(ProcessingContext(text="T\n\nKey: v\n"))

    assert ctx.status.parse is ParseStatus.PENDING
