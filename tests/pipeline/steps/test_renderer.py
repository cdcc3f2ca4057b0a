# topmark:header:start
#
#   project      : Trailmark
#   file         : test_renderer.py
#   file_relpath : tests/pipeline/steps/test_renderer.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the renderer: byte-for-byte preservation and normalized output."""

from __future__ import annotations

from tests.conftest import mark_pipeline, parametrize
from trailmark.config.options import ProcessOptions
from trailmark.config.registry import default_registry
from trailmark.pipeline.model import BlockItem, ExistingTrailer, PassThroughLine
from trailmark.pipeline.steps.locator import locate_block
from trailmark.pipeline.steps.parser import parse_block
from trailmark.pipeline.steps.renderer import (
    format_trailer,
    is_empty_trailer,
    render_block_lines,
    render_document,
    render_trailer,
)
from trailmark.pipeline.views import DocumentView

NEW = ExistingTrailer(key="Signed-off-by", separator=":", value="B", canonical_key="Signed-off-by")


def _render(text: str, extra: list[BlockItem], options: ProcessOptions | None = None) -> str:
    opts: ProcessOptions = options or ProcessOptions()
    doc: DocumentView = locate_block(text)
    items: list[BlockItem] = parse_block(doc.block, default_registry()) + extra
    return render_document(doc, items, opts)


@parametrize(
    "key, sep, value, expected",
    [
        ("Key", ":", "v", "Key: v"),
        ("Key", "=", "v", "Key= v"),
        ("Key", ":", "", "Key:"),
    ],
)
def test_format_trailer(key: str, sep: str, value: str, expected: str) -> None:
    assert format_trailer(key, sep, value) == expected


@mark_pipeline
@parametrize(
    "text",
    [
        "Fix bug\n\nSigned-off-by:   A  \n  folded   \nAcked-by=x\n",
        "Fix bug\r\n\r\nKey = v\r\n\r\n",
        "Fix bug\n\nKey: v",
        "Fix bug\n\nprose only\n",
        "",
    ],
)
def test_unchanged_documents_are_reproduced_byte_for_byte(text: str) -> None:
    assert _render(text, []) == text


@mark_pipeline
def test_new_trailer_is_appended_with_document_newline() -> None:
    assert _render("T\r\n\r\nKey: v\r\n", [NEW]) == "T\r\n\r\nKey: v\r\nSigned-off-by: B\r\n"


@mark_pipeline
@parametrize(
    "text, expected",
    [
        ("Fix bug\n", "Fix bug\n\nSigned-off-by: B\n"),
        ("Fix bug\n\n\n", "Fix bug\n\nSigned-off-by: B\n\n\n"),
        ("Fix bug", "Fix bug\n\nSigned-off-by: B"),
        ("", "Signed-off-by: B\n"),
        ("\n", "Signed-off-by: B\n\n"),
    ],
)
def test_new_block_is_separated_from_the_body(text: str, expected: str) -> None:
    assert _render(text, [NEW]) == expected


@mark_pipeline
def test_block_is_inserted_before_divider_tail() -> None:
    text = "Subject\n\nBody.\n---\ndiff\n"
    assert _render(text, [NEW]) == "Subject\n\nBody.\n\nSigned-off-by: B\n---\ndiff\n"


@mark_pipeline
def test_only_trailers_normalizes_and_drops_pass_through() -> None:
    text = "T\n\n  note\nKey =  v\nOther:w\n  more\n"
    out: str = _render(text, [NEW], ProcessOptions(only_trailers=True))

    assert out == "Key= v\nOther: w\n  more\nSigned-off-by: B\n"


@mark_pipeline
def test_unfold_joins_folded_values() -> None:
    text = "T\n\nKey: a\n   b\n\tc\n"
    assert _render(text, [], ProcessOptions(unfold=True)) == "T\n\nKey: a b c\n"


@mark_pipeline
def test_trim_empty_drops_empty_trailers() -> None:
    text = "T\n\nEmpty:\nKey: v\n"
    assert _render(text, [], ProcessOptions(trim_empty=True)) == "T\n\nKey: v\n"


@mark_pipeline
def test_legacy_cherry_pick_is_verbatim_even_when_normalizing() -> None:
    legacy = "(cherry picked from commit abc)"
    items: list[BlockItem] = parse_block([legacy], default_registry())

    assert render_trailer(items[0], unfold=True, normalize=True) == [legacy]  # type: ignore[arg-type]
    assert not is_empty_trailer(items[0])  # type: ignore[arg-type]


@mark_pipeline
def test_render_block_lines_keeps_pass_through_text() -> None:
    items: list[BlockItem] = [PassThroughLine("  odd"), NEW]
    assert render_block_lines(items, ProcessOptions()) == ["  odd", "Signed-off-by: B"]
