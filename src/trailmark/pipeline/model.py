# topmark:header:start
#
#   project      : Trailmark
#   file         : model.py
#   file_relpath : src/trailmark/pipeline/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Value types flowing through the trailer pipeline.

Types:
    TrailerToken: one parsed ``key<sep>value`` line.
    ExistingTrailer: a trailer entry of the block, possibly spanning folded
        continuation lines. Entries added by the merge engine are
        ``ExistingTrailer`` instances without an original position.
    PassThroughLine: an opaque block line that belongs to no trailer.
    NewTrailerSpec: a caller-supplied trailer to merge, with optional policies.

All types are frozen: the merge engine builds new sequences instead of
editing entries in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from trailmark.config.policy import ExistsPolicy, MissingPolicy, Placement


@dataclass(frozen=True, slots=True)
class TrailerToken:
    """A single parsed trailer line.

    Attributes:
        key (str): Key as written in the line.
        separator (str): Separator character found after the key.
        value (str): Trimmed value text.
        raw_line (str): The physical line without its line ending.
        is_legacy_cc (bool): True for a legacy ``(cherry picked from commit ...)`` note.
    """

    key: str
    separator: str
    value: str
    raw_line: str
    is_legacy_cc: bool = False


@dataclass(frozen=True, slots=True)
class ExistingTrailer:
    """A trailer entry of the block.

    Attributes:
        key (str): Key as written (canonical name for entries added by a merge).
        separator (str): Separator used between key and value.
        value (str): Value; folded continuation lines are joined with ``\\n``.
        canonical_key (str): Key after alias resolution.
        position (int | None): 0-based index among the trailers of the original
            block, or ``None`` for entries added by a merge.
        raw_lines (tuple[str, ...]): Original physical lines (no line endings);
            empty for entries added by a merge.
        folded (bool): True when the value spans continuation lines.
        is_legacy_cc (bool): True for a legacy cherry-pick note.
    """

    key: str
    separator: str
    value: str
    canonical_key: str
    position: int | None = None
    raw_lines: tuple[str, ...] = ()
    folded: bool = False
    is_legacy_cc: bool = False

    @property
    def is_new(self) -> bool:
        """True for entries that did not come from the parsed document."""
        return self.position is None

    @property
    def token(self) -> TrailerToken:
        """Return the head line of this entry as a `TrailerToken`."""
        return TrailerToken(
            key=self.key,
            separator=self.separator,
            value=self.value.split("\n", 1)[0],
            raw_line=self.raw_lines[0] if self.raw_lines else "",
            is_legacy_cc=self.is_legacy_cc,
        )

    def has_key(self, canonical_key: str) -> bool:
        """Return True if this entry's canonical key equals ``canonical_key`` (case-insensitive)."""
        return self.canonical_key.casefold() == canonical_key.casefold()

    def same_as(self, canonical_key: str, value: str) -> bool:
        """Return True if this entry carries the same canonical key and value."""
        return self.has_key(canonical_key) and self.value == value


@dataclass(frozen=True, slots=True)
class PassThroughLine:
    """A block line that is not part of any trailer (kept in place, never interpreted).

    Attributes:
        text (str): The physical line without its line ending.
    """

    text: str


BlockItem = Union[ExistingTrailer, PassThroughLine]


@dataclass(frozen=True, slots=True)
class NewTrailerSpec:
    """A trailer the caller wants merged into the block.

    Policies left as ``None`` are resolved through the key registry.

    Attributes:
        key (str): Key or alias.
        value (str | None): Value; ``None`` is rejected before merging.
        where (Placement | None): Insertion point override.
        if_exists (ExistsPolicy | None): Action override when the key exists.
        if_missing (MissingPolicy | None): Action override when the key is absent.
    """

    key: str
    value: str | None
    where: Placement | None = None
    if_exists: ExistsPolicy | None = None
    if_missing: MissingPolicy | None = None


def trailers_of(items: list[BlockItem] | tuple[BlockItem, ...]) -> list[ExistingTrailer]:
    """Return only the trailer entries of a block, in order."""
    return [item for item in items if isinstance(item, ExistingTrailer)]
