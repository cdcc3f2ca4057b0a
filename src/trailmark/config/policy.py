# topmark:header:start
#
#   project      : Trailmark
#   file         : policy.py
#   file_relpath : src/trailmark/config/policy.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Policy model for Trailmark (global and per-key).

This module defines the **policy layer** that decides where a new trailer goes
and what happens when the block already does, or does not, hold its key.

Design:
    * ``Placement``, ``ExistsPolicy`` and ``MissingPolicy`` are closed enums.
      Their ``.value`` is the keyword written in TOML and on the command line.
    * ``MutableTrailerPolicy`` uses tri-state options (``X | None``) to
      represent explicit values vs. *unset*. This enables non-destructive merges
      and inheritance when composing multiple sources
      (defaults → user → project → CLI).
    * ``TrailerPolicy`` is the fully-resolved, immutable runtime view, so the
      merge engine never branches on ``None``.
    * ``MutableTrailerPolicy.resolve(base)`` fills unset fields from ``base``.

TOML mapping:

    [trailers]
    where = "end"
    if_exists = "addIfDifferent"
    if_missing = "add"

    [keys.sign]
    where = "after"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from trailmark.config.keys import Toml
from trailmark.core.enum_mixins import EnumIntrospectionMixin, KeyedStrEnum
from trailmark.core.errors import ConfigValueError

if TYPE_CHECKING:
    from collections.abc import Mapping

_KS = TypeVar("_KS", bound=KeyedStrEnum)


class Placement(EnumIntrospectionMixin, KeyedStrEnum):
    """Where a new trailer is inserted into the block.

    ``AFTER``/``BEFORE`` are relative to the existing trailers with the same key;
    with no such trailer they degrade to ``END``/``START`` respectively.
    """

    END = ("end", "at the end of the block", ("at_end",))
    START = ("start", "at the start of the block", ("at_start",))
    AFTER = ("after", "after the last trailer with the same key", ("after_matching",))
    BEFORE = ("before", "before the first trailer with the same key", ("before_matching",))


class ExistsPolicy(EnumIntrospectionMixin, KeyedStrEnum):
    """What to do when at least one trailer with the same key already exists."""

    ADD_IF_DIFFERENT = (
        "addIfDifferent",
        "add unless the same key and value exist anywhere in the block",
    )
    ADD_IF_DIFFERENT_NEIGHBOR = (
        "addIfDifferentNeighbor",
        "add unless the neighboring trailer has the same key and value",
    )
    ADD = ("add", "always add")
    REPLACE = ("replace", "replace all trailers with the same key")
    DO_NOTHING = ("doNothing", "leave the block unchanged")


class MissingPolicy(EnumIntrospectionMixin, KeyedStrEnum):
    """What to do when no trailer with the same key exists."""

    ADD = ("add", "add the trailer")
    DO_NOTHING = ("doNothing", "leave the block unchanged")


def parse_policy_value(enum_cls: type[_KS], raw: object, *, where: str) -> _KS | None:
    """Parse a TOML/CLI keyword into a policy enum member.

    Args:
        enum_cls (type[_KS]): Policy enum to parse into.
        raw (object): Raw value; ``None`` means unset.
        where (str): Human-readable location used in error messages.

    Returns:
        _KS | None: The parsed member, or ``None`` when ``raw`` is ``None``.

    Raises:
        ConfigValueError: If ``raw`` is not a string or not a known keyword.
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ConfigValueError(f"{where}: expected a string, got {raw!r}")
    member: _KS | None = enum_cls.parse(raw)
    if member is None:
        raise ConfigValueError(
            f"{where}: invalid value '{raw}' (expected one of: {', '.join(enum_cls.keys())})"
        )
    return member


@dataclass(frozen=True, slots=True)
class TrailerPolicy:
    """Immutable, fully-resolved policy applied to one new trailer.

    Attributes:
        where (Placement): Insertion point.
        if_exists (ExistsPolicy): Action when the key is already present.
        if_missing (MissingPolicy): Action when the key is absent.
    """

    where: Placement = Placement.END
    if_exists: ExistsPolicy = ExistsPolicy.ADD_IF_DIFFERENT
    if_missing: MissingPolicy = MissingPolicy.ADD

    def thaw(self) -> MutableTrailerPolicy:
        """Return a mutable builder initialized from this frozen policy."""
        return MutableTrailerPolicy(
            where=self.where,
            if_exists=self.if_exists,
            if_missing=self.if_missing,
        )


@dataclass
class MutableTrailerPolicy:
    """Mutable builder for `TrailerPolicy`, suitable for config loading/merging.

    This class is merged in a **last-wins** manner when reading multiple config files.

    Attributes:
        where (Placement | None): See `TrailerPolicy`. `None` means "inherit".
        if_exists (ExistsPolicy | None): See `TrailerPolicy`. `None` means "inherit".
        if_missing (MissingPolicy | None): See `TrailerPolicy`. `None` means "inherit".
    """

    where: Placement | None = None
    if_exists: ExistsPolicy | None = None
    if_missing: MissingPolicy | None = None

    def merge_with(self, other: MutableTrailerPolicy) -> MutableTrailerPolicy:
        """Return a new policy by applying ``other`` over ``self`` (last-wins).

        ``None`` fields in ``other`` do not override explicit values in ``self``.
        """
        return MutableTrailerPolicy(
            where=other.where if other.where is not None else self.where,
            if_exists=other.if_exists if other.if_exists is not None else self.if_exists,
            if_missing=other.if_missing if other.if_missing is not None else self.if_missing,
        )

    def resolve(self, base: TrailerPolicy) -> TrailerPolicy:
        """Resolve tri-state fields against a base frozen policy.

        Args:
            base (TrailerPolicy): Base policy that provides defaults for unset fields.

        Returns:
            TrailerPolicy: A fully-resolved immutable policy.
        """
        return TrailerPolicy(
            where=base.where if self.where is None else self.where,
            if_exists=base.if_exists if self.if_exists is None else self.if_exists,
            if_missing=base.if_missing if self.if_missing is None else self.if_missing,
        )

    def freeze(self) -> TrailerPolicy:
        """Freeze to a concrete `TrailerPolicy` using the built-in defaults for unset fields."""
        return self.resolve(TrailerPolicy())

    def is_empty(self) -> bool:
        """Return True when no field is explicitly set."""
        return self.where is None and self.if_exists is None and self.if_missing is None

    @classmethod
    def from_toml_table(
        cls,
        tbl: Mapping[str, Any] | None,
        *,
        where: str = "trailers",
    ) -> MutableTrailerPolicy:
        """Create a MutableTrailerPolicy from a TOML table mapping.

        Unspecified keys become ``None`` (inherit from base at freeze time).

        Args:
            tbl (Mapping[str, Any] | None): Table with ``where``/``if_exists``/``if_missing``.
            where (str): Table name used in error messages.

        Returns:
            MutableTrailerPolicy: Parsed policy.
        """
        if not tbl:
            return cls()
        return cls(
            where=parse_policy_value(
                Placement, tbl.get(Toml.KEY_WHERE), where=f"[{where}] {Toml.KEY_WHERE}"
            ),
            if_exists=parse_policy_value(
                ExistsPolicy,
                tbl.get(Toml.KEY_IF_EXISTS),
                where=f"[{where}] {Toml.KEY_IF_EXISTS}",
            ),
            if_missing=parse_policy_value(
                MissingPolicy,
                tbl.get(Toml.KEY_IF_MISSING),
                where=f"[{where}] {Toml.KEY_IF_MISSING}",
            ),
        )

    def to_toml_table(self) -> dict[str, Any]:
        """Serialize only explicitly set keys to a TOML-friendly dict."""
        out: dict[str, Any] = {}
        if self.where is not None:
            out[Toml.KEY_WHERE] = self.where.key
        if self.if_exists is not None:
            out[Toml.KEY_IF_EXISTS] = self.if_exists.key
        if self.if_missing is not None:
            out[Toml.KEY_IF_MISSING] = self.if_missing.key
        return out
