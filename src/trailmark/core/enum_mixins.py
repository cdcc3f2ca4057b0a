# topmark:header:start
#
#   project      : Trailmark
#   file         : enum_mixins.py
#   file_relpath : src/trailmark/core/enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Generic Enum utilities for Trailmark (typing-friendly, UI-agnostic).

Provided:
    - ``EnumIntrospectionMixin``:
        Adds ``.value_length`` (cached) to any Enum subclass for formatting.
    - ``KeyedStrEnum``:
        ``str`` enum whose ``.value`` is a stable machine key (as written in
        TOML and on the command line), with a human label and parse aliases.

Design:
    - Keep the functions *pure* and side-effect free.
    - Avoid bringing UI libraries (e.g. yachalk) into this module.

Example:
    ```python
    class Mode(KeyedStrEnum):
        KEEP = ("keep", "Keep the value", ("retain",))

    assert Mode.parse("RETAIN") is Mode.KEEP
    ```
"""

from __future__ import annotations

from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

_KS = TypeVar("_KS", bound="KeyedStrEnum")


class EnumIntrospectionMixin:
    """Small, UI-agnostic mixin that adds introspection conveniences to Enums.

    When mixed into an Enum class, provides ``value_length``: the maximum length
    (in characters) of all ``.value`` strings for the enum class. Useful for
    printing aligned labels.
    """

    @cached_property
    def value_length(self) -> int:
        """Maximum length of the enum's ``.value`` strings."""
        # Pyright doesn't know 'self' is an Enum member; runtime guarantees it.
        return max(len(member.value) for member in type(self))  # type: ignore[attr-defined]


def _norm_token(s: str) -> str:
    """Normalize an identifier-like string: case, '-', '_' and spaces are insignificant."""
    return s.strip().lower().replace("-", "").replace("_", "").replace(" ", "")


class KeyedStrEnum(str, Enum):
    """Enum where `.value` is a stable machine key; metadata lives on attributes.

    Attributes:
        label (str): Human-readable label for the member.
        aliases (tuple[str, ...]): Alternative tokens accepted by `parse()`.

    Example:
        class Placement(KeyedStrEnum):
            AT_END = ("end", "At the end of the block")
    """

    label: str
    aliases: tuple[str, ...]

    def __new__(
        cls: type[_KS],
        key: str,
        label: str,
        aliases: Iterable[str] = (),
    ) -> _KS:
        """Create a new KeyedStrEnum member with key, label, and optional aliases.

        Args:
            key (str): The stable machine key (stored as `.value`).
            label (str): The human-readable label for the enum member.
            aliases (Iterable[str]): Optional aliases for parsing. Defaults to empty.

        Returns:
            _KS: The newly created enum member.
        """
        obj: _KS = str.__new__(cls, key)
        obj._value_ = key
        obj.label = label
        obj.aliases = tuple(aliases)
        return obj

    def __str__(self) -> str:
        return str(self.value)

    @property
    def key(self) -> str:
        """Stable machine key (same as `.value`)."""
        return str(self.value)

    @classmethod
    def keys(cls) -> list[str]:
        """Return the machine keys of all members, in declaration order."""
        return [m.key for m in cls]

    @classmethod
    def parse(cls: type[_KS], raw: str | None) -> _KS | None:
        """Parse a token into an enum member.

        Matches against the stable key (`.value`), the member name (`.name`),
        and any configured aliases. Matching ignores case, '-', '_' and spaces,
        so ``addIfDifferent``, ``add-if-different`` and ``ADD_IF_DIFFERENT``
        are equivalent.
        """
        if raw is None:
            return None
        token: str = _norm_token(raw)

        for m in cls:
            if token == _norm_token(m.value) or token == _norm_token(m.name):
                return m
            if any(token == _norm_token(a) for a in m.aliases):
                return m
        return None
