# topmark:header:start
#
#   project      : Trailmark
#   file         : errors.py
#   file_relpath : src/trailmark/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the Trailmark engine and configuration layer.

These exceptions are framework-agnostic: the CLI translates them into
`trailmark.cli.errors` instances carrying process exit codes, while API
callers can catch them directly.

Taxonomy:
    TrailmarkError
      ConfigError
        ConfigConflictError   (an alias maps to two canonical keys)
        ConfigValueError      (invalid value in a configuration table)
      MalformedSpecError      (caller-supplied trailer spec is unusable)

Irregular *document* input is never an error: unparseable lines degrade to
pass-through lines and ambiguous blocks to "no block found".
"""

from __future__ import annotations


class TrailmarkError(Exception):
    """Base class for all Trailmark errors."""


class ConfigError(TrailmarkError):
    """Invalid trailer configuration; fatal when building the key registry."""


class ConfigConflictError(ConfigError):
    """Two configured keys claim the same alias.

    Attributes:
        alias (str): The alias (case-folded) claimed twice.
        first (str): Canonical key that declared the alias first.
        second (str): Canonical key that declared it again.
    """

    def __init__(self, alias: str, first: str, second: str) -> None:
        self.alias = alias
        self.first = first
        self.second = second
        super().__init__(
            f"Trailer alias '{alias}' is declared for both '{first}' and '{second}'"
        )


class ConfigValueError(ConfigError):
    """A configuration table holds a value of the wrong shape or an unknown keyword."""


class MalformedSpecError(TrailmarkError):
    """A caller-supplied trailer spec cannot be merged (unset value, invalid key)."""
