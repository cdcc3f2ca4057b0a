# topmark:header:start
#
#   project      : Trailmark
#   file         : keys.py
#   file_relpath : src/trailmark/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for Trailmark configuration.

This module defines the authoritative string constants used when reading,
writing, and validating Trailmark configuration from TOML sources
(``trailmark.toml`` and ``[tool.trailmark]`` in ``pyproject.toml``).

Design notes:
    - Keys defined here represent *external configuration API*.
    - Renaming or removing keys is a breaking change.
    - CLI option names are intentionally kept separate.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by Trailmark configuration.

    Example:
        ```toml
        root = true

        [trailers]
        where = "end"
        if_exists = "addIfDifferent"
        if_missing = "add"
        separators = ":="

        [keys.sign]
        key = "Signed-off-by"
        aliases = ["sob"]
        where = "after"
        separator = ":"
        value = "Jane Doe <jane@example.com>"
        ```
    """

    # Root / discovery
    KEY_ROOT: Final[str] = "root"

    # [trailers]: global defaults
    SECTION_TRAILERS: Final[str] = "trailers"

    KEY_WHERE: Final[str] = "where"
    KEY_IF_EXISTS: Final[str] = "if_exists"
    KEY_IF_MISSING: Final[str] = "if_missing"
    KEY_SEPARATORS: Final[str] = "separators"

    # [keys.<name>]: per-key configuration
    SECTION_KEYS: Final[str] = "keys"

    KEY_KEY: Final[str] = "key"
    KEY_ALIASES: Final[str] = "aliases"
    KEY_SEPARATOR: Final[str] = "separator"
    KEY_VALUE: Final[str] = "value"

    # ---------------------------- Schema helpers ----------------------------

    ALLOWED_TOP_LEVEL_KEYS: Final[frozenset[str]] = frozenset(
        {
            KEY_ROOT,
            SECTION_TRAILERS,
            SECTION_KEYS,
        }
    )

    ALLOWED_TRAILERS_KEYS: Final[frozenset[str]] = frozenset(
        {
            KEY_WHERE,
            KEY_IF_EXISTS,
            KEY_IF_MISSING,
            KEY_SEPARATORS,
        }
    )

    # Allowed keys inside each [keys.<name>] table.
    ALLOWED_KEY_TABLE_KEYS: Final[frozenset[str]] = frozenset(
        {
            KEY_KEY,
            KEY_ALIASES,
            KEY_WHERE,
            KEY_IF_EXISTS,
            KEY_IF_MISSING,
            KEY_SEPARATOR,
            KEY_VALUE,
        }
    )
