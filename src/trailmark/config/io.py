# topmark:header:start
#
#   project      : Trailmark
#   file         : io.py
#   file_relpath : src/trailmark/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Lightweight TOML I/O helpers for Trailmark configuration.

This module centralizes **pure** helpers for reading and writing TOML used by
Trailmark's configuration layer. Keeping these utilities separate avoids import
cycles and keeps the registry classes small and focused.

Typical flow:
    1. Load defaults from the packaged resource (``load_defaults_dict``).
    2. Load project/user TOML files (``load_toml_dict``).
    3. Inspect values using typed helpers (``get_table_value``,
       ``warn_unknown_keys``).
    4. Serialize back to TOML when needed (``to_toml``), optionally nested
       under ``[tool.trailmark]`` (``nest_toml_under_section``).

Notes:
    - Files are parsed with `tomlkit` and unwrapped to plain Python containers.
    - Serialization uses `toml`, which emits a compact canonical document.
"""

from __future__ import annotations

from importlib.resources import files
from typing import TYPE_CHECKING, Any, TypeGuard

import toml
import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError
from tomlkit.items import Table

from trailmark.config.logging import get_logger
from trailmark.constants import DEFAULT_TOML_CONFIG_NAME, DEFAULT_TOML_CONFIG_PACKAGE

if TYPE_CHECKING:
    import sys
    from collections.abc import Iterable
    from pathlib import Path

    if sys.version_info >= (3, 14):
        from importlib.resources.abc import Traversable
    else:
        from importlib.abc import Traversable

    from trailmark.config.logging import TrailmarkLogger

logger: TrailmarkLogger = get_logger(__name__)

TomlTable = dict[str, Any]


__all__: list[str] = [
    "TomlTable",
    "is_toml_table",
    "get_table_value",
    "warn_unknown_keys",
    "load_defaults_dict",
    "load_toml_dict",
    "to_toml",
    "nest_toml_under_section",
]


def is_toml_table(val: Any) -> TypeGuard[TomlTable]:
    """Type guard for a TOML table-like mapping.

    Args:
        val (Any): Value to test.

    Returns:
        TypeGuard[TomlTable]: ``True`` if ``val`` is a ``dict[str, Any]``.
    """
    return isinstance(val, dict)


def get_table_value(table: TomlTable, key: str) -> TomlTable:
    """Extract a sub-table from a TOML table.

    Returns a new empty dict if the sub-table is missing or not a mapping.

    Args:
        table (TomlTable): Parent table mapping.
        key (str): Sub-table key.

    Returns:
        TomlTable: The sub-table if present and a mapping, otherwise an empty dict.
    """
    value: Any | None = table.get(key)
    return value if is_toml_table(value) else {}


def warn_unknown_keys(table: TomlTable, allowed: Iterable[str], *, where: str) -> list[str]:
    """Log a warning for every key of ``table`` not in ``allowed``.

    Unknown keys are ignored rather than rejected so that newer configuration
    files keep working with older releases.

    Returns:
        list[str]: The unknown keys, sorted.
    """
    unknown: list[str] = sorted(set(table) - set(allowed))
    for key in unknown:
        logger.warning("Ignoring unknown key '%s' in %s", key, where)
    return unknown


def load_defaults_dict() -> TomlTable:
    """Return the packaged default configuration as a Python dict.

    Returns:
        TomlTable: The parsed default configuration.

    Raises:
        RuntimeError: If the bundled default config resource cannot be read or
            parsed as TOML.
    """
    resource: Traversable = files(DEFAULT_TOML_CONFIG_PACKAGE).joinpath(DEFAULT_TOML_CONFIG_NAME)
    logger.debug("Loading defaults from package resource: %s", resource)
    try:
        text: str = resource.read_text(encoding="utf8")
    except OSError as exc:
        raise RuntimeError(
            f"Cannot read bundled default config {DEFAULT_TOML_CONFIG_PACKAGE!r}/"
            f"{DEFAULT_TOML_CONFIG_NAME!r}: {exc}"
        ) from exc

    try:
        data: TomlTable = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise RuntimeError(
            f"Bundled default config {DEFAULT_TOML_CONFIG_PACKAGE!r}/"
            f"{DEFAULT_TOML_CONFIG_NAME!r} is invalid TOML: {exc}"
        ) from exc

    return data


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document (e.g., ``trailmark.toml`` or
            ``pyproject.toml``).

    Returns:
        TomlTable: The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        val: TomlTable = tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        val = {}
    except UnicodeDecodeError as e:
        logger.error("Error decoding %s as UTF-8: %s", path, e)
        val = {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        val = {}
    return val


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict (TomlTable): TOML mapping to render.

    Returns:
        str: The rendered TOML document as a string.
    """
    return toml.dumps(toml_dict)


def nest_toml_under_section(toml_doc: str, section_keys: str) -> str:
    r"""Return a new TOML document nested under a dotted section path.

    For example ``nest_toml_under_section("[trailers]\nwhere = 'end'\n", "tool.trailmark")``
    yields a document with a ``[tool.trailmark.trailers]`` table, ready to be
    pasted into ``pyproject.toml``.

    Args:
        toml_doc (str): Original TOML document to nest.
        section_keys (str): Dotted section path such as ``"tool.trailmark"``.

    Returns:
        str: The nested TOML document.

    Raises:
        ValueError: If ``section_keys`` has no non-empty component.
        RuntimeError: If the TOML document cannot be parsed.
    """
    try:
        doc: tomlkit.TOMLDocument = tomlkit.parse(toml_doc)
    except TomlkitParseError as exc:
        raise RuntimeError(f"Error parsing TOML document: {exc}") from exc

    keys: list[str] = [k for k in section_keys.split(".") if k]
    if not keys:
        raise ValueError("section_keys must contain at least one non-empty component")

    new_doc: tomlkit.TOMLDocument = tomlkit.document()
    current_level: tomlkit.TOMLDocument | Table = new_doc
    for key in keys:
        table: Table = tomlkit.table(is_super_table=True)
        current_level.add(key, table)
        current_level = table

    for item_key, item_value in doc.items():
        current_level.add(item_key, item_value)

    return new_doc.as_string()
