# topmark:header:start
#
#   project      : Trailmark
#   file         : constants.py
#   file_relpath : src/trailmark/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    TRAILMARK_VERSION: str = get_version("trailmark")
except PackageNotFoundError:  # pragma: no cover - source checkout without metadata
    TRAILMARK_VERSION = "0.0.0+unknown"

# Name of the bundled default config inside the package `trailmark.config`:
DEFAULT_TOML_CONFIG_PACKAGE: str = "trailmark.config"
DEFAULT_TOML_CONFIG_NAME: str = "trailmark-default.toml"

# Config file names used during discovery:
TRAILMARK_TOML_NAME: str = "trailmark.toml"
PYPROJECT_TOML_NAME: str = "pyproject.toml"
PYPROJECT_TOOL_SECTION: str = "trailmark"

# Line that ends the part of a document that may hold trailers ("---" + optional whitespace).
DIVIDER: str = "---"

# Legacy cherry-pick note that is accepted as a trailer line inside a block.
LEGACY_CHERRY_PICK_PREFIX: str = "(cherry picked from commit "

DEFAULT_SEPARATORS: str = ":="

VALUE_NOT_SET: str = "<not set>"
