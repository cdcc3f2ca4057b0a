# topmark:header:start
#
#   project      : Trailmark
#   file         : version.py
#   file_relpath : src/trailmark/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark `version` command.

Prints the current Trailmark version as installed in the active Python environment.
"""

from __future__ import annotations

import click

from trailmark.cli.console import get_console
from trailmark.constants import TRAILMARK_VERSION


@click.command(
    name="version",
    help="Show the current version of Trailmark.",
)
def version_command() -> None:
    """Show the current version of Trailmark."""
    get_console().print(TRAILMARK_VERSION)
