# topmark:header:start
#
#   project      : Trailmark
#   file         : keys.py
#   file_relpath : src/trailmark/cli/commands/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark `keys` command.

Prints the resolved key registry as TOML (after config discovery and merging),
or, given KEY arguments, how each key or alias resolves.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from trailmark.cli.console import get_console
from trailmark.cli.errors import TrailmarkConfigError
from trailmark.cli.options import common_config_options
from trailmark.config.io import nest_toml_under_section, to_toml
from trailmark.config.registry import load_registry, resolve_key_defaults
from trailmark.constants import PYPROJECT_TOOL_SECTION
from trailmark.core.errors import ConfigError

if TYPE_CHECKING:
    from trailmark.cli.console import ClickConsole
    from trailmark.config.registry import KeyConfig, KeyRegistry


def describe_key(key: str, kc: KeyConfig) -> str:
    """Return a one-line description of how ``key`` resolves."""
    source: str = "configured" if kc.configured else "default"
    return (
        f"{key} -> {kc.name} ({source}; where={kc.default_where.key}, "
        f"if_exists={kc.default_if_exists.key}, if_missing={kc.default_if_missing.key}, "
        f"separator='{kc.separator}')"
    )


@click.command(
    name="keys",
    help="Show the resolved trailer key configuration.",
)
@click.argument("keys", nargs=-1, metavar="[KEY]...")
@click.option(
    "--pyproject",
    is_flag=True,
    help="Emit the configuration nested under [tool.trailmark] for pyproject.toml.",
)
@common_config_options
def keys_command(
    *,
    keys: tuple[str, ...],
    pyproject: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """Print the key registry, or resolve KEYs against it."""
    console: ClickConsole = get_console()
    try:
        registry: KeyRegistry = load_registry(
            anchor=Path.cwd(),
            extra_config_files=[Path(p) for p in config_paths],
            no_config=no_config,
        )
    except ConfigError as exc:
        raise TrailmarkConfigError(str(exc)) from exc

    if keys:
        for key in keys:
            console.print(describe_key(key, resolve_key_defaults(key, registry)))
        return

    document: str = to_toml(registry.to_toml_dict())
    if pyproject:
        document = nest_toml_under_section(document, f"tool.{PYPROJECT_TOOL_SECTION}")
    console.print(document, nl=False)
