# topmark:header:start
#
#   project      : Trailmark
#   file         : interpret.py
#   file_relpath : src/trailmark/cli/commands/interpret.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark `interpret` command.

Reads documents from FILE arguments (or STDIN), merges the ``--trailer``
values into their trailer blocks and writes the result to STDOUT, or back to
the files with ``--in-place``.

``--where``, ``--if-exists`` and ``--if-missing`` apply to the ``--trailer``
options that follow them; ``--no-where``, ``--no-if-exists`` and
``--no-if-missing`` reset them to the configured defaults, and ``--no-trailer``
drops the ``--trailer`` options given before it.

Examples:
    git log -1 --format=%B | trailmark interpret --trailer "sob=Jane <jane@example.com>"
    trailmark interpret --where start --trailer "Fixes: #42" --in-place MSG
    trailmark interpret --parse MSG
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from trailmark.api.runtime import run_pipeline
from trailmark.cli.cli_types import EnumChoiceParam
from trailmark.cli.console import get_console
from trailmark.cli.errors import (
    TrailmarkCliError,
    TrailmarkConfigError,
    TrailmarkPipelineError,
    TrailmarkUnexpectedError,
    TrailmarkUsageError,
)
from trailmark.cli.exit_codes import ExitCode
from trailmark.cli.io import STDIN_NAME, complete_line, read_document, read_stdin, write_document
from trailmark.cli.options import (
    TrailerCommand,
    common_config_options,
    get_scanned_trailer_args,
)
from trailmark.config.logging import get_logger
from trailmark.config.options import ProcessOptions
from trailmark.config.policy import ExistsPolicy, MissingPolicy, Placement
from trailmark.config.registry import load_registry
from trailmark.core.errors import ConfigError, MalformedSpecError
from trailmark.pipeline.merge import validate_specs
from trailmark.pipeline.model import NewTrailerSpec
from trailmark.pipeline.pipelines import Pipeline
from trailmark.pipeline.tokens import split_trailer_arg

if TYPE_CHECKING:
    from trailmark.cli.console import ClickConsole
    from trailmark.cli.options import PolicyState
    from trailmark.config.logging import TrailmarkLogger
    from trailmark.config.registry import KeyRegistry
    from trailmark.pipeline.context import ProcessingContext

logger: TrailmarkLogger = get_logger(__name__)


def build_trailer_specs(
    pairs: list[tuple[str, PolicyState]], registry: KeyRegistry
) -> list[NewTrailerSpec]:
    """Turn scanned ``--trailer`` values into `NewTrailerSpec`s.

    Raises:
        TrailmarkUsageError: If a trailer has an empty key.
    """
    specs: list[NewTrailerSpec] = []
    for raw, state in pairs:
        key, value = split_trailer_arg(raw, registry.separators)
        if not key:
            raise TrailmarkUsageError(f"Empty trailer key in '--trailer {raw}'")
        specs.append(
            NewTrailerSpec(
                key=key,
                value=value,
                where=Placement.parse(state["where"]),
                if_exists=ExistsPolicy.parse(state["if_exists"]),
                if_missing=MissingPolicy.parse(state["if_missing"]),
            )
        )
    return specs


def process_document(
    name: str,
    text: str,
    *,
    options: ProcessOptions,
    specs: list[NewTrailerSpec],
    registry: KeyRegistry,
    console: ClickConsole,
    verbosity_level: int,
) -> str:
    """Run the processing pipeline over one document and return the output text.

    Raises:
        TrailmarkPipelineError: If the engine rejects a trailer spec.
        TrailmarkUnexpectedError: If the pipeline fails for any other reason.
    """
    try:
        ctx: ProcessingContext = run_pipeline(
            Pipeline.PROCESS,
            complete_line(text),
            options=options,
            specs=specs,
            registry=registry,
        )
    except MalformedSpecError as exc:
        raise TrailmarkPipelineError(str(exc)) from exc
    except Exception as exc:
        logger.exception("Unexpected error while processing %s", name)
        raise TrailmarkUnexpectedError(f"{name}: {exc}") from exc

    if verbosity_level <= logging.INFO:
        console.info(f"{name}: {ctx.status.summary()}")
    assert ctx.output is not None
    return ctx.output


@click.command(
    name="interpret",
    cls=TrailerCommand,
    help="Add or parse structured trailers at the end of documents (e.g. commit messages).",
)
@click.argument(
    "files",
    nargs=-1,
    metavar="[FILE]...",
    type=click.Path(dir_okay=True, path_type=Path),
)
@click.option("--in-place", "in_place", is_flag=True, help="Edit files in place.")
@click.option("--trim-empty", "trim_empty", is_flag=True, help="Drop trailers with empty values.")
@click.option(
    "--where",
    type=EnumChoiceParam(Placement),
    default=None,
    help="Placement of the following --trailer options.",
)
@click.option(
    "--if-exists",
    "if_exists",
    type=EnumChoiceParam(ExistsPolicy),
    default=None,
    help="Action for the following --trailer options when the key exists.",
)
@click.option(
    "--if-missing",
    "if_missing",
    type=EnumChoiceParam(MissingPolicy),
    default=None,
    help="Action for the following --trailer options when the key is missing.",
)
@click.option("--no-where", "no_where", is_flag=True, help="Reset --where to the configuration.")
@click.option(
    "--no-if-exists", "no_if_exists", is_flag=True, help="Reset --if-exists to the configuration."
)
@click.option(
    "--no-if-missing",
    "no_if_missing",
    is_flag=True,
    help="Reset --if-missing to the configuration.",
)
@click.option(
    "--trailer",
    "trailers",
    multiple=True,
    metavar="KEY[(=|:)VALUE]",
    help="Trailer to add (repeatable). KEY may be a configured alias.",
)
@click.option(
    "--no-trailer",
    "no_trailer",
    is_flag=True,
    help="Drop the --trailer options given before this one.",
)
@click.option("--only-trailers", "only_trailers", is_flag=True, help="Output only the trailers.")
@click.option(
    "--only-input",
    "only_input",
    is_flag=True,
    help="Do not apply configured key policies or configured trailers.",
)
@click.option("--unfold", is_flag=True, help="Join folded (multi-line) values onto one line.")
@click.option(
    "--parse",
    "parse_mode",
    is_flag=True,
    help="Alias for --only-trailers --only-input --unfold.",
)
@click.option(
    "--no-divider", "no_divider", is_flag=True, help="Do not treat '---' as end of the document."
)
@click.option(
    "--whole-input",
    "whole_input",
    is_flag=True,
    help="Treat the whole input as the trailer block.",
)
@common_config_options
def interpret_command(
    *,
    files: tuple[Path, ...],
    in_place: bool,
    trim_empty: bool,
    where: Placement | None,
    if_exists: ExistsPolicy | None,
    if_missing: MissingPolicy | None,
    no_where: bool,
    no_if_exists: bool,
    no_if_missing: bool,
    trailers: tuple[str, ...],
    no_trailer: bool,
    only_trailers: bool,
    only_input: bool,
    unfold: bool,
    parse_mode: bool,
    no_divider: bool,
    whole_input: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
) -> None:
    """Rewrite the trailer blocks of FILEs (or STDIN)."""
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ClickConsole = get_console(ctx)
    verbosity_level: int = ctx.obj.get("verbosity_level", logging.WARNING)

    scanned: list[tuple[str, PolicyState]] | None = get_scanned_trailer_args(ctx)
    if scanned is None:
        # Invoked without raw argument scanning (e.g. ctx.invoke): no ordering info.
        unset: PolicyState = {"where": None, "if_exists": None, "if_missing": None}
        scanned = [] if no_trailer else [(raw, dict(unset)) for raw in trailers]
    pairs: list[tuple[str, PolicyState]] = scanned

    if parse_mode:
        only_trailers = only_input = unfold = True
    if pairs and only_input:
        raise TrailmarkUsageError("--trailer cannot be combined with --only-input or --parse")
    if in_place and not files:
        raise TrailmarkUsageError("--in-place requires at least one FILE")

    options = ProcessOptions(
        in_place=in_place,
        trim_empty=trim_empty,
        only_trailers=only_trailers,
        only_input=only_input,
        unfold=unfold,
        no_divider=no_divider,
        whole_input=whole_input,
    )
    logger.debug("Options: %s", options)

    try:
        registry: KeyRegistry = load_registry(
            anchor=Path.cwd(),
            extra_config_files=[Path(p) for p in config_paths],
            no_config=no_config,
        )
    except ConfigError as exc:
        raise TrailmarkConfigError(str(exc)) from exc

    specs: list[NewTrailerSpec] = build_trailer_specs(pairs, registry)
    try:
        validate_specs(specs)
    except MalformedSpecError as exc:
        raise TrailmarkPipelineError(str(exc)) from exc

    if not files:
        out: str = process_document(
            STDIN_NAME,
            read_stdin(),
            options=options,
            specs=specs,
            registry=registry,
            console=console,
            verbosity_level=verbosity_level,
        )
        console.print(out, nl=False)
        return

    encountered: ExitCode | None = None
    for path in files:
        try:
            out = process_document(
                str(path),
                read_document(path),
                options=options,
                specs=specs,
                registry=registry,
                console=console,
                verbosity_level=verbosity_level,
            )
            if in_place:
                write_document(path, out)
            else:
                console.print(out, nl=False)
        except TrailmarkPipelineError:
            raise
        except TrailmarkCliError as exc:
            exc.show()
            encountered = encountered or ExitCode(exc.exit_code)

    if encountered is not None:
        ctx.exit(encountered)
