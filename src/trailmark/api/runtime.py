# topmark:header:start
#
#   project      : Trailmark
#   file         : runtime.py
#   file_relpath : src/trailmark/api/runtime.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Internal helpers behind the public API: registry normalization and pipeline runs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from trailmark.config.logging import get_logger
from trailmark.config.registry import KeyRegistry, MutableKeyRegistry, default_registry
from trailmark.pipeline import runner
from trailmark.pipeline.context import ProcessingContext
from trailmark.pipeline.merge import validate_specs

if TYPE_CHECKING:
    from collections.abc import Sequence

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.config.options import ProcessOptions
    from trailmark.pipeline.model import NewTrailerSpec
    from trailmark.pipeline.pipelines import Pipeline

logger: TrailmarkLogger = get_logger(__name__)


def ensure_registry(registry: KeyRegistry | Mapping[str, Any] | None) -> KeyRegistry:
    """Return a frozen `KeyRegistry` from a registry, a TOML-shaped mapping, or ``None``.

    A mapping is layered over the built-in defaults; ``None`` means the
    built-in defaults only (no file discovery).

    Raises:
        ConfigError: If the mapping holds invalid or conflicting values.
    """
    if registry is None:
        return default_registry()
    if isinstance(registry, KeyRegistry):
        return registry
    if isinstance(registry, Mapping):
        draft: MutableKeyRegistry = MutableKeyRegistry.from_defaults().merge_with(
            MutableKeyRegistry.from_toml_dict(dict(registry))
        )
        return draft.freeze()
    raise TypeError(f"Unsupported registry type: {type(registry).__name__}")


def decode_text(text: str | bytes) -> str:
    """Return ``text`` as ``str``; bytes must be valid UTF-8.

    Raises:
        UnicodeDecodeError: If ``text`` is bytes and not valid UTF-8.
    """
    if isinstance(text, bytes):
        return text.decode("utf-8")
    return text


def run_pipeline(
    pipeline: Pipeline,
    text: str | bytes,
    *,
    options: ProcessOptions,
    specs: Sequence[NewTrailerSpec] = (),
    registry: KeyRegistry | Mapping[str, Any] | None = None,
) -> ProcessingContext:
    """Build a context for one document and run ``pipeline`` over it.

    Specs are validated before any step runs. With ``options.only_input`` the
    registry's per-key policies are replaced by the global defaults.

    Raises:
        MalformedSpecError: If a spec is malformed.
        UnicodeDecodeError: If ``text`` is bytes and not valid UTF-8.
    """
    validate_specs(specs)
    reg: KeyRegistry = ensure_registry(registry)
    if options.only_input:
        reg = reg.without_key_defaults()

    ctx = ProcessingContext(
        text=decode_text(text),
        options=options,
        registry=reg,
        specs=list(specs),
    )
    return runner.run(ctx, pipeline.steps)
