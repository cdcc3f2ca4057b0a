# topmark:header:start
#
#   project      : Trailmark
#   file         : __init__.py
#   file_relpath : src/trailmark/api/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public Trailmark API (stable surface).

This module exposes a **small, typed API** for integrations that want to
rewrite trailer blocks programmatically without going through the CLI.

Versioning policy
-----------------
- The **signatures and dataclass shapes** in this module follow semver.
- Adding optional parameters with defaults is allowed in minor releases.
- Removing/renaming anything here is a breaking change (major release).

Registry contract
-----------------
- Functions accept a frozen `KeyRegistry`, a plain **mapping** mirroring the
  TOML shape, or ``None`` (built-in defaults only, no config discovery).
- Use `load_registry` for the same discovery the CLI performs.

```python
from trailmark import api
from trailmark.pipeline.model import NewTrailerSpec

out = api.process(
    api.ProcessOptions(),
    "Fix bug\\n\\nSigned-off-by: A <a@x.com>\\n",
    [NewTrailerSpec("sob", "B <b@x.com>")],
    registry={"keys": {"sob": {"key": "Signed-off-by"}}},
)
```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from trailmark.api.runtime import ensure_registry, run_pipeline
from trailmark.config.options import ProcessOptions
from trailmark.config.registry import KeyConfig, KeyRegistry, load_registry
from trailmark.config.registry import resolve_key_defaults as _resolve_key_defaults
from trailmark.pipeline.model import ExistingTrailer, NewTrailerSpec, trailers_of
from trailmark.pipeline.pipelines import Pipeline

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from trailmark.pipeline.context import ProcessingContext

__all__: list[str] = [
    "ExistingTrailer",
    "KeyConfig",
    "KeyRegistry",
    "NewTrailerSpec",
    "ProcessOptions",
    "load_registry",
    "parse",
    "process",
    "resolve_key_defaults",
]


def resolve_key_defaults(
    key: str, registry: KeyRegistry | Mapping[str, Any] | None = None
) -> KeyConfig:
    """Return the canonical configuration for ``key`` (name or alias, case-insensitive).

    Unknown keys resolve to a synthetic config with the global defaults.
    """
    return _resolve_key_defaults(key, ensure_registry(registry))


def process(
    options: ProcessOptions,
    text: str | bytes,
    specs: Sequence[NewTrailerSpec] = (),
    *,
    registry: KeyRegistry | Mapping[str, Any] | None = None,
) -> str:
    """Merge ``specs`` into the trailer block of ``text`` and return the rewritten text.

    Args:
        options (ProcessOptions): Processing switches (``in_place`` is ignored here).
        text (str | bytes): The document; bytes must be UTF-8.
        specs (Sequence[NewTrailerSpec]): Trailers to merge, in order.
        registry (KeyRegistry | Mapping[str, Any] | None): Key registry or TOML-shaped mapping.

    Returns:
        str: The rewritten document (or the trailer lines only).

    Raises:
        MalformedSpecError: If a spec has no value or an invalid key.
        ConfigError: If ``registry`` is a mapping with invalid values.
        UnicodeDecodeError: If ``text`` is bytes and not valid UTF-8.
    """
    ctx: ProcessingContext = run_pipeline(
        Pipeline.PROCESS, text, options=options, specs=specs, registry=registry
    )
    assert ctx.output is not None
    return ctx.output


def parse(
    text: str | bytes,
    *,
    options: ProcessOptions | None = None,
    registry: KeyRegistry | Mapping[str, Any] | None = None,
) -> list[ExistingTrailer]:
    """Return the trailers found in ``text``, in document order.

    Pass-through lines are not returned. Folded values keep their line breaks;
    use `trailmark.pipeline.tokens.unfold_value` to join them.
    """
    ctx: ProcessingContext = run_pipeline(
        Pipeline.PARSE,
        text,
        options=options or ProcessOptions(),
        registry=registry,
    )
    return trailers_of(ctx.items)
