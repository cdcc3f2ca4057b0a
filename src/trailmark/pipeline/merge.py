# topmark:header:start
#
#   project      : Trailmark
#   file         : merge.py
#   file_relpath : src/trailmark/pipeline/merge.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Policy merge engine.

`merge` combines the parsed block entries with caller-supplied
`NewTrailerSpec`s. It is pure: the input sequence is never mutated and a new
list is returned.

Specs are applied strictly in order. For each spec the *matches* (trailers
with the same canonical key, case-insensitive) are recomputed on the
then-current sequence, and the spec's effective policy decides what happens:

* no match: ``if_missing`` (``add`` inserts per ``where``; ``after`` and
  ``before`` degrade to ``end`` and ``start``);
* matches: ``if_exists`` (``doNothing``, ``replace``, ``add``,
  ``addIfDifferent``, ``addIfDifferentNeighbor``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from trailmark.config.logging import get_logger
from trailmark.config.policy import ExistsPolicy, MissingPolicy, Placement, TrailerPolicy
from trailmark.core.errors import MalformedSpecError
from trailmark.pipeline.model import ExistingTrailer, trailers_of
from trailmark.pipeline.tokens import is_valid_key

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from trailmark.config.logging import TrailmarkLogger
    from trailmark.config.registry import KeyConfig, KeyRegistry
    from trailmark.pipeline.model import BlockItem, NewTrailerSpec

logger: TrailmarkLogger = get_logger(__name__)


def validate_specs(specs: Iterable[NewTrailerSpec]) -> None:
    """Reject specs that cannot be merged.

    Raises:
        MalformedSpecError: If a spec has no value, an empty key, or a key
            outside the trailer key grammar.
    """
    for spec in specs:
        key: str = spec.key.strip()
        if not key:
            raise MalformedSpecError("Trailer spec has an empty key")
        if not is_valid_key(key):
            raise MalformedSpecError(f"Invalid trailer key '{spec.key}'")
        if spec.value is None:
            raise MalformedSpecError(f"Trailer spec for '{key}' has no value")


def effective_policy(spec: NewTrailerSpec, kc: KeyConfig) -> TrailerPolicy:
    """Return the spec's policy with unset fields taken from the key's defaults."""
    return TrailerPolicy(
        where=spec.where if spec.where is not None else kc.default_where,
        if_exists=spec.if_exists if spec.if_exists is not None else kc.default_if_exists,
        if_missing=spec.if_missing if spec.if_missing is not None else kc.default_if_missing,
    )


def _insertion_index(items: Sequence[BlockItem], where: Placement, matches: list[int]) -> int:
    if where is Placement.END:
        return len(items)
    if where is Placement.START:
        return 0
    if where is Placement.AFTER:
        return matches[-1] + 1 if matches else len(items)
    if where is Placement.BEFORE:
        return matches[0] if matches else 0
    raise ValueError(f"Unsupported placement: {where!r}")


def _neighbor(
    items: Sequence[BlockItem], where: Placement, matches: list[int]
) -> ExistingTrailer | None:
    """Return the trailer adjacent to the insertion point in the direction of ``where``."""
    if where is Placement.AFTER:
        found: BlockItem = items[matches[-1]]
    elif where is Placement.BEFORE:
        found = items[matches[0]]
    elif where is Placement.END:
        trailers: list[ExistingTrailer] = trailers_of(items)
        return trailers[-1] if trailers else None
    elif where is Placement.START:
        trailers = trailers_of(items)
        return trailers[0] if trailers else None
    else:
        raise ValueError(f"Unsupported placement: {where!r}")
    assert isinstance(found, ExistingTrailer)
    return found


def apply_spec(
    items: Sequence[BlockItem],
    new: ExistingTrailer,
    policy: TrailerPolicy,
) -> list[BlockItem]:
    """Apply one resolved trailer to ``items`` and return the new sequence.

    Args:
        items (Sequence[BlockItem]): Current block entries (not mutated).
        new (ExistingTrailer): The entry to merge (``position`` is ``None``).
        policy (TrailerPolicy): Fully resolved policy for this entry.

    Returns:
        list[BlockItem]: The resulting block entries.
    """
    out: list[BlockItem] = list(items)
    matches: list[int] = [
        i
        for i, item in enumerate(out)
        if isinstance(item, ExistingTrailer) and item.has_key(new.canonical_key)
    ]

    if not matches:
        if policy.if_missing is MissingPolicy.DO_NOTHING:
            return out
        if policy.if_missing is MissingPolicy.ADD:
            out.insert(_insertion_index(out, policy.where, matches), new)
            return out
        raise ValueError(f"Unsupported missing policy: {policy.if_missing!r}")

    action: ExistsPolicy = policy.if_exists
    if action is ExistsPolicy.DO_NOTHING:
        return out
    if action is ExistsPolicy.REPLACE:
        slot: int = matches[0]
        removed: set[int] = set(matches)
        kept: list[BlockItem] = [item for i, item in enumerate(out) if i not in removed]
        kept.insert(slot, new)
        return kept
    if action is ExistsPolicy.ADD:
        pass
    elif action is ExistsPolicy.ADD_IF_DIFFERENT:
        if any(t.same_as(new.canonical_key, new.value) for t in trailers_of(out)):
            return out
    elif action is ExistsPolicy.ADD_IF_DIFFERENT_NEIGHBOR:
        neighbor: ExistingTrailer | None = _neighbor(out, policy.where, matches)
        if neighbor is not None and neighbor.same_as(new.canonical_key, new.value):
            return out
    else:
        raise ValueError(f"Unsupported exists policy: {action!r}")

    out.insert(_insertion_index(out, policy.where, matches), new)
    return out


def merge(
    items: Sequence[BlockItem],
    specs: Sequence[NewTrailerSpec],
    registry: KeyRegistry,
) -> list[BlockItem]:
    """Merge ``specs`` into the block entries ``items``.

    Args:
        items (Sequence[BlockItem]): Parsed block entries.
        specs (Sequence[NewTrailerSpec]): Trailers to merge, in application order.
        registry (KeyRegistry): Registry for alias and default resolution.

    Returns:
        list[BlockItem]: A new list; ``items`` is left untouched.

    Raises:
        MalformedSpecError: If any spec is malformed; nothing is merged then.
    """
    validate_specs(specs)

    out: list[BlockItem] = list(items)
    for spec in specs:
        kc: KeyConfig = registry.resolve(spec.key)
        policy: TrailerPolicy = effective_policy(spec, kc)
        assert spec.value is not None
        new = ExistingTrailer(
            key=kc.name,
            separator=kc.separator,
            value=spec.value.strip(),
            canonical_key=kc.name,
        )
        before: int = len(out)
        out = apply_spec(out, new, policy)
        logger.debug(
            "Applied %s=%r (where=%s, if_exists=%s, if_missing=%s): %d → %d entries",
            kc.name,
            new.value,
            policy.where.key,
            policy.if_exists.key,
            policy.if_missing.key,
            before,
            len(out),
        )
    return out
