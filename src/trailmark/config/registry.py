# topmark:header:start
#
#   project      : Trailmark
#   file         : registry.py
#   file_relpath : src/trailmark/config/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Key registry: per-key trailer configuration and alias resolution.

The registry maps every configured key name and alias (case-insensitive) to a
canonical key and its defaults (placement, existence and missing policies,
rendering separator, and an optional auto-added value).

Design:
    * ``MutableKeyConfig`` / ``MutableKeyRegistry`` are the tri-state builders
      used while loading and merging configuration layers (last-wins).
    * ``KeyConfig`` / ``KeyRegistry`` are the frozen runtime views. A registry
      is built once and shared read-only by every document processed in a run.
    * Unknown keys resolve to a synthetic ``KeyConfig`` carrying the global
      defaults, so callers never branch on "configured or not".

Conflicts (one alias claimed by two canonical keys) are detected in
`MutableKeyRegistry.freeze` and raised as `ConfigConflictError`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

from trailmark.config.io import (
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
    warn_unknown_keys,
)
from trailmark.config.keys import Toml
from trailmark.config.logging import get_logger
from trailmark.config.policy import (
    ExistsPolicy,
    MissingPolicy,
    MutableTrailerPolicy,
    Placement,
    TrailerPolicy,
)
from trailmark.constants import (
    DEFAULT_SEPARATORS,
    PYPROJECT_TOML_NAME,
    PYPROJECT_TOOL_SECTION,
    TRAILMARK_TOML_NAME,
)
from trailmark.core.errors import ConfigConflictError, ConfigValueError
from trailmark.pipeline.model import NewTrailerSpec
from trailmark.pipeline.tokens import is_valid_key, is_valid_separators

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from trailmark.config.io import TomlTable
    from trailmark.config.logging import TrailmarkLogger

logger: TrailmarkLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class KeyConfig:
    """Resolved configuration of one canonical trailer key.

    Attributes:
        name (str): Canonical key name, used when rendering new trailers.
        aliases (tuple[str, ...]): Alternative names that resolve to ``name``.
        policy (TrailerPolicy): Default placement and existence/missing policies.
        separator (str): Separator used when rendering new trailers of this key.
        separators (str): Separator characters accepted when parsing.
        value (str | None): Value of an auto-added trailer, if configured.
        configured (bool): False for synthetic configs of unknown keys.
    """

    name: str
    aliases: tuple[str, ...] = ()
    policy: TrailerPolicy = field(default_factory=TrailerPolicy)
    separator: str = ":"
    separators: str = DEFAULT_SEPARATORS
    value: str | None = None
    configured: bool = False

    @property
    def default_where(self) -> Placement:
        """Default placement for new trailers of this key."""
        return self.policy.where

    @property
    def default_if_exists(self) -> ExistsPolicy:
        """Default action when the key already exists in the block."""
        return self.policy.if_exists

    @property
    def default_if_missing(self) -> MissingPolicy:
        """Default action when the key is absent from the block."""
        return self.policy.if_missing

    @property
    def separator_set(self) -> str:
        """Separator characters accepted for this key."""
        return self.separators


@dataclass(frozen=True)
class KeyRegistry:
    """Frozen, read-only mapping from key names and aliases to `KeyConfig`.

    Attributes:
        defaults (TrailerPolicy): Global default policy for unknown keys.
        separators (str): Accepted separator characters (first one renders).
        keys (tuple[KeyConfig, ...]): Configured keys, in declaration order.
    """

    defaults: TrailerPolicy = field(default_factory=TrailerPolicy)
    separators: str = DEFAULT_SEPARATORS
    keys: tuple[KeyConfig, ...] = ()
    _index: Mapping[str, KeyConfig] = field(
        default_factory=lambda: {}, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self._index and self.keys:
            # Registries built directly (e.g. in tests) get their index here.
            object.__setattr__(self, "_index", _build_index(self.keys))

    def resolve(self, token_key: str) -> KeyConfig:
        """Return the configuration for a key or alias (case-insensitive).

        Unknown keys resolve to a synthetic config that keeps the key as written
        and carries the global defaults.
        """
        found: KeyConfig | None = self._index.get(token_key.strip().casefold())
        if found is not None:
            return found
        return KeyConfig(
            name=token_key.strip(),
            policy=self.defaults,
            separator=self.separators[0],
            separators=self.separators,
        )

    def canonical(self, token_key: str) -> str:
        """Return the canonical name for a key or alias."""
        return self.resolve(token_key).name

    def auto_add_specs(self) -> list[NewTrailerSpec]:
        """Return specs for configured keys that carry a default ``value``."""
        return [NewTrailerSpec(key=kc.name, value=kc.value) for kc in self.keys if kc.value is not None]

    def without_key_defaults(self) -> KeyRegistry:
        """Return a registry whose keys keep their names but use the global policy.

        Used for ``only_input`` runs: aliases and separators still apply, but
        per-key policies and auto-added values are ignored.
        """
        stripped: tuple[KeyConfig, ...] = tuple(
            KeyConfig(
                name=kc.name,
                aliases=kc.aliases,
                policy=self.defaults,
                separator=kc.separator,
                separators=kc.separators,
                value=None,
                configured=True,
            )
            for kc in self.keys
        )
        return KeyRegistry(defaults=self.defaults, separators=self.separators, keys=stripped)

    def to_toml_dict(self) -> TomlTable:
        """Serialize the registry back to a TOML-compatible dict."""
        keys_tbl: TomlTable = {}
        for kc in self.keys:
            tbl: TomlTable = {Toml.KEY_KEY: kc.name}
            if kc.aliases:
                tbl[Toml.KEY_ALIASES] = list(kc.aliases)
            tbl.update(kc.policy.thaw().to_toml_table())
            tbl[Toml.KEY_SEPARATOR] = kc.separator
            if kc.value is not None:
                tbl[Toml.KEY_VALUE] = kc.value
            keys_tbl[kc.name] = tbl
        trailers_tbl: TomlTable = self.defaults.thaw().to_toml_table()
        trailers_tbl[Toml.KEY_SEPARATORS] = self.separators
        return {Toml.SECTION_TRAILERS: trailers_tbl, Toml.SECTION_KEYS: keys_tbl}


def _build_index(keys: Iterable[KeyConfig]) -> dict[str, KeyConfig]:
    """Index every name and alias of ``keys``; raise on aliases claimed twice."""
    index: dict[str, KeyConfig] = {}
    for kc in keys:
        for alias in (kc.name, *kc.aliases):
            folded: str = alias.casefold()
            seen: KeyConfig | None = index.get(folded)
            if seen is not None and seen.name.casefold() != kc.name.casefold():
                raise ConfigConflictError(folded, seen.name, kc.name)
            index[folded] = kc
    return index


@dataclass
class MutableKeyConfig:
    """Mutable builder for `KeyConfig`.

    Attributes:
        name (str): Table name under ``[keys]``; doubles as an alias.
        key (str | None): Canonical key; defaults to ``name`` when unset.
        aliases (list[str]): Extra aliases.
        policy (MutableTrailerPolicy): Tri-state policy overrides.
        separator (str | None): Rendering separator override.
        value (str | None): Auto-added value.
    """

    name: str
    key: str | None = None
    aliases: list[str] = field(default_factory=lambda: [])
    policy: MutableTrailerPolicy = field(default_factory=MutableTrailerPolicy)
    separator: str | None = None
    value: str | None = None

    @property
    def canonical(self) -> str:
        """Canonical key name (explicit ``key`` or the table name)."""
        return self.key or self.name

    def merge_with(self, other: MutableKeyConfig) -> MutableKeyConfig:
        """Return a new builder with ``other`` applied over ``self`` (last-wins, aliases union)."""
        aliases: list[str] = list(self.aliases)
        aliases.extend(a for a in other.aliases if a not in aliases)
        return MutableKeyConfig(
            name=self.name,
            key=other.key if other.key is not None else self.key,
            aliases=aliases,
            policy=self.policy.merge_with(other.policy),
            separator=other.separator if other.separator is not None else self.separator,
            value=other.value if other.value is not None else self.value,
        )

    def freeze(self, defaults: TrailerPolicy, separators: str) -> KeyConfig:
        """Resolve against the global defaults and validate.

        Raises:
            ConfigValueError: If the canonical key or an alias breaks the key grammar,
                or the separator is not one of the accepted separators.
        """
        canonical: str = self.canonical
        if not is_valid_key(canonical):
            raise ConfigValueError(f"[keys.{self.name}] invalid trailer key '{canonical}'")
        aliases: list[str] = []
        for alias in (self.name, *self.aliases):
            if not is_valid_key(alias):
                raise ConfigValueError(f"[keys.{self.name}] invalid alias '{alias}'")
            if alias.casefold() != canonical.casefold() and alias not in aliases:
                aliases.append(alias)
        separator: str = self.separator if self.separator is not None else separators[0]
        if len(separator) != 1 or separator not in separators:
            raise ConfigValueError(
                f"[keys.{self.name}] separator '{separator}' is not one of '{separators}'"
            )
        return KeyConfig(
            name=canonical,
            aliases=tuple(aliases),
            policy=self.policy.resolve(defaults),
            separator=separator,
            separators=separators,
            value=self.value,
            configured=True,
        )

    @classmethod
    def from_toml_table(cls, name: str, tbl: TomlTable) -> MutableKeyConfig:
        """Create a builder from a ``[keys.<name>]`` table.

        Raises:
            ConfigValueError: If a value has the wrong type.
        """
        warn_unknown_keys(tbl, Toml.ALLOWED_KEY_TABLE_KEYS, where=f"keys.{name}")

        def opt_str(key: str) -> str | None:
            raw: Any = tbl.get(key)
            if raw is None:
                return None
            if not isinstance(raw, str):
                raise ConfigValueError(f"[keys.{name}] {key}: expected a string, got {raw!r}")
            return raw

        raw_aliases: Any = tbl.get(Toml.KEY_ALIASES, [])
        if isinstance(raw_aliases, str):
            raw_aliases = [raw_aliases]
        if not isinstance(raw_aliases, list) or not all(isinstance(a, str) for a in raw_aliases):
            raise ConfigValueError(
                f"[keys.{name}] {Toml.KEY_ALIASES}: expected a list of strings, got {raw_aliases!r}"
            )

        key: str | None = opt_str(Toml.KEY_KEY)
        return cls(
            name=name,
            key=key.strip() if key is not None else None,
            aliases=[a.strip() for a in raw_aliases],
            policy=MutableTrailerPolicy.from_toml_table(tbl, where=f"keys.{name}"),
            separator=opt_str(Toml.KEY_SEPARATOR),
            value=opt_str(Toml.KEY_VALUE),
        )


@dataclass
class MutableKeyRegistry:
    """Mutable builder for `KeyRegistry`, merged last-wins across config layers.

    Attributes:
        defaults (MutableTrailerPolicy): Global policy overrides (``[trailers]``).
        separators (str | None): Accepted separators override.
        keys (dict[str, MutableKeyConfig]): Per-key builders by table name.
        config_files (list[Path]): Config files merged into this builder.
    """

    defaults: MutableTrailerPolicy = field(default_factory=MutableTrailerPolicy)
    separators: str | None = None
    keys: dict[str, MutableKeyConfig] = field(default_factory=lambda: {})
    config_files: list[Path] = field(default_factory=lambda: [])

    # ------------------------------- Loading -------------------------------

    @classmethod
    def from_defaults(cls) -> MutableKeyRegistry:
        """Return a builder populated from the bundled default configuration."""
        return cls.from_toml_dict(load_defaults_dict())

    @classmethod
    def from_toml_dict(cls, data: TomlTable) -> MutableKeyRegistry:
        """Create a builder from a parsed ``trailmark.toml``-shaped dict.

        Raises:
            ConfigValueError: If a table holds values of the wrong type.
        """
        warn_unknown_keys(data, Toml.ALLOWED_TOP_LEVEL_KEYS, where="top level")

        trailers_tbl: TomlTable = get_table_value(data, Toml.SECTION_TRAILERS)
        warn_unknown_keys(trailers_tbl, Toml.ALLOWED_TRAILERS_KEYS, where=Toml.SECTION_TRAILERS)

        separators: Any = trailers_tbl.get(Toml.KEY_SEPARATORS)
        if separators is not None and (
            not isinstance(separators, str) or not is_valid_separators(separators)
        ):
            raise ConfigValueError(
                f"[{Toml.SECTION_TRAILERS}] {Toml.KEY_SEPARATORS}: invalid value {separators!r}"
            )

        keys: dict[str, MutableKeyConfig] = {}
        for name, tbl in get_table_value(data, Toml.SECTION_KEYS).items():
            if not isinstance(tbl, dict):
                raise ConfigValueError(f"[keys.{name}] must be a table, got {tbl!r}")
            keys[name] = MutableKeyConfig.from_toml_table(name, tbl)

        return cls(
            defaults=MutableTrailerPolicy.from_toml_table(trailers_tbl),
            separators=separators,
            keys=keys,
        )

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableKeyRegistry | None:
        """Load a builder from ``trailmark.toml`` or the ``[tool.trailmark]`` table of ``pyproject.toml``.

        Returns:
            MutableKeyRegistry | None: The builder, or ``None`` when a ``pyproject.toml``
                has no ``[tool.trailmark]`` table.
        """
        logger.debug("Creating MutableKeyRegistry from TOML config: %s", path)
        data: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_TOML_NAME:
            data = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
            if not data:
                logger.debug("No [tool.%s] section in %s", PYPROJECT_TOOL_SECTION, path)
                return None
        draft: MutableKeyRegistry = cls.from_toml_dict(data)
        draft.config_files = [path]
        return draft

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files discovered by walking upward from ``start``.

        Files are returned **root-most → nearest**; within one directory
        ``pyproject.toml`` comes before ``trailmark.toml`` so the latter wins a
        later last-wins merge. A config setting ``root = true`` stops the walk
        after its directory.
        """
        per_dir: list[list[Path]] = []
        cur: Path = start.resolve()
        if cur.is_file():
            cur = cur.parent

        while True:
            root_stop_here = False
            dir_entries: list[Path] = []
            for name in (PYPROJECT_TOML_NAME, TRAILMARK_TOML_NAME):
                p: Path = cur / name
                if not p.is_file():
                    continue
                data: TomlTable = load_toml_dict(p)
                if name == PYPROJECT_TOML_NAME:
                    data = get_table_value(get_table_value(data, "tool"), PYPROJECT_TOOL_SECTION)
                    if not data:
                        continue
                dir_entries.append(p)
                logger.debug("Discovered config file: %s", p)
                if bool(data.get(Toml.KEY_ROOT, False)):
                    root_stop_here = True

            if dir_entries:
                per_dir.append(dir_entries)

            parent: Path = cur.parent
            if parent == cur or root_stop_here:
                break
            cur = parent

        ordered: list[Path] = []
        for dir_list in reversed(per_dir):
            ordered.extend(dir_list)
        return ordered

    @classmethod
    def discover_user_config_file(cls) -> Path | None:
        """Return a user-scoped config path if it exists.

        Looks under ``$XDG_CONFIG_HOME/trailmark/trailmark.toml`` and a legacy
        fallback (``~/.trailmark.toml``).
        """
        xdg: str | None = os.environ.get("XDG_CONFIG_HOME")
        base: Path = Path(xdg) if xdg else Path.home() / ".config"
        for p in (base / "trailmark" / TRAILMARK_TOML_NAME, Path.home() / f".{TRAILMARK_TOML_NAME}"):
            if p.is_file():
                return p
        return None

    @classmethod
    def load_merged(
        cls,
        *,
        anchor: Path | None = None,
        extra_config_files: Iterable[Path] | None = None,
        no_config: bool = False,
    ) -> MutableKeyRegistry:
        """Discover and merge configuration layers into a draft registry.

        Merge order (lowest → highest precedence):
            1) Built-in defaults
            2) User config (XDG / legacy)
            3) Project configs discovered upward, root-most first
            4) Extra config files passed explicitly (in the order provided)

        Args:
            anchor (Path | None): Directory (or file) where discovery starts; CWD if None.
            extra_config_files (Iterable[Path] | None): Explicit files merged last.
            no_config (bool): If True, skip user and project discovery.

        Returns:
            MutableKeyRegistry: A draft ready to be frozen.
        """
        draft: MutableKeyRegistry = cls.from_defaults()

        if not no_config:
            user_cfg_path: Path | None = cls.discover_user_config_file()
            if user_cfg_path is not None:
                user_cfg: MutableKeyRegistry | None = cls.from_toml_file(user_cfg_path)
                if user_cfg is not None:
                    draft = draft.merge_with(user_cfg)

            for cfg_path in cls.discover_local_config_files(anchor or Path.cwd()):
                mc: MutableKeyRegistry | None = cls.from_toml_file(cfg_path)
                if mc is not None:
                    draft = draft.merge_with(mc)

        for extra in extra_config_files or ():
            mc = cls.from_toml_file(Path(extra))
            if mc is not None:
                draft = draft.merge_with(mc)

        logger.debug("Merged config files: %s", draft.config_files)
        return draft

    # ------------------------------- Merging -------------------------------

    def merge_with(self, other: MutableKeyRegistry) -> MutableKeyRegistry:
        """Return a new draft where values from ``other`` override this draft."""
        keys: dict[str, MutableKeyConfig] = dict(self.keys)
        for name, kc in other.keys.items():
            keys[name] = keys[name].merge_with(kc) if name in keys else kc
        return MutableKeyRegistry(
            defaults=self.defaults.merge_with(other.defaults),
            separators=other.separators if other.separators is not None else self.separators,
            keys=keys,
            config_files=[*self.config_files, *other.config_files],
        )

    def freeze(self) -> KeyRegistry:
        """Validate and freeze into a read-only `KeyRegistry`.

        Tables that declare the same canonical key (case-insensitive) are merged
        in declaration order before freezing; the first spelling of the key wins.

        Raises:
            ConfigConflictError: If an alias maps to two different canonical keys.
            ConfigValueError: If a key, alias or separator is invalid.
        """
        separators: str = self.separators or DEFAULT_SEPARATORS
        defaults: TrailerPolicy = self.defaults.freeze()

        grouped: dict[str, MutableKeyConfig] = {}
        for kc in self.keys.values():
            folded: str = kc.canonical.casefold()
            if folded in grouped:
                prev: MutableKeyConfig = grouped[folded]
                merged: MutableKeyConfig = prev.merge_with(kc)
                merged.key = prev.canonical
                if kc.name not in merged.aliases and kc.name != merged.name:
                    merged.aliases.append(kc.name)
                grouped[folded] = merged
            else:
                grouped[folded] = kc

        frozen: tuple[KeyConfig, ...] = tuple(
            kc.freeze(defaults, separators) for kc in grouped.values()
        )
        index: dict[str, KeyConfig] = _build_index(frozen)
        logger.debug("Key registry frozen with %d configured key(s)", len(frozen))
        return KeyRegistry(defaults=defaults, separators=separators, keys=frozen, _index=index)


def load_registry(
    *,
    anchor: Path | None = None,
    extra_config_files: Iterable[Path] | None = None,
    no_config: bool = False,
) -> KeyRegistry:
    """Discover, merge and freeze the key registry in one call.

    Raises:
        ConfigConflictError: If an alias maps to two different canonical keys.
        ConfigValueError: If a configuration value is invalid.
    """
    return MutableKeyRegistry.load_merged(
        anchor=anchor,
        extra_config_files=extra_config_files,
        no_config=no_config,
    ).freeze()


@lru_cache(maxsize=1)
def default_registry() -> KeyRegistry:
    """Return the registry built from the bundled defaults only (cached)."""
    return MutableKeyRegistry.from_defaults().freeze()


def resolve_key_defaults(key: str, registry: KeyRegistry | None = None) -> KeyConfig:
    """Resolve ``key`` (name or alias) to its canonical `KeyConfig`.

    Args:
        key (str): Key or alias as written by the caller.
        registry (KeyRegistry | None): Registry to consult; the built-in defaults
            when ``None``.

    Returns:
        KeyConfig: The configured entry, or a synthetic one carrying the global defaults.
    """
    return (registry or default_registry()).resolve(key)
