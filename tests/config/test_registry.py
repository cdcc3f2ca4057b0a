# topmark:header:start
#
#   project      : Trailmark
#   file         : test_registry.py
#   file_relpath : tests/config/test_registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the key registry: alias resolution, layering, validation and discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.conftest import SOB_REGISTRY_DATA, make_registry
from trailmark.config.policy import ExistsPolicy, MissingPolicy, Placement, TrailerPolicy
from trailmark.config.registry import (
    KeyConfig,
    KeyRegistry,
    MutableKeyRegistry,
    default_registry,
    load_registry,
    resolve_key_defaults,
)
from trailmark.core.errors import ConfigConflictError, ConfigError, ConfigValueError
from trailmark.pipeline.model import NewTrailerSpec

if TYPE_CHECKING:
    from pathlib import Path


def test_unknown_key_resolves_to_global_defaults() -> None:
    kc: KeyConfig = default_registry().resolve("Reviewed-by")

    assert kc.name == "Reviewed-by"
    assert not kc.configured
    assert kc.default_where is Placement.END
    assert kc.default_if_exists is ExistsPolicy.ADD_IF_DIFFERENT
    assert kc.default_if_missing is MissingPolicy.ADD
    assert kc.separator == ":"
    assert kc.separator_set == ":="


@pytest.mark.parametrize("alias", ["sob", "SOB", "Signed-off-by", "signed-OFF-by"])
def test_aliases_resolve_case_insensitively(alias: str) -> None:
    registry: KeyRegistry = make_registry(SOB_REGISTRY_DATA)
    assert registry.canonical(alias) == "Signed-off-by"
    assert registry.resolve(alias).configured


def test_extra_aliases_and_table_name_both_resolve() -> None:
    registry: KeyRegistry = make_registry(SOB_REGISTRY_DATA)
    assert registry.canonical("co") == "Co-authored-by"
    assert registry.canonical("coauthor") == "Co-authored-by"
    assert registry.resolve("co").aliases == ("coauthor", "co")


def test_per_key_policy_inherits_unset_fields_from_trailers_table() -> None:
    registry: KeyRegistry = make_registry(
        {
            "trailers": {"if_missing": "doNothing"},
            "keys": {"sob": {"key": "Signed-off-by", "where": "after", "separator": "="}},
        }
    )
    kc: KeyConfig = resolve_key_defaults("sob", registry)

    assert kc.policy == TrailerPolicy(
        where=Placement.AFTER,
        if_exists=ExistsPolicy.ADD_IF_DIFFERENT,
        if_missing=MissingPolicy.DO_NOTHING,
    )
    assert kc.separator == "="
    # Unknown keys pick up the changed global default too.
    assert registry.resolve("Acked-by").default_if_missing is MissingPolicy.DO_NOTHING


def test_alias_claimed_twice_is_a_conflict() -> None:
    with pytest.raises(ConfigConflictError) as excinfo:
        make_registry(
            {
                "keys": {
                    "sob": {"key": "Signed-off-by", "aliases": ["s"]},
                    "sug": {"key": "Suggested-by", "aliases": ["S"]},
                }
            }
        )
    assert excinfo.value.alias == "s"
    assert {excinfo.value.first, excinfo.value.second} == {"Signed-off-by", "Suggested-by"}


def test_tables_with_the_same_canonical_key_are_merged() -> None:
    registry: KeyRegistry = make_registry(
        {
            "keys": {
                "sob": {"key": "Signed-off-by", "where": "start"},
                "signoff": {"key": "signed-off-by", "if_exists": "replace"},
            }
        }
    )
    kc: KeyConfig = registry.resolve("signoff")

    assert kc.name == "Signed-off-by"
    assert kc.default_where is Placement.START
    assert kc.default_if_exists is ExistsPolicy.REPLACE
    assert len(registry.keys) == 1


@pytest.mark.parametrize(
    "data",
    [
        {"keys": {"bad": {"key": "1nvalid"}}},
        {"keys": {"sob": {"key": "Signed-off-by", "aliases": ["has space"]}}},
        {"keys": {"sob": {"key": "Signed-off-by", "separator": "#"}}},
        {"keys": {"sob": {"key": "Signed-off-by", "where": "middle"}}},
        {"keys": {"sob": {"key": 42}}},
        {"keys": {"sob": "Signed-off-by"}},
        {"trailers": {"separators": "a:"}},
    ],
)
def test_invalid_values_raise_config_value_error(data: dict[str, Any]) -> None:
    with pytest.raises(ConfigValueError):
        make_registry(data)


def test_config_errors_share_a_base_class() -> None:
    assert issubclass(ConfigConflictError, ConfigError)
    assert issubclass(ConfigValueError, ConfigError)


def test_auto_add_specs_come_from_configured_values() -> None:
    registry: KeyRegistry = make_registry(
        {"keys": {"sob": {"key": "Signed-off-by", "value": "Bot <bot@x.org>"}}}
    )
    assert registry.auto_add_specs() == [NewTrailerSpec(key="Signed-off-by", value="Bot <bot@x.org>")]


def test_without_key_defaults_keeps_aliases_but_drops_policies_and_values() -> None:
    registry: KeyRegistry = make_registry(
        {"keys": {"sob": {"key": "Signed-off-by", "where": "start", "value": "Bot"}}}
    )
    stripped: KeyRegistry = registry.without_key_defaults()

    assert stripped.canonical("sob") == "Signed-off-by"
    assert stripped.resolve("sob").default_where is Placement.END
    assert stripped.auto_add_specs() == []


def test_registry_built_directly_gets_an_index() -> None:
    registry = KeyRegistry(keys=(KeyConfig(name="Fixes", aliases=("fix",), configured=True),))
    assert registry.canonical("FIX") == "Fixes"


def test_to_toml_dict_round_trips_through_the_builder() -> None:
    registry: KeyRegistry = make_registry(
        {"keys": {"sob": {"key": "Signed-off-by", "aliases": ["s"], "where": "after"}}}
    )
    again: KeyRegistry = MutableKeyRegistry.from_toml_dict(registry.to_toml_dict()).freeze()

    assert again.resolve("s") == registry.resolve("s")
    assert again.defaults == registry.defaults


# ------------------------------- Discovery -------------------------------


def test_discovery_orders_root_most_first_and_honors_root(tmp_path: Path) -> None:
    outer: Path = tmp_path / "outer"
    inner: Path = outer / "inner"
    inner.mkdir(parents=True)
    (tmp_path / "trailmark.toml").write_text('[trailers]\nwhere = "start"\n', encoding="utf-8")
    (outer / "trailmark.toml").write_text("root = true\n", encoding="utf-8")
    (inner / "pyproject.toml").write_text(
        '[tool.trailmark.trailers]\nwhere = "before"\n', encoding="utf-8"
    )
    (inner / "trailmark.toml").write_text('[trailers]\nwhere = "after"\n', encoding="utf-8")

    found: list[Path] = MutableKeyRegistry.discover_local_config_files(inner)

    assert found == [
        (outer / "trailmark.toml").resolve(),
        (inner / "pyproject.toml").resolve(),
        (inner / "trailmark.toml").resolve(),
    ]


def test_pyproject_without_tool_section_is_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    (tmp_path / "trailmark.toml").write_text("root = true\n", encoding="utf-8")

    assert MutableKeyRegistry.from_toml_file(tmp_path / "pyproject.toml") is None
    assert MutableKeyRegistry.discover_local_config_files(tmp_path) == [
        (tmp_path / "trailmark.toml").resolve()
    ]


def test_load_registry_layers_user_project_and_explicit_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    xdg: Path = tmp_path / "xdg"
    (xdg / "trailmark").mkdir(parents=True)
    (xdg / "trailmark" / "trailmark.toml").write_text(
        '[keys.sob]\nkey = "Signed-off-by"\nwhere = "start"\nif_exists = "add"\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))

    project: Path = tmp_path / "project"
    project.mkdir()
    (project / "trailmark.toml").write_text(
        'root = true\n[keys.sob]\nwhere = "after"\n', encoding="utf-8"
    )
    extra: Path = tmp_path / "extra.toml"
    extra.write_text('[keys.sob]\nif_exists = "replace"\n', encoding="utf-8")

    registry: KeyRegistry = load_registry(anchor=project, extra_config_files=[extra])
    kc: KeyConfig = registry.resolve("sob")

    assert kc.name == "Signed-off-by"
    assert kc.default_where is Placement.AFTER
    assert kc.default_if_exists is ExistsPolicy.REPLACE

    bare: KeyRegistry = load_registry(anchor=project, no_config=True)
    assert not bare.resolve("sob").configured


def test_load_registry_surfaces_conflicts(tmp_path: Path) -> None:
    (tmp_path / "trailmark.toml").write_text(
        'root = true\n[keys.a]\nkey = "Acked-by"\naliases = ["x"]\n'
        '[keys.b]\nkey = "Bug"\naliases = ["x"]\n',
        encoding="utf-8",
    )
    with pytest.raises(ConfigConflictError):
        load_registry(anchor=tmp_path)
