# topmark:header:start
#
#   project      : Trailmark
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the Trailmark test suite.

This file sets up global fixtures and customizes the logging configuration for
test runs.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build registries using `trailmark.config.registry.MutableKeyRegistry`
      (mutable), then `freeze()` into a `KeyRegistry` for **public API** calls
      (``trailmark.api.process/parse``), or pass a TOML-shaped mapping.
    - Do **not** mutate a frozen `KeyRegistry`; frozen dataclasses reject it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from trailmark.config import logging
from trailmark.config.registry import KeyRegistry, MutableKeyRegistry

if TYPE_CHECKING:
    from pathlib import Path

F = TypeVar("F", bound=Callable[..., object])

# Type of the decorator itself: it takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.pipeline`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_pipeline: DecoratorType[Any] = as_typed_mark(pytest.mark.pipeline)
mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_trailmark_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure Trailmark's runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    TRAILMARK_LOG_LEVEL in their shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to manipulate
            environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own ``trailmark.toml`` out of config discovery.

    ``XDG_CONFIG_HOME`` and ``HOME`` point into the test's temporary directory.
    """
    home: Path = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the log level to TRACE so step decisions show up in failing test output.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test in an isolated project directory.

    The directory carries ``root = true`` so config discovery never walks into
    the repository that holds the test suite.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    (cwd / "trailmark.toml").write_text("root = true\n", encoding="utf-8")
    monkeypatch.chdir(cwd)
    return cwd


def make_registry(data: dict[str, Any] | None = None) -> KeyRegistry:
    """Return a frozen `KeyRegistry` built from the defaults plus a TOML-shaped mapping.

    Args:
        data (dict[str, Any] | None): Mapping shaped like ``trailmark.toml``.

    Returns:
        KeyRegistry: The frozen registry.
    """
    draft: MutableKeyRegistry = MutableKeyRegistry.from_defaults()
    if data:
        draft = draft.merge_with(MutableKeyRegistry.from_toml_dict(data))
    return draft.freeze()


SOB_REGISTRY_DATA: dict[str, Any] = {
    "keys": {
        "sob": {"key": "Signed-off-by"},
        "coauthor": {"key": "Co-authored-by", "aliases": ["co"]},
    }
}
