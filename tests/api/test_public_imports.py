# topmark:header:start
#
#   project      : Trailmark
#   file         : test_public_imports.py
#   file_relpath : tests/api/test_public_imports.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Guard the public API surface exported by `trailmark.api`."""

from __future__ import annotations

from trailmark import api

EXPECTED: list[str] = [
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


def test_public_api_all_is_stable() -> None:
    assert sorted(api.__all__) == sorted(EXPECTED)
    for name in EXPECTED:
        assert hasattr(api, name), name
