# topmark:header:start
#
#   project      : Trailmark
#   file         : tokens.py
#   file_relpath : src/trailmark/pipeline/tokens.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailer line grammar.

A trailer line has the form ``key<sep>value`` where ``key`` starts with a
letter and continues with letters, digits and dashes, and ``<sep>`` is one of
the configured separator characters (``:`` and ``=`` by default). Whitespace
around the separator and around the value is insignificant.

The legacy cherry-pick note ``(cherry picked from commit <hash>)`` is also
accepted as a trailer line; it is flagged with ``is_legacy_cc`` and always
re-emitted verbatim.

This module has no dependencies on the config layer so the key registry can
reuse the key grammar for validation.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Final

from trailmark.constants import DEFAULT_SEPARATORS, DIVIDER, LEGACY_CHERRY_PICK_PREFIX
from trailmark.pipeline.model import TrailerToken

KEY_PATTERN: Final[str] = r"[A-Za-z][A-Za-z0-9-]*"

_KEY_RE: Final[re.Pattern[str]] = re.compile(rf"^{KEY_PATTERN}$")

_DIVIDER_RE: Final[re.Pattern[str]] = re.compile(rf"^{re.escape(DIVIDER)}\s*$")


def is_valid_key(key: str) -> bool:
    """Return True if ``key`` matches the trailer key grammar."""
    return _KEY_RE.match(key) is not None


def is_valid_separators(separators: str) -> bool:
    """Return True if every character can act as a key/value separator.

    Separators must not be whitespace or characters that can appear in a key.
    """
    return bool(separators) and all(
        not c.isspace() and not c.isalnum() and c != "-" for c in separators
    )


@lru_cache(maxsize=32)
def token_regex(separators: str = DEFAULT_SEPARATORS) -> re.Pattern[str]:
    """Return the compiled trailer line pattern for a separator set.

    Groups: 1 = key, 2 = separator, 3 = value (trimmed).
    """
    sep_class: str = "".join(re.escape(c) for c in separators)
    return re.compile(rf"^\s*({KEY_PATTERN})\s*([{sep_class}])\s*(.*?)\s*$")


def strip_line_ending(line: str) -> str:
    r"""Return ``line`` without its trailing ``\n``/``\r\n``/``\r``."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def line_ending_of(line: str) -> str:
    """Return the line ending sequence of ``line`` (empty when it has none)."""
    return line[len(strip_line_ending(line)) :]


def is_blank(line: str) -> bool:
    """Return True for lines holding only whitespace."""
    return not line.strip()


def is_divider(line: str) -> bool:
    """Return True if ``line`` is a standalone three-dash divider."""
    return _DIVIDER_RE.match(strip_line_ending(line)) is not None


def starts_with_whitespace(line: str) -> bool:
    """Return True for non-blank lines indented by spaces or tabs (continuations)."""
    return bool(line) and line[0] in " \t" and not is_blank(line)


def parse_token(line: str, separators: str = DEFAULT_SEPARATORS) -> TrailerToken | None:
    """Parse one physical line into a `TrailerToken`.

    Args:
        line (str): The line, with or without its line ending.
        separators (str): Accepted separator characters.

    Returns:
        TrailerToken | None: The token, or ``None`` when the line is not a trailer.
    """
    raw: str = strip_line_ending(line)
    if raw.startswith(LEGACY_CHERRY_PICK_PREFIX):
        return TrailerToken(
            key=LEGACY_CHERRY_PICK_PREFIX.rstrip(),
            separator="",
            value=raw[len(LEGACY_CHERRY_PICK_PREFIX) :].strip(),
            raw_line=raw,
            is_legacy_cc=True,
        )
    m: re.Match[str] | None = token_regex(separators).match(raw)
    if m is None:
        return None
    return TrailerToken(
        key=m.group(1),
        separator=m.group(2),
        value=m.group(3),
        raw_line=raw,
    )


def split_trailer_arg(arg: str, separators: str = DEFAULT_SEPARATORS) -> tuple[str, str]:
    """Split a ``key<sep>value`` argument as given on the command line.

    The first separator character splits key from value; an argument without a
    separator is a bare key with an empty value.

    Args:
        arg (str): The raw argument, e.g. ``"sob=Jane <j@x.org>"``.
        separators (str): Accepted separator characters.

    Returns:
        tuple[str, str]: ``(key, value)``, both stripped.
    """
    for i, c in enumerate(arg):
        if c in separators:
            return arg[:i].strip(), arg[i + 1 :].strip()
    return arg.strip(), ""


def unfold_value(value: str) -> str:
    """Join a folded (multi-line) value onto one line.

    Each line break, together with the whitespace around it, becomes a single space.
    """
    if "\n" not in value:
        return value
    return " ".join(part.strip() for part in value.split("\n") if part.strip())


_LINE_RE: Final[re.Pattern[str]] = re.compile(r"[^\n]*\n|[^\n]+\Z")


def split_lines(text: str) -> list[str]:
    r"""Split ``text`` into physical lines, keeping ``\n``/``\r\n`` endings.

    Unlike `str.splitlines`, only ``\n`` ends a line, so form feeds and other
    Unicode line separators stay inside the line they appear in.
    """
    return _LINE_RE.findall(text)
