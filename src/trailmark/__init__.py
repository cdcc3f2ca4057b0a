# topmark:header:start
#
#   project      : Trailmark
#   file         : __init__.py
#   file_relpath : src/trailmark/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark package.

Trailmark locates, parses, and rewrites the block of ``Key: value`` trailer
lines at the end of a text document (typically a commit message). It exposes
a small typed API (`trailmark.api`) and a Click CLI (`trailmark.cli`).
"""

from __future__ import annotations
