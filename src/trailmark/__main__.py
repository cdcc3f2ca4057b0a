# topmark:header:start
#
#   project      : Trailmark
#   file         : __main__.py
#   file_relpath : src/trailmark/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running Trailmark via ``python -m trailmark``.

It delegates directly to :func:`trailmark.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how Trailmark is launched.

Examples:
    Add a sign-off to a commit message file::

        python -m trailmark interpret --trailer "Signed-off-by: Jane <j@x.org>" MSG
"""

from __future__ import annotations

from trailmark.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
