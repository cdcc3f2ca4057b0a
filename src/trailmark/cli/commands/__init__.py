# topmark:header:start
#
#   project      : Trailmark
#   file         : __init__.py
#   file_relpath : src/trailmark/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailmark CLI subcommands."""
