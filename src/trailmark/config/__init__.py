# topmark:header:start
#
#   project      : Trailmark
#   file         : __init__.py
#   file_relpath : src/trailmark/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer: policies, TOML I/O, logging and the key registry.

Import concrete modules directly (``trailmark.config.registry``,
``trailmark.config.policy``); this package module stays import-light so the
pipeline tokenizer can be shared with the registry without cycles.
"""
