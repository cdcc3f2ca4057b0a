# topmark:header:start
#
#   project      : Trailmark
#   file         : __init__.py
#   file_relpath : src/trailmark/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Trailer processing pipeline.

The pipeline turns a document into its rewritten form in four steps:

    locate → parse → merge → render

Each step is a `BaseStep` instance operating on a per-document
`ProcessingContext`; named step sequences live in `trailmark.pipeline.pipelines`
and are executed by `trailmark.pipeline.runner.run`.

This package module imports nothing: the tokenizer and the data model are also
used from the configuration layer.
"""
