"""
rusty-ast: render Rust syntax trees as text outlines or JSON documents.

A source unit is parsed by a language front-end, converted into the syntax
node model, and walked once per output format by a single traversal engine.
"""

__version__ = "0.1.0"

from rusty_ast.errors import InvalidConfiguration, ParseFailed, RenderError, SourceUnavailable
from rusty_ast.models.options import OutputFormat, RenderOptions
from rusty_ast.services.source_adapter import (
    build_tree,
    load_source_unit,
    make_options,
    render,
    render_formats,
    render_tree,
)

__all__ = [
    "__version__",
    "InvalidConfiguration",
    "ParseFailed",
    "RenderError",
    "SourceUnavailable",
    "OutputFormat",
    "RenderOptions",
    "build_tree",
    "load_source_unit",
    "make_options",
    "render",
    "render_formats",
    "render_tree",
]
