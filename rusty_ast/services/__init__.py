"""Render pipeline services package."""

from rusty_ast.services.source_adapter import (
    build_tree,
    load_source_unit,
    make_options,
    make_renderer,
    render,
    render_formats,
    render_tree,
    select_frontend,
)
from rusty_ast.services.batch_renderer import (
    BatchRenderer,
    UnitResult,
    discover_sources,
)

__all__ = [
    'build_tree',
    'load_source_unit',
    'make_options',
    'make_renderer',
    'render',
    'render_formats',
    'render_tree',
    'select_frontend',
    'BatchRenderer',
    'UnitResult',
    'discover_sources',
]
