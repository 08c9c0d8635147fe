"""Data models for the Rust AST renderer."""

from .error import ErrorRecord
from .options import OutputFormat, RenderOptions
from .source_unit import SourceLocation, SourceUnit
from .syntax_node import (
    KIND_SCHEMAS,
    PLACEHOLDER,
    FieldValue,
    NodeCategory,
    NodeKind,
    NodeSchema,
    SyntaxNode,
    empty_node,
    make_node,
    unsupported_node,
)

__all__ = [
    # Syntax node models
    "KIND_SCHEMAS",
    "PLACEHOLDER",
    "FieldValue",
    "NodeCategory",
    "NodeKind",
    "NodeSchema",
    "SyntaxNode",
    "empty_node",
    "make_node",
    "unsupported_node",
    # Source unit models
    "SourceLocation",
    "SourceUnit",
    # Option models
    "OutputFormat",
    "RenderOptions",
    # Error models
    "ErrorRecord",
]
