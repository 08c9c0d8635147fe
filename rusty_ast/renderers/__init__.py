"""Output renderers driven by the traversal engine."""

from rusty_ast.renderers.json import JsonRenderer
from rusty_ast.renderers.text import TextRenderer, format_line, format_value, render_document

__all__ = ["JsonRenderer", "TextRenderer", "format_line", "format_value", "render_document"]
