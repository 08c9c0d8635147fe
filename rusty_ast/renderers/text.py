"""
Indented text outline renderer.

One line per node: ``<indent><label>:`` followed by ``name=value`` pairs.
The source-unit root produces no line, so top-level items start at column 0
and each further ancestor adds one indentation level.
"""

from typing import Any, Dict, Iterable, List, Tuple

from rusty_ast.errors import InvalidConfiguration
from rusty_ast.models.options import MAX_INDENT, MIN_INDENT
from rusty_ast.models.syntax_node import FieldValue, SyntaxNode
from rusty_ast.traversal.walker import SyntaxVisitor, TraversalEvent, traverse


def format_value(value: FieldValue) -> str:
    """Literal textual form of a field value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    # One line per node, even for multi-line literals; backslashes first so
    # a source escape like `\n` stays distinct from a real newline
    text = str(value).replace("\\", "\\\\")
    return text.replace("\r", "\\r").replace("\n", "\\n")


def format_line(label: str, fields: Iterable[Tuple[str, FieldValue]]) -> str:
    pairs = ", ".join(f"{name}={format_value(value)}" for name, value in fields)
    if pairs:
        return f"{label}: {pairs}"
    return f"{label}:"


def check_indent_width(indent_width: int) -> int:
    """
    Validate an indentation width.

    Raises:
        InvalidConfiguration: If the width is not an integer in range
    """
    if isinstance(indent_width, bool) or not isinstance(indent_width, int):
        raise InvalidConfiguration(f"indent must be an integer, got {indent_width!r}")
    if not MIN_INDENT <= indent_width <= MAX_INDENT:
        raise InvalidConfiguration(
            f"indent must be between {MIN_INDENT} and {MAX_INDENT}, got {indent_width}"
        )
    return indent_width


class TextRenderer(SyntaxVisitor):
    """Renders traversal events as an indented outline."""

    def __init__(self, indent_width: int = 2):
        """
        Initialize the renderer.

        Args:
            indent_width: Spaces per depth level

        Raises:
            InvalidConfiguration: If indent_width is out of range
        """
        self.indent_width = check_indent_width(indent_width)
        self._lines: List[str] = []

    def enter(self, event: TraversalEvent) -> None:
        if event.depth == 0:
            return
        indent = " " * ((event.depth - 1) * self.indent_width)
        self._lines.append(indent + format_line(event.label, event.fields))

    def render_lines(self, root: SyntaxNode) -> List[str]:
        self._lines = []
        traverse(root, self)
        lines, self._lines = self._lines, []
        return lines

    def render(self, root: SyntaxNode) -> str:
        return "\n".join(self.render_lines(root))


def render_document(document: Dict[str, Any], indent_width: int = 2) -> str:
    """
    Rebuild the text outline from a JSON document.

    Replays the indentation rule over nested ``children`` arrays, which shows
    the JSON form carries everything the text form does.

    Args:
        document: Parsed JSON document produced by JsonRenderer
        indent_width: Spaces per depth level

    Returns:
        Text outline identical to TextRenderer output for the same tree
    """
    check_indent_width(indent_width)
    lines: List[str] = []
    stack = [(document, 0)]
    while stack:
        obj, depth = stack.pop()
        if depth > 0:
            indent = " " * ((depth - 1) * indent_width)
            lines.append(indent + format_line(obj["kind"], obj["fields"].items()))
        for child in reversed(obj["children"]):
            stack.append((child, depth + 1))
    return "\n".join(lines)
