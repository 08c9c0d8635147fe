"""
JSON document renderer.

Every node becomes ``{"kind": ..., "fields": {...}, "children": [...]}``
with all three keys present. The root object is the source-unit node.

The document is written out piece by piece from ENTER/EXIT events, so the
output layout matches ``json.dumps`` while tree depth stays bounded only by
memory. Only field dicts and labels go through ``json.dumps``.
"""

import json
from typing import Any, Dict, List, Optional

from rusty_ast.models.syntax_node import SyntaxNode
from rusty_ast.traversal.walker import SyntaxVisitor, TraversalEvent, traverse


class JsonRenderer(SyntaxVisitor):
    """Writes a nested JSON document from traversal events."""

    def __init__(self, indent: Optional[int] = 2, compact: bool = False):
        """
        Initialize the renderer.

        Args:
            indent: Indentation of pretty-printed output
            compact: Emit the whole document on one line
        """
        self.indent = None if compact else indent
        self.compact = compact
        if compact:
            self._item_sep, self._key_sep = ",", ":"
        elif indent is None:
            self._item_sep, self._key_sep = ", ", ": "
        else:
            self._item_sep, self._key_sep = ",", ": "
        self._parts: List[str] = []
        # Children written so far, one entry per open node
        self._written: List[int] = []

    def _newline(self, level: int) -> str:
        if self.indent is None:
            return ""
        return "\n" + " " * (self.indent * level)

    def _dumps(self, value: Any, level: int) -> str:
        text = json.dumps(
            value,
            ensure_ascii=False,
            indent=self.indent,
            separators=(self._item_sep, self._key_sep),
        )
        if self.indent is None:
            return text
        return text.replace("\n", self._newline(level))

    def _key(self, name: str, level: int) -> str:
        return f'{self._newline(level)}"{name}"{self._key_sep}'

    def enter(self, event: TraversalEvent) -> None:
        # A node at depth d sits inside d objects and d children arrays
        level = 2 * event.depth
        if self._written:
            if self._written[-1]:
                self._parts.append(self._item_sep)
            self._written[-1] += 1
            self._parts.append(self._newline(level))

        # bool/int/float stay native JSON values, everything else is a string
        self._parts.append(
            "{"
            + self._key("kind", level + 1) + self._dumps(event.label, level + 1) + self._item_sep
            + self._key("fields", level + 1) + self._dumps(dict(event.fields), level + 1) + self._item_sep
            + self._key("children", level + 1) + "["
        )
        self._written.append(0)

    def exit(self, event: TraversalEvent) -> None:
        level = 2 * event.depth
        if self._written.pop():
            self._parts.append(self._newline(level + 1))
        self._parts.append("]" + self._newline(level) + "}")

    def render(self, root: SyntaxNode) -> str:
        self._parts = []
        self._written = []
        traverse(root, self)
        output, self._parts = "".join(self._parts), []
        return output

    def to_document(self, root: SyntaxNode) -> Dict[str, Any]:
        """Render the tree into a JSON-compatible dict."""
        builder = _DocumentBuilder()
        traverse(root, builder)
        return builder.root


class _DocumentBuilder(SyntaxVisitor):
    """Builds the document as nested dicts instead of text."""

    def __init__(self):
        self._stack: List[Dict[str, Any]] = []
        self.root: Optional[Dict[str, Any]] = None

    def enter(self, event: TraversalEvent) -> None:
        obj: Dict[str, Any] = {
            "kind": event.label,
            "fields": dict(event.fields),
            "children": [],
        }
        if self._stack:
            self._stack[-1]["children"].append(obj)
        else:
            self.root = obj
        self._stack.append(obj)

    def exit(self, event: TraversalEvent) -> None:
        self._stack.pop()
