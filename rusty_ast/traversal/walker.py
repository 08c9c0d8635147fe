"""
Depth-first traversal of the syntax tree.

The walk emits an ENTER event before a node's children and an EXIT event
after them. Renderers subclass ``SyntaxVisitor`` and consume the events; they
never walk the tree themselves, so every output format sees the same node
sequence.
"""

from enum import Enum
from typing import Iterator, List, NamedTuple, Tuple

from rusty_ast.models.syntax_node import KIND_SCHEMAS, FieldValue, NodeKind, SyntaxNode


class EventType(str, Enum):
    """Traversal event type."""

    ENTER = "enter"
    EXIT = "exit"


class TraversalEvent(NamedTuple):
    """Notification emitted while walking the tree."""

    event_type: EventType
    node: SyntaxNode
    depth: int

    @property
    def kind(self) -> NodeKind:
        return self.node.kind

    @property
    def label(self) -> str:
        return self.node.kind.value

    @property
    def fields(self) -> Tuple[Tuple[str, FieldValue], ...]:
        """Field name/value pairs in the order declared by the kind's schema."""
        values = self.node.fields
        return tuple((name, values[name]) for name in KIND_SCHEMAS[self.node.kind].fields)


class SyntaxVisitor:
    """Base class for traversal event consumers."""

    def enter(self, event: TraversalEvent) -> None:
        """Called before the node's children are visited."""

    def exit(self, event: TraversalEvent) -> None:
        """Called after the node's children are visited."""


def walk(root: SyntaxNode) -> Iterator[TraversalEvent]:
    """
    Walk the tree depth-first in pre-order.

    Uses an explicit stack so tree depth is not bounded by the interpreter's
    recursion limit.

    Args:
        root: Root node (depth 0)

    Yields:
        ENTER and EXIT events, children in source order
    """
    stack: List[Tuple[SyntaxNode, int, bool]] = [(root, 0, False)]
    while stack:
        node, depth, leaving = stack.pop()
        if leaving:
            yield TraversalEvent(EventType.EXIT, node, depth)
            continue

        yield TraversalEvent(EventType.ENTER, node, depth)
        stack.append((node, depth, True))
        for child in reversed(node.children):
            stack.append((child, depth + 1, False))


def traverse(root: SyntaxNode, visitor: SyntaxVisitor) -> None:
    """Drive a visitor over every event of a walk."""
    for event in walk(root):
        if event.event_type is EventType.ENTER:
            visitor.enter(event)
        else:
            visitor.exit(event)


def count_nodes(root: SyntaxNode) -> int:
    """Number of nodes a traversal visits, root included."""
    return sum(1 for event in walk(root) if event.event_type is EventType.ENTER)
