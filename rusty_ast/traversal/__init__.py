"""Traversal engine for syntax trees."""

from .walker import EventType, SyntaxVisitor, TraversalEvent, count_nodes, traverse, walk

__all__ = ["EventType", "SyntaxVisitor", "TraversalEvent", "count_nodes", "traverse", "walk"]
