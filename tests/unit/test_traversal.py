"""Unit tests for the traversal engine."""

import pytest

from rusty_ast.models import NodeKind, make_node
from rusty_ast.traversal import EventType, SyntaxVisitor, count_nodes, traverse, walk


@pytest.fixture
def sample_tree():
    """File > Function(main) > [Parameters, Block > ExprStatement > Binary(1 + 2)]."""
    binary = make_node(
        NodeKind.BINARY,
        [make_node(NodeKind.INT, value=1), make_node(NodeKind.INT, value=2)],
        operator="+",
    )
    statement = make_node(NodeKind.EXPR_STATEMENT, [binary], terminated=False)
    function = make_node(
        NodeKind.FUNCTION,
        [make_node(NodeKind.PARAMETERS), make_node(NodeKind.BLOCK, [statement])],
        name="main",
    )
    return make_node(NodeKind.FILE, [function])


class RecordingVisitor(SyntaxVisitor):
    """Visitor that records every event."""

    def __init__(self):
        self.events = []

    def enter(self, event):
        self.events.append(("enter", event.label, event.depth))

    def exit(self, event):
        self.events.append(("exit", event.label, event.depth))


class TestWalk:
    """Test cases for walk()."""

    def test_pre_order_with_depths(self, sample_tree):
        """Test ENTER order and depths."""
        entered = [
            (event.label, event.depth)
            for event in walk(sample_tree)
            if event.event_type is EventType.ENTER
        ]

        assert entered == [
            ("File", 0),
            ("Function", 1),
            ("Parameters", 2),
            ("Block", 2),
            ("ExprStatement", 3),
            ("Binary", 4),
            ("Int", 5),
            ("Int", 5),
        ]

    def test_exit_follows_children(self, sample_tree):
        """Test that each node's EXIT comes after all of its descendants."""
        visitor = RecordingVisitor()
        traverse(sample_tree, visitor)

        assert visitor.events[0] == ("enter", "File", 0)
        assert visitor.events[-1] == ("exit", "File", 0)
        binary_exit = visitor.events.index(("exit", "Binary", 4))
        int_exits = [i for i, e in enumerate(visitor.events) if e == ("exit", "Int", 5)]
        assert all(i < binary_exit for i in int_exits)

    def test_enter_and_exit_balanced(self, sample_tree):
        """Test that every ENTER has a matching EXIT."""
        events = list(walk(sample_tree))
        enters = [e for e in events if e.event_type is EventType.ENTER]
        exits = [e for e in events if e.event_type is EventType.EXIT]

        assert len(enters) == len(exits) == 8

    def test_event_fields_in_schema_order(self, sample_tree):
        """Test that events expose field pairs in schema order."""
        function_event = next(e for e in walk(sample_tree) if e.label == "Function")

        assert function_event.fields == (("name", "main"), ("return_type", "<none>"))
        assert function_event.kind == NodeKind.FUNCTION

    def test_single_node(self):
        """Test walking a tree with no children."""
        events = list(walk(make_node(NodeKind.FILE)))

        assert [e.event_type for e in events] == [EventType.ENTER, EventType.EXIT]


class TestCountNodes:
    """Test cases for count_nodes()."""

    def test_count_includes_root(self, sample_tree):
        assert count_nodes(sample_tree) == 8

    def test_empty_file(self):
        assert count_nodes(make_node(NodeKind.FILE)) == 1


class TestDeepTrees:
    """Test that tree depth is not bounded by the recursion limit."""

    def test_deep_chain(self):
        depth = 5000
        node = make_node(NodeKind.PATH, name="x")
        for _ in range(depth):
            node = make_node(NodeKind.PAREN, [node])
        root = make_node(NodeKind.FILE, [node])

        assert count_nodes(root) == depth + 2
        max_depth = max(event.depth for event in walk(root))
        assert max_depth == depth + 1

    def test_base_visitor_is_noop(self, sample_tree):
        """Test that the base visitor accepts every event."""
        traverse(sample_tree, SyntaxVisitor())
