"""Unit tests for the syntax node model."""

import pytest
from pydantic import ValidationError

from rusty_ast.models import (
    KIND_SCHEMAS,
    PLACEHOLDER,
    NodeCategory,
    NodeKind,
    SyntaxNode,
    empty_node,
    make_node,
    unsupported_node,
)


class TestKindSchemas:
    """Test cases for the kind schema registry."""

    def test_every_kind_has_a_schema(self):
        """Test that the registry covers the closed kind set."""
        assert set(KIND_SCHEMAS) == set(NodeKind)

    def test_labels_are_unique(self):
        """Test that no two kinds share a label."""
        labels = [kind.value for kind in NodeKind]
        assert len(labels) == len(set(labels))

    def test_list_kinds_have_no_fixed_slots(self):
        """Test that repeated-slot kinds do not also declare fixed slots."""
        for kind, schema in KIND_SCHEMAS.items():
            if schema.is_list:
                assert schema.slots == (), kind

    def test_categories(self):
        """Test a sample of kind categories."""
        assert KIND_SCHEMAS[NodeKind.FILE].category == NodeCategory.STRUCTURE
        assert KIND_SCHEMAS[NodeKind.FUNCTION].category == NodeCategory.ITEM
        assert KIND_SCHEMAS[NodeKind.LET_STATEMENT].category == NodeCategory.STATEMENT
        assert KIND_SCHEMAS[NodeKind.BINARY].category == NodeCategory.EXPRESSION
        assert KIND_SCHEMAS[NodeKind.INT].category == NodeCategory.LITERAL
        assert KIND_SCHEMAS[NodeKind.GENERIC_TYPE].category == NodeCategory.TYPE
        assert KIND_SCHEMAS[NodeKind.UNSUPPORTED].category == NodeCategory.UNSUPPORTED


class TestMakeNode:
    """Test cases for node construction."""

    def test_fields_follow_schema_order(self):
        """Test that keyword order does not affect field order."""
        node = make_node(
            NodeKind.FUNCTION,
            [make_node(NodeKind.PARAMETERS), make_node(NodeKind.BLOCK)],
            return_type="i32",
            name="add",
        )

        assert list(node.fields) == ["name", "return_type"]
        assert node.field("name") == "add"
        assert node.field("return_type") == "i32"

    def test_missing_fields_use_placeholder(self):
        """Test that omitted and None fields become the placeholder."""
        node = make_node(NodeKind.INT, value=5, suffix=None)
        assert node.field("suffix") == PLACEHOLDER

        loop = make_node(NodeKind.LOOP, [make_node(NodeKind.BLOCK)])
        assert loop.field("label") == PLACEHOLDER

    def test_unknown_field_rejected(self):
        """Test that fields outside the schema are rejected."""
        with pytest.raises(ValueError):
            make_node(NodeKind.PATH, name="x", label="identifier")

    def test_field_lookup_outside_schema(self):
        """Test that field() returns None for unknown names."""
        node = make_node(NodeKind.PATH, name="x")
        assert node.field("operator") is None

    def test_fixed_arity_enforced(self):
        """Test that fixed-arity kinds reject the wrong child count."""
        left = make_node(NodeKind.INT, value=1)

        with pytest.raises(ValidationError):
            make_node(NodeKind.BINARY, [left], operator="+")

    def test_list_kinds_accept_any_arity(self):
        """Test that list kinds accept zero or many children."""
        assert make_node(NodeKind.BLOCK).children == ()

        statements = [make_node(NodeKind.PATH, name=str(i)) for i in range(5)]
        block = make_node(NodeKind.BLOCK, statements)
        assert len(block.children) == 5

    def test_direct_construction_checks_field_order(self):
        """Test that out-of-order fields are rejected."""
        with pytest.raises(ValidationError):
            SyntaxNode(
                kind=NodeKind.FUNCTION,
                fields={"return_type": "-", "name": "f"},
                children=(make_node(NodeKind.PARAMETERS), make_node(NodeKind.BLOCK)),
            )

    def test_field_value_types_preserved(self):
        """Test that bool, int, float and str values keep their type."""
        assert make_node(NodeKind.BOOL, value=True).field("value") is True
        assert make_node(NodeKind.INT, value=42).field("value") == 42
        assert isinstance(make_node(NodeKind.INT, value=42).field("value"), int)
        assert make_node(NodeKind.FLOAT, value=1.5).field("value") == 1.5
        assert make_node(NodeKind.STR, value='"hi"').field("value") == '"hi"'

    def test_nodes_are_immutable(self):
        """Test that nodes cannot be modified after construction."""
        node = make_node(NodeKind.PATH, name="x")

        with pytest.raises(ValidationError):
            node.kind = NodeKind.INT

    def test_label_and_category(self):
        """Test convenience properties."""
        node = make_node(NodeKind.MACRO_CALL, name="println!", tokens='("hi")')

        assert node.label == "MacroCall"
        assert node.category == NodeCategory.EXPRESSION
        assert node.node_schema.fields == ("name", "tokens")


class TestHelperNodes:
    """Test cases for Empty and Unsupported helpers."""

    def test_empty_node(self):
        node = empty_node()

        assert node.kind == NodeKind.EMPTY
        assert node.fields == {}
        assert node.children == ()

    def test_unsupported_node_has_description(self):
        node = unsupported_node("impl_item: impl Foo {}")

        assert node.kind == NodeKind.UNSUPPORTED
        assert node.field("description") == "impl_item: impl Foo {}"

    def test_unsupported_node_never_empty(self):
        node = unsupported_node("")
        assert node.field("description")
