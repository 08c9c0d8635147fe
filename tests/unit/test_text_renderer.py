"""Unit tests for the text outline renderer."""

import json

import pytest

from rusty_ast.errors import InvalidConfiguration
from rusty_ast.models import NodeKind, make_node, unsupported_node
from rusty_ast.renderers import JsonRenderer, TextRenderer, format_line, format_value, render_document
from rusty_ast.traversal import count_nodes


@pytest.fixture
def sample_tree():
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


class TestFormatting:
    """Test cases for value and line formatting."""

    def test_format_bool(self):
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_format_numbers(self):
        assert format_value(42) == "42"
        assert format_value(-7) == "-7"
        assert format_value(2.5) == "2.5"

    def test_format_string_keeps_quotes(self):
        assert format_value('"hello"') == '"hello"'

    def test_format_string_newlines_escaped(self):
        """Test that a multi-line literal still renders on one line."""
        assert format_value('"a\nb"') == '"a\\nb"'

    def test_format_string_backslash_escape_distinct_from_newline(self):
        """Test that a source `\\n` escape and a real newline render differently."""
        escaped = format_value(r'"a\nb"')
        multiline = format_value('"a\nb"')

        assert escaped == r'"a\\nb"'
        assert escaped != multiline

    def test_format_line_without_fields(self):
        assert format_line("Block", ()) == "Block:"

    def test_format_line_with_fields(self):
        line = format_line("Int", (("value", 5), ("suffix", "<none>")))
        assert line == "Int: value=5, suffix=<none>"


class TestTextRenderer:
    """Test cases for TextRenderer."""

    def test_render_outline(self, sample_tree):
        """Test the full outline of a small tree."""
        output = TextRenderer(indent_width=2).render(sample_tree)

        assert output.split("\n") == [
            "Function: name=main, return_type=<none>",
            "  Parameters:",
            "  Block:",
            "    ExprStatement: terminated=false",
            "      Binary: operator=+",
            "        Int: value=1, suffix=<none>",
            "        Int: value=2, suffix=<none>",
        ]

    def test_root_emits_no_line(self, sample_tree):
        """Test that one line is produced per non-root node."""
        lines = TextRenderer().render_lines(sample_tree)
        assert len(lines) == count_nodes(sample_tree) - 1

    def test_empty_file_renders_nothing(self):
        assert TextRenderer().render(make_node(NodeKind.FILE)) == ""

    def test_indentation_law(self, sample_tree):
        """Test that indentation scales with depth and width."""
        narrow = TextRenderer(indent_width=2).render_lines(sample_tree)
        wide = TextRenderer(indent_width=4).render_lines(sample_tree)

        for narrow_line, wide_line in zip(narrow, wide):
            narrow_indent = len(narrow_line) - len(narrow_line.lstrip(" "))
            wide_indent = len(wide_line) - len(wide_line.lstrip(" "))
            assert wide_indent == 2 * narrow_indent
            assert narrow_line.lstrip(" ") == wide_line.lstrip(" ")

    def test_renderer_reusable(self, sample_tree):
        """Test that repeated renders produce identical output."""
        renderer = TextRenderer()
        assert renderer.render(sample_tree) == renderer.render(sample_tree)

    def test_unsupported_rendered_inline(self):
        root = make_node(NodeKind.FILE, [unsupported_node("impl_item: impl Foo {}")])
        output = TextRenderer().render(root)
        assert output == "Unsupported: description=impl_item: impl Foo {}"

    @pytest.mark.parametrize("width", [0, -1, 17, 100])
    def test_out_of_range_indent_rejected(self, width):
        with pytest.raises(InvalidConfiguration):
            TextRenderer(indent_width=width)

    @pytest.mark.parametrize("width", [2.5, "2", True])
    def test_non_integer_indent_rejected(self, width):
        with pytest.raises(InvalidConfiguration):
            TextRenderer(indent_width=width)

    @pytest.mark.parametrize("width", [1, 16])
    def test_boundary_indent_accepted(self, width):
        assert TextRenderer(indent_width=width).indent_width == width


class TestRenderDocument:
    """Test cases for rebuilding text from JSON."""

    @pytest.mark.parametrize("width", [1, 2, 4])
    def test_matches_text_renderer(self, sample_tree, width):
        document = json.loads(JsonRenderer().render(sample_tree))

        assert render_document(document, width) == TextRenderer(width).render(sample_tree)

    def test_rejects_invalid_indent(self, sample_tree):
        document = JsonRenderer().to_document(sample_tree)

        with pytest.raises(InvalidConfiguration):
            render_document(document, 0)
