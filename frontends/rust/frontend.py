"""
Rust Language Front-end.

Parses Rust source with tree-sitter-rust and lowers the concrete syntax tree
into the syntax node model using dispatch tables keyed by tree-sitter node
type. Constructs without a table entry become Unsupported nodes.
"""

import logging
import math
import re
from pathlib import Path
from types import GeneratorType
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from frontends.base import LanguageFrontend, load_frontend_config
from rusty_ast.errors import ParseFailed
from rusty_ast.models.source_unit import SourceLocation, SourceUnit
from rusty_ast.models.syntax_node import (
    NodeKind,
    SyntaxNode,
    empty_node,
    make_node,
    unsupported_node,
)

logger = logging.getLogger(__name__)

RUST_LANGUAGE = Language(tree_sitter_rust.language())

COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

PATH_TYPES = frozenset({
    "identifier",
    "scoped_identifier",
    "generic_function",
    "field_identifier",
    "type_identifier",
    "metavariable",
    "self",
    "super",
    "crate",
})

NAMED_TYPE_TYPES = frozenset({"primitive_type", "type_identifier", "scoped_type_identifier"})

# Statement-level declarations with no schema of their own
DECLARATION_TYPES = frozenset({
    "use_declaration",
    "impl_item",
    "trait_item",
    "const_item",
    "static_item",
    "mod_item",
    "type_item",
    "union_item",
    "macro_definition",
    "attribute_item",
    "inner_attribute_item",
    "extern_crate_declaration",
    "foreign_mod_item",
    "function_signature_item",
    "associated_type",
    "shebang",
})

INT_SUFFIX = re.compile(r"[iu](?:8|16|32|64|128|size)$")
FLOAT_SUFFIX = re.compile(r"f(?:32|64)$")

DEFAULT_TEXT_LIMIT = 120
ERROR_SNIPPET_LIMIT = 40


def parse_int_literal(text: str) -> Tuple[int, Optional[str]]:
    """
    Parse a Rust integer literal into its value and type suffix.

    Handles ``_`` separators, ``0x``/``0o``/``0b`` prefixes and suffixes such
    as ``u8`` or ``usize``.

    Raises:
        ValueError: If the digits are not a valid integer
    """
    digits = text.replace("_", "")
    lowered = digits.lower()
    base = 10
    if lowered.startswith(("0x", "0o", "0b")):
        base = {"x": 16, "o": 8, "b": 2}[lowered[1]]
        digits = digits[2:]

    suffix = None
    match = INT_SUFFIX.search(digits)
    if match is None and base == 10:
        match = FLOAT_SUFFIX.search(digits)
    if match is not None:
        suffix = match.group(0)
        digits = digits[:match.start()]

    return int(digits, base), suffix


def parse_float_literal(text: str) -> Tuple[object, Optional[str]]:
    """
    Parse a Rust float literal into its value and type suffix.

    Literals that overflow to infinity keep their source text as the value.

    Raises:
        ValueError: If the text is not a valid float
    """
    digits = text.replace("_", "")
    suffix = None
    match = FLOAT_SUFFIX.search(digits)
    if match is not None:
        suffix = match.group(0)
        digits = digits[:match.start()]

    value = float(digits)
    if not math.isfinite(value):
        return digits, suffix
    return value, suffix


def _compact(text: str) -> str:
    return " ".join(text.split())


# A handler either returns a finished node or is a generator that yields
# (handler, tree-sitter node) requests and receives the converted child back.
Request = Tuple[Callable[[Node], Any], Optional[Node]]
Step = Generator[Request, Optional[SyntaxNode], Optional[SyntaxNode]]


class _RustTreeConverter:
    """
    Lowers one tree-sitter tree. Created per parse call.

    Handlers never call each other directly for child nodes; they yield a
    request and ``_run`` drives them from an explicit stack, so nesting depth
    is not limited by the interpreter's recursion limit.
    """

    def __init__(self, source: bytes, text_limit: int):
        self._source = source
        self._text_limit = text_limit

        self._item_dispatch: Dict[str, Callable[[Node], Any]] = {
            "function_item": self._function,
            "struct_item": self._struct,
            "enum_item": self._enum,
        }
        self._expr_dispatch: Dict[str, Callable[[Node], Any]] = {
            "binary_expression": self._binary,
            "unary_expression": self._unary,
            "call_expression": self._call,
            "macro_invocation": self._macro,
            "field_expression": self._field_access,
            "index_expression": self._index,
            "reference_expression": self._reference,
            "parenthesized_expression": self._paren,
            "tuple_expression": self._tuple,
            "unit_expression": self._tuple,
            "array_expression": self._array,
            "assignment_expression": self._assign,
            "compound_assignment_expr": self._assign,
            "if_expression": self._if,
            "let_condition": self._let_condition,
            "while_expression": self._while,
            "loop_expression": self._loop,
            "for_expression": self._for,
            "return_expression": self._return,
            "break_expression": self._break,
            "continue_expression": self._continue,
            "block": self._block,
            "integer_literal": self._int,
            "float_literal": self._float,
            "string_literal": self._str,
            "raw_string_literal": self._str,
            "char_literal": self._char,
            "boolean_literal": self._bool,
        }
        for node_type in PATH_TYPES:
            self._expr_dispatch[node_type] = self._path

        self._type_dispatch: Dict[str, Callable[[Node], Any]] = {
            "generic_type": self._generic_type,
            "reference_type": self._reference_type,
            "tuple_type": self._tuple_type,
            "unit_type": self._tuple_type,
            "array_type": self._array_type,
        }
        for node_type in NAMED_TYPE_TYPES:
            self._type_dispatch[node_type] = self._named_type

    def convert_file(self, root: Node) -> SyntaxNode:
        return self._run(self._file, root)

    def _run(self, handler: Callable[[Node], Any], node: Optional[Node]) -> Optional[SyntaxNode]:
        value = handler(node)
        if not isinstance(value, GeneratorType):
            return value

        stack = [value]
        value = None
        while stack:
            try:
                handler, child = stack[-1].send(value)
            except StopIteration as stop:
                stack.pop()
                value = stop.value
                continue
            value = handler(child)
            if isinstance(value, GeneratorType):
                stack.append(value)
                value = None
        return value

    # -- helpers ------------------------------------------------------------

    def _text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self._source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def _field_text(self, node: Node, field_name: str) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child is None:
            return None
        return _compact(self._text(child))

    def _named(self, node: Optional[Node]) -> List[Node]:
        if node is None:
            return []
        return [child for child in node.named_children if child.type not in COMMENT_TYPES]

    def _label(self, node: Node) -> Optional[str]:
        for child in node.named_children:
            if child.type == "label":
                return self._text(child)
        return None

    def _has_mut(self, node: Node) -> bool:
        return any(child.type == "mutable_specifier" for child in node.children)

    def _binding(self, node: Node) -> Tuple[Optional[str], bool]:
        """Name and mutability of a `let` or parameter pattern."""
        pattern = node.child_by_field_name("pattern")
        mutable = self._has_mut(node)
        if pattern is not None and pattern.type == "mut_pattern":
            mutable = True
            inner = self._named(pattern)
            if inner:
                pattern = inner[-1]
        return (_compact(self._text(pattern)) if pattern is not None else None), mutable

    def _unsupported(self, node: Node) -> SyntaxNode:
        snippet = _compact(self._text(node))
        if len(snippet) > self._text_limit:
            snippet = snippet[:self._text_limit].rstrip() + "..."
        if snippet:
            return unsupported_node(f"{node.type}: {snippet}")
        return unsupported_node(node.type)

    def _expr_field(self, node: Node, field_name: str) -> Request:
        return self._expression, node.child_by_field_name(field_name)

    # -- file and items -----------------------------------------------------

    def _file(self, root: Node) -> Step:
        items = []
        for child in self._named(root):
            if child.type != "empty_statement":
                items.append((yield self._item, child))
        return make_node(NodeKind.FILE, items)

    def _item(self, node: Node) -> Any:
        handler = self._item_dispatch.get(node.type)
        if handler is None:
            return self._unsupported(node)
        return handler(node)

    def _function(self, node: Node) -> Step:
        parameters = []
        for child in self._named(node.child_by_field_name("parameters")):
            parameters.append((yield self._parameter, child))
        body = node.child_by_field_name("body")
        block = (yield self._block, body) if body is not None else make_node(NodeKind.BLOCK)
        return make_node(
            NodeKind.FUNCTION,
            [make_node(NodeKind.PARAMETERS, parameters), block],
            name=self._field_text(node, "name"),
            return_type=self._field_text(node, "return_type"),
        )

    def _parameter(self, node: Node) -> Step:
        if node.type == "self_parameter":
            return make_node(NodeKind.SELF_PARAMETER, receiver=_compact(self._text(node)))
        if node.type != "parameter":
            return self._unsupported(node)

        name, mutable = self._binding(node)
        param_type = yield self._type, node.child_by_field_name("type")
        return make_node(NodeKind.PARAMETER, [param_type], name=name, mutable=mutable)

    def _struct(self, node: Node) -> Step:
        fields = yield from self._field_list(node.child_by_field_name("body"))
        return make_node(
            NodeKind.STRUCT,
            [make_node(NodeKind.FIELDS, fields)],
            name=self._field_text(node, "name"),
        )

    def _field_list(self, body: Optional[Node]) -> Generator[Request, Optional[SyntaxNode], List[SyntaxNode]]:
        fields: List[SyntaxNode] = []
        if body is None:
            return fields
        if body.type == "ordered_field_declaration_list":
            # Tuple fields carry no name
            for type_node in body.children_by_field_name("type"):
                fields.append(make_node(NodeKind.FIELD, [(yield self._type, type_node)]))
            return fields
        if body.type != "field_declaration_list":
            return [self._unsupported(body)]

        for child in self._named(body):
            if child.type != "field_declaration":
                fields.append(self._unsupported(child))
                continue
            field_type = yield self._type, child.child_by_field_name("type")
            fields.append(make_node(NodeKind.FIELD, [field_type], name=self._field_text(child, "name")))
        return fields

    def _enum(self, node: Node) -> Step:
        variants = []
        for child in self._named(node.child_by_field_name("body")):
            if child.type != "enum_variant":
                variants.append(self._unsupported(child))
                continue
            fields = yield from self._field_list(child.child_by_field_name("body"))
            variants.append(make_node(
                NodeKind.VARIANT,
                [make_node(NodeKind.FIELDS, fields)],
                name=self._field_text(child, "name"),
                discriminant=self._field_text(child, "value"),
            ))
        return make_node(
            NodeKind.ENUM,
            [make_node(NodeKind.VARIANTS, variants)],
            name=self._field_text(node, "name"),
        )

    # -- statements ---------------------------------------------------------

    def _block(self, node: Node) -> Step:
        statements = []
        for child in self._named(node):
            statement = yield self._statement, child
            if statement is not None:
                statements.append(statement)
        return make_node(NodeKind.BLOCK, statements)

    def _statement(self, node: Node) -> Step:
        if node.type in ("empty_statement", "label"):
            return None
        if node.type == "let_declaration":
            return (yield self._let, node)
        if node.type == "expression_statement":
            inner = self._named(node)
            if not inner:
                return self._unsupported(node)
            expression = yield self._expression, inner[0]
            return make_node(
                NodeKind.EXPR_STATEMENT,
                [expression],
                terminated=any(child.type == ";" for child in node.children),
            )
        if node.type in self._item_dispatch:
            return make_node(NodeKind.ITEM_STATEMENT, [(yield self._item, node)])
        if node.type in DECLARATION_TYPES:
            return self._unsupported(node)

        # Tail expression, or an expression the grammar left unwrapped
        following = node.next_sibling
        expression = yield self._expression, node
        return make_node(
            NodeKind.EXPR_STATEMENT,
            [expression],
            terminated=following is not None and following.type in (";", "empty_statement"),
        )

    def _let(self, node: Node) -> Step:
        if node.child_by_field_name("alternative") is not None:
            # let-else has no schema
            return self._unsupported(node)

        name, mutable = self._binding(node)
        type_node = node.child_by_field_name("type")
        value = node.child_by_field_name("value")
        let_type = (yield self._type, type_node) if type_node is not None else empty_node()
        initializer = (yield self._expression, value) if value is not None else empty_node()
        return make_node(
            NodeKind.LET_STATEMENT,
            [let_type, initializer],
            name=name,
            mutable=mutable,
        )

    # -- expressions --------------------------------------------------------

    def _expression(self, node: Optional[Node]) -> Any:
        if node is None:
            return empty_node()
        handler = self._expr_dispatch.get(node.type)
        if handler is None:
            return self._unsupported(node)
        return handler(node)

    def _path(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.PATH, name=_compact(self._text(node)))

    def _binary(self, node: Node) -> Step:
        left = yield self._expr_field(node, "left")
        right = yield self._expr_field(node, "right")
        return make_node(
            NodeKind.BINARY,
            [left, right],
            operator=self._text(node.child_by_field_name("operator")),
        )

    def _unary(self, node: Node) -> Step:
        operands = self._named(node)
        operand = yield self._expression, operands[0] if operands else None
        return make_node(NodeKind.UNARY, [operand], operator=node.children[0].type)

    def _call(self, node: Node) -> Step:
        function = yield self._expr_field(node, "function")
        arguments = []
        for child in self._named(node.child_by_field_name("arguments")):
            arguments.append((yield self._expression, child))
        return make_node(
            NodeKind.CALL,
            [function, make_node(NodeKind.ARGUMENTS, arguments)],
        )

    def _macro(self, node: Node) -> SyntaxNode:
        tokens = next(
            (self._text(child) for child in node.named_children if child.type == "token_tree"),
            None,
        )
        return make_node(
            NodeKind.MACRO_CALL,
            name=f"{self._field_text(node, 'macro')}!",
            tokens=tokens,
        )

    def _field_access(self, node: Node) -> Step:
        value = yield self._expr_field(node, "value")
        return make_node(NodeKind.FIELD_ACCESS, [value], field=self._field_text(node, "field"))

    def _index(self, node: Node) -> Step:
        operands = self._named(node)
        value = yield self._expression, operands[0] if operands else None
        index = yield self._expression, operands[1] if len(operands) > 1 else None
        return make_node(NodeKind.INDEX, [value, index])

    def _reference(self, node: Node) -> Step:
        value = yield self._expr_field(node, "value")
        return make_node(NodeKind.REFERENCE, [value], mutable=self._has_mut(node))

    def _paren(self, node: Node) -> Step:
        inner = self._named(node)
        return make_node(NodeKind.PAREN, [(yield self._expression, inner[0] if inner else None)])

    def _tuple(self, node: Node) -> Step:
        elements = []
        for child in self._named(node):
            elements.append((yield self._expression, child))
        return make_node(NodeKind.TUPLE, elements)

    def _array(self, node: Node) -> Step:
        length = node.child_by_field_name("length")
        if length is not None:
            # The repeated value is the first expression; only the length is a field
            values = [child for child in self._named(node) if child.type != "attribute_item"]
            value = yield self._expression, values[0] if values else None
            return make_node(NodeKind.ARRAY_REPEAT, [value, (yield self._expression, length)])

        elements = []
        for child in self._named(node):
            elements.append((yield self._expression, child))
        return make_node(NodeKind.ARRAY, elements)

    def _assign(self, node: Node) -> Step:
        operator = node.child_by_field_name("operator")
        left = yield self._expr_field(node, "left")
        right = yield self._expr_field(node, "right")
        return make_node(
            NodeKind.ASSIGN,
            [left, right],
            operator=self._text(operator) if operator is not None else "=",
        )

    def _if(self, node: Node) -> Step:
        condition = yield self._expr_field(node, "condition")
        consequence = yield self._expr_field(node, "consequence")
        alternative = node.child_by_field_name("alternative")
        branches = self._named(alternative)
        else_branch = (yield self._expression, branches[0]) if branches else empty_node()
        return make_node(NodeKind.IF, [condition, consequence, else_branch])

    def _let_condition(self, node: Node) -> Step:
        value = yield self._expr_field(node, "value")
        return make_node(NodeKind.LET_CONDITION, [value], pattern=self._field_text(node, "pattern"))

    def _while(self, node: Node) -> Step:
        condition = yield self._expr_field(node, "condition")
        body = yield self._expr_field(node, "body")
        return make_node(NodeKind.WHILE, [condition, body], label=self._label(node))

    def _loop(self, node: Node) -> Step:
        body = yield self._expr_field(node, "body")
        return make_node(NodeKind.LOOP, [body], label=self._label(node))

    def _for(self, node: Node) -> Step:
        value = yield self._expr_field(node, "value")
        body = yield self._expr_field(node, "body")
        return make_node(
            NodeKind.FOR,
            [value, body],
            label=self._label(node),
            pattern=self._field_text(node, "pattern"),
        )

    def _return(self, node: Node) -> Step:
        values = self._named(node)
        return make_node(NodeKind.RETURN, [(yield self._expression, values[0] if values else None)])

    def _break(self, node: Node) -> Step:
        values = [child for child in self._named(node) if child.type != "label"]
        value = yield self._expression, values[0] if values else None
        return make_node(NodeKind.BREAK, [value], label=self._label(node))

    def _continue(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.CONTINUE, label=self._label(node))

    # -- literals -----------------------------------------------------------

    def _int(self, node: Node) -> SyntaxNode:
        try:
            value, suffix = parse_int_literal(self._text(node))
        except ValueError:
            return self._unsupported(node)
        if suffix is not None and FLOAT_SUFFIX.fullmatch(suffix):
            # `1f32` is a float written without a fractional part
            return make_node(NodeKind.FLOAT, value=float(value), suffix=suffix)
        return make_node(NodeKind.INT, value=value, suffix=suffix)

    def _float(self, node: Node) -> SyntaxNode:
        try:
            value, suffix = parse_float_literal(self._text(node))
        except ValueError:
            return self._unsupported(node)
        return make_node(NodeKind.FLOAT, value=value, suffix=suffix)

    def _str(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.STR, value=self._text(node))

    def _char(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.CHAR, value=self._text(node))

    def _bool(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.BOOL, value=self._text(node) == "true")

    # -- types --------------------------------------------------------------

    def _type(self, node: Optional[Node]) -> Any:
        if node is None:
            return empty_node()
        handler = self._type_dispatch.get(node.type)
        if handler is None:
            return self._unsupported(node)
        return handler(node)

    def _named_type(self, node: Node) -> SyntaxNode:
        return make_node(NodeKind.NAMED_TYPE, name=_compact(self._text(node)))

    def _generic_type(self, node: Node) -> Step:
        arguments = []
        for child in self._named(node.child_by_field_name("type_arguments")):
            arguments.append((yield self._type, child))
        return make_node(NodeKind.GENERIC_TYPE, arguments, name=self._field_text(node, "type"))

    def _reference_type(self, node: Node) -> Step:
        lifetime = next(
            (self._text(child) for child in node.named_children if child.type == "lifetime"),
            None,
        )
        referent = yield self._type, node.child_by_field_name("type")
        return make_node(
            NodeKind.REFERENCE_TYPE,
            [referent],
            mutable=self._has_mut(node),
            lifetime=lifetime,
        )

    def _tuple_type(self, node: Node) -> Step:
        elements = []
        for child in self._named(node):
            elements.append((yield self._type, child))
        return make_node(NodeKind.TUPLE_TYPE, elements)

    def _array_type(self, node: Node) -> Step:
        element = yield self._type, node.child_by_field_name("element")
        return make_node(NodeKind.ARRAY_TYPE, [element], length=self._field_text(node, "length"))


def _find_error_node(root: Node) -> Optional[Node]:
    """First ERROR or missing node in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


class RustFrontend(LanguageFrontend):
    """Rust language front-end using tree-sitter."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the Rust front-end.

        Args:
            config_dir: Directory holding config.yaml. If None, uses this package.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent

        self._config = load_frontend_config(config_dir)
        self._text_limit = int(self._config.get("unsupported_text_limit", DEFAULT_TEXT_LIMIT))

        logger.debug("Rust front-end initialized")

    @property
    def language_name(self) -> str:
        return "rust"

    @property
    def file_extensions(self) -> List[str]:
        return list(self._config.get("file_extensions", [".rs"]))

    def parse(self, unit: SourceUnit) -> SyntaxNode:
        """
        Parse Rust source using tree-sitter-rust.

        Args:
            unit: Source unit to parse

        Returns:
            File node for the whole source unit

        Raises:
            ParseFailed: If the source contains a syntax error
        """
        source = unit.text.encode("utf-8")
        # Parsers are not shared between calls
        parser = Parser(RUST_LANGUAGE)
        tree = parser.parse(source)
        root = tree.root_node

        if root.has_error:
            error_node = _find_error_node(root) or root
            raise ParseFailed(
                self._describe_error(error_node, source),
                source_name=unit.name,
                location=self._location(error_node, source),
            )

        syntax_tree = _RustTreeConverter(source, self._text_limit).convert_file(root)
        logger.debug(f"Successfully parsed Rust source: {unit.name}")
        return syntax_tree

    def _describe_error(self, node: Node, source: bytes) -> str:
        if node.is_missing:
            return f"syntax error: missing '{node.type}'"
        snippet = _compact(source[node.start_byte:node.end_byte].decode("utf-8", errors="replace"))
        if not snippet:
            return "syntax error"
        if len(snippet) > ERROR_SNIPPET_LIMIT:
            snippet = snippet[:ERROR_SNIPPET_LIMIT] + "..."
        return f"syntax error: unexpected '{snippet}'"

    def _location(self, node: Node, source: bytes) -> SourceLocation:
        row, byte_column = node.start_point[0], node.start_point[1]
        lines = source.split(b"\n")
        line = lines[row] if row < len(lines) else b""
        column = len(line[:byte_column].decode("utf-8", errors="replace"))
        return SourceLocation(line=row + 1, column=column + 1)
