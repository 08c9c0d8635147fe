"""
Syntax node data models.

A parsed source unit is represented as a tree of immutable ``SyntaxNode``
objects. Every node carries exactly one ``NodeKind``; the field names and the
child layout of each kind are declared once in ``KIND_SCHEMAS``, which is the
only place new syntax support is wired in.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


FieldValue = Union[bool, int, float, str]

# Marker for an absent optional field (no return type, no label, ...)
PLACEHOLDER = "<none>"


class NodeCategory(str, Enum):
    """Syntactic category a node kind belongs to."""

    STRUCTURE = "structure"
    ITEM = "item"
    STATEMENT = "statement"
    EXPRESSION = "expression"
    TYPE = "type"
    LITERAL = "literal"
    UNSUPPORTED = "unsupported"


class NodeKind(str, Enum):
    """Closed set of node kinds. The value is the label shown in output."""

    # Structure
    FILE = "File"
    PARAMETERS = "Parameters"
    BLOCK = "Block"
    ARGUMENTS = "Arguments"
    FIELDS = "Fields"
    VARIANTS = "Variants"
    EMPTY = "Empty"

    # Items
    FUNCTION = "Function"
    STRUCT = "Struct"
    ENUM = "Enum"
    PARAMETER = "Parameter"
    SELF_PARAMETER = "SelfParameter"
    FIELD = "Field"
    VARIANT = "Variant"

    # Statements
    LET_STATEMENT = "LetStatement"
    EXPR_STATEMENT = "ExprStatement"
    ITEM_STATEMENT = "ItemStatement"

    # Expressions
    BINARY = "Binary"
    UNARY = "Unary"
    CALL = "Call"
    MACRO_CALL = "MacroCall"
    PATH = "Path"
    FIELD_ACCESS = "FieldAccess"
    INDEX = "Index"
    REFERENCE = "Reference"
    PAREN = "Paren"
    TUPLE = "Tuple"
    ARRAY = "Array"
    ARRAY_REPEAT = "ArrayRepeat"
    ASSIGN = "Assign"
    IF = "If"
    LET_CONDITION = "LetCondition"
    WHILE = "While"
    LOOP = "Loop"
    FOR = "For"
    RETURN = "Return"
    BREAK = "Break"
    CONTINUE = "Continue"

    # Literals
    INT = "Int"
    FLOAT = "Float"
    STR = "Str"
    CHAR = "Char"
    BOOL = "Bool"

    # Types
    NAMED_TYPE = "NamedType"
    GENERIC_TYPE = "GenericType"
    REFERENCE_TYPE = "ReferenceType"
    TUPLE_TYPE = "TupleType"
    ARRAY_TYPE = "ArrayType"

    # Fallback for grammar the schema does not model
    UNSUPPORTED = "Unsupported"


class NodeSchema(NamedTuple):
    """
    Shape of a node kind.

    ``slots`` names the children of fixed-arity kinds in order. List kinds set
    ``repeated`` instead and accept any number of children.
    """

    category: NodeCategory
    fields: Tuple[str, ...] = ()
    slots: Tuple[str, ...] = ()
    repeated: Optional[str] = None

    @property
    def is_list(self) -> bool:
        return self.repeated is not None

    def accepts_arity(self, count: int) -> bool:
        if self.is_list:
            return True
        return count == len(self.slots)


_S = NodeCategory.STRUCTURE
_I = NodeCategory.ITEM
_ST = NodeCategory.STATEMENT
_E = NodeCategory.EXPRESSION
_T = NodeCategory.TYPE
_L = NodeCategory.LITERAL

KIND_SCHEMAS: Dict[NodeKind, NodeSchema] = {
    NodeKind.FILE: NodeSchema(_S, repeated="items"),
    NodeKind.PARAMETERS: NodeSchema(_S, repeated="parameters"),
    NodeKind.BLOCK: NodeSchema(_S, repeated="statements"),
    NodeKind.ARGUMENTS: NodeSchema(_S, repeated="arguments"),
    NodeKind.FIELDS: NodeSchema(_S, repeated="fields"),
    NodeKind.VARIANTS: NodeSchema(_S, repeated="variants"),
    NodeKind.EMPTY: NodeSchema(_S),

    NodeKind.FUNCTION: NodeSchema(_I, ("name", "return_type"), ("parameters", "body")),
    NodeKind.STRUCT: NodeSchema(_I, ("name",), ("fields",)),
    NodeKind.ENUM: NodeSchema(_I, ("name",), ("variants",)),
    NodeKind.PARAMETER: NodeSchema(_I, ("name", "mutable"), ("type",)),
    NodeKind.SELF_PARAMETER: NodeSchema(_I, ("receiver",)),
    NodeKind.FIELD: NodeSchema(_I, ("name",), ("type",)),
    NodeKind.VARIANT: NodeSchema(_I, ("name", "discriminant"), ("fields",)),

    NodeKind.LET_STATEMENT: NodeSchema(_ST, ("name", "mutable"), ("type", "initializer")),
    NodeKind.EXPR_STATEMENT: NodeSchema(_ST, ("terminated",), ("expression",)),
    NodeKind.ITEM_STATEMENT: NodeSchema(_ST, (), ("item",)),

    NodeKind.BINARY: NodeSchema(_E, ("operator",), ("left", "right")),
    NodeKind.UNARY: NodeSchema(_E, ("operator",), ("operand",)),
    NodeKind.CALL: NodeSchema(_E, (), ("callee", "arguments")),
    NodeKind.MACRO_CALL: NodeSchema(_E, ("name", "tokens")),
    NodeKind.PATH: NodeSchema(_E, ("name",)),
    NodeKind.FIELD_ACCESS: NodeSchema(_E, ("field",), ("value",)),
    NodeKind.INDEX: NodeSchema(_E, (), ("value", "index")),
    NodeKind.REFERENCE: NodeSchema(_E, ("mutable",), ("value",)),
    NodeKind.PAREN: NodeSchema(_E, (), ("expression",)),
    NodeKind.TUPLE: NodeSchema(_E, repeated="elements"),
    NodeKind.ARRAY: NodeSchema(_E, repeated="elements"),
    NodeKind.ARRAY_REPEAT: NodeSchema(_E, (), ("value", "length")),
    NodeKind.ASSIGN: NodeSchema(_E, ("operator",), ("target", "value")),
    NodeKind.IF: NodeSchema(_E, (), ("condition", "then", "else")),
    NodeKind.LET_CONDITION: NodeSchema(_E, ("pattern",), ("value",)),
    NodeKind.WHILE: NodeSchema(_E, ("label",), ("condition", "body")),
    NodeKind.LOOP: NodeSchema(_E, ("label",), ("body",)),
    NodeKind.FOR: NodeSchema(_E, ("label", "pattern"), ("iterable", "body")),
    NodeKind.RETURN: NodeSchema(_E, (), ("value",)),
    NodeKind.BREAK: NodeSchema(_E, ("label",), ("value",)),
    NodeKind.CONTINUE: NodeSchema(_E, ("label",)),

    NodeKind.INT: NodeSchema(_L, ("value", "suffix")),
    NodeKind.FLOAT: NodeSchema(_L, ("value", "suffix")),
    NodeKind.STR: NodeSchema(_L, ("value",)),
    NodeKind.CHAR: NodeSchema(_L, ("value",)),
    NodeKind.BOOL: NodeSchema(_L, ("value",)),

    NodeKind.NAMED_TYPE: NodeSchema(_T, ("name",)),
    NodeKind.GENERIC_TYPE: NodeSchema(_T, ("name",), repeated="arguments"),
    NodeKind.REFERENCE_TYPE: NodeSchema(_T, ("mutable", "lifetime"), ("referent",)),
    NodeKind.TUPLE_TYPE: NodeSchema(_T, repeated="elements"),
    NodeKind.ARRAY_TYPE: NodeSchema(_T, ("length",), ("element",)),

    NodeKind.UNSUPPORTED: NodeSchema(NodeCategory.UNSUPPORTED, ("description",)),
}

_missing_kinds = set(NodeKind) - set(KIND_SCHEMAS)
if _missing_kinds:
    raise RuntimeError(
        f"No schema defined for node kinds: {sorted(k.value for k in _missing_kinds)}"
    )


class SyntaxNode(BaseModel):
    """Immutable node of the syntax tree."""

    model_config = ConfigDict(frozen=True)

    kind: NodeKind
    fields: Dict[str, FieldValue] = Field(default_factory=dict)
    children: Tuple['SyntaxNode', ...] = ()

    @model_validator(mode="after")
    def _check_schema(self) -> "SyntaxNode":
        schema = KIND_SCHEMAS[self.kind]
        if tuple(self.fields) != schema.fields:
            raise ValueError(
                f"{self.kind.value} expects fields {list(schema.fields)}, "
                f"got {list(self.fields)}"
            )
        if not schema.accepts_arity(len(self.children)):
            raise ValueError(
                f"{self.kind.value} expects {len(schema.slots)} children "
                f"({', '.join(schema.slots) or 'none'}), got {len(self.children)}"
            )
        return self

    @property
    def label(self) -> str:
        return self.kind.value

    @property
    def category(self) -> NodeCategory:
        return KIND_SCHEMAS[self.kind].category

    @property
    def node_schema(self) -> NodeSchema:
        return KIND_SCHEMAS[self.kind]

    def field(self, name: str) -> Optional[FieldValue]:
        """Return a field value, or None if the kind has no such field."""
        return self.fields.get(name)


# Enable forward references for recursive model
SyntaxNode.model_rebuild()


def make_node(
    kind: NodeKind,
    children: Sequence[SyntaxNode] = (),
    **fields: Optional[FieldValue],
) -> SyntaxNode:
    """
    Build a node with its fields laid out in schema order.

    Fields that are omitted or passed as None are filled with ``PLACEHOLDER``.

    Args:
        kind: Node kind
        children: Child nodes in source order
        **fields: Field values by name

    Returns:
        SyntaxNode instance

    Raises:
        ValueError: If a field name is not part of the kind's schema
    """
    schema = KIND_SCHEMAS[kind]
    unknown = set(fields) - set(schema.fields)
    if unknown:
        raise ValueError(f"{kind.value} has no fields named {sorted(unknown)}")

    ordered: Dict[str, FieldValue] = {}
    for name in schema.fields:
        value = fields.get(name)
        ordered[name] = PLACEHOLDER if value is None else value

    return SyntaxNode(kind=kind, fields=ordered, children=tuple(children))


def empty_node() -> SyntaxNode:
    """Marker node for an absent optional child."""
    return make_node(NodeKind.EMPTY)


def unsupported_node(description: str) -> SyntaxNode:
    """Fallback node for a construct the schema does not model."""
    return make_node(NodeKind.UNSUPPORTED, description=description or "unknown")
