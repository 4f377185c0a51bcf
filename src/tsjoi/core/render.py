import json
from collections.abc import Sequence
from typing import assert_never

from tsjoi.core.errors import UnsupportedConstructError
from tsjoi.models import (
    ArrayType,
    CompileOptions,
    LiteralType,
    ObjectType,
    PrimitiveType,
    PropertySignature,
    TypeExpr,
    TypeReference,
    UnionType,
    UnsupportedType,
)

PRIMITIVE_KEYWORDS = frozenset(
    {"any", "number", "object", "boolean", "string", "symbol", "this", "void", "undefined", "null", "never"}
)

_REQUIRED = ".required()"
_ALLOW_NULL = ".allow(null)"
_INDENT_STEP = 2


def _is_null(expr: TypeExpr) -> bool:
    return isinstance(expr, PrimitiveType) and expr.keyword == "null"


def _is_string_literal(expr: TypeExpr) -> bool:
    return isinstance(expr, LiteralType) and expr.literal == "string"


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def render_union(expr: UnionType, options: CompileOptions) -> str:
    """Render the two supported union shapes: ``T | null`` and a union of string literals."""
    members = expr.members

    if len(members) == 2 and any(_is_null(member) for member in members):
        not_null = members[1] if _is_null(members[0]) else members[0]
        return render_type(not_null, False, 0, options) + _ALLOW_NULL

    if all(_is_string_literal(member) for member in members):
        values = ", ".join(_quote(member.value) for member in members if isinstance(member, LiteralType))
        return f"Joi.string().valid([{values}])"

    raise UnsupportedConstructError(f"Cannot convert the following type yet: {expr.text}", expr.text)


def render_array(expr: ArrayType, options: CompileOptions) -> str:
    element = render_type(expr.element, False, 0, options)
    return f"Joi.array().items({element})"


def render_reference(expr: TypeReference, options: CompileOptions) -> str:
    if len(expr.segments) != 1:
        raise UnsupportedConstructError(f"Cannot convert QualifiedName yet: {expr.text}", expr.text)
    return f"{expr.segments[0]}{options.suffix}"


def render_type(expr: TypeExpr, required: bool, indent: int, options: CompileOptions) -> str:
    """Render one type expression as Joi schema text.

    ``required`` appends ``.required()`` to whatever the node renders to; nested
    object literals are laid out relative to ``indent``.
    """
    r = _REQUIRED if required else ""
    match expr:
        case PrimitiveType():
            if expr.keyword not in PRIMITIVE_KEYWORDS:
                raise UnsupportedConstructError(f"Cannot convert type {expr.text} yet", expr.text)
            return f"Joi.{expr.keyword}(){r}"
        case UnionType():
            return render_union(expr, options) + r
        case ArrayType():
            return render_array(expr, options) + r
        case ObjectType():
            return render_properties(expr.properties, indent, options) + r
        case TypeReference():
            return render_reference(expr, options) + r
        case LiteralType() | UnsupportedType():
            raise UnsupportedConstructError(f"Cannot convert type {expr.text} yet", expr.text)
        case _:
            assert_never(expr)


def render_properties(properties: Sequence[PropertySignature], indent: int, options: CompileOptions) -> str:
    """Render properties as a ``Joi.object({...})`` call, one property per line.

    Properties without a plain identifier name or a type annotation are skipped.
    """
    prefix = " " * indent
    inner_indent = indent + _INDENT_STEP
    inner_prefix = " " * inner_indent
    lines = [
        f"{inner_prefix}{prop.name}: {render_type(prop.type, not prop.optional, inner_indent, options)}"
        for prop in properties
        if prop.name is not None and prop.type is not None
    ]
    body = ",\n".join(lines)
    return f"Joi.object({{\n{body}\n{prefix}}})"
