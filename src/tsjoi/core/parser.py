from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from tsjoi.core.languages import normalize_language
from tsjoi.models import (
    ArrayType,
    Declaration,
    InterfaceDeclaration,
    LiteralType,
    ObjectType,
    OtherDeclaration,
    PrimitiveType,
    PropertySignature,
    TypeAliasDeclaration,
    TypeExpr,
    TypeReference,
    UnionType,
    UnsupportedType,
)

_WRAPPER_TYPES = {"export_statement", "ambient_declaration"}
_LITERAL_KEYWORDS = {"null", "undefined"}


def _text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def _named(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}
_LINE_CONTINUATIONS = {"\n", "\r\n", "\r", "\u2028", "\u2029"}
_OCTAL_DIGITS = frozenset("01234567")


def _decode_escape(raw: str) -> str:
    """Decode one JavaScript escape sequence (``raw`` includes the backslash)."""
    body = raw[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body in _LINE_CONTINUATIONS:
        return ""
    if body.startswith("u{") and body.endswith("}"):
        code = int(body[2:-1], 16)
        return chr(code) if code <= 0x10FFFF else body
    if len(body) > 1 and body[0] in "ux":
        return chr(int(body[1:], 16))
    if body and set(body) <= _OCTAL_DIGITS:
        return chr(int(body, 8))
    # Any other escaped character stands for itself.
    return body


def _string_value(node: Node, source: bytes) -> str:
    parts: list[str] = []
    for child in _named(node):
        raw = _text(child, source)
        parts.append(_decode_escape(raw) if child.type == "escape_sequence" else raw)
    # "\uD83D\uDE00" decodes to two surrogates; join them into one character.
    return "".join(parts).encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _parse_literal(node: Node, source: bytes) -> TypeExpr:
    text = _text(node, source)
    inner = _named(node)[0]
    if inner.type in _LITERAL_KEYWORDS:
        return PrimitiveType(text=text, keyword=inner.type)
    if inner.type == "string":
        return LiteralType(text=text, literal="string", value=_string_value(inner, source))
    if inner.type in {"true", "false"}:
        return LiteralType(text=text, literal="boolean", value=inner.type)
    return LiteralType(text=text, literal="number", value=text)


def _union_members(node: Node, source: bytes) -> list[TypeExpr]:
    members: list[TypeExpr] = []
    for child in _named(node):
        if child.type == "union_type":
            members.extend(_union_members(child, source))
        else:
            members.append(parse_type(child, source))
    return members


def _reference_segments(node: Node, source: bytes) -> tuple[str, ...]:
    return tuple(part.strip() for part in _text(node, source).split("."))


def parse_type(node: Node, source: bytes) -> TypeExpr:
    """Convert a tree-sitter type node into a ``TypeExpr``.

    Shapes without a schema rendering become ``UnsupportedType``; the renderer
    decides whether that is fatal.
    """
    text = _text(node, source)
    match node.type:
        case "predefined_type":
            return PrimitiveType(text=text, keyword=text)
        case "this_type":
            return PrimitiveType(text=text, keyword="this")
        case "literal_type":
            return _parse_literal(node, source)
        case "union_type":
            return UnionType(text=text, members=tuple(_union_members(node, source)))
        case "array_type":
            return ArrayType(text=text, element=parse_type(_named(node)[0], source))
        case "object_type":
            return ObjectType(text=text, properties=tuple(parse_properties(node, source)))
        case "type_identifier" | "nested_type_identifier":
            return TypeReference(text=text, segments=_reference_segments(node, source))
        case "generic_type":
            name = node.child_by_field_name("name")
            if name is None:
                return UnsupportedType(text=text, node_type=node.type)
            return TypeReference(text=text, segments=_reference_segments(name, source))
        case "parenthesized_type":
            return parse_type(_named(node)[0], source)
        case _:
            return UnsupportedType(text=text, node_type=node.type)


def _parse_property(node: Node, source: bytes) -> PropertySignature:
    name_node = node.child_by_field_name("name")
    name = _text(name_node, source) if name_node is not None and name_node.type == "property_identifier" else None

    annotation = node.child_by_field_name("type")
    type_nodes = _named(annotation) if annotation is not None else []
    prop_type = parse_type(type_nodes[0], source) if type_nodes else None

    optional = any(child.type == "?" for child in node.children)
    return PropertySignature(name=name, type=prop_type, optional=optional)


def parse_properties(body: Node, source: bytes) -> list[PropertySignature]:
    """Property signatures of an interface body or object type, in source order.

    Methods, index, call and construct signatures are not properties and are left out.
    """
    return [_parse_property(member, source) for member in _named(body) if member.type == "property_signature"]


def _unwrap(node: Node) -> Node:
    while node.type in _WRAPPER_TYPES:
        inner = node.child_by_field_name("declaration")
        if inner is None:
            named = _named(node)
            if not named:
                break
            inner = named[0]
        node = inner
    return node


def parse_declaration(node: Node, source: bytes) -> Declaration:
    node = _unwrap(node)
    name_node = node.child_by_field_name("name")

    if node.type == "interface_declaration" and name_node is not None:
        body = node.child_by_field_name("body")
        properties = parse_properties(body, source) if body is not None else []
        return InterfaceDeclaration(name=_text(name_node, source), properties=tuple(properties))

    if node.type == "type_alias_declaration" and name_node is not None:
        value = node.child_by_field_name("value")
        if value is not None:
            return TypeAliasDeclaration(name=_text(name_node, source), type=parse_type(value, source))

    return OtherDeclaration(node_type=node.type)


def parse_declarations(source_text: str, language: str = "typescript") -> list[Declaration]:
    """Parse ``source_text`` into its top-level declarations, in file order."""
    parser = get_parser(cast(SupportedLanguage, normalize_language(language)))
    source_bytes = source_text.encode("utf-8")
    tree = parser.parse(source_bytes)
    return [parse_declaration(statement, source_bytes) for statement in _named(tree.root_node)]
