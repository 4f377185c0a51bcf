"""Shared fixtures and helpers for tests."""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

# ---------------------------------------------------------------------------
# Auto-marker: tag every test as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# JoiModel: evaluates generated schema text against Python values
# ---------------------------------------------------------------------------

MISSING = object()

_TOKEN = re.compile(r'\s*(?:(?P<str>"(?:[^"\\]|\\.)*")|(?P<name>[A-Za-z_$][\w$]*)|(?P<punct>[.(){}\[\],:]))')
_BINDING = re.compile(r"^export const (\w+) = (.*?)\nexport function (\w+)\(", re.S | re.M)


@dataclass
class _Schema:
    base: str
    ref: str | None = None
    required: bool = False
    allow_null: bool = False
    valid: list[str] | None = None
    items: "_Schema | None" = None
    keys: dict[str, "_Schema"] | None = None


class _SchemaReader:
    def __init__(self, text: str) -> None:
        self.tokens: list[str] = []
        pos = 0
        text = text.strip()
        while pos < len(text):
            match = _TOKEN.match(text, pos)
            assert match is not None, f"cannot tokenize {text[pos:]!r}"
            self.tokens.append(match.group(match.lastgroup or "punct"))
            pos = match.end()
        self.pos = 0

    def _next(self) -> str:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _expect(self, token: str) -> None:
        actual = self._next()
        assert actual == token, f"expected {token!r}, got {actual!r}"

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def read(self) -> _Schema:
        head = self._next()
        if head == "Joi":
            self._expect(".")
            schema = _Schema(base=self._next())
            self._expect("(")
            if schema.base == "object" and self._peek() == "{":
                schema.keys = self._read_keys()
            self._expect(")")
        else:
            schema = _Schema(base="ref", ref=head)
        while self._peek() == ".":
            self._next()
            self._modifier(schema, self._next())
        return schema

    def _read_keys(self) -> dict[str, _Schema]:
        keys: dict[str, _Schema] = {}
        self._expect("{")
        while self._peek() != "}":
            name = self._next()
            self._expect(":")
            keys[name] = self.read()
            if self._peek() == ",":
                self._next()
        self._expect("}")
        return keys

    def _modifier(self, schema: _Schema, name: str) -> None:
        self._expect("(")
        if name == "allow":
            assert self._next() == "null"
            schema.allow_null = True
        elif name == "valid":
            self._expect("[")
            values: list[str] = []
            while self._peek() != "]":
                values.append(json.loads(self._next()))
                if self._peek() == ",":
                    self._next()
            self._expect("]")
            schema.valid = values
        elif name == "items":
            schema.items = self.read()
        elif name == "required":
            schema.required = True
        else:
            raise AssertionError(f"unknown modifier {name}")
        self._expect(")")


class JoiModel:
    """Loads the bindings of a generated module and answers its type guards."""

    def __init__(self, module_text: str) -> None:
        self.schemas: dict[str, _Schema] = {}
        self.guards: dict[str, str] = {}
        for name, schema_text, guard in _BINDING.findall(module_text):
            self.schemas[name] = _SchemaReader(schema_text).read()
            self.guards[guard] = name

    def guard(self, guard_name: str) -> Callable[[Any], bool]:
        schema = self.schemas[self.guards[guard_name]]
        return lambda value: self._check(schema, value)

    def _check(self, schema: _Schema, value: Any) -> bool:
        if value is MISSING:
            return not schema.required
        if value is None and schema.allow_null:
            return True
        if schema.base == "ref":
            assert schema.ref is not None
            return self._check(self.schemas[schema.ref], value)
        if schema.valid is not None and value not in schema.valid:
            return False
        return self._check_base(schema, value)

    def _check_base(self, schema: _Schema, value: Any) -> bool:
        match schema.base:
            case "any":
                return True
            case "string":
                return isinstance(value, str)
            case "number":
                return isinstance(value, int | float) and not isinstance(value, bool)
            case "boolean":
                return isinstance(value, bool)
            case "null":
                return value is None
            case "array":
                return isinstance(value, list) and all(
                    schema.items is None or self._check(schema.items, item) for item in value
                )
            case "object":
                if not isinstance(value, dict):
                    return False
                if schema.keys is None:
                    return True
                if set(value) - set(schema.keys):
                    return False
                return all(self._check(child, value.get(key, MISSING)) for key, child in schema.keys.items())
        raise AssertionError(f"unsupported base {schema.base}")


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the TypeScript example inputs."""
    return Path(__file__).parent / "data"


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def parse_type_node(typescript_parser: Parser) -> Callable[[str], tuple[Node, bytes]]:
    """Return a helper that parses ``type X = <text>`` and yields the aliased type node."""

    def _parse(type_text: str) -> tuple[Node, bytes]:
        source = f"type X = {type_text}\n".encode()
        tree = typescript_parser.parse(source)
        alias = tree.root_node.named_children[0]
        value = alias.child_by_field_name("value")
        assert value is not None
        return value, source

    return _parse


@pytest.fixture
def joi_model() -> Callable[[str], JoiModel]:
    return JoiModel
