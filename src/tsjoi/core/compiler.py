from collections.abc import Iterable

from tsjoi.core.languages import import_path
from tsjoi.core.parser import parse_declarations
from tsjoi.core.render import render_properties, render_type
from tsjoi.models import (
    CompileOptions,
    Declaration,
    InterfaceDeclaration,
    OtherDeclaration,
    TypeAliasDeclaration,
)

HEADER_COMMENT = "// Automatically generated by tsjoi"
TYPES_NAMESPACE = "T"


def make_type_guard(name: str, type_name: str, schema: str) -> str:
    return (
        f"export function {name}(obj: any): obj is {TYPES_NAMESPACE}.{type_name} {{\n"
        f"  return {schema}.validate(obj).error === null\n"
        "}"
    )


def _binding(identifier: str, schema_text: str, options: CompileOptions) -> str:
    name = f"{identifier}{options.suffix}"
    guard = make_type_guard(f"is{name}", identifier, name)
    return f"export const {name} = {schema_text}\n{guard}"


def compile_declaration(declaration: Declaration, options: CompileOptions | None = None) -> str | None:
    """Generate the schema binding and type guard for one declaration.

    Returns ``None`` for declarations that are neither interfaces nor type aliases.
    """
    options = options or CompileOptions()
    match declaration:
        case InterfaceDeclaration():
            return _binding(declaration.name, render_properties(declaration.properties, 0, options), options)
        case TypeAliasDeclaration():
            return _binding(declaration.name, render_type(declaration.type, False, 0, options), options)
        case OtherDeclaration():
            return None


def module_header(options: CompileOptions) -> str:
    return (
        f"{HEADER_COMMENT}\n"
        "import Joi from 'joi'\n"
        f"import * as {TYPES_NAMESPACE} from '{import_path(options.input_label)}'\n"
        "\n"
    )


def compile_declarations(declarations: Iterable[Declaration], options: CompileOptions | None = None) -> str:
    options = options or CompileOptions()
    compiled = [compile_declaration(declaration, options) for declaration in declarations]
    body = "\n\n".join(text for text in compiled if text is not None)
    return module_header(options) + (f"{body}\n" if body else "")


def compile_module(source_text: str, options: CompileOptions | None = None, language: str = "typescript") -> str:
    """Compile TypeScript source text into a module of Joi schemas and type guards.

    An ``UnsupportedConstructError`` anywhere aborts the whole module; nothing is
    returned for the declarations that did compile.
    """
    return compile_declarations(parse_declarations(source_text, language), options)
