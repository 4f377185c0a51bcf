from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_INPUT_LABEL = "foo.ts"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class PrimitiveType(_Node):
    kind: Literal["primitive"] = "primitive"
    keyword: str


class LiteralType(_Node):
    kind: Literal["literal"] = "literal"
    literal: Literal["string", "number", "boolean"]
    value: str


class UnionType(_Node):
    kind: Literal["union"] = "union"
    members: tuple["TypeExpr", ...]


class ArrayType(_Node):
    kind: Literal["array"] = "array"
    element: "TypeExpr"


class ObjectType(_Node):
    kind: Literal["object"] = "object"
    properties: tuple["PropertySignature", ...] = ()


class TypeReference(_Node):
    kind: Literal["reference"] = "reference"
    segments: tuple[str, ...]


class UnsupportedType(_Node):
    kind: Literal["unsupported"] = "unsupported"
    node_type: str


TypeExpr = Annotated[
    PrimitiveType | LiteralType | UnionType | ArrayType | ObjectType | TypeReference | UnsupportedType,
    Field(discriminator="kind"),
]


class PropertySignature(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    type: TypeExpr | None = None
    optional: bool = False


class InterfaceDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["interface"] = "interface"
    name: str
    properties: tuple[PropertySignature, ...] = ()


class TypeAliasDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["alias"] = "alias"
    name: str
    type: TypeExpr


class OtherDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"
    node_type: str


Declaration = Annotated[
    InterfaceDeclaration | TypeAliasDeclaration | OtherDeclaration,
    Field(discriminator="kind"),
]


class CompileOptions(BaseModel):
    """Settings for one compilation pass.

    ``suffix`` is appended to every generated schema and guard name. ``input_label``
    names the original module; the import of its types is derived from it.
    """

    model_config = ConfigDict(frozen=True)

    suffix: str = ""
    input_label: str = DEFAULT_INPUT_LABEL


PropertySignature.model_rebuild()  # necessary for recursive types
UnionType.model_rebuild()
ArrayType.model_rebuild()
ObjectType.model_rebuild()
TypeAliasDeclaration.model_rebuild()
