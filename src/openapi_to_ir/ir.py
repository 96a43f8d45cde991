"""Intermediate representation emitted by the parser.

The IR is a tree of frozen Pydantic v2 models. Every entity carries a
``kind`` tag and, where one exists, the encoded source range (``loc``) of the
document construct it came from. Models serialize with camelCase aliases:

    service.model_dump(mode="json", by_alias=True)

Tagged variants (validation rules, security schemes, OAuth2 flows) are
discriminated unions, so a dumped IR validates back into the same models.
"""

from __future__ import annotations

from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

Primitive = str | int | float | bool | None
Number = int | float


class IRModel(BaseModel):
    """Base for all IR models."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Scalar(IRModel, Generic[T]):
    """A value plus the encoded range it was read from."""

    value: T
    loc: str | None = None


class MetaValue(IRModel):
    """One ``x-`` extension, keyed without its prefix."""

    key: Scalar[str]
    value: Scalar[Any]


# --- Validation rules ---


class _Rule(IRModel):
    kind: Literal["ValidationRule"] = "ValidationRule"
    loc: str | None = None


class RequiredRule(_Rule):
    id: Literal["required"] = "required"


class StringEnumRule(_Rule):
    id: Literal["string-enum"] = "string-enum"
    values: list[Scalar[Primitive]]


class StringFormatRule(_Rule):
    id: Literal["string-format"] = "string-format"
    format: Scalar[str]


class StringMaxLengthRule(_Rule):
    id: Literal["string-max-length"] = "string-max-length"
    length: Scalar[Number]


class StringMinLengthRule(_Rule):
    id: Literal["string-min-length"] = "string-min-length"
    length: Scalar[Number]


class StringPatternRule(_Rule):
    id: Literal["string-pattern"] = "string-pattern"
    pattern: Scalar[str]


class NumberMultipleOfRule(_Rule):
    id: Literal["number-multiple-of"] = "number-multiple-of"
    value: Scalar[Number]


class NumberGtRule(_Rule):
    id: Literal["number-gt"] = "number-gt"
    value: Scalar[Number]


class NumberGteRule(_Rule):
    id: Literal["number-gte"] = "number-gte"
    value: Scalar[Number]


class NumberLtRule(_Rule):
    id: Literal["number-lt"] = "number-lt"
    value: Scalar[Number]


class NumberLteRule(_Rule):
    id: Literal["number-lte"] = "number-lte"
    value: Scalar[Number]


class ArrayMaxItemsRule(_Rule):
    id: Literal["array-max-items"] = "array-max-items"
    max: Scalar[Number]


class ArrayMinItemsRule(_Rule):
    id: Literal["array-min-items"] = "array-min-items"
    min: Scalar[Number]


class ArrayUniqueItemsRule(_Rule):
    id: Literal["array-unique-items"] = "array-unique-items"
    required: Literal[True] = True


ValidationRule = Annotated[
    RequiredRule
    | StringEnumRule
    | StringFormatRule
    | StringMaxLengthRule
    | StringMinLengthRule
    | StringPatternRule
    | NumberMultipleOfRule
    | NumberGtRule
    | NumberGteRule
    | NumberLtRule
    | NumberLteRule
    | ArrayMaxItemsRule
    | ArrayMinItemsRule
    | ArrayUniqueItemsRule,
    Field(discriminator="id"),
]


class _ObjectRule(IRModel):
    kind: Literal["ObjectValidationRule"] = "ObjectValidationRule"
    loc: str | None = None


class ObjectMaxPropertiesRule(_ObjectRule):
    id: Literal["object-max-properties"] = "object-max-properties"
    max: Scalar[Number]


class ObjectMinPropertiesRule(_ObjectRule):
    id: Literal["object-min-properties"] = "object-min-properties"
    min: Scalar[Number]


class ObjectAdditionalPropertiesRule(_ObjectRule):
    id: Literal["object-additional-properties-forbidden"] = "object-additional-properties-forbidden"
    forbidden: Literal[True] = True


ObjectValidationRule = Annotated[
    ObjectMaxPropertiesRule | ObjectMinPropertiesRule | ObjectAdditionalPropertiesRule,
    Field(discriminator="id"),
]


# --- Typed values ---

Description = Scalar[str] | list[Scalar[str]]


class TypedValue(IRModel):
    """A reference to a primitive or a named Type, Enum or Union."""

    kind: Literal["TypedValue"] = "TypedValue"
    type_name: Scalar[str]
    is_primitive: bool
    is_array: bool
    rules: list[ValidationRule] = Field(default_factory=list)


class Parameter(IRModel):
    kind: Literal["Parameter"] = "Parameter"
    name: Scalar[str]
    description: Description | None = None
    type_name: Scalar[str]
    is_primitive: bool
    is_array: bool
    default: Scalar[Primitive] | None = None
    constant: Scalar[Primitive] | None = None
    rules: list[ValidationRule] = Field(default_factory=list)
    loc: str | None = None
    meta: list[MetaValue] | None = None


class Property(IRModel):
    kind: Literal["Property"] = "Property"
    name: Scalar[str]
    description: Description | None = None
    type_name: Scalar[str]
    is_primitive: bool
    is_array: bool
    default: Scalar[Primitive] | None = None
    constant: Scalar[Primitive] | None = None
    rules: list[ValidationRule] = Field(default_factory=list)
    loc: str | None = None
    meta: list[MetaValue] | None = None


class ReturnType(IRModel):
    kind: Literal["ReturnType"] = "ReturnType"
    type_name: Scalar[str]
    is_primitive: bool
    is_array: bool
    rules: list[ValidationRule] = Field(default_factory=list)
    loc: str | None = None


# --- Named entities ---


class TypeDef(IRModel):
    kind: Literal["Type"] = "Type"
    name: Scalar[str]
    description: Scalar[str] | None = None
    properties: list[Property] = Field(default_factory=list)
    rules: list[ObjectValidationRule] = Field(default_factory=list)
    loc: str | None = None
    meta: list[MetaValue] | None = None


class EnumValue(IRModel):
    kind: Literal["EnumValue"] = "EnumValue"
    content: Scalar[Primitive]
    loc: str | None = None


class EnumDef(IRModel):
    kind: Literal["Enum"] = "Enum"
    name: Scalar[str]
    values: list[EnumValue]
    loc: str | None = None


class UnionDef(IRModel):
    kind: Literal["Union"] = "Union"
    name: Scalar[str]
    members: list[TypedValue]
    loc: str | None = None
    meta: list[MetaValue] | None = None


# --- Security ---


class OAuth2Scope(IRModel):
    kind: Literal["OAuth2Scope"] = "OAuth2Scope"
    name: Scalar[str]
    description: Scalar[str] | None = None
    loc: str | None = None


class OAuth2ImplicitFlow(IRModel):
    kind: Literal["OAuth2ImplicitFlow"] = "OAuth2ImplicitFlow"
    type: Scalar[str]
    authorization_url: Scalar[str] | None = None
    refresh_url: Scalar[str] | None = None
    scopes: list[OAuth2Scope] = Field(default_factory=list)
    loc: str | None = None


class OAuth2PasswordFlow(IRModel):
    kind: Literal["OAuth2PasswordFlow"] = "OAuth2PasswordFlow"
    type: Scalar[str]
    token_url: Scalar[str] | None = None
    refresh_url: Scalar[str] | None = None
    scopes: list[OAuth2Scope] = Field(default_factory=list)
    loc: str | None = None


class OAuth2ClientCredentialsFlow(IRModel):
    kind: Literal["OAuth2ClientCredentialsFlow"] = "OAuth2ClientCredentialsFlow"
    type: Scalar[str]
    token_url: Scalar[str] | None = None
    refresh_url: Scalar[str] | None = None
    scopes: list[OAuth2Scope] = Field(default_factory=list)
    loc: str | None = None


class OAuth2AuthorizationCodeFlow(IRModel):
    kind: Literal["OAuth2AuthorizationCodeFlow"] = "OAuth2AuthorizationCodeFlow"
    type: Scalar[str]
    authorization_url: Scalar[str] | None = None
    token_url: Scalar[str] | None = None
    refresh_url: Scalar[str] | None = None
    scopes: list[OAuth2Scope] = Field(default_factory=list)
    loc: str | None = None


OAuth2Flow = Annotated[
    OAuth2ImplicitFlow
    | OAuth2PasswordFlow
    | OAuth2ClientCredentialsFlow
    | OAuth2AuthorizationCodeFlow,
    Field(discriminator="kind"),
]


class BasicScheme(IRModel):
    kind: Literal["BasicScheme"] = "BasicScheme"
    type: Scalar[str]
    name: Scalar[str]
    description: Scalar[str] | None = None
    loc: str | None = None
    meta: list[MetaValue] | None = None


class ApiKeyScheme(IRModel):
    kind: Literal["ApiKeyScheme"] = "ApiKeyScheme"
    type: Scalar[str]
    name: Scalar[str]
    description: Scalar[str] | None = None
    parameter: Scalar[str]
    in_: Scalar[str] = Field(alias="in")
    loc: str | None = None
    meta: list[MetaValue] | None = None


class OAuth2Scheme(IRModel):
    kind: Literal["OAuth2Scheme"] = "OAuth2Scheme"
    type: Scalar[str]
    name: Scalar[str]
    description: Scalar[str] | None = None
    flows: list[OAuth2Flow] = Field(default_factory=list)
    loc: str | None = None
    meta: list[MetaValue] | None = None


SecurityScheme = Annotated[
    BasicScheme | ApiKeyScheme | OAuth2Scheme,
    Field(discriminator="kind"),
]


class SecurityOption(IRModel):
    """Schemes that must all be satisfied together."""

    kind: Literal["SecurityOption"] = "SecurityOption"
    schemes: list[SecurityScheme] = Field(default_factory=list)


# --- HTTP protocol ---


class HttpParameter(IRModel):
    kind: Literal["HttpParameter"] = "HttpParameter"
    name: Scalar[str]
    in_: Scalar[str] = Field(alias="in")
    array: Scalar[str] | None = None
    loc: str | None = None


class HttpMethod(IRModel):
    kind: Literal["HttpMethod"] = "HttpMethod"
    name: Scalar[str]
    verb: Scalar[str]
    parameters: list[HttpParameter] = Field(default_factory=list)
    success_code: Scalar[int]
    loc: str | None = None


class HttpPath(IRModel):
    kind: Literal["HttpPath"] = "HttpPath"
    path: Scalar[str]
    methods: list[HttpMethod] = Field(default_factory=list)
    loc: str | None = None


class Protocols(IRModel):
    http: list[HttpPath] = Field(default_factory=list)


# --- Service ---


class Method(IRModel):
    kind: Literal["Method"] = "Method"
    name: Scalar[str]
    description: Description | None = None
    parameters: list[Parameter] = Field(default_factory=list)
    security: list[SecurityOption] = Field(default_factory=list)
    return_type: ReturnType | None = None
    deprecated: Scalar[bool] | None = None
    loc: str | None = None
    meta: list[MetaValue] | None = None


class Interface(IRModel):
    kind: Literal["Interface"] = "Interface"
    name: Scalar[str]
    description: Scalar[str] | None = None
    methods: list[Method] = Field(default_factory=list)
    protocols: Protocols = Field(default_factory=Protocols)


class Service(IRModel):
    """Root of the IR for one document."""

    kind: Literal["Service"] = "Service"
    source_path: str
    title: Scalar[str]
    major_version: Scalar[int]
    interfaces: list[Interface] = Field(default_factory=list)
    types: list[TypeDef] = Field(default_factory=list)
    enums: list[EnumDef] = Field(default_factory=list)
    unions: list[UnionDef] = Field(default_factory=list)
    loc: str | None = None
    meta: list[MetaValue] | None = None


class Violation(IRModel):
    """A non-fatal diagnostic."""

    code: str
    message: str
    range: str | None = None
    severity: Literal["info", "warning", "error"] = "warning"
    source_path: str
