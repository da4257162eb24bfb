"""Pydantic models for the API description consumed by the generator.

The models form the intermediate representation (IR) of a run: they are
validated once from the raw JSON/YAML document and are read-only afterwards.

Schema nodes come in two flavours that share one generic shape,
``ObjectSchema[P]``:

- declared component schemas carry :class:`Property` payloads (field flags
  plus a type node);
- inline parameter/body schemas carry bare :class:`Kind` payloads.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

__all__ = [
    'SCHEMA_REF_PREFIX',
    'ArrayKind',
    'BooleanKind',
    'Call',
    'Components',
    'ContentSchema',
    'ContentType',
    'DefaultValue',
    'Info',
    'IntegerFormat',
    'IntegerKind',
    'Kind',
    'Method',
    'NumberFormat',
    'NumberKind',
    'ObjectKind',
    'ObjectSchemaDecl',
    'Parameter',
    'ParameterPosition',
    'Property',
    'Ref',
    'RequestBody',
    'Response',
    'SchemaAllOf',
    'SchemaMap',
    'SchemaObj',
    'SchemaStruct',
    'SchemaValue',
    'Spec',
    'SpecPath',
    'StringEnumDecl',
    'StringKind',
    'Tag',
]

SCHEMA_REF_PREFIX = '#/components/schemas/'

P = TypeVar('P')


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# Object schema shapes, generic over their payload
# =============================================================================


class SchemaStruct(_Model, Generic[P]):
    """Object with declared properties."""

    properties: dict[str, P]
    required: list[str] = Field(default_factory=list)


class SchemaMap(_Model, Generic[P]):
    """Object whose values all share the ``additionalProperties`` payload."""

    additional_properties: P = Field(..., alias='additionalProperties')

    @model_validator(mode='before')
    @classmethod
    def _normalize_additional_properties(cls, data: Any) -> Any:
        # `additionalProperties: true` means "any value"
        if isinstance(data, dict) and data.get('additionalProperties') is True:
            return {**data, 'additionalProperties': {}}
        return data


class SchemaAllOf(_Model, Generic[P]):
    """Composition of several payloads."""

    all_of: list[P] = Field(..., alias='allOf')


class SchemaValue(_Model):
    """Object without any usable structure; maps to the untyped fallback."""


# =============================================================================
# Type nodes
# =============================================================================


class IntegerFormat(str, Enum):
    int32 = 'int32'
    int64 = 'int64'


class NumberFormat(str, Enum):
    float = 'float'
    double = 'double'


class ArrayKind(_Model):
    type: Literal['array']
    items: Kind | None = None
    unique_items: bool = Field(False, alias='uniqueItems')


class BooleanKind(_Model):
    type: Literal['boolean']


class IntegerKind(_Model):
    type: Literal['integer']
    format: IntegerFormat | str | None = None


class NumberKind(_Model):
    type: Literal['number']
    format: NumberFormat | str | None = None


class StringKind(_Model):
    type: Literal['string']
    format: str | None = None
    enum: list[str] | None = None


class ObjectKind(_Model):
    """Inline object; the remaining keys of the node form its object schema."""

    type: Literal['object']
    object_schema: Annotated[
        Union[SchemaStruct[Kind], SchemaMap[Kind], SchemaAllOf[Kind], SchemaValue],
        Field(union_mode='left_to_right'),
    ]

    @model_validator(mode='before')
    @classmethod
    def _nest_object_schema(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'object_schema' not in data:
            return {'type': data.get('type'), 'object_schema': data}
        return data


class Ref(_Model):
    """Named reference to a component schema."""

    reference: str = Field(..., alias='$ref')


class DefaultValue(_Model):
    """Any node that is neither a known generic type nor a reference."""


class Kind(
    RootModel[
        Annotated[
            Union[
                ArrayKind,
                BooleanKind,
                IntegerKind,
                NumberKind,
                ObjectKind,
                StringKind,
                Ref,
                DefaultValue,
            ],
            Field(union_mode='left_to_right'),
        ]
    ]
):
    """Recursive type node.

    Variants are tried in order; anything that is not a recognised generic
    type or a ``$ref`` degrades to :class:`DefaultValue`.
    """

    model_config = ConfigDict(frozen=True)

    @property
    def is_string(self) -> bool:
        return isinstance(self.root, StringKind)

    @property
    def is_array(self) -> bool:
        return isinstance(self.root, ArrayKind)


class Property(_Model):
    """A field of a declared component schema."""

    deprecated: bool = False
    required: bool = False
    description: str | None = None
    kind: Kind

    @model_validator(mode='before')
    @classmethod
    def _flatten_kind(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'kind' not in data:
            return {
                'deprecated': data.get('deprecated', False),
                # object-level `required` lists are not a property flag
                'required': data.get('required') is True,
                'description': data.get('description'),
                'kind': data,
            }
        return data


# =============================================================================
# Component schemas
# =============================================================================


class ObjectSchemaDecl(_Model):
    type: Literal['object']
    object_schema: Annotated[
        Union[
            SchemaStruct[Property],
            SchemaMap[Property],
            SchemaAllOf[Property],
            SchemaValue,
        ],
        Field(union_mode='left_to_right'),
    ]

    @model_validator(mode='before')
    @classmethod
    def _nest_object_schema(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'object_schema' not in data:
            return {'type': data.get('type'), 'object_schema': data}
        return data


class StringEnumDecl(_Model):
    type: Literal['string']
    enum: list[str]


class SchemaObj(_Model):
    """A named component schema."""

    deprecated: bool = False
    description: str | None = None
    definition: Annotated[
        Union[ObjectSchemaDecl, StringEnumDecl], Field(discriminator='type')
    ]

    @model_validator(mode='before')
    @classmethod
    def _flatten_definition(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'definition' not in data:
            definition = dict(data)
            if 'type' not in definition and 'allOf' in definition:
                definition['type'] = 'object'
            return {
                'deprecated': data.get('deprecated', False),
                'description': data.get('description'),
                'definition': definition,
            }
        return data


class Components(_Model):
    schemas: dict[str, SchemaObj] = Field(default_factory=dict)


# =============================================================================
# Operations
# =============================================================================


class ParameterPosition(str, Enum):
    path = 'path'
    query = 'query'


class Parameter(_Model):
    name: str
    position: ParameterPosition = Field(..., alias='in')
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    kind: Kind = Field(..., alias='schema')


class ContentType(str, Enum):
    """Content types the generator knows how to send or parse."""

    application_json = 'application/json'
    application_octet_stream = 'application/octet-stream'
    application_xml = 'application/xml'
    text_plain = 'text/plain'
    html_form = 'application/x-www-form-urlencoded'
    any = '*/*'


class ContentSchema(_Model):
    kind: Kind = Field(default_factory=lambda: Kind.model_validate({}), alias='schema')


class RequestBody(_Model):
    description: str | None = None
    required: bool = False
    content: dict[str, ContentSchema] = Field(default_factory=dict)


class Response(_Model):
    description: str | None = None
    content: dict[str, ContentSchema] | None = None


class Method(str, Enum):
    delete = 'delete'
    get = 'get'
    head = 'head'
    options = 'options'
    patch = 'patch'
    post = 'post'
    put = 'put'

    @property
    def display(self) -> str:
        """Capitalised verb, as concatenated into method names (``Get``)."""
        return self.value.capitalize()


class Call(_Model):
    """One operation: a verb on a route."""

    tags: list[str] | None = None
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = Field(None, alias='operationId')
    deprecated: bool = False
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(None, alias='requestBody')
    responses: dict[str, Response] = Field(default_factory=dict)

    @property
    def single_tag(self) -> str | None:
        """The tag when the call declares exactly one."""
        if self.tags and len(self.tags) == 1:
            return self.tags[0]
        return None


_METHOD_NAMES = frozenset(method.value for method in Method)


class SpecPath(_Model):
    """One route with its operations and shared parameters."""

    calls: dict[Method, Call] = Field(default_factory=dict)
    parameters: list[Parameter] | None = None
    summary: str | None = None
    description: str | None = None

    @model_validator(mode='before')
    @classmethod
    def _collect_calls(cls, data: Any) -> Any:
        if isinstance(data, dict) and 'calls' not in data:
            calls = {key: value for key, value in data.items() if key in _METHOD_NAMES}
            rest = {
                key: value for key, value in data.items() if key not in _METHOD_NAMES
            }
            return {**rest, 'calls': calls}
        return data


# =============================================================================
# Document
# =============================================================================


class Info(_Model):
    title: str
    description: str | None = None
    version: str


class Tag(_Model):
    name: str
    description: str | None = None


class Spec(_Model):
    """Top-level API description."""

    openapi: str
    info: Info
    tags: list[Tag] = Field(default_factory=list)
    paths: dict[str, SpecPath] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)


for _model in (
    SchemaStruct,
    SchemaMap,
    SchemaAllOf,
    ArrayKind,
    ObjectKind,
    Kind,
    Property,
    ObjectSchemaDecl,
    SchemaObj,
    Parameter,
    ContentSchema,
):
    _model.model_rebuild()
