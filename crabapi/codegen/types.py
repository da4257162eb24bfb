"""Mapping of description type nodes to Rust type expressions.

This module provides:
- RefMode, the ownership mode a type is rendered in
- to_rust_type and its parameter/property variants
- ContentRepr and the content-type priority used for request and response bodies
- ReturnType, the resolved body type plus the reqwest call that sends or parses it
"""

import dataclasses
import enum
import logging
from collections.abc import Collection, Mapping

from crabapi.exceptions import SchemaReferenceError, UnsupportedFeatureError
from crabapi.openapi import (
    SCHEMA_REF_PREFIX,
    ArrayKind,
    BooleanKind,
    ContentSchema,
    ContentType,
    IntegerFormat,
    IntegerKind,
    Kind,
    NumberFormat,
    NumberKind,
    ObjectKind,
    Property,
    Ref,
    RequestBody,
    Response,
    SchemaAllOf,
    SchemaMap,
    SchemaStruct,
    StringKind,
)

logger = logging.getLogger(__name__)

__all__ = [
    'BYTES_TYPE',
    'UNTYPED',
    'is_float',
    'ContentRepr',
    'RefMode',
    'ReturnType',
    'parameter_type',
    'property_type',
    'reference_name',
    'request_body_type',
    'response_return_type',
    'select_content',
    'select_response',
    'to_rust_type',
]

UNTYPED = 'Value'
BYTES_TYPE = 'Vec<u8>'


class RefMode(enum.Enum):
    """Ownership mode of a rendered type.

    OWNED uses the shareable aliases of the generated types module, BORROWED
    the zero-copy reference forms and STD the plain standard library types.
    """

    OWNED = 'owned'
    BORROWED = 'borrowed'
    STD = 'std'


_STRING_TYPES = {
    RefMode.OWNED: 'TypeString',
    RefMode.BORROWED: '&str',
    RefMode.STD: 'String',
}


def reference_name(reference: str) -> str:
    """Strip the component registry prefix from a ``$ref``."""
    if not reference.startswith(SCHEMA_REF_PREFIX):
        raise SchemaReferenceError(
            reference, f'expected a reference starting with {SCHEMA_REF_PREFIX!r}'
        )
    return reference[len(SCHEMA_REF_PREFIX) :]


def _array_type(node: ArrayKind, mode: RefMode) -> str:
    # items are never borrowed
    if node.items is None:
        item = 'TypeValue'
    else:
        item = to_rust_type(node.items, RefMode.STD)
    if mode is RefMode.OWNED:
        return f'TypeVec<{item}>'
    if mode is RefMode.BORROWED:
        return f'&[{item}]'
    return f'Vec<{item}>'


def _object_type(node: ObjectKind, mode: RefMode) -> str:
    schema = node.object_schema
    if isinstance(schema, SchemaStruct):
        value_types = {to_rust_type(kind, mode) for kind in schema.properties.values()}
        value = value_types.pop() if len(value_types) == 1 else UNTYPED
        return f'TypeMap<String, {value}>'
    if isinstance(schema, SchemaMap):
        return f'TypeMap<String, {to_rust_type(schema.additional_properties, mode)}>'
    if isinstance(schema, SchemaAllOf):
        if len(schema.all_of) != 1:
            raise UnsupportedFeatureError(
                f'inline allOf with {len(schema.all_of)} members',
                'Declare the composition as a component schema instead',
            )
        return to_rust_type(schema.all_of[0], mode)
    return UNTYPED


def to_rust_type(kind: Kind, mode: RefMode = RefMode.OWNED) -> str:
    """Render a type node as a Rust type expression.

    Args:
        kind: The type node to render.
        mode: The ownership mode of the outermost type.

    Returns:
        The Rust type, e.g. ``TypeVec<UserRepresentation>``.

    Raises:
        SchemaReferenceError: If a ``$ref`` does not point into the component
            schema registry.
        UnsupportedFeatureError: If an inline ``allOf`` has several members.
    """
    node = kind.root
    if isinstance(node, StringKind):
        return _STRING_TYPES[mode]
    if isinstance(node, BooleanKind):
        return 'bool'
    if isinstance(node, IntegerKind):
        return 'i32' if node.format == IntegerFormat.int32 else 'i64'
    if isinstance(node, NumberKind):
        return 'f32' if node.format == NumberFormat.float else 'f64'
    if isinstance(node, ArrayKind):
        return _array_type(node, mode)
    if isinstance(node, ObjectKind):
        return _object_type(node, mode)
    if isinstance(node, Ref):
        return reference_name(node.reference)
    return UNTYPED


def parameter_type(kind: Kind, required: bool) -> str:
    """Type of a method argument; required arguments are borrowed."""
    if required:
        return to_rust_type(kind, RefMode.BORROWED)
    return f'Option<{to_rust_type(kind, RefMode.STD)}>'


def property_type(prop: Property, mode: RefMode = RefMode.OWNED) -> str:
    rust_type = to_rust_type(prop.kind, mode)
    if prop.required:
        return rust_type
    return f'Option<{rust_type}>'


def is_float(kind: Kind, float_types: Collection[str] = ()) -> bool:
    """Whether a type node contains a floating point number anywhere.

    Args:
        kind: The type node to inspect.
        float_types: Component names already known to contain floats.
    """
    node = kind.root
    if isinstance(node, NumberKind):
        return True
    if isinstance(node, Ref):
        return node.reference.removeprefix(SCHEMA_REF_PREFIX) in float_types
    if isinstance(node, ArrayKind):
        return node.items is not None and is_float(node.items, float_types)
    if isinstance(node, ObjectKind):
        schema = node.object_schema
        if isinstance(schema, SchemaStruct):
            return any(
                is_float(value, float_types) for value in schema.properties.values()
            )
        if isinstance(schema, SchemaMap):
            return is_float(schema.additional_properties, float_types)
        if isinstance(schema, SchemaAllOf):
            return any(is_float(member, float_types) for member in schema.all_of)
    return False


# =============================================================================
# Content selection
# =============================================================================


class ContentRepr(enum.Enum):
    """Representation chosen for a request or response body, by priority."""

    JSON = 'json'
    FORM = 'form'
    TEXT = 'text'
    BINARY_TEXT = 'binary_text'
    ANY = 'any'
    BINARY = 'binary'


def select_content(
    content: Mapping[str, ContentSchema] | None,
) -> tuple[ContentRepr, ContentSchema] | None:
    """Pick the body representation to materialize.

    Priority: JSON, URL-encoded form, plain text, octet-stream with a string
    schema, ``*/*``, raw octet-stream. Unknown content types are ignored.
    """
    if not content:
        return None
    octet = content.get(ContentType.application_octet_stream.value)
    candidates = [
        (ContentRepr.JSON, content.get(ContentType.application_json.value)),
        (ContentRepr.FORM, content.get(ContentType.html_form.value)),
        (ContentRepr.TEXT, content.get(ContentType.text_plain.value)),
        (
            ContentRepr.BINARY_TEXT,
            octet if octet is not None and octet.kind.is_string else None,
        ),
        (ContentRepr.ANY, content.get(ContentType.any.value)),
        (ContentRepr.BINARY, octet),
    ]
    for representation, schema in candidates:
        if schema is not None:
            return representation, schema
    return None


@dataclasses.dataclass(frozen=True)
class ReturnType:
    """A resolved body type.

    For responses ``body`` is the reqwest parse method (``json``, ``text``,
    ``bytes``) and ``convert`` an optional expression applied to the parsed
    future. For request bodies ``body`` is the builder call that attaches the
    argument (``json(&body)``).
    """

    value: str
    body: str | None = None
    convert: str | None = None


_RESPONSE_PARSERS = {
    ContentRepr.JSON: ('json', None),
    ContentRepr.ANY: ('json', None),
    ContentRepr.FORM: ('text', '.map(From::from)'),
    ContentRepr.TEXT: ('text', '.map(From::from)'),
    ContentRepr.BINARY_TEXT: ('text', '.map(From::from)'),
    ContentRepr.BINARY: ('bytes', '.map(|b| b.to_vec())'),
}


def request_body_type(
    request_body: RequestBody, argument: str = 'body'
) -> ReturnType | None:
    """Resolve the argument type and builder call of a request body."""
    selected = select_content(request_body.content)
    if selected is None:
        return None
    representation, schema = selected
    if representation in (ContentRepr.JSON, ContentRepr.ANY):
        call = f'json(&{argument})'
    elif representation is ContentRepr.FORM:
        call = f'form(&{argument})'
    else:
        call = f'body({argument})'
    if representation is ContentRepr.BINARY:
        value = BYTES_TYPE
    else:
        value = to_rust_type(schema.kind, RefMode.STD)
    return ReturnType(value=value, body=call)


def select_response(responses: Mapping[str, Response]) -> tuple[str, Response] | None:
    """Pick ``200``, else the first ``2xx`` status, else nothing."""
    if '200' in responses:
        return '200', responses['200']
    for status, response in responses.items():
        if not status.isdigit():
            logger.debug(f'Skipping non-numeric status code: {status}')
            continue
        if status.startswith('2'):
            return status, response
    return None


def response_return_type(responses: Mapping[str, Response]) -> ReturnType | None:
    """Resolve the typed result of an operation, if any."""
    selected = select_response(responses)
    if selected is None:
        return None
    _, response = selected
    content = select_content(response.content)
    if content is None:
        return None
    representation, schema = content
    parse, convert = _RESPONSE_PARSERS[representation]
    if representation is ContentRepr.BINARY:
        value = BYTES_TYPE
    else:
        value = to_rust_type(schema.kind, RefMode.OWNED)
    return ReturnType(value=value, body=parse, convert=convert)
