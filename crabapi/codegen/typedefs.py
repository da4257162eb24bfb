"""Rust type declarations for the component schemas of a description.

Structs, map aliases and string enumerations are emitted in declaration order
behind a prelude of shareable aliases (``TypeMap``, ``TypeString``,
``TypeValue``, ``TypeVec``) that the ``rc-*`` Cargo features switch to
reference counted variants. Struct members are sorted by their original name
so the output does not depend on the order properties are declared in.
"""

import dataclasses
import logging
from collections.abc import Mapping

from crabapi.codegen.naming import (
    derive_enum_variants,
    derive_field_names,
    needs_rename,
    resolve_struct_case,
)
from crabapi.codegen.overrides import OverrideStore
from crabapi.codegen.templating import render
from crabapi.codegen.types import RefMode, is_float, reference_name, to_rust_type
from crabapi.exceptions import (
    SchemaReferenceError,
    TypeGenerationError,
    UnsupportedFeatureError,
)
from crabapi.openapi import (
    Kind,
    ObjectKind,
    ObjectSchemaDecl,
    Property,
    Ref,
    SchemaAllOf,
    SchemaMap,
    SchemaObj,
    SchemaStruct,
    Spec,
    StringEnumDecl,
)

logger = logging.getLogger(__name__)

__all__ = [
    'StructField',
    'float_components',
    'render_type_definition',
    'render_types',
]

_DERIVES = ['Clone', 'Debug', 'Default', 'PartialEq', 'Eq', 'Deserialize', 'Serialize']


@dataclasses.dataclass(frozen=True)
class _Member:
    kind: Kind
    required: bool
    deprecated: bool = False


@dataclasses.dataclass(frozen=True)
class StructField:
    original: str
    name: str
    rust_type: str
    rename: bool
    deprecated: bool


def _struct_members(struct: SchemaStruct) -> dict[str, _Member]:
    members = {}
    for field, payload in struct.properties.items():
        required = field in struct.required
        if isinstance(payload, Property):
            members[field] = _Member(
                payload.kind, payload.required or required, payload.deprecated
            )
        else:
            members[field] = _Member(payload, required)
    return members


def _all_of_members(
    name: str, all_of: SchemaAllOf, schemas: Mapping[str, SchemaObj]
) -> dict[str, _Member]:
    """Merge the properties of several allOf members; later members win."""
    members: dict[str, _Member] = {}
    for member in all_of.all_of:
        node = member.kind.root
        if isinstance(node, ObjectKind) and isinstance(node.object_schema, SchemaStruct):
            members.update(_struct_members(node.object_schema))
            continue
        if isinstance(node, Ref):
            referenced = reference_name(node.reference)
            target = schemas.get(referenced)
            if target is None:
                raise SchemaReferenceError(node.reference, 'no such component schema')
            definition = target.definition
            if isinstance(definition, ObjectSchemaDecl):
                if isinstance(definition.object_schema, SchemaStruct):
                    members.update(_struct_members(definition.object_schema))
                    continue
                if isinstance(definition.object_schema, SchemaAllOf):
                    members.update(
                        _all_of_members(referenced, definition.object_schema, schemas)
                    )
                    continue
        raise UnsupportedFeatureError(
            f"allOf member of '{name}' that is not an object with properties",
            'Only inline objects and references to object schemas can be merged',
        )
    return members


def _member_floats(members: Mapping[str, _Member], float_types: set[str]) -> bool:
    return any(is_float(member.kind, float_types) for member in members.values())


def float_components(schemas: Mapping[str, SchemaObj]) -> set[str]:
    """Names of the component schemas that contain floating point numbers.

    Such structs cannot derive ``Eq``; references are followed until the set
    no longer grows.
    """
    floats: set[str] = set()
    changed = True
    while changed:
        changed = False
        for name, schema in schemas.items():
            if name in floats or not isinstance(schema.definition, ObjectSchemaDecl):
                continue
            object_schema = schema.definition.object_schema
            if isinstance(object_schema, SchemaStruct):
                found = _member_floats(_struct_members(object_schema), floats)
            elif isinstance(object_schema, SchemaMap):
                found = is_float(object_schema.additional_properties.kind, floats)
            elif isinstance(object_schema, SchemaAllOf):
                found = any(is_float(m.kind, floats) for m in object_schema.all_of)
            else:
                found = False
            if found:
                floats.add(name)
                changed = True
    return floats


def _render_struct(
    name: str,
    members: Mapping[str, _Member],
    store: OverrideStore,
    deprecated: bool,
    float_types: set[str],
) -> str:
    names = derive_field_names(members)
    camel_case = resolve_struct_case(names)
    fields = []
    for field in sorted(names, key=lambda field: field.original):
        member = members[field.original]
        rust_type = to_rust_type(member.kind, RefMode.OWNED)
        if not member.required:
            rust_type = f'Option<{rust_type}>'
        fields.append(
            StructField(
                original=field.original,
                name=field.name,
                rust_type=store.resolve_field_type(name, field.name, rust_type),
                rename=needs_rename(field, camel_case),
                deprecated=member.deprecated,
            )
        )
    derives = list(_DERIVES)
    if _member_floats(members, float_types):
        derives.remove('Eq')
    return render(
        'struct.rs.jinja',
        name=name,
        fields=fields,
        derives=derives,
        camel_case=camel_case,
        deprecated=deprecated,
    )


def _render_alias(name: str, target: str, deprecated: bool) -> str:
    return render('alias.rs.jinja', name=name, target=target, deprecated=deprecated)


def render_type_definition(
    name: str,
    schema: SchemaObj,
    store: OverrideStore | None = None,
    schemas: Mapping[str, SchemaObj] | None = None,
    float_types: set[str] | None = None,
) -> str:
    """Render the declaration of one component schema.

    Args:
        name: The component name, used verbatim as the Rust type name.
        schema: The component schema.
        store: Field type overrides.
        schemas: All component schemas, for resolving allOf references.
        float_types: Components known to contain floats.

    Raises:
        UnsupportedFeatureError: If an allOf member cannot be merged.
        SchemaReferenceError: If a reference is malformed or dangling.
    """
    store = store or OverrideStore()
    schemas = schemas or {}
    float_types = float_types if float_types is not None else float_components(schemas)
    definition = schema.definition

    if isinstance(definition, StringEnumDecl):
        return render(
            'enum.rs.jinja',
            name=name,
            naming=derive_enum_variants(definition.enum),
            deprecated=schema.deprecated,
        )

    object_schema = definition.object_schema
    if isinstance(object_schema, SchemaStruct):
        return _render_struct(
            name, _struct_members(object_schema), store, schema.deprecated, float_types
        )
    if isinstance(object_schema, SchemaMap):
        value = to_rust_type(object_schema.additional_properties.kind, RefMode.OWNED)
        return _render_alias(name, f'TypeMap<String, {value}>', schema.deprecated)
    if isinstance(object_schema, SchemaAllOf):
        if len(object_schema.all_of) == 1:
            member = object_schema.all_of[0]
            return _render_alias(
                name, to_rust_type(member.kind, RefMode.OWNED), schema.deprecated
            )
        members = _all_of_members(name, object_schema, schemas)
        return _render_struct(name, members, store, schema.deprecated, float_types)
    return _render_alias(name, 'TypeMap<String, TypeValue>', schema.deprecated)


def render_types(spec: Spec, store: OverrideStore | None = None) -> str:
    """Render the complete types module of a description."""
    store = store or OverrideStore()
    schemas = spec.components.schemas
    float_types = float_components(schemas)
    declarations = []
    for name, schema in schemas.items():
        try:
            declarations.append(
                render_type_definition(name, schema, store, schemas, float_types)
            )
        except (UnsupportedFeatureError, SchemaReferenceError):
            raise
        except Exception as e:
            raise TypeGenerationError(
                name, schema_path=f'#/components/schemas/{name}', cause=e
            )
    logger.debug(f'Rendered {len(declarations)} type declarations')
    return render('types.rs.jinja', declarations=declarations)
