from crabapi.openapi.models import (
    SCHEMA_REF_PREFIX,
    ArrayKind,
    BooleanKind,
    Call,
    Components,
    ContentSchema,
    ContentType,
    DefaultValue,
    Info,
    IntegerFormat,
    IntegerKind,
    Kind,
    Method,
    NumberFormat,
    NumberKind,
    ObjectKind,
    ObjectSchemaDecl,
    Parameter,
    ParameterPosition,
    Property,
    Ref,
    RequestBody,
    Response,
    SchemaAllOf,
    SchemaMap,
    SchemaObj,
    SchemaStruct,
    SchemaValue,
    Spec,
    SpecPath,
    StringEnumDecl,
    StringKind,
    Tag,
)

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
