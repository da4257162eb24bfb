"""Identifier derivation for generated Rust code.

This module provides:
- derive_method_name for turning a route and verb into a client method name
- derive_field_names / resolve_struct_case for struct member naming
- derive_enum_variants for string enumeration variants
"""

import dataclasses
import enum
import re
from collections.abc import Iterable, Sequence

from crabapi.codegen.utils import (
    RESERVED_WORDS,
    escape_reserved,
    to_lower_camel_case,
    to_snake_case,
    to_upper_camel_case,
)
from crabapi.openapi import Method, Parameter, ParameterPosition

__all__ = [
    'DEFAULT_PATH_PREFIX',
    'EnumNaming',
    'EnumVariant',
    'FieldCase',
    'FieldName',
    'MethodName',
    'derive_enum_variants',
    'derive_field_names',
    'derive_method_name',
    'merge_parameters',
    'needs_rename',
    'resolve_struct_case',
]

DEFAULT_PATH_PREFIX = '/admin/realms'

_PLACEHOLDER = re.compile(r'\{([^}]+)\}')


# =============================================================================
# Method names
# =============================================================================


@dataclasses.dataclass(frozen=True)
class MethodName:
    """Result of deriving a method name for one operation.

    Attributes:
        name: The snake_case method name.
        template: The route template with placeholders renamed to the final
            parameter identifiers.
        original_template: The route template exactly as declared.
        parameters: Merged parameters paired with their Rust identifiers.
    """

    name: str
    template: str
    original_template: str
    parameters: list[tuple[Parameter, str]]

    @property
    def is_rewritten(self) -> bool:
        return self.template != self.original_template


def merge_parameters(
    path_parameters: Sequence[Parameter] | None,
    call_parameters: Sequence[Parameter] | None,
) -> list[Parameter]:
    """Merge route-level and operation-level parameters.

    Route-level parameters come first. An operation-level parameter whose name
    is already declared on the route is dropped.
    """
    merged = list(path_parameters or [])
    declared = {parameter.name for parameter in merged}
    for parameter in call_parameters or []:
        if parameter.name not in declared:
            merged.append(parameter)
            declared.add(parameter.name)
    return merged


def derive_method_name(
    path: str,
    verb: Method,
    parameters: Sequence[Parameter],
    prefix: str = DEFAULT_PATH_PREFIX,
    realm_parameter: str = 'realm',
    taken: Iterable[str] = (),
) -> MethodName:
    """Derive the client method name for an operation.

    Args:
        path: The route template, e.g. ``/admin/realms/{realm}/users/{user-id}``.
        verb: The HTTP verb of the operation.
        parameters: The merged parameters of the operation.
        prefix: Leading route segment stripped before naming.
        realm_parameter: Path parameter that is the implicit subject of the
            method and is not prefixed with ``with_``.
        taken: Identifiers that parameters must not use (e.g. ``body``).

    Returns:
        The derived MethodName.

    Example:
        >>> derive_method_name('/admin/realms/{realm}/users', Method.get, params).name
        'realm_users_get'
    """
    remnant = path[len(prefix) :] if prefix and path.startswith(prefix) else path
    used = set(taken)
    resolved = []
    placeholders = {}

    for parameter in parameters:
        identifier = escape_reserved(to_snake_case(parameter.name), used)
        used.add(identifier)
        resolved.append((parameter, identifier))

        placeholder = '{' + parameter.name + '}'
        if parameter.position == ParameterPosition.path:
            if parameter.name == realm_parameter:
                replacement = identifier
            else:
                replacement = f'with_{identifier}'
            remnant = remnant.replace(placeholder, replacement)
            placeholders[parameter.name] = identifier

    # placeholders are rewritten from the declared template in a single pass
    template = _PLACEHOLDER.sub(
        lambda match: '{' + placeholders.get(match[1], match[1]) + '}', path
    )

    return MethodName(
        name=to_snake_case(remnant + verb.display),
        template=template,
        original_template=path,
        parameters=resolved,
    )


# =============================================================================
# Struct members
# =============================================================================


class FieldCase(enum.Enum):
    SNAKE_CASE = 'snake_case'
    CAMEL_CASE = 'camelCase'
    CUSTOM = 'custom'
    UNKNOWN = 'unknown'


@dataclasses.dataclass(frozen=True)
class FieldName:
    original: str
    name: str
    case: FieldCase


def derive_field_names(fields: Iterable[str]) -> list[FieldName]:
    """Convert declared field names into Rust member names.

    Each member is snake_cased and classified by the convention its original
    spelling follows. Renamed members are underscored until they no longer
    collide with any declared field name.
    """
    originals = list(fields)
    declared = set(originals)
    names = []
    for field in originals:
        name = to_snake_case(field)
        if name in RESERVED_WORDS:
            name += '_'
            case = FieldCase.CUSTOM
        elif field == name:
            case = FieldCase.SNAKE_CASE if '_' in field else FieldCase.UNKNOWN
        elif field == to_lower_camel_case(field):
            case = FieldCase.CAMEL_CASE
        else:
            case = FieldCase.CUSTOM
        if field != name:
            while name in declared:
                name += '_'
        names.append(FieldName(original=field, name=name, case=case))
    return names


def resolve_struct_case(names: Iterable[FieldName]) -> bool:
    """Whether a struct adopts camelCase for its members.

    camelCase wins only with a strict majority over snake_case; a tie keeps
    snake_case.
    """
    camel = snake = 0
    for field in names:
        if field.case is FieldCase.CAMEL_CASE:
            camel += 1
        elif field.case is FieldCase.SNAKE_CASE:
            snake += 1
    return camel > snake


def needs_rename(field: FieldName, camel_case: bool) -> bool:
    """Whether the adopted convention fails to reproduce the original name."""
    if field.case is FieldCase.CUSTOM:
        return True
    if field.case is FieldCase.UNKNOWN:
        return False
    if field.case is FieldCase.CAMEL_CASE:
        return not camel_case
    return camel_case


# =============================================================================
# Enum variants
# =============================================================================


@dataclasses.dataclass(frozen=True)
class EnumVariant:
    literal: str
    name: str
    rename: bool


@dataclasses.dataclass(frozen=True)
class EnumNaming:
    screaming: bool
    variants: list[EnumVariant]


def _serde_screaming_snake(variant: str) -> str:
    # serde's rename_all = "SCREAMING_SNAKE_CASE" for PascalCase variants
    out = []
    for index, char in enumerate(variant):
        if index > 0 and char.isupper():
            out.append('_')
        out.append(char.upper())
    return ''.join(out)


def derive_enum_variants(literals: Iterable[str]) -> EnumNaming:
    literals = list(literals)
    screaming = not any(char.islower() for literal in literals for char in literal)
    used: set[str] = set()
    variants = []
    for literal in literals:
        name = to_upper_camel_case(literal) or '_'
        if name[0].isdigit():
            name = f'_{name}'
        while name in used:
            name += '_'
        used.add(name)
        serialized = _serde_screaming_snake(name) if screaming else name
        variants.append(
            EnumVariant(literal=literal, name=name, rename=serialized != literal)
        )
    return EnumNaming(screaming=screaming, variants=variants)
