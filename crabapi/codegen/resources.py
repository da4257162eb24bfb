"""Fluent realm-scoped methods layered over the flat client methods.

Every flat method whose route carries the realm path parameter gets a twin on
the realm admin type. Operations without optional arguments forward straight
to the flat method; the others return a result holder that can be awaited
directly or configured through an arguments struct and an optional builder.
"""

import dataclasses
import logging

from crabapi.codegen.endpoints import BODY_ARGUMENT, RestMethod
from crabapi.codegen.tags import TagGroup
from crabapi.codegen.templating import indent, render
from crabapi.codegen.utils import to_snake_case, to_upper_camel_case
from crabapi.config import GeneratorConfig, TargetConfig

logger = logging.getLogger(__name__)

__all__ = [
    'RealmMethod',
    'RealmMethodParameter',
    'realm_method',
    'render_resource_module',
]


@dataclasses.dataclass(frozen=True)
class RealmMethodParameter:
    """An argument of the flat method as seen from the realm admin."""

    name: str
    rust_type: str
    required: bool
    description: str | None = None
    is_realm: bool = False

    @property
    def holder_type(self) -> str:
        """Type stored on the result holder; borrows live for ``'a``."""
        if self.rust_type.startswith('&') and not self.rust_type.startswith("&'"):
            return "&'a " + self.rust_type[1:]
        return self.rust_type

    @property
    def setter_type(self) -> str:
        if self.rust_type.startswith('Option<'):
            return f'impl Into<{self.rust_type}>'
        return f'impl Into<Option<{self.rust_type}>>'

    @property
    def doc(self) -> list[str]:
        if not self.description:
            return []
        description = self.description.replace('\n', '')
        return [f'/// {description}'.rstrip()]


@dataclasses.dataclass
class RealmMethod:
    """Resolved view of a flat method exposed on the realm admin.

    Attributes:
        name: The fluent method name (flat name without the realm prefix).
        flat_name: The flat method it forwards to.
        holder: Name of the result holder struct.
        parameters: All flat arguments in flat order, realm included.
        result_type: The Rust result type.
        doc: Documentation lines shared with the flat method.
        tag: The single tag of the operation, if any.
        deprecated: Whether the operation is deprecated.
    """

    name: str
    flat_name: str
    holder: str
    parameters: list[RealmMethodParameter]
    result_type: str
    doc: list[str]
    tag: str | None = None
    deprecated: bool = False

    @property
    def required(self) -> list[RealmMethodParameter]:
        return [p for p in self.parameters if p.required and not p.is_realm]

    @property
    def optional(self) -> list[RealmMethodParameter]:
        return [p for p in self.parameters if not p.required and not p.is_realm]

    @property
    def has_optional(self) -> bool:
        return bool(self.optional)

    @property
    def pass_through_arguments(self) -> list[str]:
        return ['self.realm' if p.is_realm else p.name for p in self.parameters]

    @property
    def holder_arguments(self) -> list[str]:
        arguments = []
        for parameter in self.parameters:
            if parameter.is_realm:
                arguments.append('self.realm_admin.realm')
            elif parameter.required:
                arguments.append(f'self.{parameter.name}')
            else:
                arguments.append(parameter.name)
        return arguments


def realm_method(method: RestMethod, realm_parameter: str = 'realm') -> RealmMethod | None:
    """Derive the fluent view of a flat method.

    Returns None when the method is not scoped by the realm path parameter.
    """
    prefix = f'{to_snake_case(realm_parameter)}_'
    if not method.name.startswith(prefix):
        return None
    realm = [
        parameter
        for parameter in method.path_parameters
        if parameter.original_name == realm_parameter
    ]
    if not realm:
        return None

    parameters = [
        RealmMethodParameter(
            name=parameter.name,
            rust_type=parameter.rust_type,
            # overrides without Option are passed like required arguments
            required=parameter.required or not parameter.rust_type.startswith('Option<'),
            description=parameter.description,
            is_realm=parameter is realm[0],
        )
        for parameter in method.parameters
    ]
    if method.body is not None:
        parameters.append(
            RealmMethodParameter(
                name=BODY_ARGUMENT, rust_type=method.body.rust_type, required=True
            )
        )

    return RealmMethod(
        name=method.name[len(prefix) :],
        flat_name=method.name,
        holder=to_upper_camel_case(method.name),
        parameters=parameters,
        result_type=method.result_type,
        doc=method.doc,
        tag=method.tag,
        deprecated=method.deprecated,
    )


def _render_group(
    methods: list[RealmMethod],
    target: TargetConfig,
    feature: str | None,
    max_arguments: int,
) -> tuple[list[str], list[str], list[str]]:
    rendered_methods = []
    holders = []
    builders = []
    for method in methods:
        context = {'method': method, 'target': target, 'feature': feature}
        rendered_methods.append(
            indent(
                render(
                    'resource_method.rs.jinja',
                    too_many_arguments=len(method.required) > max_arguments,
                    **context,
                )
            )
        )
        if method.has_optional:
            holders.append(render('resource_holder.rs.jinja', **context))
            builders.append(indent(render('resource_builder.rs.jinja', **context)))
    return rendered_methods, holders, builders


def render_resource_module(
    groups: list[tuple[TagGroup, list[RestMethod]]],
    config: GeneratorConfig,
    scoped: bool = False,
    gated: bool = True,
) -> str:
    """Render the fluent methods, result holders and builders of the groups.

    Args:
        groups: Tag groups with their resolved flat methods.
        config: Generator settings.
        scoped: Render a per-tag module file (``use super::*;``).
        gated: Put each item behind the Cargo feature of its group.
    """
    rendered = []
    skipped = 0
    for group, rest_methods in groups:
        methods = []
        for rest_method in rest_methods:
            method = realm_method(rest_method, config.realm_parameter)
            if method is None:
                skipped += 1
                continue
            methods.append(method)
        group_methods, holders, builders = _render_group(
            methods,
            config.target,
            group.feature if gated else None,
            config.max_arguments,
        )
        rendered.append(
            {
                'title': group.title,
                'methods': group_methods,
                'holders': holders,
                'builders': builders,
            }
        )
    if skipped:
        logger.info(
            f'Skipped {skipped} method(s) without a '
            f'{config.realm_parameter} path parameter'
        )
    return render(
        'resource.rs.jinja',
        groups=rendered,
        target=config.target,
        scoped=scoped,
        has_builders=any(group['builders'] for group in rendered),
    )

