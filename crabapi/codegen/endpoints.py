"""Flat client methods: one async reqwest call per operation.

This module provides:
- RestParameter and RestMethod, the resolved view of an operation
- resolve_rest_method, which runs naming, type mapping and overrides
- render_rest_method / render_rest_module, which emit the Rust text
"""

import dataclasses
import logging

from crabapi.codegen.naming import derive_method_name, merge_parameters
from crabapi.codegen.overrides import OverrideStore
from crabapi.codegen.tags import TagGroup
from crabapi.codegen.templating import indent, render
from crabapi.codegen.types import (
    UNTYPED,
    ReturnType,
    parameter_type,
    request_body_type,
    response_return_type,
)
from crabapi.config import GeneratorConfig, TargetConfig
from crabapi.exceptions import CrabAPIError, EndpointGenerationError
from crabapi.openapi import (
    ArrayKind,
    Call,
    Method,
    Parameter,
    ParameterPosition,
    SpecPath,
)

logger = logging.getLogger(__name__)

__all__ = [
    'BODY_ARGUMENT',
    'Argument',
    'RestBody',
    'RestMethod',
    'RestParameter',
    'build_doc',
    'docs_anchor',
    'render_rest_method',
    'render_rest_module',
    'resolve_group_methods',
    'resolve_rest_method',
]

BODY_ARGUMENT = 'body'


@dataclasses.dataclass(frozen=True)
class RestParameter:
    """A method argument bound to a path or query parameter."""

    name: str
    original_name: str
    position: ParameterPosition
    required: bool
    deprecated: bool
    description: str | None
    rust_type: str
    is_array: bool = False

    @property
    def is_path(self) -> bool:
        return self.position == ParameterPosition.path

    @property
    def is_query(self) -> bool:
        return self.position == ParameterPosition.query

    def query_value(self, variable: str) -> str:
        """Expression of the query pairs appended for this parameter."""
        key = self.original_name.replace('\\', '\\\\').replace('"', '\\"')
        if self.is_array:
            iterate = 'iter' if self.required else 'into_iter'
            return f'{variable}.{iterate}().map(|e| ("{key}", e)).collect::<Vec<_>>()'
        return f'[("{key}", {variable})]'


@dataclasses.dataclass(frozen=True)
class RestBody:
    rust_type: str
    call: str


@dataclasses.dataclass(frozen=True)
class Argument:
    name: str
    rust_type: str


@dataclasses.dataclass
class RestMethod:
    """Resolved view of one operation.

    Attributes:
        path: The route template as declared.
        verb: The HTTP verb.
        name: The method name.
        template: Route template with placeholders renamed to identifiers.
        tag: The single tag of the operation, if it has exactly one.
        deprecated: Whether the operation is deprecated.
        parameters: Path and query arguments in declaration order.
        body: The request body argument, if any.
        result: The typed result, or None for the default response.
        result_type: The Rust type in ``Result<_, Error>``.
        doc: Rendered ``///`` documentation lines.
    """

    path: str
    verb: Method
    name: str
    template: str
    tag: str | None
    deprecated: bool
    parameters: list[RestParameter]
    body: RestBody | None
    result: ReturnType | None
    result_type: str
    doc: list[str] = dataclasses.field(default_factory=list)

    @property
    def arguments(self) -> list[Argument]:
        arguments = [Argument(p.name, p.rust_type) for p in self.parameters]
        if self.body is not None:
            arguments.append(Argument(BODY_ARGUMENT, self.body.rust_type))
        return arguments

    @property
    def path_parameters(self) -> list[RestParameter]:
        return [parameter for parameter in self.parameters if parameter.is_path]

    @property
    def query_parameters(self) -> list[RestParameter]:
        return [parameter for parameter in self.parameters if parameter.is_query]

    @property
    def request_call(self) -> str:
        if self.verb is Method.options:
            return 'request(reqwest::Method::OPTIONS, '
        return f'{self.verb.value}('

    @property
    def empty_put(self) -> bool:
        return self.verb is Method.put and self.body is None


# =============================================================================
# Documentation
# =============================================================================


def docs_anchor(path: str, verb: Method) -> str:
    suffix = path.replace('-', '_')
    suffix = ''.join(char for char in suffix if char not in '{}/').lower()
    return f'_{verb.value}_{suffix}'


def _one_line(text: str) -> str:
    return text.replace('\r', '').replace('\n', '')


def build_doc(
    call: Call,
    path: str,
    verb: Method,
    template: str,
    parameters: list[RestParameter],
    has_body: bool,
    typed_result: bool,
    docs_url: str | None = None,
    api_version: str | None = None,
) -> list[str]:
    """Build the ``///`` lines documenting a generated method.

    Sections are separated by an empty ``///`` line.
    """
    sections: list[list[str]] = []

    summary = []
    if call.summary and call.summary.strip():
        summary.extend(call.summary.strip().splitlines())
    if call.description and call.description.strip() != (call.summary or '').strip():
        summary.extend(call.description.strip().splitlines())
    if summary:
        sections.append(summary)

    if parameters or has_body:
        sections.append(['Parameters:'])
        entries = []
        for parameter in parameters:
            entry = f'- `{parameter.name}`'
            if parameter.deprecated:
                entry += ' (deprecated)'
            if parameter.description:
                entry += f': {_one_line(parameter.description)}'
            entries.append(entry)
        if has_body:
            entries.append(f'- `{BODY_ARGUMENT}`')
        sections.append(entries)

    if not typed_result:
        sections.append(['Returns response for future processing.'])

    if call.single_tag is not None:
        sections.append([f'Resource: `{call.single_tag}`'])

    verb_upper = verb.value.upper()
    sections.append([f'`{verb_upper} {template}`'])

    # links need a version when the template has a version segment
    if docs_url and (api_version or '{version}' not in docs_url):
        link = docs_url.format(version=api_version or '', anchor=docs_anchor(path, verb))
        sections.append([f'Documentation: <{link}>'])

    if template != path:
        sections.append([f'REST method: `{verb_upper} {path}`'])

    lines = []
    for index, section in enumerate(sections):
        if index:
            lines.append('///')
        lines.extend(f'/// {line}'.rstrip() for line in section)
    return lines


# =============================================================================
# Resolution
# =============================================================================


def _resolve_parameter(
    parameter: Parameter,
    identifier: str,
    path: str,
    verb: Method,
    store: OverrideStore,
) -> RestParameter:
    inferred = parameter_type(parameter.kind, parameter.required)
    return RestParameter(
        name=identifier,
        original_name=parameter.name,
        position=parameter.position,
        required=parameter.required,
        deprecated=parameter.deprecated,
        description=parameter.description,
        rust_type=store.resolve_path_type(path, verb.value, identifier, inferred),
        is_array=isinstance(parameter.kind.root, ArrayKind),
    )


def _resolve_result(
    call: Call, path: str, verb: Method, store: OverrideStore, target: TargetConfig
) -> tuple[ReturnType | None, str]:
    inferred = response_return_type(call.responses)
    inferred_type = inferred.value if inferred else target.default_response_type

    entry = store.lookup_path(path, verb.value)
    if entry is None:
        if inferred_type == UNTYPED:
            header = store.path_header(path, verb.value)
            logger.warning(f'{UNTYPED} as result in {header}')
        return inferred, inferred_type

    result_type = store.resolve_path_type(path, verb.value, None, inferred_type)
    if result_type == target.default_response_type:
        return None, result_type
    result = ReturnType(
        value=result_type,
        body=entry.method or 'json',
        convert=entry.convert,
    )
    return result, result_type


def resolve_rest_method(
    path: str,
    verb: Method,
    spec_path: SpecPath,
    call: Call,
    store: OverrideStore,
    config: GeneratorConfig | None = None,
    api_version: str | None = None,
) -> RestMethod:
    """Resolve names, types and overrides of one operation.

    Args:
        path: The route template as declared.
        verb: The HTTP verb of the operation.
        spec_path: The route the operation belongs to.
        call: The operation.
        store: Override lookups for this run.
        config: Generator settings.
        api_version: Version used in documentation links.

    Returns:
        The resolved RestMethod.

    Raises:
        EndpointGenerationError: If the operation cannot be expressed, e.g. a
            request body without a supported content type.
    """
    config = config or GeneratorConfig()
    try:
        has_body = call.request_body is not None
        naming = derive_method_name(
            path,
            verb,
            merge_parameters(spec_path.parameters, call.parameters),
            prefix=config.path_prefix,
            realm_parameter=config.realm_parameter,
            taken=(BODY_ARGUMENT,) if has_body else (),
        )
        parameters = [
            _resolve_parameter(parameter, identifier, path, verb, store)
            for parameter, identifier in naming.parameters
        ]

        body = None
        if call.request_body is not None:
            body_type = request_body_type(call.request_body, BODY_ARGUMENT)
            if body_type is None:
                content_types = ', '.join(call.request_body.content) or 'none'
                raise EndpointGenerationError(
                    verb.value,
                    path,
                    f'no supported request body content type ({content_types})',
                )
            body = RestBody(
                rust_type=store.resolve_path_type(
                    path, verb.value, BODY_ARGUMENT, body_type.value
                ),
                call=body_type.body,
            )

        result, result_type = _resolve_result(call, path, verb, store, config.target)
    except EndpointGenerationError:
        raise
    except CrabAPIError as e:
        raise EndpointGenerationError(verb.value, path, cause=e)

    method = RestMethod(
        path=path,
        verb=verb,
        name=naming.name,
        template=naming.template,
        tag=call.single_tag,
        deprecated=call.deprecated,
        parameters=parameters,
        body=body,
        result=result,
        result_type=result_type,
    )
    method.doc = build_doc(
        call,
        path,
        verb,
        naming.template,
        parameters,
        has_body=body is not None,
        typed_result=result is not None,
        docs_url=config.docs_url,
        api_version=api_version or config.api_version,
    )
    return method


def resolve_group_methods(
    group: TagGroup,
    store: OverrideStore,
    config: GeneratorConfig,
    api_version: str | None = None,
) -> list[RestMethod]:
    """Resolve every operation of a tag group in declaration order."""
    return [
        resolve_rest_method(path, verb, spec_path, call, store, config, api_version)
        for path, spec_path in group.paths
        for verb, call in spec_path.calls.items()
    ]


# =============================================================================
# Rendering
# =============================================================================


def render_rest_method(
    method: RestMethod,
    target: TargetConfig | None = None,
    feature: str | None = None,
    max_arguments: int = 6,
) -> str:
    """Render one ``pub async fn``, unindented."""
    return render(
        'rest_method.rs.jinja',
        method=method,
        target=target or TargetConfig(),
        feature=feature,
        too_many_arguments=len(method.arguments) > max_arguments,
    )


def render_rest_module(
    groups: list[tuple[TagGroup, list[RestMethod]]],
    config: GeneratorConfig,
    scoped: bool = False,
    gated: bool = True,
) -> str:
    """Render the ``impl`` block holding the methods of the given groups.

    Args:
        groups: Tag groups with their resolved methods.
        config: Generator settings.
        scoped: Render a per-tag module file (``use super::*;``) instead of the
            complete module with its imports.
        gated: Put each method behind the Cargo feature of its group.
    """
    rendered = [
        {
            'title': group.title,
            'methods': [
                indent(
                    render_rest_method(
                        method,
                        config.target,
                        feature=group.feature if gated else None,
                        max_arguments=config.max_arguments,
                    )
                )
                for method in methods
            ],
        }
        for group, methods in groups
    ]
    return render('rest.rs.jinja', groups=rendered, target=config.target, scoped=scoped)
