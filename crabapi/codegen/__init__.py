"""Code generation module for crabapi.

This module provides the code generation functionality for creating Rust
admin client code from an API description.

Main Components:
    - Codegen: The orchestrator of a generator run
    - SchemaLoader: Loads API descriptions from URLs or files
    - OverrideStore: Type overrides from the TOML patch file
    - render_types / render_rest_module / render_resource_module: the emitters
    - CodeEmitter: Handles output of generated code

Example:
    >>> from crabapi.codegen import Codegen
    >>> from crabapi.config import GeneratorConfig
    >>>
    >>> codegen = Codegen(GeneratorConfig(source='./openapi.json'))
    >>> print(codegen.generate_types())
"""

from crabapi.codegen.codegen import Codegen
from crabapi.codegen.emitter import CodeEmitter, FileEmitter, StringEmitter
from crabapi.codegen.endpoints import (
    RestMethod,
    RestParameter,
    render_rest_method,
    render_rest_module,
    resolve_group_methods,
    resolve_rest_method,
)
from crabapi.codegen.naming import (
    MethodName,
    derive_enum_variants,
    derive_field_names,
    derive_method_name,
    resolve_struct_case,
)
from crabapi.codegen.overrides import OverrideStore
from crabapi.codegen.resources import RealmMethod, realm_method, render_resource_module
from crabapi.codegen.schema import SchemaLoader
from crabapi.codegen.tags import TagFormat, TagGroup, group_paths, render_tag_listing
from crabapi.codegen.typedefs import render_type_definition, render_types
from crabapi.codegen.types import RefMode, to_rust_type

__all__ = [
    # Main codegen class
    'Codegen',
    # Loading
    'SchemaLoader',
    'OverrideStore',
    # Type mapping and naming
    'RefMode',
    'to_rust_type',
    'MethodName',
    'derive_method_name',
    'derive_field_names',
    'derive_enum_variants',
    'resolve_struct_case',
    # Grouping
    'TagFormat',
    'TagGroup',
    'group_paths',
    'render_tag_listing',
    # Emitters
    'RestMethod',
    'RestParameter',
    'resolve_rest_method',
    'resolve_group_methods',
    'render_rest_method',
    'render_rest_module',
    'RealmMethod',
    'realm_method',
    'render_resource_module',
    'render_type_definition',
    'render_types',
    # Code emission
    'CodeEmitter',
    'FileEmitter',
    'StringEmitter',
]
