"""crabapi - Generate Rust admin clients from OpenAPI descriptions.

crabapi reads an OpenAPI 3 document and renders Rust source for an async
admin client: serde type declarations, one flat method per operation and
fluent realm-scoped methods with optional builders.

Quick Start:
    >>> from crabapi import Codegen, GeneratorConfig
    >>>
    >>> config = GeneratorConfig(source='openapi.json', patch_file='openapi.patch.toml')
    >>> codegen = Codegen(config)
    >>> print(codegen.generate_types())

CLI Usage:
    $ crabapi --source openapi.json types > src/types.rs
    $ crabapi --source openapi.json --patch openapi.patch.toml rest --tag Users
    $ crabapi --source openapi.json tags --format features
"""

from crabapi.codegen.codegen import Codegen
from crabapi.codegen.overrides import OverrideStore
from crabapi.codegen.schema import SchemaLoader
from crabapi.config import GeneratorConfig, TargetConfig, get_config
from crabapi.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    CrabAPIError,
    EndpointGenerationError,
    OutputError,
    OverrideFileError,
    SchemaError,
    SchemaLoadError,
    SchemaReferenceError,
    SchemaValidationError,
    TypeGenerationError,
    UnsupportedFeatureError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'OverrideStore',
    # Configuration
    'GeneratorConfig',
    'TargetConfig',
    'get_config',
    # Exceptions
    'CrabAPIError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'SchemaReferenceError',
    'CodeGenerationError',
    'TypeGenerationError',
    'EndpointGenerationError',
    'ConfigurationError',
    'OverrideFileError',
    'OutputError',
    'UnsupportedFeatureError',
]

__version__ = '0.1.0'
