"""Custom exceptions for crabapi.

This module defines a hierarchy of exceptions used throughout crabapi to
provide clear, actionable error messages for the different failure scenarios
of a generator run.
"""


class CrabAPIError(Exception):
    """Base exception for all crabapi errors.

    All exceptions raised by crabapi inherit from this class, making it easy
    to catch all generator errors with a single except clause.

    Example:
        try:
            codegen.generate_types()
        except CrabAPIError as e:
            print(f"crabapi error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(CrabAPIError):
    """Base exception for API description related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an API description from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load API description from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """The API description does not have the expected shape.

    Attributes:
        source: The source path or URL of the invalid description.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"API description validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SchemaReferenceError(SchemaError):
    """A ``$ref`` does not point into the component schema registry.

    Attributes:
        reference: The $ref string that could not be resolved.
        reason: Explanation of why the reference couldn't be resolved.
    """

    def __init__(self, reference: str, reason: str | None = None):
        self.reference = reference
        self.reason = reason
        message = f"Failed to resolve reference '{reference}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class CodeGenerationError(CrabAPIError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class TypeGenerationError(CodeGenerationError):
    """Error generating a type declaration from a component schema.

    Attributes:
        type_name: The name of the type being generated.
        schema_path: The path to the schema in the API description.
    """

    def __init__(
        self,
        type_name: str,
        schema_path: str | None = None,
        cause: Exception | None = None,
    ):
        self.type_name = type_name
        self.schema_path = schema_path
        message = f"Failed to generate type '{type_name}'"
        if schema_path:
            message += f" at '{schema_path}'"
        super().__init__(message, context=type_name, cause=cause)


class EndpointGenerationError(CodeGenerationError):
    """Error generating a client method from an operation.

    Attributes:
        method: The HTTP verb of the operation.
        path: The route template of the operation.
    """

    def __init__(
        self,
        method: str,
        path: str,
        reason: str | None = None,
        cause: Exception | None = None,
    ):
        self.method = method
        self.path = path
        self.reason = reason
        message = f'Failed to generate method for {method.upper()} {path}'
        if reason:
            message += f': {reason}'
        super().__init__(message, cause=cause)


class ConfigurationError(CrabAPIError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OverrideFileError(CrabAPIError):
    """The override (patch) file is missing or cannot be parsed.

    The generator cannot run without a syntactically valid patch file once
    one is configured, even an empty one.

    Attributes:
        path: The path of the override file.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        message = f"Invalid override file '{path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class OutputError(CrabAPIError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class UnsupportedFeatureError(CrabAPIError):
    """Attempted to use a feature the generator does not support.

    Attributes:
        feature: Description of the unsupported feature.
        suggestion: Optional suggestion for a workaround.
    """

    def __init__(self, feature: str, suggestion: str | None = None):
        self.feature = feature
        self.suggestion = suggestion
        message = f'Unsupported feature: {feature}'
        if suggestion:
            message += f'. {suggestion}'
        super().__init__(message)
