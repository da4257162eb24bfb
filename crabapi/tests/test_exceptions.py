"""Test suite for crabapi exceptions."""

import pytest

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


class TestCrabAPIError:
    """Tests for the base CrabAPIError exception."""

    def test_basic_message(self):
        """Test that the error stores the message."""
        error = CrabAPIError('Something went wrong')
        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    @pytest.mark.parametrize(
        'error',
        [
            SchemaLoadError('api.json'),
            SchemaValidationError('api.json'),
            SchemaReferenceError('#/definitions/User'),
            TypeGenerationError('User'),
            EndpointGenerationError('get', '/users'),
            ConfigurationError('bad'),
            OverrideFileError('openapi.patch.toml'),
            OutputError('out.rs'),
            UnsupportedFeatureError('oneOf'),
        ],
    )
    def test_hierarchy(self, error):
        """Every error can be caught as CrabAPIError."""
        with pytest.raises(CrabAPIError):
            raise error


class TestSchemaErrors:
    """Tests for description related errors."""

    def test_load_error(self):
        """Test the message includes the source and the cause."""
        cause = FileNotFoundError('no such file')
        error = SchemaLoadError('api.json', cause=cause)
        assert isinstance(error, SchemaError)
        assert error.cause is cause
        assert str(error) == "Failed to load API description from 'api.json': no such file"

    def test_validation_error(self):
        """Test validation errors are joined into the message."""
        error = SchemaValidationError('api.json', errors=['info: Field required', 'openapi: Field required'])
        assert error.errors == ['info: Field required', 'openapi: Field required']
        assert str(error).endswith(': info: Field required; openapi: Field required')

    def test_validation_error_without_errors(self):
        """Test the error list defaults to empty."""
        error = SchemaValidationError('api.json')
        assert error.errors == []
        assert str(error) == "API description validation failed for 'api.json'"

    def test_reference_error(self):
        """Test the message includes the reason."""
        error = SchemaReferenceError('#/definitions/User', reason='not a component schema')
        assert error.reference == '#/definitions/User'
        assert str(error) == (
            "Failed to resolve reference '#/definitions/User': not a component schema"
        )


class TestCodeGenerationErrors:
    """Tests for generation errors."""

    def test_context(self):
        """Test the context is included in the message."""
        error = CodeGenerationError('Failed', context='types')
        assert str(error) == 'Failed (while generating types)'

    def test_type_error(self):
        """Test type errors name the type and schema path."""
        error = TypeGenerationError(
            'User', schema_path='#/components/schemas/User', cause=ValueError('bad')
        )
        assert isinstance(error, CodeGenerationError)
        assert error.type_name == 'User'
        assert str(error) == (
            "Failed to generate type 'User' at '#/components/schemas/User' "
            '(while generating User): bad'
        )

    def test_endpoint_error(self):
        """Test endpoint errors name the verb and route."""
        error = EndpointGenerationError('post', '/{realm}/users', reason='no usable body')
        assert error.method == 'post'
        assert str(error) == 'Failed to generate method for POST /{realm}/users: no usable body'


class TestOtherErrors:
    """Tests for configuration, override and output errors."""

    def test_configuration_error(self):
        """Test the config path and field are included."""
        error = ConfigurationError('Missing value', config_path='crabapi.yaml', field='source')
        assert str(error) == "Missing value in 'crabapi.yaml' (field: source)"

    def test_override_file_error(self):
        """Test the path is included."""
        error = OverrideFileError('openapi.patch.toml', cause=ValueError('bad toml'))
        assert error.path == 'openapi.patch.toml'
        assert str(error) == "Invalid override file 'openapi.patch.toml': bad toml"

    def test_output_error(self):
        """Test the output path is included."""
        error = OutputError('src/types.rs')
        assert str(error) == "Failed to write output to 'src/types.rs'"

    def test_unsupported_feature(self):
        """Test the suggestion is appended."""
        error = UnsupportedFeatureError('inline allOf', suggestion='Declare a component schema')
        assert error.feature == 'inline allOf'
        assert str(error) == 'Unsupported feature: inline allOf. Declare a component schema'
