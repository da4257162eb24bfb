import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from crabapi.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['crabapi.yaml', 'crabapi.yml']

DEFAULT_DOCS_URL = 'https://www.keycloak.org/docs-api/{version}/rest-api/index.html#{anchor}'


class TargetConfig(BaseModel):
    """Names of the Rust items the generated code is written against."""

    admin_type: str = Field(
        'KeycloakAdmin', description='Client type the flat methods are implemented on.'
    )

    realm_admin_type: str = Field(
        'KeycloakRealmAdmin',
        description='Realm scoped client type the fluent methods are implemented on.',
    )

    error_type: str = Field(
        'KeycloakError', description='Error type of every generated method.'
    )

    token_supplier_trait: str = Field(
        'KeycloakTokenSupplier', description='Trait bound of the token supplier.'
    )

    method_trait: str = Field(
        'KeycloakRealmAdminMethod',
        description='Trait implemented by fluent result holders.',
    )

    default_response_type: str = Field(
        'DefaultResponse',
        description='Result type of operations without a typed response.',
    )


class GeneratorConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CRABAPI_', env_nested_delimiter='__')

    source: str | None = Field(
        None, description='Path or URL to the API description (JSON or YAML).'
    )

    patch_file: str | None = Field(
        None, description='Optional TOML file with type overrides.'
    )

    path_prefix: str = Field(
        '/admin/realms',
        description='Leading route segment stripped before deriving method names.',
    )

    realm_parameter: str = Field(
        'realm',
        description='Path parameter that scopes the fluent (realm) methods.',
    )

    docs_url: str | None = Field(
        DEFAULT_DOCS_URL,
        description='Documentation link template with {version} and {anchor} placeholders.',
    )

    api_version: str | None = Field(
        None,
        description='Version used in documentation links; defaults to info.version.',
    )

    max_arguments: int = Field(
        6,
        description='Argument count above which methods allow clippy::too_many_arguments.',
    )

    target: TargetConfig = Field(default_factory=TargetConfig)


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.safe_load(Path(path).read_text()) or {}


def load_file(path: str | Path) -> dict:
    if Path(path).suffix.lower() == '.json':
        return json.loads(Path(path).read_text())
    return load_yaml(path)


def _validate(data: dict, path: str | Path | None = None) -> GeneratorConfig:
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f'Invalid configuration: {e}', config_path=str(path) if path else None
        )


def get_config(path: str | None = None) -> GeneratorConfig:
    """Load configuration from a file, pyproject.toml or the environment."""
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return _validate(load_file(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return _validate(load_yaml(path), path)

    path = Path(os.getcwd()) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'crabapi' in tools:
            return _validate(tools['crabapi'], path)

    return GeneratorConfig()
