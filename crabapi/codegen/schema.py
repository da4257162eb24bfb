"""Loading of API descriptions.

This module provides SchemaLoader, which reads an OpenAPI document from a URL
or a local file (JSON or YAML) and validates it into the Spec IR.
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from crabapi.exceptions import SchemaLoadError, SchemaValidationError
from crabapi.openapi import Spec

logger = logging.getLogger(__name__)

__all__ = ['SchemaLoader']


class SchemaLoader:
    """Loads API descriptions from URLs or file paths.

    Example:
        >>> loader = SchemaLoader()
        >>> spec = loader.load('https://www.keycloak.org/docs-api/latest/rest-api/openapi.json')
        >>> # or
        >>> spec = loader.load('api/openapi.yaml')
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        base_path: str | Path | None = None,
    ):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, a default client will be created.
            base_path: Base path for resolving relative file paths.
                      Defaults to current working directory.
        """
        self._http_client = http_client
        self._base_path = Path(base_path) if base_path else Path.cwd()

    def load(self, source: str) -> Spec:
        """Load and validate an API description from a URL or file path.

        Args:
            source: URL or file path to the description.

        Returns:
            The validated Spec.

        Raises:
            SchemaLoadError: If the description cannot be read or parsed.
            SchemaValidationError: If the description does not have the
                expected shape.
        """
        if self._is_url(source):
            content = self._load_from_url(source)
        else:
            content = self._load_from_file(source)
        return self.validate(content, source)

    def validate(self, content: Any, source: str = '<memory>') -> Spec:
        """Validate already parsed content into a Spec."""
        if not isinstance(content, dict):
            raise SchemaValidationError(
                source, errors=[f'expected a mapping, got {type(content).__name__}']
            )
        try:
            spec = Spec.model_validate(content)
        except ValidationError as e:
            errors = [
                f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
                for error in e.errors()
            ]
            raise SchemaValidationError(source, errors=errors)
        logger.debug(
            f'Loaded {spec.info.title} {spec.info.version}: '
            f'{len(spec.paths)} paths, {len(spec.components.schemas)} schemas'
        )
        return spec

    def _is_url(self, text: str) -> bool:
        """Check if a string is a URL."""
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> Any:
        """Load description content from a URL."""
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')
            content = response.text

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(content)
            return json.loads(content)

        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> Any:
        """Load description content from a file."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_path / path

        if not path.exists():
            raise SchemaLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaLoadError(str(file_path), cause=e)
        except OSError as e:
            raise SchemaLoadError(str(file_path), cause=e)
