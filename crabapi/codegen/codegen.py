"""Code generation module for crabapi.

This module provides the main Codegen class that orchestrates the generation
of Rust client code from an API description.
"""

import logging

from crabapi.codegen.emitter import CodeEmitter, StringEmitter
from crabapi.codegen.endpoints import render_rest_module, resolve_group_methods
from crabapi.codegen.overrides import OverrideStore
from crabapi.codegen.resources import render_resource_module
from crabapi.codegen.schema import SchemaLoader
from crabapi.codegen.tags import TagFormat, TagGrouping, group_paths, render_tag_listing
from crabapi.codegen.typedefs import render_types
from crabapi.config import GeneratorConfig
from crabapi.exceptions import ConfigurationError
from crabapi.openapi import Spec

logger = logging.getLogger(__name__)

__all__ = ['Codegen']


class Codegen:
    """Main code generator for Rust admin clients.

    This class orchestrates one generator run:
    - Loading and validating the API description
    - Loading the override (patch) file
    - Running one emitter with the requested tag scoping
    - Pruning redundant overrides once the output is rendered

    Attributes:
        config: The GeneratorConfig with source and naming settings.
        spec: The loaded description (populated by _load_schema).

    Example:
        >>> from crabapi.config import GeneratorConfig
        >>> from crabapi.codegen import Codegen
        >>>
        >>> config = GeneratorConfig(source='openapi.json', patch_file='openapi.patch.toml')
        >>> codegen = Codegen(config)
        >>> print(codegen.generate_rest(tag='Users'))

    Note:
        The description is not loaded until the first generate call.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        schema_loader: SchemaLoader | None = None,
        store: OverrideStore | None = None,
    ):
        """Initialize the code generator.

        Args:
            config: Configuration specifying the source and generator settings.
            schema_loader: Optional custom schema loader.
            store: Optional override store; by default it is loaded from
                ``config.patch_file``.
        """
        self.config = config
        self.spec: Spec | None = None
        self._schema_loader = schema_loader or SchemaLoader()
        self._store = store

    def _load_schema(self) -> Spec:
        """Load the description from the configured source once.

        Raises:
            ConfigurationError: If no source is configured.
            SchemaLoadError: If the description cannot be loaded.
            SchemaValidationError: If the description has an unexpected shape.
        """
        if self.spec is None:
            if not self.config.source:
                raise ConfigurationError(
                    'No API description source configured', field='source'
                )
            self.spec = self._schema_loader.load(self.config.source)
        return self.spec

    def specs(self) -> Spec:
        """The parsed description."""
        return self._load_schema()

    @property
    def store(self) -> OverrideStore:
        if self._store is None:
            self._store = OverrideStore.load(self.config.patch_file)
        return self._store

    @property
    def api_version(self) -> str:
        return self.config.api_version or self._load_schema().info.version

    def _select_groups(self, tag: str | None, no_tag: bool) -> TagGrouping:
        if tag is not None and no_tag:
            raise ConfigurationError('A tag and no_tag cannot be combined')
        grouping = group_paths(self._load_schema(), tag)
        if tag is not None and not grouping.groups:
            logger.warning(f"No tag group named '{tag}'")
        if grouping.unprocessed:
            logger.info(f'{grouping.unprocessed} path(s) not processed')
        return grouping

    def _finish(self, source: str, name: str, emitter: CodeEmitter | None) -> str:
        self.store.flush()
        (emitter or StringEmitter()).emit(source, name)
        return source

    def generate_types(self, emitter: CodeEmitter | None = None) -> str:
        """Generate the type declarations module.

        Args:
            emitter: Where to write the output; kept in memory by default.

        Returns:
            The generated Rust source.
        """
        source = render_types(self._load_schema(), self.store)
        return self._finish(source, 'types', emitter)

    def generate_rest(
        self,
        tag: str | None = None,
        no_tag: bool = False,
        emitter: CodeEmitter | None = None,
    ) -> str:
        """Generate the flat client methods.

        Args:
            tag: Render only this tag group as a per-tag module file.
            no_tag: Render every group without feature gates.
            emitter: Where to write the output; kept in memory by default.

        Returns:
            The generated Rust source.
        """
        grouping = self._select_groups(tag, no_tag)
        groups = [
            (group, resolve_group_methods(group, self.store, self.config, self.api_version))
            for group in grouping
        ]
        source = render_rest_module(
            groups,
            self.config,
            scoped=tag is not None,
            gated=tag is None and not no_tag,
        )
        return self._finish(source, 'rest', emitter)

    def generate_resource(
        self,
        tag: str | None = None,
        no_tag: bool = False,
        emitter: CodeEmitter | None = None,
    ) -> str:
        """Generate the fluent realm methods, result holders and builders.

        Takes the same scoping arguments as :meth:`generate_rest`.
        """
        grouping = self._select_groups(tag, no_tag)
        groups = [
            (group, resolve_group_methods(group, self.store, self.config, self.api_version))
            for group in grouping
        ]
        source = render_resource_module(
            groups,
            self.config,
            scoped=tag is not None,
            gated=tag is None and not no_tag,
        )
        return self._finish(source, 'resource', emitter)

    def list_tags(
        self, fmt: TagFormat = TagFormat.features, emitter: CodeEmitter | None = None
    ) -> str:
        """Render the tag groups as Cargo features, module listings or names."""
        source = render_tag_listing(self._load_schema(), fmt)
        (emitter or StringEmitter()).emit(source, 'tags')
        return source
