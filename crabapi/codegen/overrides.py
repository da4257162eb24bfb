"""Human-maintained type overrides for generated code.

The override (patch) file is a TOML document with two tables::

    [path."/admin/realms/{realm}/users:get:"]
    from_type = "TypeVec<UserRepresentation>"
    rust_type = "TypeVec<UserRepresentation>"

    [type."UserRepresentation:attributes"]
    rust_type = "TypeMap<String, TypeVec<String>>"

``path`` entries are keyed ``route:verb:parameter``; an empty parameter
addresses the return type of the operation. ``type`` entries are keyed
``Struct:field`` with the Rust member name.

Entries that no longer change anything are pruned from the file once per run,
after every lookup of the run has completed.
"""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from crabapi.exceptions import OverrideFileError

logger = logging.getLogger(__name__)

__all__ = [
    'FieldOverride',
    'OverrideFile',
    'OverrideStore',
    'PathOverride',
]


class PathOverride(BaseModel):
    """Correction of a parameter, body or return type of an operation."""

    from_type: str = Field(..., description='Type inferred when the entry was written.')
    rust_type: str = Field(..., description='Type to emit instead.')
    method: str | None = Field(
        None, description='Response parse method to use instead of the inferred one.'
    )
    convert: str | None = Field(
        None, description='Conversion applied to the parsed response.'
    )


class FieldOverride(BaseModel):
    """Correction of a struct member type."""

    rust_type: str


class OverrideFile(BaseModel):
    path: dict[str, PathOverride] = Field(default_factory=dict)
    type: dict[str, FieldOverride] = Field(default_factory=dict)


def _normalize_header(line: str) -> str:
    """Table header without whitespace or a trailing comment outside quotes."""
    out = []
    quoted = False
    escaped = False
    for char in line.strip():
        if quoted:
            out.append(char)
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                quoted = False
        elif char == '#':
            break
        elif not char.isspace():
            out.append(char)
            quoted = char == '"'
    return ''.join(out)


class OverrideStore:
    """Override lookups backed by an optional on-disk patch file.

    The store is built once per run and passed to the emitters. Redundant
    entries found during lookups are only queued; :meth:`flush` rewrites the
    file once at the end of the run.

    Example:
        >>> store = OverrideStore.load('openapi.patch.toml')
        >>> store.resolve_path_type('/admin/realms', 'get', None, 'TypeVec<Realm>')
        'TypeVec<Realm>'
        >>> store.flush()
        0
    """

    def __init__(self, overrides: OverrideFile | None = None, path: str | Path | None = None):
        self.overrides = overrides or OverrideFile()
        self.path = Path(path) if path else None
        self._redundant: list[str] = []

    @classmethod
    def load(cls, path: str | Path | None) -> 'OverrideStore':
        """Load the patch file at ``path``; no path gives an empty store.

        Raises:
            OverrideFileError: If the file is missing, is not valid TOML or
                does not have the expected shape.
        """
        if path is None:
            return cls()
        try:
            data = tomllib.loads(Path(path).read_text(encoding='utf-8'))
            overrides = OverrideFile.model_validate(data)
        except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
            raise OverrideFileError(str(path), cause=e)
        logger.debug(
            f'Loaded {len(overrides.path)} path and {len(overrides.type)} type overrides from {path}'
        )
        return cls(overrides, path)

    # =========================================================================
    # Keys
    # =========================================================================

    @staticmethod
    def path_key(path: str, verb: str, parameter: str | None = None) -> str:
        return f'{path}:{verb}:{parameter or ""}'

    @classmethod
    def path_header(cls, path: str, verb: str, parameter: str | None = None) -> str:
        return f'[path."{cls.path_key(path, verb, parameter)}"]'

    @staticmethod
    def field_key(struct: str, field: str) -> str:
        return f'{struct}:{field}'

    @classmethod
    def field_header(cls, struct: str, field: str) -> str:
        return f'[type."{cls.field_key(struct, field)}"]'

    # =========================================================================
    # Lookups
    # =========================================================================

    def lookup_path(
        self, path: str, verb: str, parameter: str | None = None
    ) -> PathOverride | None:
        return self.overrides.path.get(self.path_key(path, verb, parameter))

    def lookup_field(self, struct: str, field: str) -> FieldOverride | None:
        return self.overrides.type.get(self.field_key(struct, field))

    def resolve_path_type(
        self, path: str, verb: str, parameter: str | None, inferred: str
    ) -> str:
        """Apply a path override to an inferred type.

        An entry whose recorded ``from_type`` no longer matches inference is
        either redundant (its ``rust_type`` is what inference now yields) and
        queued for pruning, or still needed and reported as drift.

        Args:
            path: The route template as declared.
            verb: The lowercase HTTP verb.
            parameter: The parameter identifier, or None for the return type.
            inferred: The freshly inferred Rust type.

        Returns:
            The type to emit.
        """
        entry = self.lookup_path(path, verb, parameter)
        if entry is None:
            return inferred
        if entry.from_type != inferred:
            header = self.path_header(path, verb, parameter)
            if entry.rust_type == inferred:
                self.mark_redundant(header)
            else:
                logger.warning(
                    f'type info changed in {header} : was {entry.from_type} '
                    f'now {inferred} (mapped {entry.rust_type})'
                )
        return entry.rust_type

    def resolve_field_type(self, struct: str, field: str, inferred: str) -> str:
        entry = self.lookup_field(struct, field)
        if entry is None:
            return inferred
        if entry.rust_type == inferred:
            self.mark_redundant(self.field_header(struct, field))
        return entry.rust_type

    # =========================================================================
    # Pruning
    # =========================================================================

    def mark_redundant(self, header: str) -> None:
        if header not in self._redundant:
            self._redundant.append(header)

    @property
    def pending(self) -> list[str]:
        """Headers queued for pruning."""
        return list(self._redundant)

    def prune(self, *headers: str) -> int:
        """Remove whole tables from the patch file.

        Each table spans from its header line up to the next line starting a
        table. Returns the number of tables removed.
        """
        if self.path is None or not headers:
            return 0
        wanted = {_normalize_header(header) for header in headers}
        found = set()
        kept = []
        skipping = False
        for line in self.path.read_text(encoding='utf-8').split('\n'):
            if line.strip().startswith('['):
                header = _normalize_header(line)
                skipping = header in wanted
                if skipping:
                    found.add(header)
                    continue
            if not skipping:
                kept.append(line)
        for header in sorted(wanted - found):
            logger.warning(f'Redundant override {header} not found in {self.path}')
        if found:
            self.path.write_text('\n'.join(kept), encoding='utf-8')
            logger.info(f'Pruned {len(found)} redundant override(s) from {self.path}')
        return len(found)

    def flush(self) -> int:
        """Prune every queued table once; later calls are no-ops."""
        headers, self._redundant = self._redundant, []
        return self.prune(*headers)
