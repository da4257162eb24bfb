"""Code emitter interfaces and implementations for generated output.

This module provides the CodeEmitter interface and concrete implementations
for emitting generated Rust source (files on any UPath backend, strings).
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from upath import UPath

from crabapi.exceptions import OutputError

logger = logging.getLogger(__name__)

__all__ = ['CodeEmitter', 'FileEmitter', 'StringEmitter']


class CodeEmitter(ABC):
    """Abstract base class for code emitters.

    A CodeEmitter takes the complete text of a generated module and outputs
    it somewhere (a file, memory, ...).
    """

    @abstractmethod
    def emit(self, source: str, name: str) -> str:
        """Emit one generated module.

        Args:
            source: The generated Rust source.
            name: The module name (used for identification).

        Returns:
            The path of the emitted file, or the source itself, depending on
            the implementation.
        """
        pass


class FileEmitter(CodeEmitter):
    """Writes generated modules to disk.

    The emitter is bound to a single output file; parent directories are
    created on demand.
    """

    def __init__(self, output: str | Path | UPath):
        self.output = UPath(output)
        self._written_files: list[str] = []

    def emit(self, source: str, name: str) -> str:
        try:
            self.output.parent.mkdir(parents=True, exist_ok=True)
            self.output.write_text(source, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(self.output), cause=e)
        self._written_files.append(str(self.output))
        logger.info(f'Wrote {name} module to {self.output}')
        return str(self.output)

    def get_written_files(self) -> list[str]:
        """Get list of all files written by this emitter."""
        return self._written_files.copy()


class StringEmitter(CodeEmitter):
    """Keeps generated modules in memory.

    Useful for testing or for printing the output to stdout.
    """

    def __init__(self):
        self._modules: dict[str, str] = {}

    def emit(self, source: str, name: str) -> str:
        self._modules[name] = source
        return source

    def get_module(self, name: str) -> str | None:
        """Get a previously emitted module by name."""
        return self._modules.get(name)

    def get_all_modules(self) -> dict[str, str]:
        return self._modules.copy()
