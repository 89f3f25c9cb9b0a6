# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Storage abstraction for reading input files.

The ordering core never touches the file system directly for inputs; it asks
a FileSource whether a path exists and for its content. This keeps reading
separate from graph construction and lets tests run fully in memory.

Components:
- FileSource: Abstract interface for input storage
- LocalFileSource: Reads from the local file system
- InMemoryFileSource: Serves content from a dict
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional


class FileSource(ABC):
    """Abstract storage interface for input files."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether `path` names an existing file."""
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the full text content of `path`.

        Raises:
            OSError: If the file cannot be read.
        """
        pass


class LocalFileSource(FileSource):
    """Reads input files from the local file system.

    Args:
        encoding: Text encoding used to decode file content.
        errors: Decoding error handler. Undecodable bytes are replaced by
            default so one binary or mis-encoded file cannot stop a run.
        base_dir: Directory relative paths are resolved against. If None,
            the current working directory is used.
    """

    def __init__(
        self,
        encoding: str = "utf-8",
        base_dir: Optional[Path] = None,
        errors: str = "replace",
    ) -> None:
        self.encoding = encoding
        self.errors = errors
        self.base_dir = base_dir

    def _resolve(self, path: str) -> Path:
        resolved = Path(path)
        if self.base_dir is not None and not resolved.is_absolute():
            resolved = self.base_dir / resolved
        return resolved

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def read(self, path: str) -> str:
        return self._resolve(path).read_text(encoding=self.encoding, errors=self.errors)


class InMemoryFileSource(FileSource):
    """Serves file content from a mapping of path -> text."""

    def __init__(self, files: Optional[Mapping[str, str]] = None) -> None:
        self._files: Dict[str, str] = dict(files or {})

    def add_file(self, path: str, content: str) -> None:
        self._files[path] = content

    def exists(self, path: str) -> bool:
        return path in self._files

    def read(self, path: str) -> str:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
