"""
BUNNYSTORE - Filesystem Abstraction

Provides abstraction layer for local file I/O used by the file-backed cache.
This allows mocking in tests and makes the code more testable.
"""

import os
import tempfile
from typing import Protocol


class FileSystemAdapter(Protocol):
    """Protocol for local filesystem operations."""

    def exists(self, path: str) -> bool:
        """Check if a file exists."""
        ...

    def read(self, path: str) -> str:
        """Read file contents as string."""
        ...

    def write(self, path: str, content: str) -> None:
        """Replace file contents, creating parent directories as needed."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file if it exists."""
        ...


class RealFileSystem:
    """Real filesystem implementation."""

    def exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def read(self, path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)

        # Write to a sibling temp file and swap it in so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def delete(self, path: str) -> None:
        if self.exists(path):
            os.remove(path)


class MockFileSystem:
    """Mock filesystem for testing."""

    def __init__(self):
        self._files: dict[str, str] = {}

    def exists(self, path: str) -> bool:
        return path in self._files

    def read(self, path: str) -> str:
        if path not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path]

    def write(self, path: str, content: str) -> None:
        self._files[path] = content

    def delete(self, path: str) -> None:
        self._files.pop(path, None)

    def paths(self) -> list[str]:
        """All stored paths, sorted."""
        return sorted(self._files)
