"""
FileSystem abstraction for the Zone01 Profile dashboard.

PURPOSE: Injectable file system interface for testability.
AI CONTEXT: Lets session persistence and chart export run against an
in-memory filesystem in unit tests.

DESIGN:
- Protocol defines the interface
- RealFileSystem uses actual os operations
- MockFileSystem in tests/conftest.py stores data in memory for tests

USAGE:
    # Production
    store = SessionStore(filesystem=RealFileSystem())

    # Tests (MockFileSystem from conftest.py)
    store = SessionStore(session_dir="/test", filesystem=mock_fs)
"""

from __future__ import annotations

import os
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """
    Protocol for file system operations.

    All paths are strings. Implementations include RealFileSystem for
    production and MockFileSystem for testing.

    Business context: The session file holds a bearer token, so tests must
    exercise its permission handling and corruption paths without touching
    the developer's real home directory.
    """

    def exists(self, path: str) -> bool:
        """
        Check if path exists (file or directory).

        Args:
            path: Path to check.

        Returns:
            True if the path exists, False otherwise. Never raises.
        """
        ...

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create directory and all parent directories.

        Args:
            path: Directory to create.
            exist_ok: If True, don't raise if the directory exists.

        Raises:
            OSError: If directory exists and exist_ok is False.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """
        Read file contents as text.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """
        Write text to file, overwriting existing content.

        Raises:
            PermissionError: If file is read-only.
        """
        ...

    def chmod(self, path: str, mode: int) -> None:
        """
        Change file permissions.

        Business context: The session file is restricted to its owner
        (0o600) because it contains a bearer token.

        Raises:
            FileNotFoundError: If path doesn't exist.
        """
        ...

    def remove(self, path: str) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...


class RealFileSystem:
    """
    Real file system implementation using the os module.

    Each method delegates directly to the corresponding os or built-in
    function.
    """

    def exists(self, path: str) -> bool:  # pragma: no cover
        """Delegate to os.path.exists()."""
        return os.path.exists(path)

    def makedirs(self, path: str, exist_ok: bool = False) -> None:  # pragma: no cover
        """Delegate to os.makedirs()."""
        os.makedirs(path, exist_ok=exist_ok)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:  # pragma: no cover
        """
        Read file contents from disk.

        Args:
            path: Path to file to read.
            encoding: Text encoding (default utf-8).

        Returns:
            Complete file contents as a string.

        Raises:
            FileNotFoundError: If file doesn't exist.
            UnicodeDecodeError: If content isn't valid for the encoding.
        """
        with open(path, encoding=encoding) as f:
            return f.read()

    def write_text(
        self, path: str, content: str, encoding: str = "utf-8"
    ) -> None:  # pragma: no cover
        """
        Write text to a file on disk, creating parent directories.

        Args:
            path: Path to file to write.
            content: String content to write.
            encoding: Text encoding (default utf-8).

        Raises:
            PermissionError: If file or directory is not writable.
        """
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding=encoding) as f:
            f.write(content)

    def chmod(self, path: str, mode: int) -> None:  # pragma: no cover
        """Delegate to os.chmod()."""
        os.chmod(path, mode)

    def remove(self, path: str) -> None:  # pragma: no cover
        """Delegate to os.remove()."""
        os.remove(path)
