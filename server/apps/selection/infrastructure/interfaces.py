"""Capabilities consumed by the selection engine.

Each one is implemented once for real access (local disk or Django
storage) and replaced with fakes in tests.
"""

from collections.abc import Sequence
from typing import Protocol


class FileSystemExplorer(Protocol):
    """Read-only view of a filesystem."""

    def list_entries(self, directory_path: str) -> Sequence[str]:
        """Return names of the immediate children of a directory.

        Raises an error if the directory cannot be listed.
        """

    def exists(self, path: str) -> bool:
        """Return True if anything exists at path."""

    def is_directory(self, path: str) -> bool:
        """Return True if path is an existing directory."""


class FileSystemManipulator(Protocol):
    """Mutating filesystem primitives.

    Every method either completes or raises an exception carrying a
    human-readable message.
    """

    def copy(self, source: str, destination: str) -> None:
        """Copy a file or directory tree."""

    def move(self, source: str, destination: str) -> None:
        """Move a file or directory tree."""

    def delete(self, path: str) -> None:
        """Delete a file or directory tree."""

    def create_directory(self, path: str) -> None:
        """Create a directory and its parents if missing."""


class RandomProvider(Protocol):
    """Source of uniformly distributed integers."""

    def next_int(self, max_value: int) -> int:
        """Return an integer in ``[0, max_value)``."""
