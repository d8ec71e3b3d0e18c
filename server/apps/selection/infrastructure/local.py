"""Local disk implementations of the engine's filesystem capabilities."""

import errno
import logging
import os
import secrets
import shutil
from typing import final

logger = logging.getLogger(__name__)


@final
class LocalFileSystemExplorer:
    """Explorer backed by the local filesystem."""

    def list_entries(self, directory_path: str) -> list[str]:
        """List immediate children of a directory, sorted by name.

        Args:
            directory_path: Directory to list.

        Returns:
            Sorted entry names.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
        """
        logger.debug('Listing directory: %s', directory_path)
        return sorted(os.listdir(directory_path))

    def exists(self, path: str) -> bool:
        """Check whether anything exists at path."""
        return os.path.lexists(path)

    def is_directory(self, path: str) -> bool:
        """Check whether path is an existing directory."""
        return os.path.isdir(path)


@final
class LocalFileSystemManipulator:
    """Manipulator backed by the local filesystem."""

    def copy(self, source: str, destination: str) -> None:
        """Copy a file, or a directory tree recursively.

        Args:
            source: Existing file or directory.
            destination: Target path.

        Raises:
            OSError: If the copy fails.
        """
        logger.info('Copying %s -> %s', source, destination)
        if os.path.isdir(source):
            shutil.copytree(source, destination, dirs_exist_ok=True)
            return
        # copy2 would write into an existing directory instead of onto it
        if os.path.isdir(destination):
            raise IsADirectoryError(
                errno.EISDIR,
                'Destination is a directory',
                destination,
            )
        shutil.copy2(source, destination)

    def move(self, source: str, destination: str) -> None:
        """Move a file or directory tree to exactly ``destination``.

        Files replace an existing file at the destination. An existing
        directory at the destination is never merged into.

        Args:
            source: Existing file or directory.
            destination: Target path.

        Raises:
            FileNotFoundError: If source does not exist.
            FileExistsError: If destination is an existing directory.
            OSError: If the move fails.
        """
        logger.info('Moving %s -> %s', source, destination)
        if not os.path.lexists(source):
            raise FileNotFoundError(f'No such file or directory: {source}')
        # shutil.move would nest the source inside an existing directory
        if os.path.isdir(destination):
            raise FileExistsError(
                errno.EEXIST,
                'Destination directory already exists',
                destination,
            )
        shutil.move(source, destination)

    def delete(self, path: str) -> None:
        """Delete a file or directory tree.

        A path that is already gone counts as deleted.

        Args:
            path: File or directory to remove.

        Raises:
            OSError: If removal fails.
        """
        logger.info('Deleting %s', path)
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.remove(path)
        else:
            logger.warning('Nothing to delete (already gone?): %s', path)

    def create_directory(self, path: str) -> None:
        """Create a directory with parents; existing ones are kept."""
        logger.debug('Creating directory: %s', path)
        os.makedirs(path, exist_ok=True)


@final
class SystemRandomProvider:
    """Random provider using the operating system's CSPRNG."""

    def next_int(self, max_value: int) -> int:
        """Return a uniform integer in ``[0, max_value)``."""
        return secrets.randbelow(max_value)
