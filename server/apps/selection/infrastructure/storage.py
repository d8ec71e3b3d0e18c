"""Filesystem capabilities on top of Django storage backends.

``StorageFileSystem`` lets the selection engine browse and manipulate a
Django ``Storage`` (S3-compatible object storage in production, or any
other backend). Object storage has no real directories, so a directory
is either a prefix with objects under it or an empty ``.folder`` marker.
"""

import errno
import logging
import os
from typing import TYPE_CHECKING, Any, Final, final, override

from django.core.files.base import ContentFile
from storages.backends.s3 import S3Storage

if TYPE_CHECKING:
    from django.core.files.storage import Storage

logger = logging.getLogger(__name__)

_PATH_SEPARATOR: Final = '/'

# Empty object that keeps an otherwise empty folder visible
FOLDER_MARKER: Final = '.folder'


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for browsed files.

    Extends django-storages S3Storage with:
    - Enhanced error logging
    - Server-side copy and move of single objects
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def copy_object(self, source: str, destination: str) -> None:
        """Copy an object server-side without downloading it.

        Args:
            source: Source storage path.
            destination: Destination storage path.

        Raises:
            Exception: If the copy fails.
        """
        try:
            logger.info('Copying file: %s -> %s', source, destination)
            copy_source = {
                'Bucket': self.bucket_name,
                'Key': source,
            }
            self.bucket.copy(copy_source, destination)
        except Exception:
            logger.exception('Copy failed: %s -> %s', source, destination)
            raise

    def move_object(self, source: str, destination: str) -> None:
        """Move/rename an object in S3 storage.

        S3 doesn't support native rename, so this performs a server-side
        copy followed by deletion of the source.

        Note: This operation is not atomic. If copy succeeds but delete
        fails, both files will exist (source becomes orphaned).

        Args:
            source: Source storage path.
            destination: Destination storage path.

        Raises:
            Exception: If copy or delete fails.
        """
        try:
            logger.info('Moving file: %s -> %s', source, destination)
            self.copy_object(source, destination)
            self.delete(source)
            logger.info('Moved file: %s -> %s', source, destination)
        except Exception:
            logger.exception('Move failed: %s -> %s', source, destination)
            raise


def join_storage_path(parent: str, name: str) -> str:
    """Join a storage folder path and a child name.

    Args:
        parent: Folder path (empty string for the storage root).
        name: Child name.

    Returns:
        Joined path without leading or doubled separators.
    """
    parent_normalized = parent.strip(_PATH_SEPARATOR)
    if not parent_normalized:
        return name
    return parent_normalized + _PATH_SEPARATOR + name


@final
class StorageFileSystem:
    """Explorer and manipulator over a Django storage backend."""

    def __init__(self, storage: 'Storage') -> None:
        """Initialize with the storage to operate on.

        Args:
            storage: Django storage backend (e.g. ``default_storage``).
        """
        self._storage = storage

    # Explorer

    def list_entries(self, directory_path: str) -> list[str]:
        """List folder children: sub-folders first, then files.

        Args:
            directory_path: Folder path inside the storage.

        Returns:
            Sorted folder names followed by sorted file names.

        Raises:
            FileNotFoundError: If the folder does not exist.
        """
        if not self.is_directory(directory_path):
            raise FileNotFoundError(f'Directory not found: {directory_path}')

        folders, files = self._storage.listdir(directory_path)
        logger.debug(
            'Listed %s: %d folders, %d files',
            directory_path,
            len(folders),
            len(files),
        )
        visible_files = [name for name in files if name != FOLDER_MARKER]
        return sorted(folders) + sorted(visible_files)

    def exists(self, path: str) -> bool:
        """Check whether a file or folder exists at path."""
        return self._storage.exists(path) or self.is_directory(path)

    def is_directory(self, path: str) -> bool:
        """Check whether path is a folder.

        Args:
            path: Storage path.

        Returns:
            True for real directories on local storages, and for
            prefixes holding objects or a folder marker elsewhere.
        """
        local_path = self._local_path(path)
        if local_path is not None:
            return os.path.isdir(local_path)

        if self._storage.exists(join_storage_path(path, FOLDER_MARKER)):
            return True
        folders, files = self._storage.listdir(path)
        return bool(folders or files)

    # Manipulator

    def copy(self, source: str, destination: str) -> None:
        """Copy a file, or a folder recursively.

        Args:
            source: Existing storage path.
            destination: Target storage path.

        Raises:
            FileNotFoundError: If source does not exist.
        """
        if self.is_directory(source):
            self.create_directory(destination)
            for child in self.list_entries(source):
                self.copy(
                    join_storage_path(source, child),
                    join_storage_path(destination, child),
                )
            return

        self._ensure_file(source)
        if isinstance(self._storage, FileStorage):
            self._storage.copy_object(source, destination)
            return
        self._stream_copy(source, destination)

    def move(self, source: str, destination: str) -> None:
        """Move a file, or a folder recursively.

        Args:
            source: Existing storage path.
            destination: Target storage path.

        Raises:
            FileNotFoundError: If source does not exist.
        """
        if self.is_directory(source):
            self.copy(source, destination)
            self.delete(source)
            return

        self._ensure_file(source)
        if isinstance(self._storage, FileStorage):
            self._storage.move_object(source, destination)
            return
        self._stream_copy(source, destination)
        self._storage.delete(source)

    def delete(self, path: str) -> None:
        """Delete a file, or a folder recursively.

        A path that is already gone counts as deleted.

        Args:
            path: Storage path to remove.
        """
        if self.is_directory(path):
            for child in self.list_entries(path):
                self.delete(join_storage_path(path, child))
            marker_path = join_storage_path(path, FOLDER_MARKER)
            if self._storage.exists(marker_path):
                self._storage.delete(marker_path)
            # Removes the now empty directory on local storages
            if self._local_path(path) is not None:
                self._storage.delete(path)
            return

        if not self._storage.exists(path):
            logger.warning('Nothing to delete (already gone?): %s', path)
            return
        self._storage.delete(path)

    def create_directory(self, path: str) -> None:
        """Create a folder; existing folders are left alone.

        Args:
            path: Storage path of the folder.
        """
        local_path = self._local_path(path)
        if local_path is not None:
            os.makedirs(local_path, exist_ok=True)
            return

        marker_path = join_storage_path(path, FOLDER_MARKER)
        if self._storage.exists(marker_path):
            return
        logger.debug('Creating folder marker: %s', marker_path)
        self._storage.save(marker_path, ContentFile(b''))

    def _local_path(self, path: str) -> str | None:
        """Return the OS path for storages that have one."""
        try:
            return self._storage.path(path)
        except NotImplementedError:
            return None

    def _ensure_file(self, path: str) -> None:
        if not self._storage.exists(path):
            raise FileNotFoundError(f'No such file or directory: {path}')

    def _stream_copy(self, source: str, destination: str) -> None:
        """Copy file content so it lands exactly at ``destination``.

        An existing file at the destination is replaced. Storages pick
        another name for a taken path, so that case is treated as a
        failure and the stray copy is removed.

        Raises:
            IsADirectoryError: If destination is a folder.
            FileExistsError: If the storage saved under another name.
        """
        if self.is_directory(destination):
            raise IsADirectoryError(
                errno.EISDIR,
                'Destination is a directory',
                destination,
            )
        if self._storage.exists(destination):
            logger.info('Replacing existing file: %s', destination)
            self._storage.delete(destination)

        with self._storage.open(source, 'rb') as source_file:
            saved_name = self._storage.save(destination, source_file)
        if saved_name != destination:
            logger.error(
                'Destination taken, removing copy saved as %s instead of %s',
                saved_name,
                destination,
            )
            self._storage.delete(saved_name)
            raise FileExistsError(
                errno.EEXIST,
                'Destination already exists',
                destination,
            )
