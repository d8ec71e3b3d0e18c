"""Construction of selection engines for the configured backend."""

import logging
from typing import Final

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import default_storage

from server.apps.selection.infrastructure.local import (
    LocalFileSystemExplorer,
    LocalFileSystemManipulator,
    SystemRandomProvider,
)
from server.apps.selection.infrastructure.storage import StorageFileSystem
from server.apps.selection.logic.selection_engine import SelectionEngine

logger = logging.getLogger(__name__)

BACKEND_LOCAL: Final = 'local'
BACKEND_STORAGE: Final = 'storage'


def get_backend_name() -> str:
    """Get the configured filesystem backend name.

    Returns:
        Backend from settings or default of 'local'.
    """
    return getattr(settings, 'SELECTION_BACKEND', BACKEND_LOCAL)


def create_engine() -> SelectionEngine:
    """Create a selection engine wired to the configured backend.

    Returns:
        New SelectionEngine with empty state.

    Raises:
        ImproperlyConfigured: If SELECTION_BACKEND is unknown.
    """
    backend = get_backend_name()
    if backend == BACKEND_LOCAL:
        return SelectionEngine(
            LocalFileSystemExplorer(),
            LocalFileSystemManipulator(),
            SystemRandomProvider(),
        )
    if backend == BACKEND_STORAGE:
        filesystem = StorageFileSystem(default_storage)
        return SelectionEngine(filesystem, filesystem, SystemRandomProvider())

    logger.error('Unknown selection backend: %s', backend)
    raise ImproperlyConfigured(
        f"SELECTION_BACKEND must be '{BACKEND_LOCAL}' or "
        f"'{BACKEND_STORAGE}', got '{backend}'",
    )
