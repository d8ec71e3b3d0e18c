"""Stateful selection and batch manipulation of directory entries.

The engine keeps one current directory, a snapshot of its entries and a
set of selected entry names. Batch operations (copy, move, delete) run
once per selected entry and never abort on a single failure: failed
entries stay selected so the caller can retry just those.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, final

from server.apps.selection.exceptions import (
    EntryNotFoundError,
    NothingSelectedError,
)
from server.apps.selection.logic.naming import (
    ADJECTIVES,
    MAX_NAME_ATTEMPTS,
    NOUNS,
    make_name,
    make_numbered_name,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from server.apps.selection.infrastructure.interfaces import (
        FileSystemExplorer,
        FileSystemManipulator,
        RandomProvider,
    )

logger = logging.getLogger(__name__)


class OperationType(StrEnum):
    """Kind of batch operation."""

    COPY = 'copy'
    MOVE = 'move'
    DELETE = 'delete'


@dataclass(frozen=True)
class FileOperationError:
    """Failure of one entry within a batch operation."""

    file_name: str
    error_message: str
    operation_type: OperationType

    def to_dict(self) -> dict[str, str]:
        """Serialize for JSON responses."""
        return {
            'fileName': self.file_name,
            'errorMessage': self.error_message,
            'operationType': str(self.operation_type),
        }


@dataclass
class OperationResult:
    """Outcome of a batch operation.

    ``destination_path`` is None for delete, which has no destination.
    """

    errors: list[FileOperationError] = field(default_factory=list)
    destination_path: str | None = None

    @property
    def succeeded(self) -> bool:
        """True when no entry failed."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses.

        The ``destinationPath`` key is omitted for delete results.

        Returns:
            Dictionary with camelCase keys.
        """
        payload: dict[str, Any] = {}
        if self.destination_path is not None:
            payload['destinationPath'] = self.destination_path
        payload['errors'] = [error.to_dict() for error in self.errors]
        return payload


@final
class SelectionEngine:
    """Selection set and batch operations over one directory at a time.

    Not thread-safe: one engine serves one client. The session manager
    hands out a separate engine per session.
    """

    def __init__(
        self,
        explorer: 'FileSystemExplorer',
        manipulator: 'FileSystemManipulator',
        random_provider: 'RandomProvider',
    ) -> None:
        """Initialize engine with its filesystem capabilities.

        Args:
            explorer: Lists directories and checks path existence.
            manipulator: Performs copy, move, delete and mkdir.
            random_provider: Draws words for generated destinations.
        """
        self._explorer = explorer
        self._manipulator = manipulator
        self._random = random_provider
        self._current_directory: str | None = None
        self._entries: list[str] = []
        self._selected: set[str] = set()

    # Enumeration

    def load_directory(self, directory_path: str) -> list[str]:
        """Load a directory, replacing entries and clearing the selection.

        The selection is cleared even when reloading the same directory.
        Explorer errors propagate unchanged and leave state untouched.

        Args:
            directory_path: Directory to enumerate.

        Returns:
            Copy of the loaded entry names.
        """
        entries = list(self._explorer.list_entries(directory_path))
        self._current_directory = directory_path
        self._entries = entries
        self._selected.clear()
        logger.info(
            'Loaded directory %s (%d entries)',
            directory_path,
            len(entries),
        )
        return list(self._entries)

    def get_entries(self) -> list[str]:
        """Return a copy of the current entry names."""
        return list(self._entries)

    def get_current_directory(self) -> str | None:
        """Return the loaded directory, or None before the first load."""
        return self._current_directory

    # Selection

    def select(self, entry_name: str) -> None:
        """Add an entry to the selection.

        Selecting an already selected entry is a no-op.

        Args:
            entry_name: Name from the current entries.

        Raises:
            EntryNotFoundError: If the name is not a current entry.
        """
        if entry_name not in self._entries:
            raise EntryNotFoundError(entry_name)
        self._selected.add(entry_name)

    def deselect(self, entry_name: str) -> None:
        """Remove an entry from the selection if present."""
        self._selected.discard(entry_name)

    def select_all(self) -> None:
        """Select every current entry."""
        self._selected.update(self._entries)

    def deselect_all(self) -> None:
        """Clear the selection."""
        self._selected.clear()

    def get_selected_entries(self) -> list[str]:
        """Return a copy of the selection, in no particular order."""
        return list(self._selected)

    def is_selected(self, entry_name: str) -> bool:
        """Check whether an entry is selected."""
        return entry_name in self._selected

    # Operations

    def copy_selection(self, destination: str | None = None) -> OperationResult:
        """Copy selected entries into a destination directory.

        Copied entries are deselected; the entry list is unchanged.

        Args:
            destination: Target directory. Generated when omitted.

        Returns:
            Result with resolved destination and per-entry errors.

        Raises:
            NothingSelectedError: If the selection is empty.
        """
        return self._transfer_selection(
            OperationType.COPY,
            self._manipulator.copy,
            destination,
        )

    def move_selection(self, destination: str | None = None) -> OperationResult:
        """Move selected entries into a destination directory.

        Moved entries leave both the selection and the entry list.

        Args:
            destination: Target directory. Generated when omitted.

        Returns:
            Result with resolved destination and per-entry errors.

        Raises:
            NothingSelectedError: If the selection is empty.
        """
        return self._transfer_selection(
            OperationType.MOVE,
            self._manipulator.move,
            destination,
        )

    def delete_selection(self) -> OperationResult:
        """Delete selected entries.

        Returns:
            Result with per-entry errors and no destination.

        Raises:
            NothingSelectedError: If the selection is empty.
        """
        self._ensure_selection()
        directory = self._directory()
        errors: list[FileOperationError] = []

        for entry in list(self._selected):
            full_path = os.path.join(directory, entry)
            try:
                self._manipulator.delete(full_path)
            except Exception as exc:
                errors.append(
                    self._record_failure(entry, exc, OperationType.DELETE),
                )
                continue
            self._drop_entry(entry)

        logger.info(
            'Delete finished in %s: %d failed',
            directory,
            len(errors),
        )
        return OperationResult(errors=errors)

    def resolve_destination(self, destination: str | None = None) -> str:
        """Return the destination directory for copy or move.

        An explicit destination is returned unchanged and is not checked.
        Otherwise up to MAX_NAME_ATTEMPTS random ``<adjective>-<noun>``
        names are tried inside the current directory; if all of them
        exist, the last one gets a numeric suffix starting at 1 until a
        free path is found. Nothing is created on disk.

        Args:
            destination: Caller-supplied destination, if any.

        Returns:
            Destination directory path.
        """
        if destination:
            return destination

        directory = self._directory()
        base_name = ''
        for _attempt in range(MAX_NAME_ATTEMPTS):
            adjective = ADJECTIVES[self._random.next_int(len(ADJECTIVES))]
            noun = NOUNS[self._random.next_int(len(NOUNS))]
            base_name = make_name(adjective, noun)
            candidate = os.path.join(directory, base_name)
            if not self._explorer.exists(candidate):
                return candidate

        logger.info(
            'All %d generated names taken, numbering %s',
            MAX_NAME_ATTEMPTS,
            base_name,
        )
        counter = 1
        candidate = os.path.join(
            directory,
            make_numbered_name(base_name, counter),
        )
        while self._explorer.exists(candidate):
            counter += 1
            candidate = os.path.join(
                directory,
                make_numbered_name(base_name, counter),
            )
        return candidate

    def _transfer_selection(
        self,
        operation: OperationType,
        transfer: 'Callable[[str, str], None]',
        destination: str | None,
    ) -> OperationResult:
        """Run copy or move for every selected entry.

        Args:
            operation: COPY or MOVE.
            transfer: Manipulator primitive taking (source, target).
            destination: Caller-supplied destination, if any.

        Returns:
            Result with resolved destination and per-entry errors.
        """
        self._ensure_selection()
        directory = self._directory()
        resolved = self.resolve_destination(destination)
        self._manipulator.create_directory(resolved)

        errors: list[FileOperationError] = []
        for entry in list(self._selected):
            source = os.path.join(directory, entry)
            target = os.path.join(resolved, entry)
            try:
                transfer(source, target)
            except Exception as exc:
                errors.append(self._record_failure(entry, exc, operation))
                continue
            if operation is OperationType.MOVE:
                self._drop_entry(entry)
            else:
                self._selected.discard(entry)

        logger.info(
            '%s finished %s -> %s: %d failed',
            operation.capitalize(),
            directory,
            resolved,
            len(errors),
        )
        return OperationResult(errors=errors, destination_path=resolved)

    def _ensure_selection(self) -> None:
        if not self._selected:
            raise NothingSelectedError()

    def _directory(self) -> str:
        # A non-empty selection implies a loaded directory
        return self._current_directory or ''

    def _drop_entry(self, entry: str) -> None:
        """Remove an entry that no longer exists at its source path."""
        self._entries.remove(entry)
        self._selected.discard(entry)

    def _record_failure(
        self,
        entry: str,
        exc: Exception,
        operation: OperationType,
    ) -> FileOperationError:
        logger.warning(
            'Failed to %s %s: %s',
            operation,
            entry,
            exc,
        )
        return FileOperationError(
            file_name=entry,
            error_message=str(exc),
            operation_type=operation,
        )
