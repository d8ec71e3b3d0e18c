"""Exceptions for selection app."""


class SelectionError(Exception):
    """Base class for selection precondition failures."""


class EntryNotFoundError(SelectionError):
    """Raised when selecting a name missing from the current directory."""

    def __init__(self, entry_name: str) -> None:
        """Initialize EntryNotFoundError.

        Args:
            entry_name: Name that was not found in the current entries.
        """
        self.entry_name = entry_name
        super().__init__(
            f"Entry '{entry_name}' does not exist in the current directory.",
        )


class NothingSelectedError(SelectionError):
    """Raised when a batch operation is requested with an empty selection."""

    def __init__(self) -> None:
        """Initialize NothingSelectedError."""
        super().__init__('No entries selected.')
