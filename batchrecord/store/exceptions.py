class DataStoreError(Exception):
    """Base exception for working-copy errors."""


class EditError(DataStoreError):
    """Raised when a field edit is not possible in the current state."""
