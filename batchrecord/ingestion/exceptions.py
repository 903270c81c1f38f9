from batchrecord.core.errors import ErrorStage, IntakeError


class IngestionError(Exception):
    """Base exception for all ingestion-related errors."""


class FileValidationError(IngestionError):
    """Raised when an uploaded file is rejected before it enters the working set."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename


class FileTooLargeError(FileValidationError):
    """Raised when a file exceeds the configured upload size."""


class UnsupportedFileTypeError(FileValidationError):
    """Raised when a file extension is not in the accepted list."""


class FileReadError(IntakeError):
    """Raised when a file's bytes cannot be read."""

    stage = ErrorStage.RECOGNITION
