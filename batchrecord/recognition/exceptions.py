from batchrecord.core.errors import ErrorStage, IntakeError


class RecognitionError(IntakeError):
    """Raised when the OCR provider answered but gave no usable result."""

    stage = ErrorStage.RECOGNITION


class RecognitionNetworkError(RecognitionError):
    """Raised on transport failure, timeout or a non-2xx OCR response."""

    stage = ErrorStage.NETWORK
