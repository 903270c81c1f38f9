from batchrecord.core.errors import ErrorStage, IntakeError


class ExtractionError(IntakeError):
    """Raised when structured extraction fails."""

    stage = ErrorStage.EXTRACTION


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""

    stage = ErrorStage.NETWORK


class ExtractionParseError(ExtractionError):
    """Raised when the provider replied but the reply is not the expected shape."""

    stage = ErrorStage.PARSE
