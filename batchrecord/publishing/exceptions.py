from batchrecord.core.errors import ErrorStage, IntakeError


class PublishError(IntakeError):
    """Raised when the spreadsheet webhook call fails."""

    stage = ErrorStage.NETWORK
