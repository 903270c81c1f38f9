class PipelineError(Exception):
    """Base exception for extraction pipeline misuse."""


class InvalidTransitionError(PipelineError):
    """Raised when a trigger is not allowed from the file's current state."""
