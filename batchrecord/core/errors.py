from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorStage(str, Enum):
    """Where in the intake flow a failure happened."""

    RECOGNITION = "recognition"
    EXTRACTION = "extraction"
    NETWORK = "network"
    PARSE = "parse"


@dataclass(frozen=True)
class ErrorDetail:
    """Typed failure value returned by clients instead of raising."""

    stage: ErrorStage
    message: str


class IntakeError(Exception):
    """Base exception for failures that can be reported as an ErrorDetail."""

    stage: ClassVar[ErrorStage] = ErrorStage.EXTRACTION

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(stage=self.stage, message=str(self))
