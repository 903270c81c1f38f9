from dataclasses import dataclass
from typing import ClassVar

from batchrecord.core.errors import ErrorDetail
from batchrecord.extraction.models import StructuredRecordSet


@dataclass(frozen=True)
class NotStarted:
    label: ClassVar[str] = "idle"


@dataclass(frozen=True)
class RecognizingText:
    label: ClassVar[str] = "extracting"


@dataclass(frozen=True)
class ExtractingStructure:
    recognized_text: str
    label: ClassVar[str] = "processing"


@dataclass(frozen=True)
class Ready:
    records: StructuredRecordSet
    recognized_text: str
    label: ClassVar[str] = "ready"


@dataclass(frozen=True)
class Failed:
    error: ErrorDetail
    label: ClassVar[str] = "failed"


ExtractionState = NotStarted | RecognizingText | ExtractingStructure | Ready | Failed

NOT_STARTED = NotStarted()
