from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from batchrecord.extraction.models import (
    SECTION_ORDER,
    Scalar,
    Section,
    SectionData,
    StructuredRecordSet,
)
from batchrecord.logging.logger import Log
from batchrecord.store.exceptions import DataStoreError, EditError

_SCALAR_TYPES = (str, int, float, bool)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class SerializedSnapshot:
    """Working copy ready for publishing, stamped at serialization time."""

    metadata: SectionData | None
    mixing_step: SectionData | None
    ph_adjustment: SectionData | None
    timestamp: str

    @property
    def records(self) -> StructuredRecordSet:
        return StructuredRecordSet(
            metadata=self.metadata,
            mixing_step=self.mixing_step,
            ph_adjustment=self.ph_adjustment,
        )

    def to_dict(self) -> dict[str, object]:
        return {**self.records.to_dict(), "timestamp": self.timestamp}


@dataclass(frozen=True)
class PendingEdit:
    section: Section
    key: str
    value: Scalar


class StructuredDataStore:
    """Editable working copy of the selected file's records.

    ``load`` copies the given record set, so edits never reach the pipeline's
    cached result. At most one field is in edit mode at a time.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock
        self._original: StructuredRecordSet | None = None
        self._working: dict[Section, SectionData] = {}
        self._file_id: str | None = None
        self._pending: PendingEdit | None = None

    @property
    def file_id(self) -> str | None:
        return self._file_id

    @property
    def is_loaded(self) -> bool:
        return self._original is not None

    @property
    def editing(self) -> PendingEdit | None:
        return self._pending

    @property
    def records(self) -> StructuredRecordSet:
        """A copy of the current working records."""
        return StructuredRecordSet.from_sections(
            {section: dict(data) for section, data in self._working.items()}
        )

    @property
    def is_dirty(self) -> bool:
        if self._original is None:
            return False
        return self._working != self._original.sections()

    def load(self, records: StructuredRecordSet, file_id: str | None = None) -> None:
        self._original = records
        self._working = {section: dict(data) for section, data in records.sections().items()}
        self._file_id = file_id
        self._pending = None
        Log.debug(f"Loaded {len(self._working)} sections into the working copy", file_id=file_id)

    def reset(self) -> None:
        """Discard every edit and re-copy the originally loaded records."""
        if self._original is not None:
            self.load(self._original, self._file_id)

    def clear(self) -> None:
        self._original = None
        self._working = {}
        self._file_id = None
        self._pending = None

    def value(self, section: Section | str, key: str) -> Scalar:
        data = self._working.get(_section(section))
        if data is None or key not in data:
            raise EditError(f"No field '{key}' in section '{_section(section).value}'")
        return data[key]

    def begin_edit(self, section: Section | str, key: str) -> Scalar:
        """Put one field into edit mode and return its current value.

        Any edit already in progress is discarded.
        """
        resolved = _section(section)
        current = self.value(resolved, key)
        if self._pending is not None:
            Log.debug(f"Discarding pending edit of {self._pending.key}")
        self._pending = PendingEdit(section=resolved, key=key, value=current)
        return current

    def commit_edit(self, value: Scalar) -> None:
        if self._pending is None:
            raise EditError("No field is being edited")
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise EditError(f"Field values must be scalars, got {type(value).__name__}")
        pending = self._pending
        self._working[pending.section][pending.key] = value
        self._pending = None
        Log.info(f"Edited {pending.section.value}.{pending.key}", file_id=self._file_id)

    def cancel_edit(self) -> None:
        self._pending = None

    def serialize(self) -> SerializedSnapshot:
        if self._original is None:
            raise DataStoreError("No records loaded")
        copied = {section: dict(self._working[section]) for section in SECTION_ORDER
                  if section in self._working}
        return SerializedSnapshot(
            metadata=copied.get(Section.METADATA),
            mixing_step=copied.get(Section.MIXING_STEP),
            ph_adjustment=copied.get(Section.PH_ADJUSTMENT),
            timestamp=format_timestamp(self._clock()),
        )


def _section(section: Section | str) -> Section:
    try:
        return Section(section)
    except ValueError as exc:
        raise EditError(f"Unknown section '{section}'") from exc
