"""Builds a StructuredRecordSet from a parsed reply array."""

from typing import Any

from batchrecord.extraction.exceptions import ExtractionParseError
from batchrecord.extraction.models import (
    SECTION_ORDER,
    Section,
    SectionData,
    StructuredRecordSet,
)
from batchrecord.logging.logger import Log

_SCALAR_TYPES = (str, int, float, bool)


def build_record_set(items: list[Any]) -> StructuredRecordSet:
    """Map array elements positionally onto metadata, mixing step and pH adjustment.

    Missing or null elements leave their slot absent. Values are kept verbatim.

    Raises:
        ExtractionParseError: if a present element is not a flat scalar mapping.
    """
    if len(items) > len(SECTION_ORDER):
        Log.warning(
            f"Model returned {len(items)} objects, ignoring all after the first "
            f"{len(SECTION_ORDER)}"
        )
    sections: dict[Section, SectionData] = {}
    for section, raw in zip(SECTION_ORDER, items):
        if raw is None:
            continue
        sections[section] = _build_section(section, raw)
    return StructuredRecordSet.from_sections(sections)


def _build_section(section: Section, raw: Any) -> SectionData:
    if not isinstance(raw, dict):
        raise ExtractionParseError(f"'{section.value}' must be a JSON object")
    for key, value in raw.items():
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise ExtractionParseError(
                f"'{section.value}.{key}' must be a scalar value, "
                f"got {type(value).__name__}"
            )
    return dict(raw)
