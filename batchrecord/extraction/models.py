from dataclasses import dataclass
from enum import Enum

Scalar = str | int | float | bool | None
SectionData = dict[str, Scalar]


class Section(str, Enum):
    """Record sections, valued by their wire/form-field names."""

    METADATA = "metadata"
    MIXING_STEP = "mixingStep"
    PH_ADJUSTMENT = "phAdjustment"


SECTION_ORDER: tuple[Section, ...] = (
    Section.METADATA,
    Section.MIXING_STEP,
    Section.PH_ADJUSTMENT,
)

_ATTRIBUTES: dict[Section, str] = {
    Section.METADATA: "metadata",
    Section.MIXING_STEP: "mixing_step",
    Section.PH_ADJUSTMENT: "ph_adjustment",
}


@dataclass(frozen=True)
class StructuredRecordSet:
    """Metadata, mixing step and pH adjustment records of one batch record.

    Each slot is optional; a present slot is a flat key -> scalar mapping.
    """

    metadata: SectionData | None = None
    mixing_step: SectionData | None = None
    ph_adjustment: SectionData | None = None

    @classmethod
    def from_sections(cls, sections: dict[Section, SectionData]) -> "StructuredRecordSet":
        return cls(**{_ATTRIBUTES[section]: data for section, data in sections.items()})

    def get(self, section: Section) -> SectionData | None:
        return getattr(self, _ATTRIBUTES[section])

    def sections(self) -> dict[Section, SectionData]:
        """Present sections, in record order."""
        present = {}
        for section in SECTION_ORDER:
            data = self.get(section)
            if data is not None:
                present[section] = data
        return present

    def copy(self) -> "StructuredRecordSet":
        return StructuredRecordSet.from_sections(
            {section: dict(data) for section, data in self.sections().items()}
        )

    def to_dict(self) -> dict[str, SectionData | None]:
        return {section.value: self.get(section) for section in SECTION_ORDER}
