import pytest

from batchrecord.extraction.exceptions import ExtractionParseError
from batchrecord.extraction.models import Section, StructuredRecordSet
from batchrecord.extraction.validator import build_record_set


class TestPositionalMapping:
    def test_maps_three_elements(self) -> None:
        records = build_record_set([{"batch": "42"}, {"NaCl": "9 g"}, {"pH": 7.0}])
        assert records == StructuredRecordSet(
            metadata={"batch": "42"},
            mixing_step={"NaCl": "9 g"},
            ph_adjustment={"pH": 7.0},
        )

    def test_short_array_leaves_slots_absent(self) -> None:
        records = build_record_set([{"batch": "42"}])
        assert records.metadata == {"batch": "42"}
        assert records.mixing_step is None
        assert records.ph_adjustment is None

    def test_null_element_is_absent(self) -> None:
        records = build_record_set([{"batch": "42"}, None, {"pH": 6.8}])
        assert records.mixing_step is None
        assert records.ph_adjustment == {"pH": 6.8}

    def test_extra_elements_are_ignored(self) -> None:
        records = build_record_set([{}, {}, {}, {"extra": 1}])
        assert set(records.sections()) == {
            Section.METADATA,
            Section.MIXING_STEP,
            Section.PH_ADJUSTMENT,
        }

    def test_values_pass_through_verbatim(self) -> None:
        records = build_record_set([{"qty": "9.0", "count": 3, "ok": True, "note": None}])
        assert records.metadata == {"qty": "9.0", "count": 3, "ok": True, "note": None}

    def test_empty_array(self) -> None:
        assert build_record_set([]).sections() == {}


class TestShapeErrors:
    def test_nested_object_is_rejected(self) -> None:
        with pytest.raises(ExtractionParseError, match="metadata.batch"):
            build_record_set([{"batch": {"no": "42"}}])

    def test_nested_list_is_rejected(self) -> None:
        with pytest.raises(ExtractionParseError, match="phAdjustment.readings"):
            build_record_set([{}, {}, {"readings": [6.8, 7.0]}])

    def test_non_object_element_is_rejected(self) -> None:
        with pytest.raises(ExtractionParseError, match="mixingStep"):
            build_record_set([{}, "mixing"])
