"""Tests for person record schema validation."""
from __future__ import annotations

import copy

import pytest

from person_extractor.core.schemas import person_json_schema, persons_json_schema
from person_extractor.core.validator import ensure_valid_persons, validate_person, validate_persons
from person_extractor.utils.exceptions import SchemaValidationError

FULL_RECORD = {
    "first_name": "John",
    "middle_names": "William",
    "last_name": "Smith",
    "gender": "Male",
    "birth_date": "1850-03-15",
    "birth_place": "London, England",
    "death_date": "1920-11-23",
    "death_place": "Adelaide, Australia",
    "age_at_death": "70 years",
    "burial_place": "Adelaide Cemetery",
}


class TestValidatePerson:
    """Single-record validation."""

    def test_full_record_passes(self):
        outcome = validate_person(FULL_RECORD)
        assert outcome.valid
        assert outcome.errors == []

    def test_only_required_fields_pass(self):
        assert validate_person({"first_name": "Ann", "last_name": "Lee"}).valid

    def test_nullable_optional_fields_pass(self):
        record = {"first_name": "Ann", "last_name": "Lee", "gender": None, "birth_date": None, "middle_names": None}
        assert validate_person(record).valid

    def test_missing_last_name_names_the_field(self):
        outcome = validate_person({"first_name": "Ann"})

        assert not outcome.valid
        assert [e.field for e in outcome.errors] == ["last_name"]
        assert outcome.errors[0].constraint == "missing"
        assert outcome.errors[0].value is None

    def test_missing_both_names_reports_both(self):
        outcome = validate_person({"birth_place": "Cork"})
        assert {e.field for e in outcome.errors} == {"first_name", "last_name"}

    def test_empty_first_name_fails(self):
        outcome = validate_person({"first_name": "", "last_name": "Lee"})
        assert not outcome.valid
        assert outcome.errors[0].field == "first_name"
        assert outcome.errors[0].value == ""

    def test_invalid_gender(self):
        outcome = validate_person({"first_name": "Ann", "last_name": "Lee", "gender": "F"})
        assert not outcome.valid
        assert outcome.errors[0].field == "gender"
        assert outcome.errors[0].value == "F"

    @pytest.mark.parametrize("value", ["circa 1850", "1850", "1850-3-15", "1850-02-30", "18500315"])
    def test_non_iso_dates_fail(self, value):
        outcome = validate_person({"first_name": "Ann", "last_name": "Lee", "death_date": value})
        assert not outcome.valid
        assert outcome.errors[0].field == "death_date"
        assert outcome.errors[0].constraint == "iso_date"
        assert outcome.errors[0].value == value

    def test_age_at_death_must_be_string(self):
        outcome = validate_person({"first_name": "Ann", "last_name": "Lee", "age_at_death": 65})
        assert not outcome.valid
        assert outcome.errors[0].field == "age_at_death"

    def test_extra_fields_are_ignored(self):
        assert validate_person({"first_name": "Ann", "last_name": "Lee", "occupation": "Sailor"}).valid

    def test_non_object_record(self):
        outcome = validate_person("Ann Lee")
        assert not outcome.valid
        assert outcome.errors[0].constraint == "object_type"


class TestValidatePersons:
    """Collection validation."""

    def test_valid_collection(self):
        records = [FULL_RECORD, {"first_name": "Ann", "last_name": "Lee"}]
        outcome = validate_persons(records)
        assert outcome.valid
        assert outcome.data is records

    def test_empty_collection_is_valid(self):
        assert validate_persons([]).valid

    def test_not_a_list(self):
        outcome = validate_persons({"first_name": "Ann", "last_name": "Lee"})
        assert not outcome.valid
        assert outcome.errors[0].constraint == "array_type"

    def test_reports_index_of_first_invalid_record(self):
        records = [
            {"first_name": "Ann", "last_name": "Lee"},
            {"first_name": "Bob"},
            {"last_name": "NoFirst"},
        ]
        outcome = validate_persons(records)

        assert not outcome.valid
        assert len(outcome.errors) == 1
        assert outcome.errors[0].index == 1
        assert outcome.errors[0].field == "last_name"
        assert "record 1" in str(outcome.errors[0])

    def test_mixed_shapes_fail(self):
        outcome = validate_persons([{"first_name": "Ann", "last_name": "Lee"}, ["Bob", "Lee"]])
        assert outcome.errors[0].index == 1
        assert outcome.errors[0].constraint == "object_type"

    def test_input_is_not_mutated(self):
        records = [{"first_name": "Ann", "last_name": "Lee", "gender": "female", "occupation": "Sailor"}]
        snapshot = copy.deepcopy(records)

        outcome = validate_persons(records)

        assert not outcome.valid
        assert records == snapshot
        assert outcome.data is records


class TestEnsureValidPersons:
    def test_returns_records_when_valid(self):
        records = [{"first_name": "Ann", "last_name": "Lee"}]
        assert ensure_valid_persons(records) is records

    def test_raises_with_errors_and_data(self):
        records = [{"first_name": "Ann"}]
        with pytest.raises(SchemaValidationError) as exc_info:
            ensure_valid_persons(records)
        assert exc_info.value.data is records
        assert exc_info.value.errors[0].field == "last_name"


class TestJsonSchemas:
    """The declared schemas consumed by downstream persistence."""

    def test_person_schema_required_fields(self):
        schema = person_json_schema()
        assert sorted(schema["required"]) == ["first_name", "last_name"]
        assert "burial_place" in schema["properties"]

    def test_persons_schema_is_array_of_person(self):
        schema = persons_json_schema()
        assert schema["type"] == "array"
        assert schema["items"] == {"$ref": "#/$defs/PersonRecord"}
