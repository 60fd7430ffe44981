# person_extractor/core/validator.py
"""
Schema validation for extracted person records.

Validation never mutates or coerces its input: the outcome carries the
original object next to any field-level errors, so partial results can be
inspected or persisted and flagged.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import ValidationError

from person_extractor.core.schemas import FieldError, PersonRecord
from person_extractor.utils.exceptions import SchemaValidationError


@dataclass
class ValidationOutcome:
    valid: bool
    data: Any
    errors: List[FieldError] = field(default_factory=list)


def _field_errors(exc: ValidationError, index: Optional[int]) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else None
        missing = err.get("type") == "missing"
        errors.append(
            FieldError(
                index=index,
                field=name,
                constraint=err.get("type", "invalid"),
                message=err.get("msg", "Invalid value"),
                value=None if missing else err.get("input"),
            )
        )
    return errors


def _record_errors(record: Any, index: Optional[int]) -> List[FieldError]:
    if not isinstance(record, dict):
        return [
            FieldError(
                index=index,
                constraint="object_type",
                message="Person record must be a JSON object",
                value=record,
            )
        ]

    try:
        PersonRecord.model_validate(record)
    except ValidationError as e:
        return _field_errors(e, index)
    return []


def validate_person(record: Any) -> ValidationOutcome:
    """Validate a single person record."""
    errors = _record_errors(record, None)
    return ValidationOutcome(valid=not errors, data=record, errors=errors)


def validate_persons(records: Any) -> ValidationOutcome:
    """
    Validate a collection of person records.

    Stops at the first invalid record and reports all of that record's
    field errors, tagged with its index.
    """
    if not isinstance(records, list):
        error = FieldError(
            constraint="array_type",
            message="Persons must be a JSON array",
            value=records,
        )
        return ValidationOutcome(valid=False, data=records, errors=[error])

    for index, record in enumerate(records):
        errors = _record_errors(record, index)
        if errors:
            return ValidationOutcome(valid=False, data=records, errors=errors)

    return ValidationOutcome(valid=True, data=records)


def ensure_valid_persons(records: Any) -> List[Any]:
    """Return `records` unchanged, or raise SchemaValidationError."""
    outcome = validate_persons(records)
    if not outcome.valid:
        raise SchemaValidationError(outcome.errors, outcome.data)
    return records
