"""
Pydantic models for person records and extraction results.
"""

import re
from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictStr, TypeAdapter, WithJsonSchema
from pydantic_core import PydanticCustomError

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
_ISO_DATE_RE = re.compile(ISO_DATE_PATTERN)


def _check_calendar_date(value: str) -> str:
    # the pattern alone accepts 1850-02-30
    try:
        valid = bool(_ISO_DATE_RE.match(value)) and date.fromisoformat(value) is not None
    except ValueError:
        valid = False
    if not valid:
        raise PydanticCustomError("iso_date", "Date must be a calendar date in YYYY-MM-DD format")
    return value


IsoDate = Annotated[
    StrictStr,
    AfterValidator(_check_calendar_date),
    WithJsonSchema({"type": "string", "format": "date", "pattern": ISO_DATE_PATTERN}),
]


# ============================================================================
# RECORD SCHEMA
# ============================================================================

class PersonRecord(BaseModel):
    """One person extracted from a historical document."""

    model_config = ConfigDict(extra="ignore", title="Person")

    first_name: StrictStr = Field(min_length=1, description="First name of the person")
    last_name: StrictStr = Field(min_length=1, description="Last name of the person")
    middle_names: Optional[StrictStr] = None
    gender: Optional[Literal["Male", "Female"]] = None
    birth_date: Optional[IsoDate] = None
    birth_place: Optional[StrictStr] = None
    death_date: Optional[IsoDate] = None
    death_place: Optional[StrictStr] = None
    age_at_death: Optional[StrictStr] = None
    burial_place: Optional[StrictStr] = None


PersonList = TypeAdapter(List[PersonRecord])


def person_json_schema() -> Dict[str, Any]:
    """JSON Schema for a single person record."""
    return PersonRecord.model_json_schema()


def persons_json_schema() -> Dict[str, Any]:
    """JSON Schema for an array of person records."""
    return PersonList.json_schema()


# ============================================================================
# RESULTS
# ============================================================================

class FieldError(BaseModel):
    """A single validation failure, located by record index and field."""

    index: Optional[int] = None
    field: Optional[str] = None
    constraint: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        where = f"record {self.index}" if self.index is not None else "record"
        if self.field:
            where = f"{where}, field '{self.field}'"
        return f"{where}: {self.message} (got {self.value!r})"


class ExtractionResult(BaseModel):
    """Outcome of one extraction call: success with records, or a failure tagged by stage."""

    success: bool
    data: Optional[List[Any]] = None
    error: Optional[str] = None
    errors: Optional[List[FieldError]] = None
    raw_response: Optional[str] = Field(default=None, serialization_alias="rawResponse")
    stage: Optional[Literal["provider", "parse", "validation"]] = None

    @classmethod
    def ok(cls, data: List[Any]) -> "ExtractionResult":
        return cls(success=True, data=list(data))

    @classmethod
    def provider_failure(cls, message: str) -> "ExtractionResult":
        return cls(success=False, stage="provider", error=message)

    @classmethod
    def parse_failure(cls, message: str, raw_response: Optional[str]) -> "ExtractionResult":
        return cls(success=False, stage="parse", error=message, raw_response=raw_response)

    @classmethod
    def validation_failure(cls, errors: List[FieldError], data: Any) -> "ExtractionResult":
        detail = f": {errors[0]}" if errors else ""
        return cls(
            success=False,
            stage="validation",
            error=f"Extracted data failed schema validation{detail}",
            errors=errors,
            data=data if isinstance(data, list) else [data],
        )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the wire format, omitting unset fields."""
        wire: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            wire["data"] = self.data
        if self.error is not None:
            wire["error"] = self.error
        if self.errors is not None:
            wire["errors"] = [e.model_dump() for e in self.errors]
        if self.raw_response is not None:
            wire["rawResponse"] = self.raw_response
        if self.stage is not None:
            wire["stage"] = self.stage
        return wire
