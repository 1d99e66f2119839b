"""
Domain models for pet health schedules.

Vaccinations, medications and appointments share one record shape and are told
apart by an explicit kind tag. Models are frozen: edits produce new records.
"""

from enum import Enum
from typing import ClassVar

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator, model_validator


class RecordKind(str, Enum):
    """Categories of scheduled health events."""

    VACCINATION = "vaccination"
    MEDICATION = "medication"
    APPOINTMENT = "appointment"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def plural_label(self) -> str:
        return f"{self.label}s"


class ScheduleRecord(BaseModel):
    """A scheduled health event with a due date and completion flag."""

    model_config = ConfigDict(frozen=True)  # Immutable for better reasoning

    kind: ClassVar[RecordKind]
    medication_name_required: ClassVar[bool] = True

    id: str = Field(min_length=1, description="Opaque identifier, unique per collection")
    title: str
    medication_name: str = ""
    details: str = ""
    date_to_administer: AwareDatetime
    is_complete: bool = False
    doctor_name: str

    @field_validator("title", "doctor_name")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @model_validator(mode="after")
    def require_medication_name(self) -> "ScheduleRecord":
        if self.medication_name_required and not self.medication_name.strip():
            raise ValueError(f"medication_name is required for {type(self).__name__} records")
        return self

    def with_completion(self, is_complete: bool) -> "ScheduleRecord":
        return self.model_copy(update={"is_complete": is_complete})


class Vaccination(ScheduleRecord):
    kind: ClassVar[RecordKind] = RecordKind.VACCINATION


class Medication(ScheduleRecord):
    kind: ClassVar[RecordKind] = RecordKind.MEDICATION


class Appointment(ScheduleRecord):
    """Vet visit. The medication name is free text and may be empty."""

    kind: ClassVar[RecordKind] = RecordKind.APPOINTMENT
    medication_name_required: ClassVar[bool] = False


RECORD_CLASSES: dict[RecordKind, type[ScheduleRecord]] = {
    RecordKind.VACCINATION: Vaccination,
    RecordKind.MEDICATION: Medication,
    RecordKind.APPOINTMENT: Appointment,
}


def record_class_for(kind: RecordKind) -> type[ScheduleRecord]:
    """Return the record variant stored in the collection for `kind`."""
    return RECORD_CLASSES[kind]
