"""
Form boundary: turns raw add/edit form input into schedule records.

Rejected input is an expected outcome here, so submission returns a Result
instead of raising. Records produced by this module are trusted by the store.
"""

import uuid
from datetime import date, datetime, time, tzinfo
from typing import Any, Literal

import structlog
from pydantic import AwareDatetime, BaseModel, ValidationError

from pethealth.domain.models import RecordKind, ScheduleRecord, record_class_for
from pethealth.result import Result

logger = structlog.get_logger(__name__)

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "medication_name": "Medication name is required",
    "date_to_administer": "Date is required",
    "doctor_name": "Doctor name is required",
}


class FormValidationError(ValueError):
    """Form input was rejected; `errors` maps field names to messages."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class RecordForm(BaseModel):
    """Values captured by the add/edit form."""

    title: str = ""
    medication_name: str | None = None
    details: str | None = None
    date_to_administer: AwareDatetime | None = None
    doctor_name: str = ""
    is_complete: bool | None = None


def new_record_id() -> str:
    return uuid.uuid4().hex


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_form(
    kind: RecordKind, values: dict[str, Any]
) -> Result[RecordForm, FormValidationError]:
    """Check every field and report all problems together."""
    errors: dict[str, str] = {}
    form: RecordForm | None = None
    try:
        form = RecordForm.model_validate(values)
    except ValidationError as e:
        for error in e.errors():
            name = str(error["loc"][0]) if error["loc"] else "form"
            if error.get("input") in (None, "") and name in REQUIRED_MESSAGES:
                errors[name] = REQUIRED_MESSAGES[name]
            else:
                errors[name] = error["msg"]

    needs_medication = record_class_for(kind).medication_name_required
    for name, message in REQUIRED_MESSAGES.items():
        if name == "medication_name" and not needs_medication:
            continue
        if name not in errors and _is_blank(values.get(name)):
            errors[name] = message

    if errors or form is None:
        return Result.err(FormValidationError(errors))
    return Result.ok(form)


def submit_form(
    kind: RecordKind,
    values: dict[str, Any],
    existing: ScheduleRecord | None = None,
    *,
    id_factory=new_record_id,
) -> Result[ScheduleRecord, FormValidationError]:
    """
    Build a complete record from form values.

    New records get a fresh id and start incomplete. Edits keep the id of
    `existing` and, unless the form says otherwise, its completion flag.
    """
    validated = validate_form(kind, values)
    if validated.is_err():
        error = validated.unwrap_err()
        logger.info("form_rejected", kind=kind.value, fields=sorted(error.errors))
        return Result.err(error)

    form = validated.unwrap()
    if form.is_complete is not None:
        is_complete = form.is_complete
    else:
        is_complete = existing.is_complete if existing else False

    record = record_class_for(kind)(
        id=existing.id if existing else id_factory(),
        title=form.title,
        medication_name=form.medication_name or "",
        details=form.details or "",
        date_to_administer=form.date_to_administer,
        is_complete=is_complete,
        doctor_name=form.doctor_name,
    )
    return Result.ok(record)


def min_date_hint(kind: RecordKind, now: datetime) -> datetime | None:
    """Earliest date the picker should offer. Appointments cannot be booked in the past."""
    if kind is RecordKind.APPOINTMENT:
        return now
    return None


def combine_date_and_time(
    day: date,
    hour: int,
    minute: int,
    meridiem: Literal["AM", "PM"],
    tz: tzinfo,
) -> datetime:
    """Compose the picker's date with a 12-hour clock reading."""
    if not 1 <= hour <= 12:
        raise ValueError(f"hour must be between 1 and 12, got {hour}")
    if not 0 <= minute <= 59:
        raise ValueError(f"minute must be between 0 and 59, got {minute}")
    if meridiem not in ("AM", "PM"):
        raise ValueError(f"meridiem must be AM or PM, got {meridiem!r}")

    hour_24 = hour % 12 + (12 if meridiem == "PM" else 0)
    return datetime.combine(day, time(hour_24, minute), tzinfo=tz)
