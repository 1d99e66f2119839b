"""
In-memory event store for vaccinations, medications and appointments.

Collections are tuples and the store itself is a frozen model: every add,
update or delete returns a new value and leaves the old one untouched, so
observers can detect changes by identity. Operations on unknown ids are
inert rather than errors.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from pydantic import BaseModel, ConfigDict, Field

from pethealth.domain.models import (
    Appointment,
    Medication,
    RecordKind,
    ScheduleRecord,
    Vaccination,
    record_class_for,
)

logger = structlog.get_logger(__name__)

Records = tuple[ScheduleRecord, ...]

COLLECTION_FIELDS: dict[RecordKind, str] = {
    RecordKind.VACCINATION: "vaccinations",
    RecordKind.MEDICATION: "medications",
    RecordKind.APPOINTMENT: "appointments",
}


def _index_of(records: Records, record_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


def add_record(records: Records, record: ScheduleRecord) -> Records:
    """Append `record`. A duplicate id leaves the collection as it was."""
    if _index_of(records, record.id) is not None:
        logger.warning("duplicate_record_id_ignored", record_id=record.id)
        return records
    return (*records, record)


def update_record(records: Records, record: ScheduleRecord) -> Records:
    """Replace the record with the same id; no-op if the id is absent."""
    index = _index_of(records, record.id)
    if index is None:
        logger.debug("update_of_unknown_record_ignored", record_id=record.id)
        return records
    return (*records[:index], record, *records[index + 1 :])


@dataclass(frozen=True)
class DeleteResult:
    """
    Outcome of a delete, carrying what was removed so it can be undone.

    `removed` is None when the id was not present.
    """

    records: Records
    removed: ScheduleRecord | None = None
    index: int | None = None

    @property
    def deleted(self) -> bool:
        return self.removed is not None

    def undo(self, records: Records) -> Records:
        """Re-insert the removed record at its former position in `records`."""
        if self.removed is None or self.index is None:
            return records
        if _index_of(records, self.removed.id) is not None:
            logger.debug("restore_of_present_record_ignored", record_id=self.removed.id)
            return records
        index = min(self.index, len(records))
        return (*records[:index], self.removed, *records[index:])


def delete_record(records: Records, record_id: str) -> DeleteResult:
    """Remove the record with `record_id`; no-op if absent."""
    index = _index_of(records, record_id)
    if index is None:
        logger.debug("delete_of_unknown_record_ignored", record_id=record_id)
        return DeleteResult(records=records)
    return DeleteResult(
        records=(*records[:index], *records[index + 1 :]),
        removed=records[index],
        index=index,
    )


@dataclass(frozen=True)
class StoreDeleteResult:
    """A delete applied to an EventStore: the new store plus the undo payload."""

    store: "EventStore"
    kind: RecordKind
    result: DeleteResult


class EventStore(BaseModel):
    """Immutable snapshot of all three schedule collections."""

    model_config = ConfigDict(frozen=True)

    vaccinations: tuple[Vaccination, ...] = Field(default_factory=tuple)
    medications: tuple[Medication, ...] = Field(default_factory=tuple)
    appointments: tuple[Appointment, ...] = Field(default_factory=tuple)

    def collection(self, kind: RecordKind) -> Records:
        return getattr(self, COLLECTION_FIELDS[kind])

    def find(self, kind: RecordKind, record_id: str) -> ScheduleRecord | None:
        records = self.collection(kind)
        index = _index_of(records, record_id)
        return None if index is None else records[index]

    def _replace(self, kind: RecordKind, records: Records) -> "EventStore":
        if records is self.collection(kind):
            return self
        return self.model_copy(update={COLLECTION_FIELDS[kind]: records})

    def _check_kind(self, kind: RecordKind, record: ScheduleRecord) -> None:
        expected = record_class_for(kind)
        if not isinstance(record, expected):
            raise TypeError(
                f"{kind.value} collection only holds {expected.__name__} records, "
                f"got {type(record).__name__}"
            )

    def add(self, kind: RecordKind, record: ScheduleRecord) -> "EventStore":
        self._check_kind(kind, record)
        store = self._replace(kind, add_record(self.collection(kind), record))
        if store is not self:
            logger.info("record_added", kind=kind.value, record_id=record.id)
        return store

    def update(self, kind: RecordKind, record: ScheduleRecord) -> "EventStore":
        self._check_kind(kind, record)
        store = self._replace(kind, update_record(self.collection(kind), record))
        if store is not self:
            logger.info("record_updated", kind=kind.value, record_id=record.id)
        return store

    def delete(self, kind: RecordKind, record_id: str) -> StoreDeleteResult:
        result = delete_record(self.collection(kind), record_id)
        if result.deleted:
            logger.info("record_deleted", kind=kind.value, record_id=record_id)
        return StoreDeleteResult(
            store=self._replace(kind, result.records), kind=kind, result=result
        )

    def set_complete(self, kind: RecordKind, record_id: str, is_complete: bool) -> "EventStore":
        """Set the completion flag of one record; no-op if absent or already set."""
        record = self.find(kind, record_id)
        if record is None:
            logger.debug(
                "completion_of_unknown_record_ignored", kind=kind.value, record_id=record_id
            )
            return self
        if record.is_complete == is_complete:
            return self
        return self.update(kind, record.with_completion(is_complete))

    def restore(self, deletion: StoreDeleteResult) -> "EventStore":
        """Undo a delete by re-inserting the exact record that was removed."""
        store = self._replace(deletion.kind, deletion.result.undo(self.collection(deletion.kind)))
        if store is not self and deletion.result.removed is not None:
            logger.info(
                "record_restored",
                kind=deletion.kind.value,
                record_id=deletion.result.removed.id,
            )
        return store


def sample_store(now: datetime) -> EventStore:
    """Demo records: a rabies shot, heartworm prevention and an annual checkup."""
    return EventStore(
        vaccinations=(
            Vaccination(
                id="v1",
                title="Annual Rabies Shot",
                medication_name="Rabies Vaccine",
                details="Required by law, administered annually",
                date_to_administer=now + timedelta(days=7),
                doctor_name="Dr. Smith",
            ),
        ),
        medications=(
            Medication(
                id="m1",
                title="Heartworm Prevention",
                medication_name="HeartGuard Plus",
                details="Monthly oral medication",
                date_to_administer=now + timedelta(days=3),
                doctor_name="Dr. Smith",
            ),
        ),
        appointments=(
            Appointment(
                id="a1",
                title="Annual Checkup",
                medication_name="N/A",
                details="Routine wellness exam",
                date_to_administer=now + timedelta(days=14),
                doctor_name="Dr. Smith",
            ),
        ),
    )
