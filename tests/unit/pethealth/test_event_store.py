"""
Tests for the in-memory event store.

Covers:
- Collection functions return new tuples and leave their input alone
- Unknown ids are inert for update, delete and completion changes
- Delete results carry enough to undo the delete exactly
- EventStore keeps the three collections separate and typed
"""

from datetime import timedelta

import pytest

from pethealth.domain.models import RecordKind, ScheduleRecord
from pethealth.services.event_store import (
    EventStore,
    add_record,
    delete_record,
    sample_store,
    update_record,
)
from tests.factories import NOW, make_record


class TestCollectionFunctions:
    def test_add_appends_and_returns_new_tuple(self, medication: ScheduleRecord) -> None:
        original: tuple[ScheduleRecord, ...] = ()
        records = add_record(original, medication)

        assert records == (medication,)
        assert original == ()

    def test_add_with_duplicate_id_is_ignored(self, medication: ScheduleRecord) -> None:
        records = (medication,)
        duplicate = make_record(RecordKind.MEDICATION, days=1, record_id=medication.id)

        assert add_record(records, duplicate) is records

    def test_update_replaces_matching_record_in_place(self) -> None:
        first = make_record(days=1, record_id="m1")
        second = make_record(days=2, record_id="m2")
        changed = second.model_copy(update={"title": "Flea Treatment"})

        records = update_record((first, second), changed)

        assert records == (first, changed)

    def test_update_of_unknown_id_is_a_no_op(self, medication: ScheduleRecord) -> None:
        records = (medication,)
        stranger = make_record(record_id="nope")

        assert update_record(records, stranger) is records

    def test_delete_removes_exactly_one_record(self) -> None:
        records = tuple(make_record(days=d, record_id=f"m{d}") for d in range(3))

        result = delete_record(records, "m1")

        assert [r.id for r in result.records] == ["m0", "m2"]
        assert result.removed == records[1]
        assert result.index == 1

    def test_second_delete_of_same_id_is_a_no_op(self, medication: ScheduleRecord) -> None:
        first = delete_record((medication,), medication.id)
        second = delete_record(first.records, medication.id)

        assert second.records is first.records
        assert not second.deleted
        assert second.removed is None

    def test_undo_restores_identical_record_at_original_position(self) -> None:
        records = tuple(make_record(days=d, record_id=f"m{d}") for d in range(3))
        result = delete_record(records, "m1")

        restored = result.undo(result.records)

        assert restored == records
        assert restored[1] is records[1]

    def test_undo_does_not_duplicate_a_present_record(self, medication: ScheduleRecord) -> None:
        result = delete_record((medication,), medication.id)
        readded = add_record(result.records, medication)

        assert result.undo(readded) is readded

    def test_undo_of_no_op_delete_is_a_no_op(self, medication: ScheduleRecord) -> None:
        records = (medication,)
        result = delete_record(records, "unknown")

        assert result.undo(records) is records

    def test_undo_clamps_position_to_collection_length(self) -> None:
        records = tuple(make_record(days=d, record_id=f"m{d}") for d in range(3))
        result = delete_record(records, "m2")

        restored = result.undo(())

        assert restored == (records[2],)


class TestEventStore:
    def test_new_store_is_empty(self) -> None:
        store = EventStore()
        for kind in RecordKind:
            assert store.collection(kind) == ()

    def test_add_returns_new_store_and_keeps_other_collections(
        self, store: EventStore
    ) -> None:
        extra = make_record(RecordKind.MEDICATION, days=5, record_id="m2")

        updated = store.add(RecordKind.MEDICATION, extra)

        assert updated is not store
        assert len(updated.medications) == 2
        assert len(store.medications) == 1
        assert updated.vaccinations is store.vaccinations
        assert updated.appointments is store.appointments

    def test_add_rejects_record_of_another_kind(
        self, store: EventStore, vaccination: ScheduleRecord
    ) -> None:
        with pytest.raises(TypeError, match="Medication"):
            store.add(RecordKind.MEDICATION, vaccination)

    def test_update_then_find_reflects_new_values(self, store: EventStore) -> None:
        record = store.find(RecordKind.APPOINTMENT, "a1")
        assert record is not None
        moved = record.model_copy(update={"date_to_administer": NOW + timedelta(days=1)})

        updated = store.update(RecordKind.APPOINTMENT, moved)

        assert updated.find(RecordKind.APPOINTMENT, "a1") == moved

    def test_unknown_ids_leave_store_unchanged(self, store: EventStore) -> None:
        stranger = make_record(RecordKind.VACCINATION, record_id="nope")

        assert store.update(RecordKind.VACCINATION, stranger) is store
        assert store.delete(RecordKind.VACCINATION, "nope").store is store
        assert store.set_complete(RecordKind.VACCINATION, "nope", True) is store
        assert store.find(RecordKind.VACCINATION, "nope") is None

    def test_ids_are_scoped_per_collection(self, store: EventStore) -> None:
        assert store.find(RecordKind.MEDICATION, "v1") is None
        assert store.delete(RecordKind.MEDICATION, "v1").store is store

    def test_set_complete_toggles_flag(self, store: EventStore) -> None:
        done = store.set_complete(RecordKind.MEDICATION, "m1", True)
        undone = done.set_complete(RecordKind.MEDICATION, "m1", False)

        def flag(s: EventStore) -> bool | None:
            record = s.find(RecordKind.MEDICATION, "m1")
            return None if record is None else record.is_complete

        assert flag(done) is True
        assert flag(undone) is False
        assert flag(store) is False

    def test_set_complete_to_current_value_keeps_store(self, store: EventStore) -> None:
        assert store.set_complete(RecordKind.MEDICATION, "m1", False) is store

        done = store.set_complete(RecordKind.MEDICATION, "m1", True)
        assert done.set_complete(RecordKind.MEDICATION, "m1", True) is done

    def test_delete_then_restore_round_trips(
        self, store: EventStore, vaccination: ScheduleRecord
    ) -> None:
        deletion = store.delete(RecordKind.VACCINATION, "v1")
        assert deletion.store.vaccinations == ()
        assert deletion.result.removed == vaccination

        restored = deletion.store.restore(deletion)

        assert restored.vaccinations == (vaccination,)
        assert restored.find(RecordKind.VACCINATION, "v1") == vaccination

    def test_store_is_frozen(self, store: EventStore) -> None:
        with pytest.raises(ValueError, match="frozen"):
            store.vaccinations = ()  # type: ignore[misc]


def test_sample_store_contains_demo_records() -> None:
    store = sample_store(NOW)

    assert [r.id for r in store.vaccinations] == ["v1"]
    assert store.medications[0].title == "Heartworm Prevention"
    assert store.medications[0].date_to_administer == NOW + timedelta(days=3)
    assert store.appointments[0].date_to_administer == NOW + timedelta(days=14)
    assert all(
        r.doctor_name == "Dr. Smith" and not r.is_complete
        for kind in RecordKind
        for r in store.collection(kind)
    )
