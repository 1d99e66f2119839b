from datetime import datetime

import pytest

from pethealth.domain.models import RecordKind, ScheduleRecord
from pethealth.services.event_store import EventStore
from tests.factories import NOW, make_record


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def vaccination() -> ScheduleRecord:
    return make_record(RecordKind.VACCINATION, days=7, record_id="v1")


@pytest.fixture
def medication() -> ScheduleRecord:
    return make_record(RecordKind.MEDICATION, days=3, record_id="m1")


@pytest.fixture
def appointment() -> ScheduleRecord:
    return make_record(RecordKind.APPOINTMENT, days=14, record_id="a1")


@pytest.fixture
def store(
    vaccination: ScheduleRecord, medication: ScheduleRecord, appointment: ScheduleRecord
) -> EventStore:
    return (
        EventStore()
        .add(RecordKind.VACCINATION, vaccination)
        .add(RecordKind.MEDICATION, medication)
        .add(RecordKind.APPOINTMENT, appointment)
    )
