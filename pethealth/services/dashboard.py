"""
Derived dashboard views over the schedule collections.

Everything here is a pure function of an EventStore (or a single collection)
and a reference time. Nothing is cached and nothing is persisted; the views
are recomputed whenever the store changes.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pethealth.config import DashboardConfig
from pethealth.domain.models import RecordKind, ScheduleRecord
from pethealth.services.event_store import EventStore

WEEK = timedelta(days=7)
# Inclusive end bound: the last representable instant before the next week starts
_END_OF_WEEK = WEEK - timedelta(microseconds=1)


@dataclass(frozen=True)
class UpcomingEvent:
    """An incomplete record tagged with the collection it came from."""

    kind: RecordKind
    record: ScheduleRecord


@dataclass(frozen=True)
class WeekWindow:
    """A calendar week with inclusive `start` and `end` bounds."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def shifted(self, weeks: int) -> "WeekWindow":
        return WeekWindow(start=self.start + weeks * WEEK, end=self.end + weeks * WEEK)


@dataclass(frozen=True)
class WeeklySummary:
    """Incomplete record counts per kind for the current and following week."""

    this_week_window: WeekWindow
    next_week_window: WeekWindow
    this_week: dict[RecordKind, int] = field(default_factory=dict)
    next_week: dict[RecordKind, int] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardView:
    generated_at: datetime
    next_per_kind: dict[RecordKind, ScheduleRecord | None]
    weekly: WeeklySummary
    upcoming: list[UpcomingEvent]


def _due(record: ScheduleRecord) -> datetime:
    return record.date_to_administer


def incomplete(records: Iterable[ScheduleRecord]) -> list[ScheduleRecord]:
    return [r for r in records if not r.is_complete]


def sorted_for_display(records: Iterable[ScheduleRecord]) -> list[ScheduleRecord]:
    """All records, soonest first. `sorted` is stable so ties keep stored order."""
    return sorted(records, key=_due)


def next_upcoming(records: Iterable[ScheduleRecord]) -> ScheduleRecord | None:
    """The incomplete record with the earliest due date, first one wins on ties."""
    return min(incomplete(records), key=_due, default=None)


def next_upcoming_per_kind(store: EventStore) -> dict[RecordKind, ScheduleRecord | None]:
    return {kind: next_upcoming(store.collection(kind)) for kind in RecordKind}


def week_window(now: datetime, week_starts_on: int = 0) -> WeekWindow:
    """
    The week containing `now`, in `now`'s timezone.

    The week begins at midnight on `week_starts_on` (0=Monday .. 6=Sunday) and
    ends one microsecond before the following week begins.
    """
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    days_since_start = (now.weekday() - week_starts_on) % 7
    start = midnight - timedelta(days=days_since_start)
    return WeekWindow(start=start, end=start + _END_OF_WEEK)


def count_in_window(records: Iterable[ScheduleRecord], window: WeekWindow) -> int:
    return sum(1 for r in incomplete(records) if window.contains(r.date_to_administer))


def weekly_counts(store: EventStore, now: datetime, week_starts_on: int = 0) -> WeeklySummary:
    this_week = week_window(now, week_starts_on)
    next_week = this_week.shifted(1)
    return WeeklySummary(
        this_week_window=this_week,
        next_week_window=next_week,
        this_week={kind: count_in_window(store.collection(kind), this_week) for kind in RecordKind},
        next_week={kind: count_in_window(store.collection(kind), next_week) for kind in RecordKind},
    )


def upcoming_feed(store: EventStore, limit: int = 3) -> list[UpcomingEvent]:
    """Incomplete records of every kind merged into one list, soonest first."""
    events = [
        UpcomingEvent(kind=kind, record=record)
        for kind in RecordKind
        for record in incomplete(store.collection(kind))
    ]
    events.sort(key=lambda event: _due(event.record))
    return events[:limit]


def build_dashboard(
    store: EventStore, now: datetime, config: DashboardConfig | None = None
) -> DashboardView:
    config = config or DashboardConfig()
    return DashboardView(
        generated_at=now,
        next_per_kind=next_upcoming_per_kind(store),
        weekly=weekly_counts(store, now, config.week_starts_on),
        upcoming=upcoming_feed(store, config.upcoming_limit),
    )
