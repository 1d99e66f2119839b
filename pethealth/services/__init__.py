"""
Core services for the application.

This package contains the event store, the derived dashboard views,
the form boundary and the tracker session that ties them together.
"""

from .dashboard import (
    DashboardView,
    UpcomingEvent,
    WeeklySummary,
    WeekWindow,
    build_dashboard,
    next_upcoming,
    next_upcoming_per_kind,
    sorted_for_display,
    upcoming_feed,
    week_window,
    weekly_counts,
)
from .event_store import DeleteResult, EventStore, StoreDeleteResult, sample_store
from .forms import FormValidationError, RecordForm, submit_form
from .tracker import CommandOutcome, PetHealthTracker

__all__ = [
    "CommandOutcome",
    "DashboardView",
    "DeleteResult",
    "EventStore",
    "FormValidationError",
    "PetHealthTracker",
    "RecordForm",
    "StoreDeleteResult",
    "UpcomingEvent",
    "WeekWindow",
    "WeeklySummary",
    "build_dashboard",
    "next_upcoming",
    "next_upcoming_per_kind",
    "sample_store",
    "sorted_for_display",
    "submit_form",
    "upcoming_feed",
    "week_window",
    "weekly_counts",
]
