"""
Tracker session: the single owner of the current EventStore.

The store is immutable; the session swaps in the new value after each command
and remembers the most recent delete so it can be undone. Every command
reports a short notice for the user, mirroring the toasts of the web UI.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import structlog

from pethealth.config import DashboardConfig
from pethealth.domain.models import RecordKind, ScheduleRecord
from pethealth.result import Result
from pethealth.services.dashboard import DashboardView, build_dashboard
from pethealth.services.event_store import EventStore, StoreDeleteResult, sample_store
from pethealth.services.forms import FormValidationError, submit_form

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CommandOutcome:
    """Result of a tracker command: the store after it ran and what to tell the user."""

    store: EventStore
    notice: str | None = None
    changed: bool = False


class PetHealthTracker:
    """
    Owns the record collections for one session.

    Design principles:
    - The store value is replaced, never mutated
    - Unknown ids are inert, not errors
    - Undo replays the exact record that a delete removed
    """

    def __init__(
        self, store: EventStore | None = None, config: DashboardConfig | None = None
    ) -> None:
        self.store = store if store is not None else EventStore()
        self.config = config or DashboardConfig()
        self.logger = logger.bind(component="pet_health_tracker")
        self._last_delete: StoreDeleteResult | None = None

    @classmethod
    def with_sample_data(
        cls, now: datetime | None = None, config: DashboardConfig | None = None
    ) -> "PetHealthTracker":
        return cls(sample_store(now or datetime.now(UTC)), config)

    def _apply(self, store: EventStore, notice: str | None) -> CommandOutcome:
        changed = store is not self.store
        self.store = store
        if notice and changed:
            self.logger.info("notice", message=notice)
            return CommandOutcome(store=store, notice=notice, changed=True)
        return CommandOutcome(store=store)

    def add(self, kind: RecordKind, record: ScheduleRecord) -> CommandOutcome:
        return self._apply(self.store.add(kind, record), f"{kind.label} added successfully")

    def update(self, kind: RecordKind, record: ScheduleRecord) -> CommandOutcome:
        return self._apply(self.store.update(kind, record), f"{kind.label} updated successfully")

    def delete(self, kind: RecordKind, record_id: str) -> CommandOutcome:
        deletion = self.store.delete(kind, record_id)
        if deletion.result.deleted:
            self._last_delete = deletion
        return self._apply(deletion.store, f"{kind.label} deleted")

    def toggle_complete(
        self, kind: RecordKind, record_id: str, is_complete: bool
    ) -> CommandOutcome:
        state = "complete" if is_complete else "incomplete"
        return self._apply(
            self.store.set_complete(kind, record_id, is_complete),
            f"{kind.label} marked as {state}",
        )

    def undo_last_delete(self) -> CommandOutcome:
        """Put back the record removed by the most recent delete, once."""
        if self._last_delete is None:
            return CommandOutcome(store=self.store)
        deletion, self._last_delete = self._last_delete, None
        return self._apply(self.store.restore(deletion), f"{deletion.kind.label} restored")

    def submit(
        self, kind: RecordKind, values: dict[str, Any], existing_id: str | None = None
    ) -> Result[CommandOutcome, FormValidationError]:
        """Validate form values, then add (no `existing_id`) or update the record."""
        existing = None
        if existing_id is not None:
            existing = self.store.find(kind, existing_id)
            if existing is None:
                self.logger.debug(
                    "edit_of_unknown_record_ignored", kind=kind.value, record_id=existing_id
                )
                return Result.ok(CommandOutcome(store=self.store))
        submitted = submit_form(kind, values, existing)
        if submitted.is_err():
            return Result.err(submitted.unwrap_err())

        record = submitted.unwrap()
        if existing is None:
            return Result.ok(self.add(kind, record))
        return Result.ok(self.update(kind, record))

    def dashboard(self, now: datetime | None = None) -> DashboardView:
        return build_dashboard(self.store, now or datetime.now(UTC), self.config)
