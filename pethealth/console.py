"""
Terminal rendering of the dashboard and the per-kind schedules.

Run with: pet-health  (or python -m pethealth.console)
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from pethealth.config import configure_logging, get_config
from pethealth.domain.models import RecordKind, ScheduleRecord
from pethealth.services.dashboard import DashboardView, sorted_for_display
from pethealth.services.tracker import PetHealthTracker

console = Console()

ICONS = {
    RecordKind.VACCINATION: "💉",
    RecordKind.MEDICATION: "💊",
    RecordKind.APPOINTMENT: "📅",
}

EMPTY_UPCOMING = "No upcoming health events. Add some using the tabs below."


def format_due(moment: datetime) -> str:
    """Format as e.g. '03/14/2025 09:30 AM'."""
    return moment.strftime("%m/%d/%Y %I:%M %p")


def _week_table(title: str, counts: dict[RecordKind, int]) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Kind", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for kind in RecordKind:
        table.add_row(f"{ICONS[kind]} {kind.plural_label}", str(counts.get(kind, 0)))
    return table


def render_dashboard(view: DashboardView) -> Group:
    """This Week / Next Week counts followed by the upcoming events feed."""
    upcoming = Table(
        title="Upcoming Health Events", caption="The next scheduled items for your pet"
    )
    upcoming.add_column("Type", style="cyan")
    upcoming.add_column("Title", style="magenta")
    upcoming.add_column("Details", style="yellow")
    upcoming.add_column("Due", style="green")

    for event in view.upcoming:
        # Appointment cards show the vet rather than a medication
        if event.kind is RecordKind.APPOINTMENT:
            subtitle = event.record.doctor_name
        else:
            subtitle = event.record.medication_name
        upcoming.add_row(
            f"{ICONS[event.kind]} Next {event.kind.label}",
            event.record.title,
            subtitle,
            format_due(event.record.date_to_administer),
        )

    parts = [
        _week_table("This Week", view.weekly.this_week),
        _week_table("Next Week", view.weekly.next_week),
        upcoming,
    ]
    if not view.upcoming:
        parts.append(Panel(EMPTY_UPCOMING, style="dim"))
    return Group(*parts)


def render_schedule(kind: RecordKind, records: Iterable[ScheduleRecord]) -> Table | Panel:
    """One manager tab: every record of `kind`, soonest first."""
    ordered = sorted_for_display(records)
    if not ordered:
        return Panel(
            f"No {kind.plural_label.lower()} scheduled. Add one to get started.",
            title=f"{kind.label} Schedule",
        )

    table = Table(title=f"{kind.label} Schedule")
    table.add_column("Done", justify="center")
    table.add_column("Title", style="magenta")
    table.add_column("Medication", style="yellow")
    table.add_column("Doctor", style="cyan")
    table.add_column("Due", style="green")
    for record in ordered:
        title = f"[strike dim]{record.title}[/]" if record.is_complete else record.title
        table.add_row(
            "✅" if record.is_complete else "⬜",
            title,
            record.medication_name or "—",
            record.doctor_name,
            format_due(record.date_to_administer),
        )
    return table


def main() -> None:
    config = get_config()
    configure_logging(config.logging)

    now = datetime.now(UTC)
    if config.dashboard.seed_sample_data:
        tracker = PetHealthTracker.with_sample_data(now, config.dashboard)
    else:
        tracker = PetHealthTracker(config=config.dashboard)

    console.print(Panel("🐾 Pet Health Tracker", style="blue"))
    console.print(render_dashboard(tracker.dashboard(now)))
    for kind in RecordKind:
        console.print(render_schedule(kind, tracker.store.collection(kind)))


if __name__ == "__main__":
    main()
