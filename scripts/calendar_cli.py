#!/usr/bin/env python3
"""Interactive calendar CLI for rescheduling appointments against the clinic backend."""

import asyncio
import sys
from datetime import UTC, datetime
from functools import partial

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from clinic_calendar.clients.backend import BackendClient
from clinic_calendar.config import CalendarConfig
from clinic_calendar.errors import BackendError, CalendarError
from clinic_calendar.services.layout import layout_slots
from clinic_calendar.services.mutations import MutationCoordinator
from clinic_calendar.services.scheduler import CalendarScheduler, ScheduleResult, ScheduleStatus
from clinic_calendar.utils.logging import LogConfig, setup_logging


class CalendarCLI:
    """Interactive terminal view of a user's calendar."""

    def __init__(self, user_id: str, config: CalendarConfig):
        """Initialize calendar CLI."""
        self.user_id = user_id
        self.config = config
        self.console = Console()
        self.client = BackendClient(config)
        self.coordinator = MutationCoordinator(commit_timeout=config.commit_timeout_seconds)
        self.scheduler = CalendarScheduler(
            self.coordinator,
            commit_factory=partial(self.client.commit_for, user_id),
            config=config,
        )

    async def start(self) -> None:
        """Start the interactive session."""
        self.console.print(
            Panel.fit(
                "[bold blue]Clinic Calendar[/bold blue]\n"
                "Create, move and resize appointments on the 15-minute grid.\n"
                "Commands: /help, /reload, /quit",
                border_style="blue",
            )
        )

        try:
            if not await self.client.get_status(self.user_id):
                self.console.print("[red]Calendar is not connected for this user.[/red]")
                return
            await self._reload()

            while True:
                command = Prompt.ask(
                    "\n[bold cyan]Action[/bold cyan]",
                    choices=["list", "create", "move", "resize", "delete", "/reload", "/help", "/quit"],
                    default="list",
                )

                if command == "/quit":
                    break
                elif command == "/help":
                    self._show_help()
                elif command == "/reload":
                    try:
                        await self._reload()
                    except CalendarError as e:
                        self.console.print(f"[red]Could not reload: {e}[/red]")
                elif command == "list":
                    self._show_calendar()
                else:
                    await self._run_action(command)

        except BackendError as e:
            self.console.print(f"[red]Backend error: {e}[/red]")
        except CalendarError as e:
            self.console.print(f"[red]Calendar error: {e}[/red]")
        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            await self.client.aclose()

    async def _reload(self) -> None:
        intervals = await self.client.fetch_intervals(self.user_id)
        self.coordinator.replace_all(intervals)
        self.console.print(f"[green]Loaded {len(intervals)} appointments[/green]")
        self._show_calendar()

    async def _run_action(self, command: str) -> None:
        try:
            if command == "create":
                start = self._ask_time("Start")
                end = self._ask_time("End")
                summary = Prompt.ask("Title", default="")
                action = partial(self.scheduler.create, start, end, summary=summary or None)
            else:
                interval_id = Prompt.ask("Appointment id")
                if command == "move":
                    action = partial(self.scheduler.move, interval_id, self._ask_time("New start"))
                elif command == "resize":
                    action = partial(self.scheduler.resize, interval_id, self._ask_time("New end"))
                else:
                    if not Confirm.ask(f"Delete {interval_id}?", default=False):
                        return
                    action = partial(self.scheduler.delete, interval_id)

            result = await action()
            if result.status is ScheduleStatus.CONFLICT:
                self._show_conflicts(result)
                if not Confirm.ask("Save anyway?", default=False):
                    self.console.print("[yellow]Change abandoned[/yellow]")
                    return
                result = await action(override=True)

            self._show_result(result)

        except (CalendarError, ValueError) as e:
            self.console.print(f"[red]{e}[/red]")

    def _ask_time(self, label: str) -> datetime:
        raw = Prompt.ask(f"{label} (YYYY-MM-DD HH:MM)")
        value = datetime.fromisoformat(raw)
        return value if value.tzinfo else value.replace(tzinfo=UTC)

    def _show_calendar(self) -> None:
        intervals = sorted(self.coordinator.settled_intervals(), key=lambda interval: interval.start)
        slots = layout_slots(intervals)

        table = Table(title="Appointments")
        table.add_column("Id", style="dim")
        table.add_column("Title")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Column")

        for interval in intervals:
            slot = slots.get(interval.id)
            column = f"{slot.slot_index + 1}/{slot.slot_count}" if slot else "-"
            table.add_row(
                interval.id,
                interval.summary or "",
                interval.start.strftime("%Y-%m-%d %H:%M"),
                interval.end.strftime("%H:%M"),
                column,
            )

        self.console.print(table)

    def _show_conflicts(self, result: ScheduleResult) -> None:
        lines = "\n".join(
            f"• {interval.id} {interval.summary or ''} "
            f"{interval.start.strftime('%H:%M')}-{interval.end.strftime('%H:%M')}"
            for interval in result.conflicts
        )
        self.console.print(Panel(lines, title="[yellow]Conflicting appointments[/yellow]", border_style="yellow"))

    def _show_result(self, result: ScheduleResult) -> None:
        style = {
            ScheduleStatus.COMMITTED: "green",
            ScheduleStatus.FAILED: "red",
            ScheduleStatus.REJECTED: "red",
            ScheduleStatus.BUSY: "yellow",
        }.get(result.status, "white")
        self.console.print(f"[{style}]{result.message}[/{style}]")
        self._show_calendar()

    def _show_help(self) -> None:
        help_text = """
[bold]Actions:[/bold]
• list - Show appointments with their side-by-side columns
• create - New appointment (times snap to 15 minutes)
• move - Drag an appointment to a new start, its length is kept
• resize - Change the end time, at least 15 minutes after the start
• delete - Remove an appointment
• /reload - Fetch appointments from the backend again
• /quit - Exit

[bold]Notes:[/bold]
• Appointments must be between 15 minutes and 12 hours long
• Overlapping appointments ask for confirmation before saving
• A failed save is reverted and reported
        """
        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the calendar CLI."""
    if len(sys.argv) < 2:
        print("usage: calendar_cli.py USER_ID [BACKEND_URL]")
        sys.exit(1)

    config = CalendarConfig.from_env()
    if len(sys.argv) > 2:
        config.backend_url = sys.argv[2]
    setup_logging(LogConfig.from_calendar_config(config))

    asyncio.run(CalendarCLI(sys.argv[1], config).start())


if __name__ == "__main__":
    main()
