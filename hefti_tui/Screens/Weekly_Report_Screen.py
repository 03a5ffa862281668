# Weekly_Report_Screen.py
#
# Description: Modal screen showing one ISO week of stored entries, grouped by category.
#
# Imports
from datetime import date
from typing import TYPE_CHECKING, List, Optional
#
# 3rd-Party Imports
from loguru import logger
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widget import Widget
from textual.widgets import Button, Label, Static
#
# Local Imports
from ..Constants import (
    REPORT_BODY_ID, REPORT_CLOSE_BUTTON_ID, REPORT_NEXT_BUTTON_ID, REPORT_PREV_BUTTON_ID, REPORT_TITLE_ID,
    REPORT_TOTAL_ID,
)
from ..Entries.entry_row import format_hours
from ..Entries.weekly_report import WeeklyReport, build_weekly_report, current_week, shift_week
from ..hefti_api.exceptions import HeftiAPIError
#
if TYPE_CHECKING:
    from ..hefti_api.client import HeftiAPIClient
#
########################################################################################################################
#
# Functions:

class WeeklyReportScreen(ModalScreen[None]):
    BINDINGS = [
        Binding("escape", "close_report", "Close Report"),
        Binding("left", "previous_week", "Previous Week"),
        Binding("right", "next_week", "Next Week"),
    ]
    CSS = """
    WeeklyReportScreen { align: center middle; }
    #report-dialog { width: 90%; max-width: 100; height: 80%; border: thick $primary-background-lighten-2; background: $surface; }
    #report-title { width: 100%; padding: 0 1; text-style: bold; }
    #report-body { height: 1fr; padding: 0 1; }
    .report-group-title { margin-top: 1; text-style: bold; color: $accent; }
    .report-empty { color: $text-muted; }
    #report-total { margin-top: 1; text-style: bold; }
    #report-footer { height: auto; width: 100%; dock: bottom; align: right middle; }
    """

    def __init__(self, api_client: 'HeftiAPIClient', year: Optional[int] = None, week: Optional[int] = None,
                 training_start: Optional[date] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_client = api_client
        if year is None or week is None:
            year, week = current_week()
        self.year = year
        self.week = week
        self.training_start = training_start
        self.report: Optional[WeeklyReport] = None

    def compose(self) -> ComposeResult:
        with Vertical(id="report-dialog"):
            yield Static("", id=REPORT_TITLE_ID, markup=False)
            yield VerticalScroll(id=REPORT_BODY_ID)
            with Horizontal(id="report-footer"):
                yield Button("< Week", id=REPORT_PREV_BUTTON_ID)
                yield Button("Week >", id=REPORT_NEXT_BUTTON_ID)
                yield Button("Close", variant="error", id=REPORT_CLOSE_BUTTON_ID)

    async def on_mount(self) -> None:
        await self.load_week()

    async def load_week(self) -> None:
        """Fetches all entries and renders the currently selected week."""
        year, week = self.year, self.week
        self.report = None
        title = self.query_one(f"#{REPORT_TITLE_ID}", Static)
        try:
            records = await self.api_client.list_entries()
        except HeftiAPIError as e:
            logger.error(f"Weekly report {week}/{year}: could not load entries: {e}")
            title.update(f"KW {week}/{year}: entries could not be loaded")
            await self.query_one(f"#{REPORT_BODY_ID}", VerticalScroll).remove_children()
            self.app.notify(f"Could not load entries: {e}", severity="error")
            return

        if (year, week) != (self.year, self.week):
            # The user moved on while this week was loading
            return
        self.report = build_weekly_report(records, year, week, self.training_start)
        logger.debug(f"Weekly report {week}/{year}: {self.report.total_hours} h")
        title.update(self.report.title())
        await self._render_report(self.report)

    async def _render_report(self, report: WeeklyReport) -> None:
        body = self.query_one(f"#{REPORT_BODY_ID}", VerticalScroll)
        await body.remove_children()
        widgets: List[Widget] = []
        for group in report.groups:
            widgets.append(Label(f"{group.entry_type}: {format_hours(group.total_hours)} h",
                                 classes="report-group-title", markup=False))
            if not group.entries:
                widgets.append(Label("  -", classes="report-empty"))
            for entry in group.entries:
                widgets.append(Label(
                    f"  {entry.logdate:%d.%m.}  {entry.title}  {format_hours(entry.spend_time)} h",
                    classes="report-entry",
                    markup=False,
                ))
        widgets.append(Label(report.summary(), id=REPORT_TOTAL_ID, markup=False))
        await body.mount_all(widgets)

    ########################################################
    # --- Actions ---
    ########################################################

    async def action_previous_week(self) -> None:
        self.year, self.week = shift_week(self.year, self.week, -1)
        await self.load_week()

    async def action_next_week(self) -> None:
        self.year, self.week = shift_week(self.year, self.week, 1)
        await self.load_week()

    def action_close_report(self) -> None:
        self.dismiss()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == REPORT_PREV_BUTTON_ID:
            await self.action_previous_week()
        elif event.button.id == REPORT_NEXT_BUTTON_ID:
            await self.action_next_week()
        elif event.button.id == REPORT_CLOSE_BUTTON_ID:
            self.action_close_report()

#
# End of Weekly_Report_Screen.py
#######################################################################################################################
