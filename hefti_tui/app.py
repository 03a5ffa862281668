# hefti_tui - Textual client for the hefti time-tracking backend
# Description: This file contains the main application logic for hefti_tui: an editable list of
# time entries, each kept in sync with the backend by its own RowSynchronizer.
#
# Imports
import logging
import traceback
from typing import Any, Dict, Optional
#
# 3rd-Party Libraries
from loguru import logger as loguru_logger
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Button, Collapsible, Footer, Header, Input, RichLog, Select
#
# Local Imports
from .Constants import (
    ADD_ENTRY_BUTTON_ID, ENTRIES_WINDOW_ID, LOG_DISPLAY_ID, REMOVE_BUTTON_NAME, WEEKLY_REPORT_BUTTON_ID, css_content,
)
from .Entries.sync_registry import SyncRegistry
from .Event_Handlers import entry_events
from .Logging_Config import RichLogHandler, configure_application_logging
from .Screens.Weekly_Report_Screen import WeeklyReportScreen
from .UI.Entries_Window import EntriesWindow
from .Widgets.entry_list_item import find_entry_item
from .config import (
    get_api_base_url, get_api_credentials, get_api_timeout, get_cli_setting, get_report_training_start,
    get_sync_request_timeout,
)
from .hefti_api.client import HeftiAPIClient
#
########################################################################################################################
#
# Functions:

class HeftiApp(App[None]):
    """A Textual app for keeping time entries in sync with the hefti backend."""
    TITLE = "hefti"
    CSS = css_content
    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit App", show=True),
        Binding("ctrl+n", "add_entry", "Add Entry", show=True),
        Binding("ctrl+r", "weekly_report", "Weekly Report", show=True),
    ]

    def __init__(
        self,
        api_client: Optional[HeftiAPIClient] = None,
        api_credentials: Optional[Dict[str, str]] = None,
        setup_logging: bool = True,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_client = api_client or HeftiAPIClient(
            base_url=get_api_base_url(),
            token=get_cli_setting("api", "token", "") or None,
            timeout=get_api_timeout(),
        )
        self.api_credentials = api_credentials if api_credentials is not None else get_api_credentials()
        self.sync_registry = SyncRegistry(
            self.api_client,
            request_timeout=get_sync_request_timeout(),
            on_transport_error=lambda error: entry_events.notify_transport_error(self, error),
        )
        self._setup_logging_enabled = setup_logging
        self._rich_log_handler: Optional[RichLogHandler] = None
        self.loguru_logger = loguru_logger

    def compose(self) -> ComposeResult:
        logging.debug("App composing UI...")
        yield Header()
        yield EntriesWindow(self, id=ENTRIES_WINDOW_ID)
        with Collapsible(title="Logs", collapsed=True, id="logs-collapsible"):
            yield RichLog(id=LOG_DISPLAY_ID, wrap=True, highlight=True)
        yield Footer()

    def on_mount(self) -> None:
        """Configure logging and schedule post-mount setup."""
        if self._setup_logging_enabled:
            configure_application_logging(self)
            if self._rich_log_handler:
                self._rich_log_handler.start_processor(self)
        self.call_after_refresh(self._post_mount_setup)

    async def _post_mount_setup(self) -> None:
        """Logs in (when configured) and rebuilds the entry list from the backend."""
        await entry_events.login_if_configured(self)
        await entry_events.load_entries(self)

    async def on_unmount(self) -> None:
        self.loguru_logger.info("App unmounting, flushing in-flight entry requests...")
        try:
            await self.sync_registry.drain()
        finally:
            await self.api_client.close()
            if self._rich_log_handler:
                await self._rich_log_handler.stop_processor()

    ########################################################
    # --- Actions ---
    ########################################################

    async def action_add_entry(self) -> None:
        await entry_events.handle_add_entry_button_pressed(self)

    def action_weekly_report(self) -> None:
        """Opens the weekly report for the current ISO week."""
        self.push_screen(WeeklyReportScreen(self.api_client, training_start=get_report_training_start()))

    ########################################################
    # --- Event routing ---
    ########################################################

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == ADD_ENTRY_BUTTON_ID:
            await entry_events.handle_add_entry_button_pressed(self)
            return
        if event.button.id == WEEKLY_REPORT_BUTTON_ID:
            self.action_weekly_report()
            return
        if event.button.name == REMOVE_BUTTON_NAME:
            item = find_entry_item(event.button)
            if item is not None:
                event.stop()
                await entry_events.handle_entry_remove_button_pressed(self, item)
            return
        self.loguru_logger.warning(f"Unhandled button press: id={event.button.id!r} name={event.button.name!r}")

    async def on_input_changed(self, event: Input.Changed) -> None:
        await self._route_field_change(event.input, event.value)

    async def on_select_changed(self, event: Select.Changed) -> None:
        await self._route_field_change(event.select, event.value)

    async def _route_field_change(self, widget, value: Any) -> None:
        item = find_entry_item(widget)
        if item is None or not widget.name or value is Select.BLANK:
            return
        await entry_events.handle_entry_field_changed(self, item, widget.name, value)


def main_cli_runner():
    app_instance = HeftiApp()
    try:
        app_instance.run()
    except Exception:
        loguru_logger.exception("--- CRITICAL ERROR DURING app.run() ---")
        traceback.print_exc()
        raise


# --- Main execution block ---
if __name__ == "__main__":
    main_cli_runner()

#
# End of app.py
#######################################################################################################################
