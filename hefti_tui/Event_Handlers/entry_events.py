# entry_events.py
# Description: Handlers that forward entry list UI events to the row synchronizers.
#
# Imports
from typing import Any, TYPE_CHECKING
#
# 3rd-Party Imports
from loguru import logger
from textual.css.query import QueryError
from textual.widgets import ListView
#
# Local Imports
from ..Constants import ENTRIES_LIST_ID
from ..Entries.entry_row import EntryRow
from ..Entries.errors import StateError, TransportError, ValidationError
from ..Widgets.entry_list_item import EntryListItem
from ..hefti_api.exceptions import AuthenticationError, HeftiAPIError
#
if TYPE_CHECKING:
    from ..app import HeftiApp
#
########################################################################################################################
#
# Functions:

OPERATION_LABELS = {
    "create": "Saving new entry",
    "update": "Saving entry",
    "delete": "Deleting entry",
}


def notify_transport_error(app: 'HeftiApp', error: TransportError) -> None:
    """Callback for SyncRegistry; every failed request ends up here."""
    label = OPERATION_LABELS.get(error.operation, error.operation)
    app.notify(f"{label} failed: {error.cause or 'unknown error'}", severity="error", timeout=6)


def _entries_list(app: 'HeftiApp') -> ListView:
    return app.query_one(f"#{ENTRIES_LIST_ID}", ListView)


async def _mount_row(app: 'HeftiApp', row: EntryRow) -> EntryListItem:
    app.sync_registry.create(row)
    item = EntryListItem(row)
    await _entries_list(app).append(item)
    return item


async def handle_add_entry_button_pressed(app: 'HeftiApp') -> None:
    """Appends an empty, not yet persisted row dated today."""
    row = EntryRow()
    try:
        await _mount_row(app, row)
    except QueryError as e:
        logger.error(f"Entries list not found, cannot add a row: {e}")
        app.sync_registry.dispose(row.row_key)
        return
    logger.info(f"Added new row {row.row_key}")


async def handle_entry_field_changed(app: 'HeftiApp', item: EntryListItem, field: str, value: Any) -> None:
    """Records an edit on the row and lets its synchronizer send or queue it."""
    row = item.entry_row
    if row.is_detached:
        return
    if str(row.get_value(field)) == str(value):
        # Widgets echo their initial value on mount; that is not an edit
        return
    row.set_field(field, value)
    try:
        synchronizer = app.sync_registry.get(row.row_key)
        synchronizer.on_field_changed()
        item.mark_invalid(False)
    except ValidationError as e:
        item.mark_invalid(True)
        logger.info(f"{row.row_key}: edit not sent: {e}")
        app.notify(str(e), severity="error", timeout=4)
    except (StateError, KeyError) as e:
        logger.error(f"{row.row_key}: cannot sync edit: {e}")
        app.notify("This entry can no longer be edited.", severity="error")


async def handle_entry_remove_button_pressed(app: 'HeftiApp', item: EntryListItem) -> None:
    row = item.entry_row
    try:
        app.sync_registry.remove_row(row.row_key)
    except (StateError, KeyError) as e:
        logger.error(f"{row.row_key}: cannot remove: {e}")
        # Still take it off the screen, there is nothing left to sync
        row.remove()


async def login_if_configured(app: 'HeftiApp') -> bool:
    credentials = app.api_credentials
    if not credentials:
        return False
    try:
        await app.api_client.login(credentials["username"], credentials["password"])
        return True
    except AuthenticationError as e:
        logger.error(f"Login rejected: {e}")
        app.notify("Login failed, check username and password.", severity="error")
    except HeftiAPIError as e:
        logger.error(f"Login failed: {e}")
        app.notify(f"Could not reach the backend: {e}", severity="error")
    return False


async def load_entries(app: 'HeftiApp') -> int:
    """Rebuilds the list from the backend; loaded rows start out synced."""
    try:
        records = await app.api_client.list_entries()
    except HeftiAPIError as e:
        logger.error(f"Could not load entries: {e}")
        app.notify(f"Could not load entries: {e}", severity="error")
        return 0
    for record in sorted(records, key=lambda r: r.logdate):
        await _mount_row(app, EntryRow.from_record(record))
    logger.info(f"Loaded {len(records)} entries")
    return len(records)

#
# End of entry_events.py
#######################################################################################################################
