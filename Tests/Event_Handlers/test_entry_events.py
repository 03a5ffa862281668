# /tests/Event_Handlers/test_entry_events.py

import pytest
from unittest.mock import AsyncMock, MagicMock

from textual.widgets import ListView
from textual.css.query import QueryError

from hefti_tui.Entries.entry_row import EntryRow
from hefti_tui.Entries.errors import TransportError
from hefti_tui.Entries.row_synchronizer import SyncState
from hefti_tui.Entries.sync_registry import SyncRegistry
from hefti_tui.Widgets.entry_list_item import EntryListItem
from hefti_tui.hefti_api.exceptions import APIConnectionError, AuthenticationError

# Functions to test
from hefti_tui.Event_Handlers.entry_events import (
    handle_add_entry_button_pressed,
    handle_entry_field_changed,
    handle_entry_remove_button_pressed,
    load_entries,
    login_if_configured,
    notify_transport_error,
)

pytestmark = pytest.mark.asyncio


@pytest.fixture
def backend(backend_factory):
    return backend_factory(ids=["42"])


@pytest.fixture
def mock_app(backend):
    app = MagicMock()
    app.api_client = backend
    app.api_credentials = None
    app.sync_registry = SyncRegistry(backend, request_timeout=None)
    app.notify = MagicMock()

    app.entries_list = MagicMock(spec=ListView)
    app.entries_list.append = AsyncMock()
    app.query_one = MagicMock(return_value=app.entries_list)
    return app


def make_item(app, row: EntryRow):
    """A registered row behind a mocked list item."""
    app.sync_registry.create(row)
    item = MagicMock(spec=EntryListItem)
    item.entry_row = row
    return item


# --- Add ---

async def test_add_entry_mounts_unsynced_row(mock_app):
    await handle_add_entry_button_pressed(mock_app)

    mock_app.entries_list.append.assert_awaited_once()
    item = mock_app.entries_list.append.await_args.args[0]
    assert isinstance(item, EntryListItem)
    sync = mock_app.sync_registry.get(item.entry_row.row_key)
    assert sync.state is SyncState.UNSYNCED
    assert mock_app.api_client.calls == []


async def test_add_entry_without_list_leaves_no_synchronizer(mock_app):
    mock_app.query_one.side_effect = QueryError("no list")
    await handle_add_entry_button_pressed(mock_app)
    assert len(mock_app.sync_registry) == 0


# --- Field changes ---

async def test_field_change_starts_create(mock_app, backend):
    row = EntryRow()
    item = make_item(mock_app, row)

    await handle_entry_field_changed(mock_app, item, "title", "Standup")
    sync = mock_app.sync_registry.get(row.row_key)
    await sync.wait_idle()

    assert row.get_value("title") == "Standup"
    assert backend.operations() == ["create"]
    assert row.identifier == "42"
    item.mark_invalid.assert_called_once_with(False)


async def test_unchanged_value_is_not_an_edit(mock_app, backend, settle_loop):
    row = EntryRow(title="Standup")
    item = make_item(mock_app, row)

    await handle_entry_field_changed(mock_app, item, "title", "Standup")
    await settle_loop()

    assert backend.calls == []
    assert mock_app.sync_registry.get(row.row_key).state is SyncState.UNSYNCED


async def test_invalid_duration_marks_item_and_notifies(mock_app, backend, settle_loop):
    row = EntryRow()
    item = make_item(mock_app, row)

    await handle_entry_field_changed(mock_app, item, "duration", "lots")
    await settle_loop()

    item.mark_invalid.assert_called_once_with(True)
    mock_app.notify.assert_called_once()
    assert mock_app.notify.call_args.kwargs["severity"] == "error"
    assert backend.calls == []


async def test_field_change_on_detached_row_is_ignored(mock_app, backend, settle_loop):
    row = EntryRow()
    item = make_item(mock_app, row)
    row.remove()

    await handle_entry_field_changed(mock_app, item, "title", "late")
    await settle_loop()
    assert row.get_value("title") == ""
    assert backend.calls == []


async def test_field_change_for_unregistered_row_notifies(mock_app):
    item = MagicMock(spec=EntryListItem)
    item.entry_row = EntryRow()

    await handle_entry_field_changed(mock_app, item, "title", "orphan")
    mock_app.notify.assert_called_once()


# --- Remove ---

async def test_remove_synced_row_deletes_and_unregisters(mock_app, backend):
    row = EntryRow(identifier="3")
    backend.store["3"] = {}
    item = make_item(mock_app, row)
    on_detach = MagicMock()
    row.set_detach_callback(on_detach)

    await handle_entry_remove_button_pressed(mock_app, item)
    await mock_app.sync_registry.drain()

    on_detach.assert_called_once_with(row)
    assert row.row_key not in mock_app.sync_registry
    assert backend.operations() == ["delete"]


async def test_remove_unknown_row_still_detaches(mock_app, backend):
    row = EntryRow()
    item = MagicMock(spec=EntryListItem)
    item.entry_row = row

    await handle_entry_remove_button_pressed(mock_app, item)
    assert row.is_detached
    assert backend.calls == []


# --- Transport errors ---

async def test_notify_transport_error_names_operation(mock_app):
    error = TransportError("delete", "entry-row-1", APIConnectionError("refused"))
    notify_transport_error(mock_app, error)
    message = mock_app.notify.call_args.args[0]
    assert message.startswith("Deleting entry failed")
    assert "refused" in message


# --- Startup ---

async def test_login_skipped_without_credentials(mock_app, mocker):
    login = mocker.patch.object(mock_app.api_client, "login", new_callable=mocker.AsyncMock)
    assert await login_if_configured(mock_app) is False
    login.assert_not_awaited()


async def test_login_uses_configured_credentials(mock_app, mocker):
    mock_app.api_credentials = {"username": "azubi", "password": "geheim"}
    login = mocker.patch.object(mock_app.api_client, "login", new_callable=mocker.AsyncMock)
    assert await login_if_configured(mock_app) is True
    login.assert_awaited_once_with("azubi", "geheim")


async def test_rejected_login_notifies(mock_app, mocker):
    mock_app.api_credentials = {"username": "azubi", "password": "falsch"}
    mocker.patch.object(mock_app.api_client, "login", side_effect=AuthenticationError("401"))
    assert await login_if_configured(mock_app) is False
    mock_app.notify.assert_called_once()


async def test_load_entries_mounts_synced_rows_in_date_order(mock_app, backend, make_entry_body):
    backend.store["2"] = make_entry_body(title="later", logdate="2024-03-05", spend_time=1.0)
    backend.store["1"] = make_entry_body(title="earlier", logdate="2024-03-01", spend_time=2.5)

    assert await load_entries(mock_app) == 2

    items = [c.args[0] for c in mock_app.entries_list.append.await_args_list]
    assert [i.entry_row.get_value("title") for i in items] == ["earlier", "later"]
    assert [i.entry_row.identifier for i in items] == ["1", "2"]
    for item in items:
        assert mock_app.sync_registry.get(item.entry_row.row_key).state is SyncState.SYNCED


async def test_load_entries_failure_notifies(mock_app):
    mock_app.api_client = MagicMock()
    mock_app.api_client.list_entries = AsyncMock(side_effect=APIConnectionError("down"))
    assert await load_entries(mock_app) == 0
    mock_app.notify.assert_called_once()
    mock_app.entries_list.append.assert_not_awaited()

#
# End of test_entry_events.py
#######################################################################################################################
