# row_synchronizer.py
# Description: Per-row state machine that turns edits and removals into create/update/delete requests.
#
# A row is in exactly one SyncState. At most one request per row is in flight; edits that
# arrive meanwhile land in a single pending slot (newest wins) and are sent once the
# in-flight request has finished. Nothing that needs the identifier (update, delete) is
# sent before the create that produces it has completed.
#
# Imports
import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Protocol
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from ..hefti_api.exceptions import HeftiAPIError, APIResponseError, APITimeoutError
from ..hefti_api.schemas import EntryForm
from .entry_row import EntryRow, EntrySnapshot
from .errors import StateError, TransportError
#
#######################################################################################################################
#
# Functions:

DEFAULT_REQUEST_TIMEOUT = 10.0


class SyncState(str, Enum):
    UNSYNCED = "Unsynced"
    CREATE_PENDING = "CreatePending"
    SYNCED = "Synced"
    UPDATE_PENDING = "UpdatePending"
    REMOVED = "Removed"


class EntryBackend(Protocol):
    async def create_entry(self, form: EntryForm) -> str: ...
    async def update_entry(self, entry_id: str, form: EntryForm) -> None: ...
    async def delete_entry(self, entry_id: str) -> None: ...


class RowSynchronizer:
    def __init__(
        self,
        row: EntryRow,
        backend: EntryBackend,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
        on_transport_error: Optional[Callable[[TransportError], None]] = None,
    ):
        self.row = row
        self._backend = backend
        self._request_timeout = request_timeout
        self._on_transport_error = on_transport_error
        self._state = SyncState.SYNCED if row.has_identifier() else SyncState.UNSYNCED
        self._pending: Optional[EntrySnapshot] = None
        self._task: Optional[asyncio.Task] = None

    def __repr__(self) -> str:
        return f"RowSynchronizer(row={self.row.row_key!r}, state={self._state.value})"

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def identifier(self) -> Optional[str]:
        return self.row.identifier

    @property
    def pending_snapshot(self) -> Optional[EntrySnapshot]:
        return self._pending

    @property
    def is_busy(self) -> bool:
        return self._task is not None and not self._task.done()

    ###################################################################################################################
    # Events
    ###################################################################################################################

    def on_field_changed(self) -> None:
        """
        Reads the row's current values and sends or queues them, depending on state.

        Raises:
            StateError: the row was already removed.
            ValidationError: the duration is not a number; nothing is sent or queued.
        """
        self._ensure_not_removed("field change")
        snapshot = self.row.get_field_values()
        snapshot.to_form()  # Validate before touching any state

        if self._state is SyncState.UNSYNCED:
            self._state = SyncState.CREATE_PENDING
            logger.debug(f"{self.row.row_key}: sending create")
            self._start(self._run_create(snapshot))
        elif self._state is SyncState.SYNCED:
            self._state = SyncState.UPDATE_PENDING
            logger.debug(f"{self.row.row_key}: sending update for {self.row.identifier}")
            self._start(self._run_update(snapshot))
        else:
            if self._pending is not None:
                logger.debug(f"{self.row.row_key}: superseding queued edit ({self._state.value})")
            self._pending = snapshot

    def on_remove_requested(self) -> None:
        """Detaches the row and issues whatever delete its state calls for."""
        self._ensure_not_removed("remove")
        previous = self._state
        self._state = SyncState.REMOVED
        self._pending = None

        try:
            if previous is SyncState.UNSYNCED:
                logger.debug(f"{self.row.row_key}: removed before it was ever sent, nothing to delete")
            elif previous is SyncState.CREATE_PENDING:
                logger.info(f"{self.row.row_key}: removed while create in flight, will delete once an id arrives")
            elif previous is SyncState.SYNCED:
                self._start(self._send_delete(self.row.identifier))
            else:
                # UPDATE_PENDING: the running update task sends the delete when it finishes
                logger.debug(f"{self.row.row_key}: removed during update, delete follows the update")
        finally:
            # The delete is already scheduled if the detach callback raises
            self.row.remove()

    ###################################################################################################################
    # Request continuations
    ###################################################################################################################

    async def _run_create(self, snapshot: EntrySnapshot) -> None:
        try:
            new_id = await self._call("create", self._backend.create_entry(snapshot.to_form()))
            if new_id is None or not str(new_id).strip():
                cause = APIResponseError(200, f"Create returned an empty identifier: {new_id!r}")
                raise TransportError("create", self.row.row_key, cause)
        except TransportError as e:
            self._create_failed(e)
            return

        if self._state is SyncState.REMOVED:
            logger.info(f"{self.row.row_key}: create returned {new_id} for a removed row, sending compensating delete")
            await self._send_delete(new_id)
            return

        try:
            self.row.assign_identifier(new_id)
        except StateError as e:
            self._create_failed(TransportError("create", self.row.row_key, e))
            return
        logger.info(f"{self.row.row_key}: persisted as {new_id}")
        if self._pending is None:
            self._state = SyncState.SYNCED
            return
        queued, self._pending = self._pending, None
        self._state = SyncState.UPDATE_PENDING
        await self._run_update(queued)

    def _create_failed(self, error: TransportError) -> None:
        self._report(error)
        if self._state is SyncState.REMOVED:
            return
        if self._pending is not None:
            logger.warning(f"{self.row.row_key}: create failed, dropping queued edit until the next change")
        self._pending = None
        self._state = SyncState.UNSYNCED

    async def _run_update(self, snapshot: EntrySnapshot) -> None:
        while True:
            try:
                await self._call("update", self._backend.update_entry(self.row.identifier, snapshot.to_form()))
            except TransportError as e:
                self._report(e)

            if self._state is SyncState.REMOVED:
                await self._send_delete(self.row.identifier)
                return
            if self._pending is None:
                self._state = SyncState.SYNCED
                return
            snapshot, self._pending = self._pending, None

    async def _send_delete(self, entry_id: str) -> None:
        try:
            await self._call("delete", self._backend.delete_entry(entry_id))
            logger.info(f"{self.row.row_key}: deleted {entry_id}")
        except TransportError as e:
            # Not retried, the row is gone from the list either way
            self._report(e)

    ###################################################################################################################
    # Helpers
    ###################################################################################################################

    async def _call(self, operation: str, request: Awaitable[Any]) -> Any:
        try:
            if self._request_timeout:
                return await asyncio.wait_for(request, timeout=self._request_timeout)
            return await request
        except asyncio.TimeoutError as e:
            cause = APITimeoutError(f"no answer within {self._request_timeout}s")
            raise TransportError(operation, self.row.row_key, cause) from e
        except HeftiAPIError as e:
            raise TransportError(operation, self.row.row_key, e) from e

    def _report(self, error: TransportError) -> None:
        logger.warning(str(error))
        if self._on_transport_error is not None:
            try:
                self._on_transport_error(error)
            except Exception as e:
                logger.exception(f"{self.row.row_key}: transport error callback failed: {e}")

    def _start(self, coro) -> None:
        if self.is_busy:
            coro.close()
            raise StateError(f"{self.row.row_key}: a request is already in flight")
        self._task = asyncio.get_running_loop().create_task(coro, name=f"sync-{self.row.row_key}")
        self._task.add_done_callback(self._log_task_failure)

    def _log_task_failure(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"{self.row.row_key}: sync task crashed in state {self._state.value}")

    def _ensure_not_removed(self, event: str) -> None:
        if self._state is SyncState.REMOVED:
            raise StateError(f"{self.row.row_key}: {event} received after the row was removed")

    async def wait_idle(self) -> None:
        """Waits until no request for this row is in flight."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})

#
# End of row_synchronizer.py
#######################################################################################################################
