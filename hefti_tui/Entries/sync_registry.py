# sync_registry.py
# Description: Maps row keys to their RowSynchronizer for the lifetime of each row.
#
# Imports
import asyncio
from typing import Callable, Dict, Iterator, List, Optional
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from .entry_row import EntryRow
from .errors import StateError, TransportError
from .row_synchronizer import DEFAULT_REQUEST_TIMEOUT, EntryBackend, RowSynchronizer
#
#######################################################################################################################
#
# Functions:

class SyncRegistry:
    def __init__(
        self,
        backend: EntryBackend,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
        on_transport_error: Optional[Callable[[TransportError], None]] = None,
    ):
        self.backend = backend
        self.request_timeout = request_timeout
        self.on_transport_error = on_transport_error
        self._synchronizers: Dict[str, RowSynchronizer] = {}
        # Disposed synchronizers may still owe a (compensating) delete
        self._retired: List[RowSynchronizer] = []

    def __len__(self) -> int:
        return len(self._synchronizers)

    def __contains__(self, row_key: str) -> bool:
        return row_key in self._synchronizers

    def __iter__(self) -> Iterator[RowSynchronizer]:
        return iter(list(self._synchronizers.values()))

    def create(self, row: EntryRow) -> RowSynchronizer:
        synchronizer = RowSynchronizer(
            row,
            self.backend,
            request_timeout=self.request_timeout,
            on_transport_error=self.on_transport_error,
        )
        self.register(synchronizer)
        return synchronizer

    def register(self, synchronizer: RowSynchronizer) -> None:
        row_key = synchronizer.row.row_key
        if row_key in self._synchronizers:
            raise StateError(f"Row {row_key} already has a synchronizer")
        self._synchronizers[row_key] = synchronizer
        logger.debug(f"Registered {synchronizer!r}")

    def get(self, row_key: str) -> RowSynchronizer:
        try:
            return self._synchronizers[row_key]
        except KeyError:
            raise KeyError(f"No synchronizer registered for row '{row_key}'") from None

    def dispose(self, row_key: str) -> Optional[RowSynchronizer]:
        synchronizer = self._synchronizers.pop(row_key, None)
        if synchronizer is None:
            return None
        self._retired = [s for s in self._retired if s.is_busy]
        if synchronizer.is_busy:
            self._retired.append(synchronizer)
        logger.debug(f"Disposed {synchronizer!r}")
        return synchronizer

    def remove_row(self, row_key: str) -> RowSynchronizer:
        """Runs the removal transition for a row, then forgets it."""
        synchronizer = self.get(row_key)
        try:
            synchronizer.on_remove_requested()
        finally:
            self.dispose(row_key)
        return synchronizer

    async def drain(self) -> None:
        """Waits until every row, including removed ones, has no request in flight."""
        pending = [s for s in [*self._synchronizers.values(), *self._retired] if s.is_busy]
        if pending:
            logger.info(f"Waiting for {len(pending)} row(s) to finish syncing")
            await asyncio.gather(*(s.wait_idle() for s in pending))
        self._retired = []

#
# End of sync_registry.py
#######################################################################################################################
