# Tests/conftest.py
#
#
# Imports
import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Set
import pytest
#
# Third-party imports
#
# Local imports
from hefti_tui import config
from hefti_tui.hefti_api.exceptions import APIConnectionError, APIResponseError
from hefti_tui.hefti_api.schemas import EntryForm, EntryRecord
#
############################################################################################################################
#
# Functions:

ALL_OPERATIONS = frozenset({"create", "update", "delete"})


@dataclass
class BackendCall:
    operation: str           # "create", "update", "delete", or "created" once a create returned
    entry_id: Optional[str]
    body: Optional[Dict[str, Any]]


class FakeBackend:
    """
    In-memory stand-in for HeftiAPIClient.

    Operations listed in `hold` park on a future until `release_next()` is called, which lets a
    test decide exactly when (and whether successfully) each request finishes.
    """

    def __init__(self, hold: Optional[Set[str]] = None, ids: Optional[List[str]] = None):
        self.hold = set(hold or ())
        self.calls: List[BackendCall] = []
        self.store: Dict[str, Dict[str, Any]] = {}
        self.fail_operations: Set[str] = set()
        self._ids = list(ids or [])
        self._next_numeric_id = 100
        self._gates: List[asyncio.Future] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    # --- test controls ---
    @property
    def waiting(self) -> int:
        return len(self._gates)

    async def release_next(self, fail: bool = False) -> None:
        gate = self._gates.pop(0)
        gate.set_result(fail)
        await settle()

    async def release_all(self) -> None:
        while self._gates:
            await self.release_next()

    def operations(self) -> List[str]:
        return [c.operation for c in self.calls if c.operation != "created"]

    def calls_for(self, operation: str) -> List[BackendCall]:
        return [c for c in self.calls if c.operation == operation]

    # --- backend surface ---
    async def _enter(self, operation: str, entry_id: Optional[str], form: Optional[EntryForm]) -> None:
        self.calls.append(BackendCall(operation, entry_id, form.model_dump() if form else None))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            should_fail = operation in self.fail_operations
            if operation in self.hold:
                gate = asyncio.get_running_loop().create_future()
                self._gates.append(gate)
                should_fail = await gate or should_fail
            else:
                await asyncio.sleep(0)
            if should_fail:
                raise APIConnectionError(f"{operation} refused by fake backend")
        finally:
            self.in_flight -= 1

    async def create_entry(self, form: EntryForm) -> str:
        await self._enter("create", None, form)
        if self._ids:
            new_id = self._ids.pop(0)
        else:
            new_id = str(self._next_numeric_id)
            self._next_numeric_id += 1
        self.store[new_id] = form.model_dump()
        self.calls.append(BackendCall("created", new_id, None))
        return new_id

    async def update_entry(self, entry_id: str, form: EntryForm) -> None:
        await self._enter("update", entry_id, form)
        if entry_id not in self.store:
            raise APIResponseError(404, f"no entry {entry_id}")
        self.store[entry_id] = form.model_dump()

    async def delete_entry(self, entry_id: str) -> None:
        await self._enter("delete", entry_id, None)
        self.store.pop(entry_id, None)

    async def list_entries(self) -> List[EntryRecord]:
        return [EntryRecord(id=key, **value) for key, value in self.store.items()]

    async def login(self, username: str, password: str):
        return None

    async def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 25) -> None:
    """Lets pending tasks run until they block again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def entry_body(title: str = "", logdate: Optional[str] = None, entry_type: str = "Betriebliche Tätigkeit",
               spend_time: float = 0.0) -> Dict[str, Any]:
    return {
        "title": title,
        "logdate": logdate or date.today().isoformat(),
        "entry_type": entry_type,
        "spend_time": spend_time,
    }


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps config and log files out of the real home directory."""
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", tmp_path / "config" / "config.toml")
    monkeypatch.setattr(config, "BASE_DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(config, "_CONFIG_CACHE", None)
    monkeypatch.delenv("HEFTI_API_BASE_URL", raising=False)
    monkeypatch.delenv("HEFTI_API_TOKEN", raising=False)
    yield tmp_path


@pytest.fixture
def backend_factory():
    """Builds FakeBackend instances; see FakeBackend for the `hold` semantics."""
    return FakeBackend


@pytest.fixture
def settle_loop():
    return settle


@pytest.fixture
def make_entry_body():
    return entry_body

#
# End of Tests/conftest.py
########################################################################################################################
