# entry_row.py
# Description: The editable, UI-side representation of one time-tracking entry.
#
# Imports
import math
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional
#
# Local Imports
from ..hefti_api.schemas import EntryForm, EntryRecord, DEFAULT_ENTRY_TYPE
from .errors import StateError, ValidationError
#
#######################################################################################################################
#
# Functions:

EDITABLE_FIELDS = ("title", "log_date", "entry_type", "duration")


def parse_duration(raw: Any) -> float:
    """
    Coerces user input to fractional hours. Never raises: anything that is not a
    number becomes NaN, which `EntrySnapshot.to_form` refuses to transmit.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    text = str(raw if raw is not None else "").strip().replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return math.nan


def format_hours(value: Any) -> str:
    """Renders hours the way a user would type them: 3.0 -> "3", 2.5 -> "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class EntrySnapshot:
    title: str
    log_date: str
    entry_type: str
    duration_hours: float
    identifier: Optional[str] = None

    @property
    def is_transmittable(self) -> bool:
        return math.isfinite(self.duration_hours)

    def to_form(self) -> EntryForm:
        if not self.is_transmittable:
            raise ValidationError(f"Duration must be a number of hours, got {self.duration_hours!r}", field="duration")
        return EntryForm(
            title=self.title,
            logdate=self.log_date,
            entry_type=self.entry_type,
            spend_time=self.duration_hours,
        )


class EntryRow:
    """
    Holds the current field values of one list row and, once persisted, the
    identifier the backend assigned to it.
    """

    def __init__(
        self,
        title: str = "",
        log_date: Optional[str] = None,
        entry_type: str = DEFAULT_ENTRY_TYPE,
        duration: Any = "0",
        identifier: Optional[str] = None,
        on_detach: Optional[Callable[["EntryRow"], None]] = None,
        row_key: Optional[str] = None,
    ):
        self.row_key: str = row_key or f"entry-row-{uuid.uuid4().hex[:12]}"
        self._values = {
            "title": title,
            "log_date": log_date or date.today().isoformat(),
            "entry_type": entry_type,
            "duration": duration,
        }
        self._identifier: Optional[str] = str(identifier) if identifier is not None else None
        self._on_detach = on_detach
        self._detached = False

    @classmethod
    def from_record(cls, record: EntryRecord, on_detach: Optional[Callable[["EntryRow"], None]] = None) -> "EntryRow":
        return cls(
            title=record.title,
            log_date=record.logdate.isoformat(),
            entry_type=record.entry_type,
            duration=format_hours(record.spend_time),
            identifier=record.identifier,
            on_detach=on_detach,
        )

    def __repr__(self) -> str:
        return f"EntryRow(row_key={self.row_key!r}, identifier={self._identifier!r})"

    @property
    def identifier(self) -> Optional[str]:
        return self._identifier

    @property
    def is_detached(self) -> bool:
        return self._detached

    def get_value(self, name: str) -> Any:
        return self._values[name]

    def set_field(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise KeyError(f"Unknown entry field '{name}'")
        self._values[name] = value

    def get_field_values(self) -> EntrySnapshot:
        return EntrySnapshot(
            title=str(self._values["title"] or ""),
            log_date=str(self._values["log_date"] or ""),
            entry_type=str(self._values["entry_type"] or DEFAULT_ENTRY_TYPE),
            duration_hours=parse_duration(self._values["duration"]),
            identifier=self._identifier,
        )

    # Same snapshot, named for callers that think in entries rather than fields
    to_entry = get_field_values

    def has_identifier(self) -> bool:
        return self._identifier is not None

    def assign_identifier(self, identifier: str) -> None:
        if self._identifier is not None:
            raise StateError(
                f"Row {self.row_key} already has identifier {self._identifier!r}, refusing {identifier!r}")
        if identifier is None or str(identifier) == "":
            raise StateError(f"Row {self.row_key}: cannot assign an empty identifier")
        self._identifier = str(identifier)

    def set_detach_callback(self, on_detach: Optional[Callable[["EntryRow"], None]]) -> None:
        self._on_detach = on_detach

    def remove(self) -> None:
        """Takes the row out of the visible list. Talks to no backend."""
        if self._detached:
            return
        self._detached = True
        if self._on_detach is not None:
            self._on_detach(self)

#
# End of entry_row.py
#######################################################################################################################
