# weekly_report.py
# Description: Groups one ISO week of stored entries by category for the weekly report.
#
# Imports
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple
#
# Local Imports
from ..hefti_api.schemas import ENTRY_TYPES, EntryRecord
from .entry_row import format_hours
#
#######################################################################################################################
#
# Functions:

def week_days(year: int, week: int) -> List[date]:
    """Monday through Sunday of ISO week `week` in ISO year `year`."""
    try:
        return [date.fromisocalendar(year, week, day) for day in range(1, 8)]
    except ValueError as e:
        raise ValueError(f"{year} has no ISO week {week}") from e


def current_week(today: Optional[date] = None) -> Tuple[int, int]:
    iso = (today or date.today()).isocalendar()
    return iso[0], iso[1]


def shift_week(year: int, week: int, delta: int) -> Tuple[int, int]:
    """Moves `delta` weeks forward (or back), crossing year boundaries."""
    monday = week_days(year, week)[0] + timedelta(weeks=delta)
    iso = monday.isocalendar()
    return iso[0], iso[1]


def report_number(week_start: date, training_start: Optional[date]) -> Optional[Tuple[int, int]]:
    """
    Consecutive report number and training year for a week, counted from the Monday
    the training started. None when no start is configured or the week lies before it.
    """
    if training_start is None or week_start < training_start:
        return None
    weeks = (week_start - training_start).days // 7
    return weeks + 1, weeks // 52 + 1


@dataclass
class CategoryGroup:
    entry_type: str
    entries: List[EntryRecord] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return round(sum(e.spend_time for e in self.entries), 2)


@dataclass
class WeeklyReport:
    year: int
    week: int
    days: List[date]
    groups: List[CategoryGroup]
    number: Optional[int] = None
    training_year: Optional[int] = None

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]

    @property
    def total_hours(self) -> float:
        return round(sum(g.total_hours for g in self.groups), 2)

    @property
    def is_empty(self) -> bool:
        return not any(g.entries for g in self.groups)

    def group(self, entry_type: str) -> CategoryGroup:
        for candidate in self.groups:
            if candidate.entry_type == entry_type:
                return candidate
        raise KeyError(entry_type)

    def title(self) -> str:
        heading = f"KW {self.week}/{self.year}: {self.start:%d.%m.%Y} - {self.end:%d.%m.%Y}"
        if self.number is not None:
            heading += f"  (Nachweis Nr. {self.number}, Ausbildungsjahr {self.training_year})"
        return heading

    def summary(self) -> str:
        return f"Gesamt: {format_hours(self.total_hours)} h"


def build_weekly_report(records: Iterable[EntryRecord], year: int, week: int,
                        training_start: Optional[date] = None) -> WeeklyReport:
    """
    Keeps the records dated inside the week and groups them by category, ordered by
    date. The known categories are always present, even when empty; any other
    stored category gets its own group after them.
    """
    days = week_days(year, week)
    groups = {entry_type: CategoryGroup(entry_type) for entry_type in ENTRY_TYPES}
    for record in sorted(records, key=lambda r: r.logdate):
        if not days[0] <= record.logdate <= days[-1]:
            continue
        groups.setdefault(record.entry_type, CategoryGroup(record.entry_type)).entries.append(record)

    numbering = report_number(days[0], training_start)
    return WeeklyReport(
        year=year,
        week=week,
        days=days,
        groups=list(groups.values()),
        number=numbering[0] if numbering else None,
        training_year=numbering[1] if numbering else None,
    )

#
# End of weekly_report.py
#######################################################################################################################
