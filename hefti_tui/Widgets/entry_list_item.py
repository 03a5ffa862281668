# entry_list_item.py
# Description: One editable entry in the entries list.
#
# Imports
from typing import List, Optional, Tuple
#
# 3rd-Party Imports
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.dom import DOMNode
from textual.widgets import Button, Input, ListItem, Select
#
# Local Imports
from ..Constants import FIELD_DURATION, FIELD_ENTRY_TYPE, FIELD_LOG_DATE, FIELD_TITLE, REMOVE_BUTTON_NAME
from ..Entries.entry_row import EntryRow, format_hours
from ..hefti_api.schemas import ENTRY_TYPES
#
#######################################################################################################################
#
# Functions:

def entry_type_options(current: Optional[str] = None) -> List[Tuple[str, str]]:
    """Select options for the category; keeps an unknown stored value selectable."""
    labels = list(ENTRY_TYPES)
    if current and current not in labels:
        labels.append(current)
    return [(label, label) for label in labels]


class EntryListItem(ListItem):
    def __init__(self, entry_row: EntryRow, **kwargs):
        kwargs.setdefault("id", entry_row.row_key)
        super().__init__(**kwargs)
        self.entry_row: EntryRow = entry_row
        entry_row.set_detach_callback(self._on_row_detached)

    def compose(self) -> ComposeResult:
        row = self.entry_row
        entry_type = row.get_value(FIELD_ENTRY_TYPE)
        with Horizontal():
            yield Input(value=row.get_value(FIELD_TITLE), placeholder="Title...",
                        name=FIELD_TITLE, classes="entry-title")
            yield Input(value=format_hours(row.get_value(FIELD_DURATION)), placeholder="h",
                        name=FIELD_DURATION, classes="entry-duration")
            yield Select(entry_type_options(entry_type), value=entry_type, allow_blank=False,
                         name=FIELD_ENTRY_TYPE, classes="entry-type")
            yield Input(value=row.get_value(FIELD_LOG_DATE), placeholder="YYYY-MM-DD",
                        name=FIELD_LOG_DATE, classes="entry-date")
            yield Button("✕", name=REMOVE_BUTTON_NAME, variant="error", classes="entry-remove-button")

    def mark_invalid(self, invalid: bool) -> None:
        self.set_class(invalid, "-invalid")

    def _on_row_detached(self, _row: EntryRow) -> None:
        if self.is_attached:
            self.remove()


def find_entry_item(node: Optional[DOMNode]) -> Optional[EntryListItem]:
    """Walks up from a child widget to the EntryListItem that owns it."""
    while node is not None and not isinstance(node, EntryListItem):
        node = node.parent
    return node

#
# End of entry_list_item.py
#######################################################################################################################
