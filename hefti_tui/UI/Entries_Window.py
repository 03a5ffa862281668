# Entries_Window.py
# Description: This file contains the UI components for the Entries Window
#
# Imports
from typing import TYPE_CHECKING
#
# 3rd-Party Imports
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, ListView, Static
#
# Local Imports
from ..Constants import ADD_ENTRY_BUTTON_ID, ENTRIES_LIST_ID, WEEKLY_REPORT_BUTTON_ID
#
if TYPE_CHECKING:
    from ..app import HeftiApp
#
#######################################################################################################################
#
# Functions:

class EntriesWindow(Container):
    """
    Container for the list of time entries and its toolbar.
    """
    def __init__(self, app_instance: 'HeftiApp', **kwargs):
        super().__init__(**kwargs)
        self.app_instance = app_instance

    def compose(self) -> ComposeResult:
        with Horizontal(id="entries-toolbar"):
            yield Button("Add Entry", id=ADD_ENTRY_BUTTON_ID, variant="primary")
            yield Button("Weekly Report", id=WEEKLY_REPORT_BUTTON_ID)
            yield Static()  # Spacer
        yield ListView(id=ENTRIES_LIST_ID)

#
# End of Entries_Window.py
#######################################################################################################################
