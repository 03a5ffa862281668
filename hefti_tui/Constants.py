# Constants.py
# Description: Constants for the application
#
# Imports
#
# 3rd-Party Imports
#
# Local Imports
#
########################################################################################################################
#
# Functions:

# --- Widget IDs ---
ENTRIES_WINDOW_ID = "entries-window"
ENTRIES_LIST_ID = "entries-list"
ADD_ENTRY_BUTTON_ID = "add-entry-button"
LOG_DISPLAY_ID = "app-log-display"
WEEKLY_REPORT_BUTTON_ID = "weekly-report-button"

# --- Weekly report screen IDs ---
REPORT_TITLE_ID = "report-title"
REPORT_BODY_ID = "report-body"
REPORT_TOTAL_ID = "report-total"
REPORT_PREV_BUTTON_ID = "report-prev-week"
REPORT_NEXT_BUTTON_ID = "report-next-week"
REPORT_CLOSE_BUTTON_ID = "report-close"

# --- Row field names (Input/Select `name=` values) ---
FIELD_TITLE = "title"
FIELD_DURATION = "duration"
FIELD_ENTRY_TYPE = "entry_type"
FIELD_LOG_DATE = "log_date"
REMOVE_BUTTON_NAME = "remove"

# --- CSS definition ---
css_content = """
Screen { layout: vertical; }
Header { dock: top; height: 1; background: $accent-darken-1; }
Footer { dock: bottom; height: 1; background: $accent-darken-1; }

#entries-window { height: 1fr; width: 100%; }
#entries-toolbar { height: 3; padding: 0 1; }
#entries-list { height: 1fr; border: round $primary; }

EntryListItem { height: auto; padding: 0 1; }
EntryListItem > Horizontal { height: auto; }
EntryListItem .entry-title { width: 4fr; }
EntryListItem .entry-duration { width: 10; }
EntryListItem .entry-type { width: 28; }
EntryListItem .entry-date { width: 14; }
EntryListItem .entry-remove-button { width: 5; min-width: 5; }
EntryListItem.-invalid .entry-duration { border: tall $error; }

#logs-collapsible { height: auto; max-height: 14; }
#app-log-display { height: 10; border: round $primary-darken-2; }
"""

#
# End of Constants.py
#######################################################################################################################
