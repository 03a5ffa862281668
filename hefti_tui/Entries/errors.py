# errors.py
# Description: Exceptions raised by the entry rows and their synchronizers.
#
# Imports
from typing import Optional
#
#######################################################################################################################
#
# Functions:

class SyncError(Exception):
    """Base class for row synchronization errors."""
    pass

class ValidationError(SyncError, ValueError):
    """A field value cannot be transmitted (e.g. the duration is not a number)."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

class StateError(SyncError, RuntimeError):
    """A row or synchronizer invariant was violated."""
    pass

class TransportError(SyncError):
    """A create, update or delete request failed or timed out."""
    def __init__(self, operation: str, row_key: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"{operation} failed for row {row_key}{detail}")
        self.operation = operation
        self.row_key = row_key
        self.cause = cause

#
# End of errors.py
#######################################################################################################################
