# hefti_tui/hefti_api/__init__.py
from .client import HeftiAPIClient
from .exceptions import (
    HeftiAPIError, APIConnectionError, APITimeoutError, APIRequestError,
    APIResponseError, AuthenticationError
)
from .schemas import (
    EntryForm, EntryRecord, LoginRequest, LoginResponse, LoginUser,
    EntryType, ENTRY_TYPES, DEFAULT_ENTRY_TYPE # Export Enums/Literals
)

__all__ = [
    "HeftiAPIClient",
    "HeftiAPIError", "APIConnectionError", "APITimeoutError", "APIRequestError",
    "APIResponseError", "AuthenticationError",
    "EntryForm", "EntryRecord", "LoginRequest", "LoginResponse", "LoginUser",
    "EntryType", "ENTRY_TYPES", "DEFAULT_ENTRY_TYPE",
]
