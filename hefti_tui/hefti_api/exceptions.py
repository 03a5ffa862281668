# hefti_tui/hefti_api/exceptions.py
#
#
#######################################################################################################################
#
# Functions:

class HeftiAPIError(Exception):
    """Base exception for hefti_api errors."""
    pass

class APIConnectionError(HeftiAPIError):
    """Raised for network or connection issues."""
    pass

class APITimeoutError(APIConnectionError):
    """Raised when the backend does not answer within the configured timeout."""
    pass

class APIRequestError(HeftiAPIError):
    """Raised for errors in constructing or sending the request (e.g., bad data)."""
    def __init__(self, message: str, response_data: dict = None):
        super().__init__(message)
        self.response_data = response_data or {}

class APIResponseError(HeftiAPIError):
    """Raised for non-2xx responses or issues parsing the response."""
    def __init__(self, status_code: int, message: str, response_data: dict = None):
        super().__init__(f"API Error {status_code}: {message}")
        self.status_code = status_code
        self.response_data = response_data or {}

class AuthenticationError(HeftiAPIError):
    """Raised for authentication failures."""
    pass

#
# End of hefti_tui/hefti_api/exceptions.py
########################################################################################################################
