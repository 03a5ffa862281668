# hefti_tui/hefti_api/schemas.py
from datetime import date
from typing import List, Optional, Union, Literal
from pydantic import BaseModel, Field

# Enum-like Literals from the entry form
EntryType = Literal['Betriebliche Tätigkeit', 'Schulung', 'Berufschule']
ENTRY_TYPES: List[str] = ['Betriebliche Tätigkeit', 'Schulung', 'Berufschule']
DEFAULT_ENTRY_TYPE: str = ENTRY_TYPES[0]


# --- Entry Payloads ---
class EntryForm(BaseModel):
    """Body of POST /entry and PUT /entry/{id}."""
    title: str = ""
    logdate: str # YYYY-MM-DD, passed through as typed
    # Free text on the wire; the UI only offers ENTRY_TYPES.
    entry_type: str = DEFAULT_ENTRY_TYPE
    spend_time: float = Field(default=0.0, allow_inf_nan=False) # fractional hours


class EntryRecord(BaseModel):
    """One element of the GET /entry listing."""
    id: Union[int, str]
    title: str = ""
    description: Optional[str] = None
    spend_time: float = 0.0
    logdate: date
    entry_type: str = DEFAULT_ENTRY_TYPE

    @property
    def identifier(self) -> str:
        return str(self.id)


# --- Auth ---
class LoginRequest(BaseModel):
    username: str
    password: str

class LoginUser(BaseModel):
    username: str
    token: str
    image: Optional[str] = None

class LoginResponse(BaseModel):
    user: LoginUser
