# hefti_tui/hefti_api/client.py
#
#
# Imports
import json
from typing import Optional, Dict, Any, List
#
# 3rd-party Libraries
import httpx
from loguru import logger
#
# Local Imports
from .schemas import EntryForm, EntryRecord, LoginRequest, LoginResponse
from .exceptions import (
    APIConnectionError, APIRequestError, APIResponseError, APITimeoutError, AuthenticationError
)
#
########################################################################################################################
#
# Functions:

ENTRY_ENDPOINT = "/entry"
LOGIN_ENDPOINT = "/auth/login"


class HeftiAPIClient:
    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        # Tests hand in an httpx.MockTransport here
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        client = await self._get_client()
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            response = await client.request(method, endpoint, json=json_body)
            response.raise_for_status()  # Raises HTTPStatusError for 4xx/5xx
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as e:
            error_detail = str(e)
            response_data = None
            try:
                response_data = e.response.json()
                if isinstance(response_data, dict) and isinstance(response_data.get("detail"), str):
                    error_detail = response_data["detail"]
            except ValueError:
                pass # Body is not JSON, keep the status line as detail

            if e.response.status_code == 401:
                raise AuthenticationError(f"Authentication failed: {error_detail}")
            elif e.response.status_code == 422:
                raise APIRequestError(f"Validation Error: {error_detail}", response_data=response_data)
            raise APIResponseError(e.response.status_code, error_detail, response_data=response_data)
        except httpx.TimeoutException as e:
            raise APITimeoutError(f"Timed out talking to {url}: {e}")
        except httpx.RequestError as e: # Covers ConnectError, ReadError, etc.
            raise APIConnectionError(f"Connection error to {url}: {e}")
        except json.JSONDecodeError:
            raise APIResponseError(response.status_code, "Failed to decode JSON response", response_data={"raw_text": response.text})

    async def login(self, username: str, password: str) -> LoginResponse:
        """Exchanges credentials for a bearer token and uses it for all later requests."""
        body = LoginRequest(username=username, password=password).model_dump()
        response_dict = await self._request("POST", LOGIN_ENDPOINT, json_body=body)
        if not isinstance(response_dict, dict):
            raise APIResponseError(200, "Unexpected login response", response_data={"raw": response_dict})
        login_response = LoginResponse(**response_dict)
        self.token = login_response.user.token
        # Headers are fixed per AsyncClient, so drop the old one
        await self.close()
        logger.info(f"Logged in as '{login_response.user.username}'")
        return login_response

    async def list_entries(self) -> List[EntryRecord]:
        response_list = await self._request("GET", ENTRY_ENDPOINT)
        if not isinstance(response_list, list):
            raise APIResponseError(200, "Expected a list of entries", response_data={"raw": response_list})
        return [EntryRecord(**item) for item in response_list]

    async def create_entry(self, form: EntryForm) -> str:
        """POST /entry. The backend answers with the bare identifier of the new entry."""
        new_id = await self._request("POST", ENTRY_ENDPOINT, json_body=form.model_dump(mode="json"))
        if new_id is None or isinstance(new_id, (dict, list)) or not str(new_id).strip():
            raise APIResponseError(200, "Create did not return an identifier", response_data={"raw": new_id})
        return str(new_id)

    async def update_entry(self, entry_id: str, form: EntryForm) -> None:
        await self._request("PUT", f"{ENTRY_ENDPOINT}/{entry_id}", json_body=form.model_dump(mode="json"))

    async def delete_entry(self, entry_id: str) -> None:
        await self._request("DELETE", f"{ENTRY_ENDPOINT}/{entry_id}")

#
# End of client.py
########################################################################################################################
