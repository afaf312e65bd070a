"""
Async client for the Event Buddy API.

Mirrors what the mobile app does: keeps the session cookie between calls,
unwraps the `{success, ...}` envelope and raises ApiError when a call
fails. Event images given as local paths are uploaded first; a failed
upload does not stop the event from being saved.
"""

import mimetypes
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from event_buddy.core.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error


class EventBuddyClient:

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.email: Optional[str] = None

    async def __aenter__(self) -> "EventBuddyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _handle(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(
                f"Failed to parse response (status {response.status_code})",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise ApiError("Unexpected response shape", status_code=response.status_code)

        if response.is_error or not data.get("success", False):
            message = data.get("message") or response.reason_phrase or "Request failed"
            raise ApiError(message, status_code=response.status_code, error=data.get("error"))
        return data

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("api_request_failed", method=method, path=path, error=str(e))
            raise ApiError(f"Could not reach server: {e}") from e
        return self._handle(response)

    # Accounts

    async def register(self, email: str, password: str) -> dict:
        await self._request("GET", "/signup", params={"email": email, "pass": password})
        return {"success": True, "email": email}

    async def login(self, email: str, password: str) -> dict:
        data = await self._request("GET", "/signin", params={"email": email, "pass": password})
        self.email = email
        return {"success": True, "email": email, "isLoggedIn": data.get("login", False)}

    async def logout(self) -> dict:
        data = await self._request("GET", "/signout")
        self.email = None
        return data

    # Events

    async def fetch_events(self) -> list[dict]:
        data = await self._request("GET", "/")
        return data.get("events") or []

    async def fetch_sorted_events(self, ascending: bool = True) -> list[dict]:
        data = await self._request("GET", "/sortedEvents", params={"ascending": str(ascending).lower()})
        return data.get("events") or []

    async def fetch_event(self, our_id: Union[str, int]) -> dict:
        data = await self._request("POST", "/getSpecificEvent", json={"ourId": str(our_id)})
        event = data.get("event")
        if not event:
            raise ApiError("Event not found", status_code=404)
        return event

    async def fetch_created_events(self) -> list[dict]:
        data = await self._request("GET", "/myCreatedEvents")
        return data.get("createdEvents") or []

    async def fetch_joined_events(self) -> list[dict]:
        data = await self._request("GET", "/myJoinedEvents")
        return data.get("joinedEvents") or []

    async def _with_uploaded_image(self, event_data: dict[str, Any]) -> dict[str, Any]:
        payload = dict(event_data)
        image_path = payload.pop("image_path", None) or payload.pop("imagePath", None)
        if image_path:
            try:
                upload = await self.upload_image(image_path)
                payload["image"] = upload["imageUrl"]
            except (ApiError, OSError) as e:
                logger.warning("image_upload_skipped", error=str(e))
        return payload

    async def create_event(self, event_data: dict[str, Any]) -> dict:
        payload = await self._with_uploaded_image(event_data)
        data = await self._request("POST", "/addEvent", json=payload)
        return data["event"]

    async def update_event(self, our_id: Union[str, int], event_data: dict[str, Any]) -> dict:
        if not our_id or not event_data:
            raise ApiError("Missing event data or ID")
        payload = await self._with_uploaded_image(event_data)
        data = await self._request("POST", "/updateSpecificEvent", params={"ourId": str(our_id)}, json=payload)
        return data["event"]

    async def delete_event(self, our_id: Union[str, int]) -> dict:
        if not our_id:
            raise ApiError("Missing event ID")
        return await self._request("POST", "/deleteSpecificEvent", params={"ourId": str(our_id)})

    async def join_event(self, our_id: Union[str, int]) -> dict:
        return await self._request("POST", "/joinEvent", json={"ourId": str(our_id)})

    async def leave_event(self, our_id: Union[str, int]) -> dict:
        return await self._request("POST", "/leaveEvent", json={"ourId": str(our_id)})

    # Extras

    async def upload_image(self, path: Union[str, Path]) -> dict:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        files = {"image": (path.name, path.read_bytes(), content_type)}
        return await self._request("POST", "/upload-image", files=files)

    async def suggest_event_name(self, description: str, category: Optional[str] = None) -> str:
        data = await self._request(
            "POST",
            "/suggestEventName",
            json={"description": description, "category": category},
        )
        return data["title"]
