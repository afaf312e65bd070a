"""
Event name suggestions from an external HTTP service.

Request:  POST SUGGESTION_API_URL {"description": ..., "category": ...}
Response: {"title": "..."} (a "suggestion" key is accepted too)
"""

from typing import Optional

import httpx

from event_buddy.core.config import get_settings
from event_buddy.core.exceptions import ServiceUnavailable, UpstreamError
from event_buddy.core.logging import get_logger
from event_buddy.services.interfaces.suggestion_provider import SuggestionProvider

logger = get_logger(__name__)

MAX_TITLE_LENGTH = 255


class HttpSuggestionProvider(SuggestionProvider):

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def suggest_title(self, description: str, category: Optional[str] = None) -> str:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        payload = {"description": description, "category": category}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error("suggestion_request_failed", url=self.url, error=str(e))
            raise UpstreamError("Event name suggestion failed") from e
        except ValueError as e:
            logger.error("suggestion_response_invalid", url=self.url, error=str(e))
            raise UpstreamError("Event name suggestion failed") from e

        title = ""
        if isinstance(data, dict):
            title = str(data.get("title") or data.get("suggestion") or "").strip()
        if not title:
            raise UpstreamError("Suggestion service returned no title")

        logger.info("suggestion_received", length=len(title))
        return title[:MAX_TITLE_LENGTH]


class DisabledSuggestionProvider(SuggestionProvider):
    """Used when SUGGESTION_API_URL is not set."""

    async def suggest_title(self, description: str, category: Optional[str] = None) -> str:
        raise ServiceUnavailable("Event name suggestions are not configured")


def get_suggestion_provider() -> SuggestionProvider:
    settings = get_settings()
    if not settings.SUGGESTION_API_URL:
        return DisabledSuggestionProvider()
    return HttpSuggestionProvider(
        url=settings.SUGGESTION_API_URL,
        api_key=settings.SUGGESTION_API_KEY,
        timeout=settings.SUGGESTION_TIMEOUT,
    )
