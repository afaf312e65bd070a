"""
Event name suggestions from the optional upstream service.
"""

from fastapi import APIRouter, Depends

from event_buddy.api.deps import parse_fields, request_fields, require_session
from event_buddy.schemas.event import SuggestionRequest, SuggestionResponse
from event_buddy.schemas.user import SessionData
from event_buddy.services.interfaces.suggestion_provider import SuggestionProvider
from event_buddy.services.suggestion_service import get_suggestion_provider

router = APIRouter(tags=["Suggestions"])


@router.post("/suggestEventName", response_model=SuggestionResponse)
async def suggest_event_name_endpoint(
    session: SessionData = Depends(require_session),
    fields: dict = Depends(request_fields),
    provider: SuggestionProvider = Depends(get_suggestion_provider),
):
    request = parse_fields(SuggestionRequest, fields)
    title = await provider.suggest_title(request.description, request.category)
    return SuggestionResponse(title=title)
