"""
Central API router that aggregates all route modules.
Routes sit at the root path because the mobile client calls them there.
"""

from fastapi import APIRouter
from event_buddy.api.routes import auth, events, memberships, uploads, suggestions

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(memberships.router)
api_router.include_router(uploads.router)
api_router.include_router(suggestions.router)
