"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .session_store import SessionStore
from .suggestion_provider import SuggestionProvider

__all__ = ['SessionStore', 'SuggestionProvider']
