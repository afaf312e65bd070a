"""
Event name suggestion interface.
The suggestion backend is an optional external collaborator.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SuggestionProvider(ABC):

    @abstractmethod
    async def suggest_title(self, description: str, category: Optional[str] = None) -> str:
        """
        Propose an event title for a description.

        Raises:
            UpstreamError: the backend failed or answered without a title
            ServiceUnavailable: no backend is configured
        """
        pass
