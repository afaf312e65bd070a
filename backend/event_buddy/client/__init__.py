from event_buddy.client.api_client import ApiError, EventBuddyClient

__all__ = ["ApiError", "EventBuddyClient"]
