"""Event Buddy: event creation and RSVP API."""

__version__ = "1.0.0"
