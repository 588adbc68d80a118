"""
Calendar tools: events (create, search, list), calendars and accounts.
"""

from gcal_mcp.tools.events import create_event, search_events, list_events
from gcal_mcp.tools.calendars import list_calendars, set_calendar_defaults, list_calendar_accounts

__all__ = [
    "create_event",
    "search_events",
    "list_events",
    "list_calendars",
    "set_calendar_defaults",
    "list_calendar_accounts",
]
