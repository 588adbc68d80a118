"""
Google Calendar Events API wrapper.

Handles:
- List events with time range
- Search events by query
- Create event (timed or all-day)
"""

from datetime import datetime, timezone
from typing import Optional


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def list_events(
    service,
    calendar_id: str,
    time_min: Optional[str] = None,
    time_max: Optional[str] = None,
    max_results: int = 10,
) -> list[dict]:
    """
    List events from calendar ordered by start time.

    Recurring events are expanded into single instances.
    """
    params = {
        "calendarId": calendar_id,
        "maxResults": max_results,
        "singleEvents": True,
        "orderBy": "startTime",
    }

    if time_min:
        params["timeMin"] = time_min

    if time_max:
        params["timeMax"] = time_max

    result = service.events().list(**params).execute()
    return result.get("items", [])


def search_events(service, query: str, calendar_id: str = "primary", max_results: int = 10) -> list[dict]:
    """Free-text search (summary, description, location, attendees)."""
    result = service.events().list(
        calendarId=calendar_id,
        q=query,
        maxResults=max_results,
    ).execute()
    return result.get("items", [])


def create_event(
    service,
    calendar_id: str,
    summary: str,
    start: str,
    end: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> dict:
    """
    Create calendar event.

    Date-only start/end ("2024-12-15") create an all-day event.
    Returns created event resource with ID, htmlLink, etc.
    """
    event = {
        "summary": summary,
        "start": _time_field(start),
        "end": _time_field(end),
    }

    if description:
        event["description"] = description

    if location:
        event["location"] = location

    return service.events().insert(calendarId=calendar_id, body=event).execute()


def _is_date_only(dt_string: str) -> bool:
    """Check if string is date-only (no time component)."""
    return "T" not in dt_string


def _time_field(value: str) -> dict:
    if _is_date_only(value):
        return {"date": value}
    return {"dateTime": value}


def event_start(event: dict) -> Optional[str]:
    """Start as given by the API: dateTime for timed events, date for all-day."""
    start = event.get("start") or {}
    return start.get("dateTime") or start.get("date")


def start_instant(event: dict) -> datetime:
    """
    Absolute start time for ordering.

    All-day events start at UTC midnight. Naive timestamps are read as UTC.
    Missing or unparseable starts sort first.
    """
    value = event_start(event)
    if not value:
        return EPOCH

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
