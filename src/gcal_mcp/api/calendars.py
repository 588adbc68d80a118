"""
Google Calendar Calendars API wrapper.

Handles:
- List calendars (accessible by user)
- Get calendar details
"""


def list_calendars(service) -> list[dict]:
    """
    List all calendars accessible by user, following pagination.

    Returns calendarList entries as provided (id, summary, primary, ...).
    """
    calendars = []
    page_token = None

    while True:
        params = {}
        if page_token:
            params["pageToken"] = page_token

        result = service.calendarList().list(**params).execute()
        calendars.extend(result.get("items", []))

        page_token = result.get("nextPageToken")
        if not page_token:
            break

    return calendars


def get_calendar(service, calendar_id: str) -> dict:
    """Get calendar metadata. Raises HttpError if the calendar is not accessible."""
    return service.calendars().get(calendarId=calendar_id).execute()
