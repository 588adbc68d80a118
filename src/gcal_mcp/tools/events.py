"""
Event tools: create_event, search_events, list_events.

Each takes the call context, the resolved account and validated arguments,
and returns the reply text.
"""

from datetime import timedelta

from googleapiclient.errors import HttpError

from gcal_mcp.api import calendars as calendars_api
from gcal_mcp.api import events as events_api
from gcal_mcp.context import ToolContext
from gcal_mcp.errors import CalendarNotFound
from gcal_mcp.registry import Account
from gcal_mcp.schemas import CreateEventArgs, ListEventsArgs, SearchEventsArgs


# Lower bound for list_events when timeMin is not given
DEFAULT_LOOKBACK = timedelta(days=7)

SEARCH_PAGE_SIZE = 10


def default_calendar_for(ctx: ToolContext, account: Account) -> str:
    """Stored default calendar if it belongs to this account, else 'primary'."""
    return ctx.settings_store.load().calendar_for(account.account_id) or "primary"


def create_event(ctx: ToolContext, account: Account, args: CreateEventArgs) -> str:
    service = ctx.registry.get_service(account)
    calendar_id = args.calendar_id or default_calendar_for(ctx, account)

    event = events_api.create_event(
        service,
        calendar_id=calendar_id,
        summary=args.summary,
        start=args.start,
        end=args.end,
        description=args.description,
        location=args.location,
    )
    return f"Created event: {event.get('htmlLink')}"


def search_events(ctx: ToolContext, account: Account, args: SearchEventsArgs) -> str:
    service = ctx.registry.get_service(account)
    items = events_api.search_events(service, args.query, max_results=SEARCH_PAGE_SIZE)

    lines = [
        f"{item.get('summary') or 'Untitled'} ({events_api.event_start(item)})"
        for item in items
    ]
    return "\n".join([f"Found {len(items)} events:", *lines])


def list_events(ctx: ToolContext, account: Account, args: ListEventsArgs) -> str:
    """
    List events from one calendar, or merged across all calendars.

    Without calendarId every calendar in the account is queried, results are
    merged, sorted by start instant and cut to maxResults.
    """
    service = ctx.registry.get_service(account)
    time_min = args.time_min or (ctx.clock() - DEFAULT_LOOKBACK).isoformat()

    if args.calendar_id:
        try:
            calendars_api.get_calendar(service, args.calendar_id)
        except HttpError as e:
            raise CalendarNotFound(args.calendar_id, getattr(e, "reason", None) or str(e)) from e

        items = events_api.list_events(
            service,
            args.calendar_id,
            time_min=time_min,
            time_max=args.time_max,
            max_results=args.max_results,
        )
        lines = [
            f"- {item.get('summary') or 'Untitled'} ({events_api.event_start(item)})"
            for item in items
        ]
        header = f"Events for calendar {args.calendar_id} in account {account.account_id}:"
        return "\n".join([header, *lines])

    collected = []
    for calendar in calendars_api.list_calendars(service):
        calendar_id = calendar.get("id")
        if not calendar_id:
            continue

        items = events_api.list_events(
            service,
            calendar_id,
            time_min=time_min,
            time_max=args.time_max,
            max_results=args.max_results,
        )
        collected.extend((calendar.get("summary"), item) for item in items)

    collected.sort(key=lambda pair: events_api.start_instant(pair[1]))
    collected = collected[:args.max_results]

    lines = [
        f"- [{calendar_name}] {item.get('summary') or 'Untitled'} ({events_api.event_start(item)})"
        for calendar_name, item in collected
    ]
    header = f"Events across all calendars for account {account.account_id}:"
    return "\n".join([header, *lines])
