"""
Google Calendar MCP Server.

FastMCP server exposing multi-account Google Calendar tools over stdio.

Tools (6 total):
- create_event, search_events, list_events: events
- list_calendars: calendars in an account
- set_calendar_defaults, list_calendar_accounts: accounts and defaults

Parameter names are camelCase and parameter types come from gcal_mcp.schemas,
so clients see the same constraints the dispatcher enforces.
"""

from typing import Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from gcal_mcp.dispatcher import ToolDispatcher
from gcal_mcp.errors import CalendarToolError
from gcal_mcp.schemas import (
    TOOL_SCHEMAS,
    AccountId,
    CalendarId,
    EventEnd,
    EventStart,
    MaxResults,
    OptionalAccountId,
    TimeBound,
)


INSTRUCTIONS = """Google Calendar integration. Multi-account support.

ACCOUNTS vs CALENDARS:
- ACCOUNTS = different Google accounts (work, personal). Parameter: accountId="work"
- CALENDARS = calendars within one account. Parameter: calendarId="primary"

Call list_calendar_accounts to see account IDs and the default account.
Without accountId, tools use the default account (or the first one).

TIME FORMAT: '2024-12-15T10:00:00+02:00' (timed) or '2024-12-15' (all-day)"""


def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Create FastMCP server whose tools forward to dispatcher."""
    mcp = FastMCP(name="google-calendar", instructions=INSTRUCTIONS)

    async def forward(tool: str, **arguments) -> str:
        try:
            return await dispatcher.call_tool(
                tool, {k: v for k, v in arguments.items() if v is not None}
            )
        except CalendarToolError as e:
            raise ToolError(e.message) from e

    async def create_event(
        summary: str,
        start: EventStart,
        end: EventEnd,
        accountId: OptionalAccountId = None,
        calendarId: CalendarId = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> str:
        """Create an event; without calendarId the account's default calendar, then 'primary'."""
        return await forward(
            "create_event",
            summary=summary,
            start=start,
            end=end,
            accountId=accountId,
            calendarId=calendarId,
            description=description,
            location=location,
        )

    async def search_events(query: str, accountId: OptionalAccountId = None) -> str:
        """Free text search in the primary calendar."""
        return await forward("search_events", query=query, accountId=accountId)

    async def list_events(
        accountId: OptionalAccountId = None,
        calendarId: CalendarId = None,
        maxResults: MaxResults = 10,
        timeMin: TimeBound = None,
        timeMax: TimeBound = None,
    ) -> str:
        """
        List events ordered by start time.

        Without calendarId, events from all calendars in the account are
        merged. timeMin defaults to 7 days ago.
        """
        return await forward(
            "list_events",
            accountId=accountId,
            calendarId=calendarId,
            maxResults=maxResults,
            timeMin=timeMin,
            timeMax=timeMax,
        )

    async def set_calendar_defaults(accountId: AccountId, calendarId: CalendarId = None) -> str:
        """Set default account; calendarId, if given, becomes that account's default calendar."""
        return await forward("set_calendar_defaults", accountId=accountId, calendarId=calendarId)

    async def list_calendar_accounts() -> str:
        return await forward("list_calendar_accounts")

    async def list_calendars(accountId: AccountId) -> str:
        return await forward("list_calendars", accountId=accountId)

    for fn in (
        create_event,
        search_events,
        list_events,
        set_calendar_defaults,
        list_calendar_accounts,
        list_calendars,
    ):
        _, description = TOOL_SCHEMAS[fn.__name__]
        mcp.tool(description=description)(fn)

    return mcp


def serve(dispatcher: ToolDispatcher) -> None:
    """Run MCP server on stdio until the client disconnects."""
    create_server(dispatcher).run()
