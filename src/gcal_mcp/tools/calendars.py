"""
Calendar and account tools: list_calendars, set_calendar_defaults,
list_calendar_accounts.
"""

from googleapiclient.errors import HttpError

from gcal_mcp.api import calendars as calendars_api
from gcal_mcp.context import ToolContext
from gcal_mcp.errors import AccountNotFound, CalendarNotFound
from gcal_mcp.registry import Account
from gcal_mcp.schemas import ListCalendarAccountsArgs, ListCalendarsArgs, SetCalendarDefaultsArgs


def list_calendars(ctx: ToolContext, account: Account, args: ListCalendarsArgs) -> str:
    service = ctx.registry.get_service(account)
    calendars = calendars_api.list_calendars(service)

    if not calendars:
        return "No calendars found"

    default_calendar_id = ctx.settings_store.load().calendar_for(account.account_id)

    lines = []
    for calendar in calendars:
        marker = "* " if default_calendar_id and calendar.get("id") == default_calendar_id else "- "
        lines.append(f"{marker}{calendar.get('summary')} ({calendar.get('id')})")

    return "\n".join(["Available calendars:", *lines, "(* indicates default calendar)"])


def set_calendar_defaults(ctx: ToolContext, args: SetCalendarDefaultsArgs) -> str:
    """
    Store default account and, if given, default calendar.

    The calendar must exist in the account. Nothing is written on failure.
    """
    if args.account_id not in ctx.registry:
        raise AccountNotFound(args.account_id)

    account = ctx.registry.resolve(args.account_id)

    if args.calendar_id:
        service = ctx.registry.get_service(account)
        try:
            calendars_api.get_calendar(service, args.calendar_id)
        except HttpError as e:
            raise CalendarNotFound(args.calendar_id, getattr(e, "reason", None) or str(e)) from e

        ctx.settings_store.update(
            default_account_id=args.account_id,
            default_calendar_id=args.calendar_id,
            default_calendar_account_id=args.account_id,
        )
        return f"Default account set to {args.account_id} and calendar set to {args.calendar_id}"

    ctx.settings_store.update(default_account_id=args.account_id)
    return f"Default account set to {args.account_id}"


def list_calendar_accounts(ctx: ToolContext, args: ListCalendarAccountsArgs) -> str:
    account_ids = ctx.registry.account_ids()
    if not account_ids:
        return "No accounts configured"

    default_id = ctx.settings_store.load().default_account_id
    lines = [f"{'* ' if account_id == default_id else '- '}{account_id}" for account_id in account_ids]

    return "\n".join(["Available accounts:", *lines, "(* indicates default account)"])
