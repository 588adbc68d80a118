"""
Tool dispatcher.

Runs one tool call through validation, account resolution and execution:

    RECEIVED -> VALIDATED -> AUTH_RESOLVED -> EXECUTED -> RESPONDED

Any step may end in FAILED. Calendar calls run in a worker thread so a
request waiting on the network does not block the event loop.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from gcal_mcp.api.client import REMOTE_ERRORS, describe_error
from gcal_mcp.context import ToolContext
from gcal_mcp.errors import CalendarToolError, RemoteOperationFailed
from gcal_mcp.schemas import validate_arguments
from gcal_mcp.tools import calendars, events


logger = logging.getLogger(__name__)


class CallState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    AUTH_RESOLVED = "auth_resolved"
    EXECUTED = "executed"
    RESPONDED = "responded"
    FAILED = "failed"


# Operations run against a resolved account
ACCOUNT_TOOLS: dict[str, tuple[Callable, str]] = {
    "create_event": (events.create_event, "create event"),
    "search_events": (events.search_events, "search events"),
    "list_events": (events.list_events, "list events"),
    "list_calendars": (calendars.list_calendars, "list calendars"),
}

# Operations that handle accounts themselves
CONTEXT_TOOLS: dict[str, tuple[Callable, str]] = {
    "set_calendar_defaults": (calendars.set_calendar_defaults, "set calendar defaults"),
    "list_calendar_accounts": (calendars.list_calendar_accounts, "list calendar accounts"),
}


class ToolDispatcher:
    """Entry point for tool calls coming from the MCP server."""

    def __init__(self, context: ToolContext):
        self.context = context

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> str:
        """
        Execute a tool call and return its reply text.

        Raises:
            CalendarToolError: UnknownTool, InvalidArguments, AccountNotFound,
                NoAccountsConfigured, CalendarNotFound or RemoteOperationFailed.
        """
        state = CallState.RECEIVED
        try:
            args = validate_arguments(name, arguments)
            state = self._advance(name, state, CallState.VALIDATED)

            if name in CONTEXT_TOOLS:
                operation, action = CONTEXT_TOOLS[name]
                account_id = getattr(args, "account_id", None)
                text = await self._execute(action, account_id, operation, self.context, args)
            else:
                operation, action = ACCOUNT_TOOLS[name]
                account = self.context.registry.resolve(args.account_id)
                state = self._advance(name, state, CallState.AUTH_RESOLVED)
                text = await self._execute(
                    action, account.account_id, operation, self.context, account, args
                )

            state = self._advance(name, state, CallState.EXECUTED)
            self._advance(name, state, CallState.RESPONDED)
            return text

        except CalendarToolError as e:
            state = self._advance(name, state, CallState.FAILED)
            logger.warning(f"Tool {name} {state.value}: {e}")
            raise

    async def _execute(self, action: str, account_id: Optional[str], operation: Callable, *args) -> str:
        try:
            return await asyncio.to_thread(self._run, account_id, operation, *args)
        except REMOTE_ERRORS as e:
            raise RemoteOperationFailed(action, describe_error(e)) from e

    def _run(self, account_id: Optional[str], operation: Callable, *args) -> str:
        """Run operation in the worker thread, one call per account at a time."""
        if account_id is None:
            return operation(*args)
        with self.context.registry.call_lock(account_id):
            return operation(*args)

    def _advance(self, name: str, current: CallState, target: CallState) -> CallState:
        logger.debug(f"{name}: {current.value} -> {target.value}")
        return target
