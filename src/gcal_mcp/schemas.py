"""
Tool input schemas.

One pydantic model per tool. The same models validate incoming argument
bags and produce the JSON schemas advertised to clients.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from gcal_mcp.errors import InvalidArguments, UnknownTool


class ToolArgs(BaseModel):
    """Base for tool argument models: camelCase on the wire, strict types."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
    )


# Field types shared by the argument models and the server's tool signatures
AccountId = Annotated[str, Field(description="Account ID")]
OptionalAccountId = Annotated[Optional[str], Field(description="Account ID (uses default if not specified)")]
CalendarId = Annotated[Optional[str], Field(description="Calendar ID")]
EventStart = Annotated[str, Field(
    description="'2025-01-01T10:00:00+02:00' for timed events or '2025-01-01' for all-day"
)]
EventEnd = Annotated[str, Field(
    description="'2025-01-01T11:00:00+02:00' for timed events or '2025-01-02' for all-day (exclusive)"
)]
MaxResults = Annotated[int, Field(ge=1, le=2500, description="Maximum number of events to return")]
TimeBound = Annotated[Optional[str], Field(description="RFC3339 timestamp")]


class CreateEventArgs(ToolArgs):
    account_id: OptionalAccountId = None
    calendar_id: CalendarId = None
    summary: str
    description: Optional[str] = None
    location: Optional[str] = None
    start: EventStart
    end: EventEnd


class SearchEventsArgs(ToolArgs):
    account_id: OptionalAccountId = None
    query: str


class ListEventsArgs(ToolArgs):
    account_id: OptionalAccountId = None
    calendar_id: CalendarId = None
    max_results: MaxResults = 10
    time_min: TimeBound = None
    time_max: TimeBound = None


class SetCalendarDefaultsArgs(ToolArgs):
    account_id: AccountId
    calendar_id: CalendarId = None


class ListCalendarsArgs(ToolArgs):
    account_id: AccountId


class ListCalendarAccountsArgs(ToolArgs):
    pass


# Shape of every tool reply
TEXT_OUTPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "content": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["text"]},
                    "text": {"type": "string"},
                },
                "required": ["type", "text"],
            },
        }
    },
    "required": ["content"],
}


TOOL_SCHEMAS: dict[str, tuple[type[ToolArgs], str]] = {
    "create_event": (CreateEventArgs, "Create a new calendar event"),
    "search_events": (SearchEventsArgs, "Search for calendar events"),
    "list_events": (ListEventsArgs, "List calendar events"),
    "set_calendar_defaults": (SetCalendarDefaultsArgs, "Set default account and calendar"),
    "list_calendar_accounts": (ListCalendarAccountsArgs, "List all authenticated Google Calendar accounts"),
    "list_calendars": (ListCalendarsArgs, "List all calendars in an account"),
}


def _field_path(loc: tuple, model: type[ToolArgs]) -> str:
    """Render a pydantic error location with wire (camelCase) names."""
    parts = []
    for item in loc:
        if isinstance(item, str) and item in model.model_fields:
            parts.append(model.model_fields[item].alias or item)
        else:
            parts.append(str(item))
    return ".".join(parts) or "arguments"


def validate_arguments(tool: str, arguments: Optional[dict]) -> ToolArgs:
    """
    Validate an argument bag against the tool's schema.

    Raises:
        UnknownTool: no schema for tool.
        InvalidArguments: one entry per offending field.
    """
    if tool not in TOOL_SCHEMAS:
        raise UnknownTool(tool)

    model, _ = TOOL_SCHEMAS[tool]
    try:
        return model.model_validate(arguments if arguments is not None else {})
    except ValidationError as e:
        errors = [(_field_path(err["loc"], model), err["msg"]) for err in e.errors()]
        raise InvalidArguments(tool, errors) from e


def catalog() -> list[dict]:
    """Tool definitions advertised to clients."""
    return [
        {
            "name": name,
            "description": description,
            "inputSchema": model.model_json_schema(by_alias=True),
            "outputSchema": TEXT_OUTPUT_SCHEMA,
        }
        for name, (model, description) in TOOL_SCHEMAS.items()
    ]
