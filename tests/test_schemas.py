"""
Tests for tool schemas and the advertised catalog.
"""

import pytest

from gcal_mcp.errors import InvalidArguments, UnknownTool
from gcal_mcp.schemas import TEXT_OUTPUT_SCHEMA, catalog, validate_arguments


class TestValidate:

    def test_defaults_applied(self):
        args = validate_arguments("list_events", {})
        assert args.max_results == 10
        assert args.account_id is None
        assert args.time_min is None

    def test_camel_case_fields(self):
        args = validate_arguments("list_events", {"accountId": "work", "calendarId": "cal-a", "maxResults": 3})
        assert (args.account_id, args.calendar_id, args.max_results) == ("work", "cal-a", 3)

    def test_missing_required_fields_reported(self):
        with pytest.raises(InvalidArguments) as exc:
            validate_arguments("create_event", {"start": "2026-10-20T10:00:00Z"})

        fields = {field for field, _ in exc.value.errors}
        assert fields == {"summary", "end"}
        assert "summary" in str(exc.value)

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidArguments) as exc:
            validate_arguments("list_events", {"maxResults": "5"})
        assert exc.value.errors[0][0] == "maxResults"

    def test_max_results_bounds(self):
        with pytest.raises(InvalidArguments):
            validate_arguments("list_events", {"maxResults": 0})

    def test_start_format_not_checked(self):
        args = validate_arguments("create_event", {"summary": "x", "start": "tomorrow", "end": "later"})
        assert args.start == "tomorrow"

    def test_unknown_fields_ignored(self):
        args = validate_arguments("search_events", {"query": "standup", "extra": 1})
        assert args.query == "standup"

    def test_none_arguments(self):
        validate_arguments("list_calendar_accounts", None)

    def test_unknown_tool(self):
        with pytest.raises(UnknownTool):
            validate_arguments("delete_everything", {})

    def test_error_dict(self):
        with pytest.raises(InvalidArguments) as exc:
            validate_arguments("list_calendars", {})
        data = exc.value.to_dict()
        assert data["error"] == "invalid_arguments"
        assert data["fields"][0]["field"] == "accountId"


class TestCatalog:

    def test_six_tools(self):
        names = {tool["name"] for tool in catalog()}
        assert names == {
            "create_event",
            "search_events",
            "list_events",
            "set_calendar_defaults",
            "list_calendar_accounts",
            "list_calendars",
        }

    def test_input_schemas(self):
        tools = {tool["name"]: tool for tool in catalog()}

        create = tools["create_event"]["inputSchema"]
        assert set(create["required"]) == {"summary", "start", "end"}
        assert "accountId" in create["properties"]

        listing = tools["list_events"]["inputSchema"]
        assert listing["properties"]["maxResults"]["default"] == 10
        assert "required" not in listing

        assert tools["set_calendar_defaults"]["inputSchema"]["required"] == ["accountId"]
        assert tools["list_calendar_accounts"]["inputSchema"].get("properties", {}) == {}

    def test_output_schema(self):
        for tool in catalog():
            assert tool["outputSchema"] == TEXT_OUTPUT_SCHEMA
