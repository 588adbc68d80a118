"""
Shared fixtures: stub Calendar service, settings store, dispatcher.
"""

import asyncio
import json
import threading
import time
from datetime import datetime, timezone

import httplib2
import pytest
from googleapiclient.errors import HttpError

from gcal_mcp.context import ToolContext
from gcal_mcp.dispatcher import ToolDispatcher
from gcal_mcp.registry import CredentialRegistry
from gcal_mcp.store import SettingsStore


FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def http_error(status: int, message: str) -> HttpError:
    """HttpError as googleapiclient raises it."""
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(resp, content)


class FakeRequest:
    def __init__(self, service, method, params):
        self.service = service
        self.method = method
        self.params = params

    def execute(self):
        return self.service.handle(self.method, self.params)


class FakeResource:
    def __init__(self, service, name):
        self._service = service
        self._name = name

    def __getattr__(self, method):
        def call(**params):
            return FakeRequest(self._service, f"{self._name}.{method}", params)
        return call


class FakeCalendarService:
    """
    Stand-in for the Calendar v3 resource.

    Records every executed request in calls. With delay set, each request
    sleeps that long and max_active tracks how many overlapped.
    """

    def __init__(self, calendar_items=None, events_by_calendar=None):
        self.calendar_items = calendar_items or []
        self.events_by_calendar = events_by_calendar or {}
        self.failures = {}
        self.calls = []
        self.delay = 0
        self.active = 0
        self.max_active = 0
        self._active_lock = threading.Lock()

    def calendarList(self):
        return FakeResource(self, "calendarList")

    def calendars(self):
        return FakeResource(self, "calendars")

    def events(self):
        return FakeResource(self, "events")

    def calls_to(self, method):
        return [params for name, params in self.calls if name == method]

    def handle(self, method, params):
        with self._active_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            return self._respond(method, params)
        finally:
            with self._active_lock:
                self.active -= 1

    def _respond(self, method, params):
        self.calls.append((method, params))

        if method in self.failures:
            raise self.failures[method]

        if method == "calendarList.list":
            return {"items": list(self.calendar_items)}

        if method == "calendars.get":
            calendar_id = params["calendarId"]
            known = {c["id"] for c in self.calendar_items} | {"primary"}
            if calendar_id not in known:
                raise http_error(404, "Not Found")
            return {"id": calendar_id}

        if method == "events.list":
            items = self.events_by_calendar.get(params["calendarId"], [])
            return {"items": items[:params.get("maxResults", 250)]}

        if method == "events.insert":
            body = params["body"]
            return {
                "id": "evt123",
                "htmlLink": f"https://calendar.google.com/event?eid=evt123&cal={params['calendarId']}",
                **body,
            }

        raise AssertionError(f"Unexpected call {method}")


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def service():
    return FakeCalendarService(
        calendar_items=[
            {"id": "cal-a", "summary": "Cal A"},
            {"id": "cal-b", "summary": "Cal B"},
        ]
    )


@pytest.fixture
def factory_calls():
    return []


@pytest.fixture
def registry(store, service, factory_calls):
    def factory(credentials):
        factory_calls.append(credentials)
        return service

    registry = CredentialRegistry(store, factory)
    registry.register("work", "work-creds")
    registry.register("personal", "personal-creds")
    return registry


@pytest.fixture
def dispatcher(registry, store):
    context = ToolContext(registry=registry, settings_store=store, clock=lambda: FIXED_NOW)
    return ToolDispatcher(context)


def call(dispatcher, name, arguments=None):
    """Run a tool call to completion."""
    return asyncio.run(dispatcher.call_tool(name, arguments))
