"""
Tests for the command line entry point.
"""

import json

import pytest

from gcal_mcp import __main__ as cli
from gcal_mcp.settings import Settings


@pytest.fixture
def app_settings(tmp_path, monkeypatch):
    settings = Settings(data_dir=tmp_path)
    monkeypatch.setattr("gcal_mcp.settings.settings", settings)
    return settings


def run(monkeypatch, *argv):
    monkeypatch.setattr("sys.argv", ["gcal-mcp", *argv])
    cli.main()


class TestServe:

    @pytest.mark.parametrize("argv", [("serve",), ()])
    def test_no_credentials_exits_1(self, app_settings, monkeypatch, argv):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, *argv)

        assert exc.value.code == 1

    def test_loaded_accounts_start_server(self, app_settings, monkeypatch):
        app_settings.ensure_dirs()
        app_settings.get_token_path("work").write_text(
            json.dumps({"token": "t", "refresh_token": "r", "client_id": "c", "client_secret": "s"}),
            encoding="utf-8",
        )
        served = []
        monkeypatch.setattr("gcal_mcp.server.serve", served.append)

        run(monkeypatch, "serve")

        assert len(served) == 1
        assert served[0].context.registry.account_ids() == ["work"]


class TestTools:

    def test_prints_catalog(self, app_settings, monkeypatch, capsys):
        run(monkeypatch, "tools")

        tools = json.loads(capsys.readouterr().out)
        assert [tool["name"] for tool in tools] == [
            "create_event",
            "search_events",
            "list_events",
            "set_calendar_defaults",
            "list_calendar_accounts",
            "list_calendars",
        ]


class TestAuth:

    def test_invalid_account_id_exits_1(self, app_settings, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "auth", "../escape")

        assert exc.value.code == 1
        assert not any(app_settings.tokens_dir.iterdir())
