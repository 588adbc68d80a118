"""
Google Calendar MCP CLI entry point.

Usage:
    python -m gcal_mcp auth ACCOUNT_ID               # Authorize account (paste code)
    python -m gcal_mcp auth ACCOUNT_ID --local-server  # Authorize via browser redirect
    python -m gcal_mcp tools                         # Print tool catalog as JSON
    python -m gcal_mcp serve                         # Run MCP server (default)
"""

import argparse
import json
import logging
import sys


def configure_logging(level: str) -> None:
    """Log to stderr; stdout carries the MCP stream."""
    logging.basicConfig(
        level=level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    parser = argparse.ArgumentParser(
        prog="gcal-mcp",
        description="Multi-account Google Calendar MCP server"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # auth command
    auth_parser = subparsers.add_parser("auth", help="Authorize an account")
    auth_parser.add_argument("account_id", help="Account ID (e.g., work, personal)")
    auth_parser.add_argument(
        "--local-server",
        action="store_true",
        help="Catch the OAuth redirect on a local port instead of pasting the code"
    )

    # tools command
    subparsers.add_parser("tools", help="Print tool catalog")

    # serve command
    subparsers.add_parser("serve", help="Run MCP server")

    args = parser.parse_args()

    from gcal_mcp.settings import settings
    configure_logging(settings.log_level)

    if args.command == "auth":
        from gcal_mcp.auth import run_auth
        settings.ensure_dirs()
        sys.exit(run_auth(args.account_id, settings, local_server=args.local_server))

    elif args.command == "tools":
        from gcal_mcp.schemas import catalog
        print(json.dumps(catalog(), indent=2))

    elif args.command in ("serve", None):
        # Default to serve if no command given
        from gcal_mcp.auth import load_accounts
        from gcal_mcp.context import ToolContext
        from gcal_mcp.dispatcher import ToolDispatcher
        from gcal_mcp.errors import NoCredentialsFound
        from gcal_mcp.server import serve

        try:
            registry = load_accounts(settings)
        except NoCredentialsFound as e:
            logging.getLogger("gcal_mcp").error(f"Server failed: {e}")
            sys.exit(1)

        context = ToolContext(registry=registry, settings_store=registry.settings_store)
        serve(ToolDispatcher(context))

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
