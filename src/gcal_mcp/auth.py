"""
Account authorization and startup loading.

Handles:
- Interactive authorization of a new account (auth <account-id>)
- OAuth client credentials input
- Loading every persisted token into the credential registry
"""

import json
import logging
import re
import sys
from typing import Callable, Optional

from google_auth_oauthlib.flow import InstalledAppFlow

from gcal_mcp.api.client import (
    SCOPES,
    TokenStore,
    build_service,
    credentials_from_token,
    load_oauth_client,
    persist_on_refresh,
    save_oauth_client,
)
from gcal_mcp.errors import AuthorizationError, NoCredentialsFound
from gcal_mcp.registry import CredentialRegistry
from gcal_mcp.settings import Settings
from gcal_mcp.store import SettingsStore


logger = logging.getLogger(__name__)


ACCOUNT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._@-]{1,64}$")


def print_success(text: str) -> None:
    """Print success message."""
    print(f"✓ {text}", file=sys.stderr)


def print_error(text: str) -> None:
    """Print error message."""
    print(f"✗ {text}", file=sys.stderr)


def validate_account_id(account_id: str) -> str:
    """Account IDs become file names: letters, digits and . _ @ - only."""
    if not account_id or not ACCOUNT_ID_PATTERN.match(account_id) or account_id.startswith("."):
        raise AuthorizationError(
            f"Invalid account ID '{account_id}'. "
            "Use 1-64 letters, digits, '.', '_', '@' or '-'."
        )
    return account_id


def collect_oauth_client(read_line: Callable[[], str] = input) -> dict:
    """
    Collect OAuth client JSON from user input.

    User pastes JSON from Google Cloud Console, then an empty line.
    """
    print("Paste OAuth client JSON from Google Cloud Console.", file=sys.stderr)
    print("(Get it from: APIs & Services → Credentials → OAuth 2.0 Client IDs)", file=sys.stderr)
    print("Press Enter on an empty line when done:\n", file=sys.stderr)

    lines = []
    while True:
        try:
            line = read_line()
        except EOFError:
            break
        if line == "":
            break
        lines.append(line)

    json_text = "".join(lines)
    if not json_text.strip():
        raise AuthorizationError("No JSON provided")

    try:
        client = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise AuthorizationError(f"Invalid JSON: {e}")

    if not isinstance(client, dict) or ("installed" not in client and "web" not in client):
        raise AuthorizationError(
            "Invalid OAuth client JSON. "
            "Expected 'installed' or 'web' application credentials."
        )

    return client


def ensure_oauth_client(settings: Settings, read_line: Callable[[], str] = input) -> dict:
    """Return stored OAuth client config, asking the operator for it if absent."""
    client = load_oauth_client(settings.oauth_client_path)
    if client:
        return client

    client = collect_oauth_client(read_line)
    save_oauth_client(settings.oauth_client_path, client)
    print_success("OAuth client saved")
    return client


def authorize_account(
    account_id: str,
    settings: Settings,
    local_server: bool = False,
    read_line: Callable[[], str] = input,
) -> TokenStore:
    """
    Obtain and persist a token for account_id.

    Default flow prints the authorization URL and waits for the one-time
    code. local_server=True lets a loopback server catch the redirect instead.

    Raises AuthorizationError on invalid input or a failed code exchange.
    """
    validate_account_id(account_id)
    client = ensure_oauth_client(settings, read_line)

    flow = InstalledAppFlow.from_client_config(client, SCOPES)

    if local_server:
        creds = flow.run_local_server(
            port=0,
            access_type="offline",
            prompt="consent",
            authorization_prompt_message=f"Authorize Google Calendar for '{account_id}' in browser...\n{{url}}",
            success_message="Authorization complete. You can close this window.",
        )
    else:
        flow.redirect_uri = settings.oauth_redirect_uri
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        print(f"Please authorize this app by visiting: {auth_url}", file=sys.stderr)

        print("Enter the authorization code: ", end="", file=sys.stderr, flush=True)
        code = read_line().strip()
        if not code:
            raise AuthorizationError("No authorization code provided")

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            raise AuthorizationError(f"Code exchange failed: {e}") from e
        creds = flow.credentials

    token_store = TokenStore(settings.tokens_dir)
    token_store.write(account_id, json.loads(creds.to_json()))
    logger.info(f"Token saved for account '{account_id}' at {token_store.path_for(account_id)}")
    return token_store


def run_auth(account_id: str, settings: Settings, local_server: bool = False) -> int:
    """
    Auth command entry point.

    Returns exit code (0 = success, 1 = error).
    """
    try:
        authorize_account(account_id, settings, local_server=local_server)
    except AuthorizationError as e:
        print_error(f"Authentication failed: {e}")
        return 1

    print_success(f"Successfully authenticated {account_id}")
    return 0


def load_accounts(
    settings: Settings,
    service_factory: Callable = build_service,
    settings_store: Optional[SettingsStore] = None,
) -> CredentialRegistry:
    """
    Build the credential registry from persisted token files.

    Accounts register in sorted file name order. Each credential writes
    refreshed tokens back to its own file.

    Raises NoCredentialsFound if no token file exists or none is readable.
    """
    token_store = TokenStore(settings.tokens_dir)
    account_ids = token_store.account_ids()

    if not account_ids:
        raise NoCredentialsFound(settings.tokens_dir)

    if settings_store is None:
        settings_store = SettingsStore(settings.settings_path)

    client = load_oauth_client(settings.oauth_client_path)
    registry = CredentialRegistry(settings_store, service_factory)

    for account_id in account_ids:
        try:
            creds = credentials_from_token(token_store.read(account_id), client)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping account '{account_id}': unreadable token file ({e})")
            continue

        creds.set_refresh_hook(persist_on_refresh(token_store, account_id))
        registry.register(account_id, creds)

    if not len(registry):
        raise NoCredentialsFound(settings.tokens_dir)

    logger.info(f"Loaded {len(registry)} account(s): {', '.join(registry.account_ids())}")
    return registry
