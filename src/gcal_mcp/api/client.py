"""
Google Calendar API client: credentials, token files and service creation.

Handles:
- Credentials that report token refreshes through a hook
- Token file read / merge-on-refresh write (per-account lock)
- OAuth client secrets storage
- Calendar service instance creation
"""

import json
import logging
import os
import threading
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error


# OAuth scope required for full Calendar access
SCOPES = ["https://www.googleapis.com/auth/calendar"]

# Errors coming out of the remote API boundary
REMOTE_ERRORS = (HttpError, GoogleAuthError, HttpLib2Error, OSError)


logger = logging.getLogger(__name__)


class RefreshingCredentials(Credentials):
    """
    OAuth2 user credentials with an on-refresh hook.

    google-auth refreshes expired tokens transparently before a request;
    the hook receives the credentials right after each successful refresh.
    """

    _on_refresh: Optional[Callable[["RefreshingCredentials"], None]] = None

    def set_refresh_hook(self, hook: Optional[Callable[["RefreshingCredentials"], None]]) -> None:
        self._on_refresh = hook

    def refresh(self, request) -> None:
        super().refresh(request)
        if self._on_refresh is not None:
            self._on_refresh(self)


def describe_error(error: BaseException) -> str:
    """Provider message for an API error."""
    if isinstance(error, HttpError):
        reason = getattr(error, "reason", None)
        if reason:
            return f"{reason} (HTTP {error.resp.status})"
    return str(error) or error.__class__.__name__


class TokenStore:
    """
    Token files: one authorized-user JSON per account.

    Writes for the same account are serialized.
    """

    def __init__(self, tokens_dir: Path):
        self.tokens_dir = Path(tokens_dir)
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def path_for(self, account_id: str) -> Path:
        return self.tokens_dir / f"{account_id}.json"

    def _lock_for(self, account_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[account_id]

    def account_ids(self) -> list[str]:
        """Accounts with a token file, in sorted file name order."""
        if not self.tokens_dir.is_dir():
            return []
        return [p.stem for p in sorted(self.tokens_dir.glob("*.json"))]

    def read(self, account_id: str) -> dict:
        return json.loads(self.path_for(account_id).read_text(encoding="utf-8"))

    def write(self, account_id: str, data: dict) -> None:
        """Overwrite token file with secure permissions."""
        with self._lock_for(account_id):
            self._write(account_id, data)

    def merge(self, account_id: str, data: dict) -> dict:
        """Merge fields into the existing token file and rewrite it."""
        with self._lock_for(account_id):
            try:
                current = self.read(account_id)
            except (OSError, ValueError):
                current = {}
            merged = {**current, **data}
            self._write(account_id, merged)
            return merged

    def _write(self, account_id: str, data: dict) -> None:
        self.tokens_dir.mkdir(parents=True, exist_ok=True)
        token_path = self.path_for(account_id)
        token_path.write_text(json.dumps(data), encoding="utf-8")
        os.chmod(token_path, 0o600)


def load_oauth_client(path: Path) -> Optional[dict]:
    """Load OAuth client credentials. Returns None if missing or unreadable."""
    if not path.exists():
        return None

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, IOError):
        return None


def save_oauth_client(path: Path, client: dict) -> None:
    """Save OAuth client credentials with secure permissions."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(client, indent=2), encoding="utf-8")
    os.chmod(path, 0o600)


def client_fields(client: Optional[dict]) -> dict:
    """client_id / client_secret / token_uri from an 'installed' or 'web' block."""
    if not client:
        return {}
    config = client.get("installed") or client.get("web") or {}
    fields = {
        "client_id": config.get("client_id"),
        "client_secret": config.get("client_secret"),
        "token_uri": config.get("token_uri"),
    }
    return {k: v for k, v in fields.items() if v}


def credentials_from_token(token: dict, client: Optional[dict] = None) -> RefreshingCredentials:
    """
    Build credentials from a token file's content.

    Client id/secret from the OAuth client file fill in whatever the token
    file lacks.

    Raises ValueError if required fields are missing.
    """
    info = {**client_fields(client), **token}
    return RefreshingCredentials.from_authorized_user_info(info, SCOPES)


def persist_on_refresh(token_store: TokenStore, account_id: str) -> Callable[[Credentials], None]:
    """Refresh hook writing new token fields back to the account's file."""

    def _persist(creds: Credentials) -> None:
        token_store.merge(account_id, json.loads(creds.to_json()))
        logger.info(f"Refreshed token persisted for account '{account_id}'")

    return _persist


def build_service(credentials: Any) -> Resource:
    """Build a Calendar v3 service for credentials."""
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)
