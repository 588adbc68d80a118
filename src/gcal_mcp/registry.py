"""
Credential registry for multi-account support.

Maps account IDs to credentials and resolves which account a tool call
runs against.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from gcal_mcp.errors import AccountNotFound, NoAccountsConfigured
from gcal_mcp.store import SettingsStore


logger = logging.getLogger(__name__)


@dataclass
class Account:
    """One authorized Google account."""

    account_id: str
    credentials: Any


class CredentialRegistry:
    """
    Ordered account ID -> credentials mapping.

    Registration order matters: it is the last fallback when no account is
    given and no usable default is stored.
    """

    def __init__(self, settings_store: SettingsStore, service_factory: Callable[[Any], Any]):
        self.settings_store = settings_store
        self.service_factory = service_factory
        self._accounts: dict[str, Account] = {}
        self._services: dict[str, Any] = {}
        self._services_lock = threading.Lock()
        self._call_locks: dict[str, threading.Lock] = {}

    def register(self, account_id: str, credentials: Any) -> Account:
        account = Account(account_id=account_id, credentials=credentials)
        self._accounts[account_id] = account
        with self._services_lock:
            self._services.pop(account_id, None)
        logger.debug(f"Registered account '{account_id}'")
        return account

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def account_ids(self) -> list[str]:
        """Account IDs in registration order."""
        return list(self._accounts)

    def resolve(self, account_id: Optional[str] = None) -> Account:
        """
        Find the account a call should use.

        An explicit ID must be registered. Without one: stored default
        account (if registered), then first registered account.

        Raises:
            AccountNotFound: explicit ID not registered.
            NoAccountsConfigured: nothing registered.
        """
        if account_id:
            account = self._accounts.get(account_id)
            if account is None:
                raise AccountNotFound(account_id)
            return account

        default_id = self.settings_store.load().default_account_id
        if default_id and default_id in self._accounts:
            return self._accounts[default_id]

        if not self._accounts:
            raise NoAccountsConfigured()

        return next(iter(self._accounts.values()))

    def get_service(self, account: Account) -> Any:
        """Get Calendar API service for account, built once and cached."""
        with self._services_lock:
            service = self._services.get(account.account_id)
            if service is None:
                service = self.service_factory(account.credentials)
                self._services[account.account_id] = service
            return service

    def call_lock(self, account_id: str) -> threading.Lock:
        """
        Lock held while a call uses account_id's service.

        The cached service shares one httplib2.Http, which is not thread-safe.
        """
        with self._services_lock:
            return self._call_locks.setdefault(account_id, threading.Lock())
