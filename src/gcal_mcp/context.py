"""
Shared state handed to every tool call.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from gcal_mcp.registry import CredentialRegistry
from gcal_mcp.store import SettingsStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ToolContext:
    """Registry, settings store and clock used by calendar operations."""

    registry: CredentialRegistry
    settings_store: SettingsStore
    clock: Callable[[], datetime] = field(default=utcnow)
