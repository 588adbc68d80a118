"""
Default account / calendar settings store.

Handles:
- Loading the settings record (missing or corrupt file reads as empty)
- Full overwrite on save
- Serialized read-modify-write for updates
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel


logger = logging.getLogger(__name__)


class CalendarDefaults(BaseModel):
    """
    Persisted defaults.

    The default calendar is tied to the account it was chosen in. Records
    written without default_calendar_account_id attribute the calendar to
    the default account.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    default_account_id: Optional[str] = None
    default_calendar_id: Optional[str] = None
    default_calendar_account_id: Optional[str] = None

    @property
    def calendar_owner(self) -> Optional[str]:
        if not self.default_calendar_id:
            return None
        return self.default_calendar_account_id or self.default_account_id

    def calendar_for(self, account_id: str) -> Optional[str]:
        """Stored default calendar if it was chosen in account_id."""
        if self.calendar_owner == account_id:
            return self.default_calendar_id
        return None


_UNSET = object()


class SettingsStore:
    """JSON file backed store for CalendarDefaults."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> CalendarDefaults:
        """Load settings. Returns an empty record on any read/parse failure."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return CalendarDefaults.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.debug(f"No usable settings at {self.path}: {e}")
            return CalendarDefaults()

    def save(self, record: CalendarDefaults) -> None:
        """Overwrite the settings file with record."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(record.model_dump(by_alias=True, exclude_none=True), indent=2),
            encoding="utf-8",
        )
        os.chmod(self.path, 0o600)

    def update(
        self,
        default_account_id=_UNSET,
        default_calendar_id=_UNSET,
        default_calendar_account_id=_UNSET,
    ) -> CalendarDefaults:
        """
        Change selected fields and persist.

        Fields left unset keep their stored value. Moving the default
        account keeps the stored calendar with the account it came from.
        """
        with self._lock:
            record = self.load()
            if default_account_id is not _UNSET:
                record.default_calendar_account_id = record.calendar_owner
                record.default_account_id = default_account_id
            if default_calendar_id is not _UNSET:
                record.default_calendar_id = default_calendar_id
            if default_calendar_account_id is not _UNSET:
                record.default_calendar_account_id = default_calendar_account_id
            self.save(record)
            return record
