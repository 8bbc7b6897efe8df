"""Food diary service."""

import json
import logging
import re
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Protocol

from nutriai.domain.diary import MEAL_TYPES, MealEntry
from nutriai.domain.errors import StorageError, ValidationError

DEFAULT_MAX_PAYLOAD_BYTES = 1_000_000

_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
_TIME_PATTERN = re.compile(r"\d{2}:\d{2}")
_logger = logging.getLogger(__name__)


class DiaryRepository(Protocol):
    """Persistence interface for diary entries."""

    def list_entries(self, user_id: str) -> list[MealEntry]:
        """Return the user's entries in any order."""

    def create_entry(self, user_id: str, entry: MealEntry) -> str:
        """Persist an entry and return its backend-assigned id."""


@dataclass
class DiaryService:
    """Service for listing and logging meals."""

    repository: DiaryRepository
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES

    def list_entries(self, user_id: str) -> list[MealEntry]:
        """Return entries newest first by (date, time); empty on failure."""
        try:
            entries = self.repository.list_entries(user_id)
        except Exception:
            _logger.exception("Failed to list diary entries user_id=%s", user_id)
            return []
        return sorted(entries, key=lambda e: (e.date, e.time), reverse=True)

    def create_entry(self, user_id: str, entry: MealEntry) -> str:
        """Persist a meal and return its id; failures raise StorageError."""
        _validate_entry(entry)
        payload_size = len(json.dumps(asdict(entry), ensure_ascii=False).encode())
        if payload_size > self.max_payload_bytes:
            raise StorageError(
                f"Diary entry is too large ({payload_size} bytes); "
                "try a smaller image"
            )
        try:
            entry_id = self.repository.create_entry(user_id, entry)
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError("Failed to save diary entry") from exc
        _logger.info("Diary entry saved user_id=%s entry_id=%s", user_id, entry_id)
        return str(entry_id)


def _validate_entry(entry: MealEntry) -> None:
    if entry.type not in MEAL_TYPES:
        raise ValidationError(f"Unknown meal type: {entry.type}")
    if not isinstance(entry.date, str) or not _DATE_PATTERN.fullmatch(entry.date):
        raise ValidationError("Entry date must be YYYY-MM-DD")
    try:
        date.fromisoformat(entry.date)
    except ValueError as exc:
        raise ValidationError("Entry date must be YYYY-MM-DD") from exc
    if entry.time:
        if not _TIME_PATTERN.fullmatch(entry.time):
            raise ValidationError("Entry time must be HH:MM")
        try:
            datetime.strptime(entry.time, "%H:%M")
        except ValueError as exc:
            raise ValidationError("Entry time must be HH:MM") from exc
    if entry.calories < 0:
        raise ValidationError("Calories cannot be negative")
