"""JSON file persistence for saved schedules and entrant templates."""

import logging
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from runtimes.dtos import EntrantTemplate, ScheduleSnapshot

# Set up logging
logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class CorruptStoreError(ValueError):
    """A data file exists but cannot be read, so it must not be overwritten."""

    def __init__(self, path: Path, reason: Exception):
        super().__init__(f"Cannot read {path} ({reason}). Fix or move the file before saving again.")
        self.path = path


class JsonCollectionStore(Generic[T]):
    """A list of records keyed by their `id`, stored as one JSON array.

    Records keep their insertion order; saving an existing id replaces it
    in place.
    """

    kind = "record"

    def __init__(self, path: Path, model: type[T]):
        self.path = Path(path)
        self._adapter = TypeAdapter(list[model])

    def all(self) -> list[T]:
        """Load every record. A missing or corrupt file reads as empty."""
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.error(f"Error loading {self.kind}s from {self.path}: {e}")
            return []

    def _load_for_write(self) -> list[T]:
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            raise CorruptStoreError(self.path, e) from e

    def get(self, record_id: str) -> T | None:
        return next((r for r in self.all() if r.id == record_id), None)

    def save(self, record: T) -> None:
        """Insert or replace a record. Raises CorruptStoreError if the file is unreadable."""
        records = self._load_for_write()
        index = next((i for i, r in enumerate(records) if r.id == record.id), None)
        if index is None:
            records.append(record)
        else:
            records[index] = record
        self._write(records)
        logger.info(f"{self.kind.capitalize()} saved: {record.id}")

    def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False if there was nothing to remove."""
        records = self._load_for_write()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.info(f"{self.kind.capitalize()} deleted: {record_id}")
        return True

    def _write(self, records: list[T]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(self._adapter.dump_json(records, indent=2))


class ScheduleStore(JsonCollectionStore[ScheduleSnapshot]):
    kind = "schedule"

    def __init__(self, path: Path):
        super().__init__(path, ScheduleSnapshot)


class TemplateStore(JsonCollectionStore[EntrantTemplate]):
    kind = "template"

    def __init__(self, path: Path):
        super().__init__(path, EntrantTemplate)
