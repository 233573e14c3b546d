"""
ParcelTrack Backend — Record Store
===================================

What:  Loads and saves the full package collection as a single JSON document.
How:   `RecordStore` is the abstract contract (load_all / save_all);
       `JsonFileRecordStore` is the production implementation and
       `InMemoryRecordStore` is a drop-in double for tests.
Who:   Used by PackageService; injected into routes through
       `get_package_service` so tests can substitute another store.

Persistence model:
    There is no per-record storage. Every operation reads the whole
    collection, changes it in memory, and writes the whole collection back:

        load_all()  →  [record, record, ...]  →  mutate  →  save_all()

    JsonFileRecordStore writes to a temporary sibling file and then swaps it
    into place with an atomic replace, so a failed write leaves the previous
    collection intact. Concurrent writers are not coordinated here; see
    PackageService for the in-process mutation lock.

File format:
    A JSON array of objects with camelCase keys, 2-space indented, UTF-8:

        [
          {
            "id": "1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed",
            "packageName": "Box1",
            ...
            "image": null
          }
        ]
"""

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Sequence

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from parceltrack.config import settings
from parceltrack.exceptions import StorageReadError, StorageWriteError
from parceltrack.schemas.package import PackageRecord

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """
    Abstract interface for durable storage of the package collection.

    Contract:
        - load_all() returns the collection in insertion order, or [] when
          nothing has been persisted yet
        - save_all() replaces the entire collection; a later load_all()
          returns exactly what was saved
        - save_all(await load_all()) leaves the stored contents unchanged
    """

    @abstractmethod
    async def load_all(self) -> List[PackageRecord]:
        """
        Read the persisted collection.

        Raises:
            StorageReadError: The persisted data is unreadable or malformed.
        """
        ...

    @abstractmethod
    async def save_all(self, records: Sequence[PackageRecord]) -> None:
        """
        Overwrite the persisted collection with `records`.

        Raises:
            StorageWriteError: The collection could not be written.
        """
        ...

    async def ping(self) -> bool:
        """Lightweight readability probe used by the health check."""
        try:
            await self.load_all()
        except StorageReadError:
            return False
        return True


def _parse_records(raw: Any, source: str) -> List[PackageRecord]:
    if not isinstance(raw, list):
        raise StorageReadError(
            context={"source": source, "reason": f"expected a JSON array, got {type(raw).__name__}"},
        )
    records = []
    for index, item in enumerate(raw):
        try:
            records.append(PackageRecord.model_validate(item))
        except PydanticValidationError as e:
            raise StorageReadError(
                context={"source": source, "index": index, "reason": str(e)},
            ) from e
    return records


class JsonFileRecordStore(RecordStore):
    """
    Record store backed by a single JSON file.

    A missing file or an empty file means "no records yet". Anything else
    that does not parse as an array of package records is a StorageReadError;
    the file is never silently reset.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    async def load_all(self) -> List[PackageRecord]:
        if not await aiofiles.os.path.exists(self.path):
            return []

        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                text = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read record store %s: %s", self.path, str(e))
            raise StorageReadError(context={"path": str(self.path), "error": str(e)}) from e

        if not text.strip():
            return []

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("Record store %s is not valid JSON: %s", self.path, str(e))
            raise StorageReadError(context={"path": str(self.path), "error": str(e)}) from e

        records = _parse_records(raw, str(self.path))
        logger.debug("Loaded %d records from %s", len(records), self.path)
        return records

    async def save_all(self, records: Sequence[PackageRecord]) -> None:
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")

        try:
            # Encoded up front so unencodable text (lone surrogates) fails before any write
            payload = json.dumps(
                [record.to_wire() for record in records],
                indent=2,
                ensure_ascii=False,
            ).encode("utf-8")
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except (OSError, UnicodeError) as e:
            logger.error("Failed to write record store %s: %s", self.path, str(e))
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temporary store file %s", tmp_path)
            raise StorageWriteError(context={"path": str(self.path), "error": str(e)}) from e

        logger.debug("Saved %d records to %s", len(records), self.path)


class InMemoryRecordStore(RecordStore):
    """
    Record store that keeps the collection in process memory.

    Records are held as wire dicts and re-validated on load, so callers get
    fresh model instances and cannot mutate the stored state by accident.
    """

    def __init__(self, records: Sequence[PackageRecord] = ()):
        self._data: List[Dict[str, Any]] = [record.to_wire() for record in records]
        self.save_count = 0

    async def load_all(self) -> List[PackageRecord]:
        return _parse_records(copy.deepcopy(self._data), "memory")

    async def save_all(self, records: Sequence[PackageRecord]) -> None:
        self._data = [record.to_wire() for record in records]
        self.save_count += 1


# ── Singleton Instance ────────────────────────────────────────────────────
record_store = JsonFileRecordStore(settings.data_file)


def get_record_store() -> RecordStore:
    """FastAPI dependency returning the configured record store."""
    return record_store
