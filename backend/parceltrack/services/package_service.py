"""
ParcelTrack Backend — Package Service (Business Logic)
=======================================================

What:  Create, list, fetch and update package records.
How:   Composes a RecordStore (whole-collection persistence) and a
       FileService (photo uploads). Every mutation is
       load_all → change in memory → save_all.
Who:   Called by the API and HTML route handlers via `get_package_service`.

Create vs update validation:
    Create requires packageName, description, senderName and recipientName
    to be present and non-empty. Update performs no such check: any field
    present in the payload overwrites the stored value, including with "".
    Tests pin this asymmetry as current behavior.

Mutation lock:
    create_package and update_package hold one asyncio.Lock for their whole
    load → mutate → save sequence, so two requests served by the same
    process cannot interleave at an await point and lose an update.
    Separate processes sharing the same store file are not coordinated.
"""

import asyncio
import logging
import uuid
from typing import List, NamedTuple, Optional

from parceltrack.exceptions import NotFoundError, StorageError, ValidationError
from parceltrack.schemas.package import (
    PACKAGE_FIELDS,
    PackageCreate,
    PackageRecord,
    PackageUpdate,
)
from parceltrack.services.file_service import FileService, file_service
from parceltrack.store import RecordStore, record_store

logger = logging.getLogger(__name__)

PACKAGE_NOT_FOUND = "Package not found."
REQUIRED_FIELDS_MISSING = "Required fields are missing."


class UploadedImage(NamedTuple):
    """Photo received with a create/update request."""

    filename: str
    content: bytes
    size: Optional[int] = None


class PackageService:
    """
    Business logic layer for package records.

    Responsibilities:
        - create_package(): presence check, id assignment, optional photo
        - list_packages(): whole collection in insertion order
        - get_package(): single record with not-found handling
        - update_package(): shallow merge of present fields, optional photo

    Error Handling Strategy:
        NotFoundError and ValidationError are raised here. Store errors
        (StorageReadError / StorageWriteError) propagate unchanged to the
        global handlers. If a photo was written and the record then fails to
        save, the photo is removed before the error propagates.
    """

    def __init__(self, store: RecordStore, files: Optional[FileService] = None):
        self.store = store
        self.files = files or file_service
        self._lock = asyncio.Lock()

    async def _store_image(self, image: Optional[UploadedImage]) -> Optional[str]:
        if image is None:
            return None
        return await self.files.store_upload(
            filename=image.filename,
            content=image.content,
            content_length=image.size,
        )

    async def _save(self, records: List[PackageRecord], image_path: Optional[str]) -> None:
        try:
            await self.store.save_all(records)
        except StorageError:
            if image_path:
                await self.files.cleanup(image_path)
            raise

    async def create_package(
        self,
        data: PackageCreate,
        image: Optional[UploadedImage] = None,
    ) -> PackageRecord:
        """
        Append a new package record to the store.

        Workflow:
            1. Presence check on the four required fields
            2. Store the photo, if one was uploaded
            3. load_all → append with a fresh id → save_all

        Raises:
            ValidationError: Required fields missing (details list which),
                or the photo was rejected. The store is untouched.
            StorageReadError / StorageWriteError: Store failure.
        """
        missing = data.missing_required()
        if missing:
            logger.info("Rejected package create: missing %s", ", ".join(missing))
            raise ValidationError(
                message=REQUIRED_FIELDS_MISSING,
                context={"missing_fields": missing},
            )

        async with self._lock:
            records = await self.store.load_all()
            existing_ids = {record.id for record in records}

            package_id = str(uuid.uuid4())
            while package_id in existing_ids:
                package_id = str(uuid.uuid4())

            image_path = await self._store_image(image)
            record = PackageRecord(
                id=package_id,
                image=image_path,
                **data.model_dump(include=set(PACKAGE_FIELDS)),
            )
            records.append(record)
            await self._save(records, image_path)

        logger.info(
            "Package created: %s (%s)%s",
            record.id,
            record.package_name,
            " with image" if image_path else "",
        )
        return record

    async def list_packages(self) -> List[PackageRecord]:
        """Every stored record, in insertion order."""
        return await self.store.load_all()

    async def get_package(self, package_id: str) -> PackageRecord:
        """
        Retrieve a single package by id.

        Raises:
            NotFoundError: No record has this id (→ 404 "Package not found.")
        """
        for record in await self.store.load_all():
            if record.id == package_id:
                return record
        raise NotFoundError(resource="package", resource_id=package_id, message=PACKAGE_NOT_FOUND)

    async def update_package(
        self,
        package_id: str,
        changes: PackageUpdate,
        image: Optional[UploadedImage] = None,
    ) -> PackageRecord:
        """
        Merge the fields present in `changes` over a stored record.

        Fields absent from `changes` keep their stored value; `id` never
        changes; `image` changes only when a new photo is uploaded.

        Raises:
            NotFoundError: No record has this id. No photo is written.
            ValidationError: The uploaded photo was rejected.
            StorageReadError / StorageWriteError: Store failure.
        """
        async with self._lock:
            records = await self.store.load_all()
            index = next(
                (i for i, record in enumerate(records) if record.id == package_id),
                None,
            )
            if index is None:
                raise NotFoundError(
                    resource="package", resource_id=package_id, message=PACKAGE_NOT_FOUND
                )

            update = changes.changes()
            image_path = await self._store_image(image)
            if image_path:
                update["image"] = image_path

            merged = records[index].model_copy(update=update)
            records[index] = merged
            await self._save(records, image_path)

        logger.info(
            "Package updated: %s (fields: %s)",
            package_id,
            ", ".join(sorted(update)) or "none",
        )
        return merged


# ── Singleton Instance ────────────────────────────────────────────────────
package_service = PackageService(record_store, file_service)


def get_package_service() -> PackageService:
    """FastAPI dependency returning the application's PackageService."""
    return package_service
