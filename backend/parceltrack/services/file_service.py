"""
ParcelTrack Backend — Upload Storage Service
=============================================

What:  Validates and stores the optional package photo, and cleans it up.
How:   Checks extension and size, then writes the bytes into the public
       uploads directory as `<uuid4>-<original name>`.
Who:   Called by PackageService during create and update.
When:  Only when the request carried a file in the `image` field.

Naming:
    public/uploads/
    ├── 1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed-box.jpg
    └── 6ec0bd7f-11c0-43da-975e-2a8ad9ebae0b-box.jpg

    The uuid4 prefix keeps names unique even when two clients upload files
    with the same name. Only the final path component of the client filename
    is kept, so names like "../../etc/passwd" land inside the uploads folder.
    Records reference the photo by its public path, e.g.
    "/uploads/1b9d6bcd-...-box.jpg", which is served by the static mount.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from parceltrack.config import settings
from parceltrack.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)


def _basename(filename: str) -> str:
    """Last path component of a client filename, for either separator style."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    return name or "upload"


class FileService:
    """
    Manages the lifecycle of uploaded package photos.

    Lifecycle of an upload:
        1. Route reads the multipart `image` field → PackageService
        2. validate_extension() and validate_size()
        3. store_file() writes `<uuid4>-<name>` into the uploads directory
        4. The public path is stored on the record
        5. If saving the record fails afterwards, cleanup() removes the file
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        url_prefix: Optional[str] = None,
    ):
        """
        Args:
            upload_dir: Override settings.upload_dir (used in tests).
            url_prefix: Override settings.upload_url_prefix (used in tests).
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")

    def validate_extension(self, filename: str) -> str:
        """
        Check that the photo has an accepted image extension.

        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if the extension is not allowed.
        """
        allowed = settings.allowed_image_extensions_set
        ext = Path(_basename(filename)).suffix.lower()
        if ext not in allowed:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(allowed))}"
                ),
                field="image",
                context={"extension": ext, "allowed": sorted(allowed)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject empty photos and photos larger than settings.max_file_size.

        Args:
            content_length: Size reported by the multipart parser (may be None)
            actual_size: Actual byte count of the uploaded file
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="The uploaded image is empty.",
                field="image",
                context={"actual_size": 0},
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def _generate_storage_path(self, filename: str) -> Tuple[Path, str]:
        """
        Build the on-disk path and public path for a new upload.

        Returns: Tuple of (absolute_path, public_path).
        """
        stored_name = f"{uuid.uuid4()}-{_basename(filename)}"
        return self.upload_dir / stored_name, f"{self.url_prefix}/{stored_name}"

    async def store_file(self, filename: str, content: bytes) -> str:
        """
        Write the photo into the uploads directory.

        Returns: Public path of the stored photo.
        Raises:  FileStorageError if the directory or file cannot be written.
        """
        absolute_path, public_path = self._generate_storage_path(filename)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Upload stored: %s (%d bytes)", public_path, len(content))
        return public_path

    async def store_upload(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Validate and store a photo in one step.

        Returns: Public path to put on the record's `image` field.
        """
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        return await self.store_file(filename, content)

    def resolve(self, public_path: str) -> Optional[Path]:
        """
        Map a public path back to its file in the uploads directory.

        Returns None for paths outside the uploads prefix.
        """
        prefix = f"{self.url_prefix}/"
        if not public_path or not public_path.startswith(prefix):
            return None
        path = (self.upload_dir / public_path[len(prefix):]).resolve()
        if path.parent != self.upload_dir:
            return None
        return path

    async def cleanup(self, public_path: str) -> None:
        """
        Remove a stored photo after the record that referenced it failed to save.

        Best-effort: missing files and OS errors are logged, not raised, so
        the original store error reaches the client.
        """
        path = self.resolve(public_path)
        if path is None:
            logger.debug("Cleanup: %s is not an upload path", public_path)
            return
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up upload: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up upload %s: %s", path, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
