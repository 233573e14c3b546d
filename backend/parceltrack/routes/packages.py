"""
ParcelTrack Backend — Package API Route Handlers
=================================================

What:  JSON API for package records under /api/packages.
How:   Parses the request body, delegates to PackageService, shapes the
       response. Errors are raised as application exceptions and turned into
       JSON by the global handlers in main.py.
Who:   Called by API clients and by the HTML edit page.

Endpoints:
    POST /api/packages          create         → 201 {message, id}
    GET  /api/packages          list           → 200 [record, ...]
    GET  /api/packages/{id}     fetch          → 200 record | 404
    PUT  /api/packages/{id}     update         → 200 {message, package} | 404
    POST /api/packages/{id}     update (form)  → 303 redirect to / | 404

Request bodies:
    Form data (urlencoded or multipart, with an optional `image` file) or a
    JSON object. Field names are camelCase (packageName, senderEmail, ...).
    The body is read from the request directly rather than through Form()
    parameters: FastAPI treats an empty form value as "not sent", and an
    update must be able to set a field to "".
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile

from parceltrack.exceptions import ValidationError
from parceltrack.schemas.package import (
    ErrorResponse,
    PackageCreate,
    PackageCreatedResponse,
    PackageRecord,
    PackageUpdate,
    PackageUpdatedResponse,
)
from parceltrack.services.package_service import (
    PackageService,
    UploadedImage,
    get_package_service,
)

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Packages"])

IMAGE_FIELD = "image"


# ══════════════════════════════════════════════════════════════════════════
# Body Parsing
# ══════════════════════════════════════════════════════════════════════════


async def _read_image(value: UploadFile) -> Optional[UploadedImage]:
    try:
        content = await value.read()
    finally:
        await value.close()
    # Browsers send an empty, unnamed part when no file was chosen
    if not value.filename and not content:
        return None
    return UploadedImage(
        filename=value.filename or "upload",
        content=content,
        size=value.size,
    )


async def read_package_payload(
    request: Request,
) -> Tuple[Dict[str, Any], Optional[UploadedImage]]:
    """
    Extract package fields and the optional photo from a request body.

    Returns:
        (fields, image): camelCase field dict and the uploaded photo, or None.
    Raises:
        ValidationError: The body is not a JSON object or not valid JSON.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(
                message="Request body is not valid JSON.",
                context={"error": str(e)},
            )
        if not isinstance(body, dict):
            raise ValidationError(message="Request body must be a JSON object.")
        return body, None

    fields: Dict[str, Any] = {}
    image: Optional[UploadedImage] = None
    form = await request.form()
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == IMAGE_FIELD:
                image = await _read_image(value)
            else:
                await value.close()
        elif key != IMAGE_FIELD:
            fields[key] = value
    return fields, image


def _validate(model, fields: Dict[str, Any]):
    try:
        return model.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Invalid package fields.",
            context={
                "errors": [
                    {
                        "field": ".".join(str(part) for part in err["loc"]),
                        "message": err["msg"],
                    }
                    for err in e.errors()
                ]
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Routes
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "/packages",
    status_code=status.HTTP_201_CREATED,
    response_model=PackageCreatedResponse,
    responses={
        400: {"description": "Required fields missing or invalid image", "model": ErrorResponse},
        500: {"description": "Record store failure", "model": ErrorResponse},
    },
    summary="Create a package record",
)
async def create_package(
    request: Request,
    service: PackageService = Depends(get_package_service),
) -> PackageCreatedResponse:
    """
    Create a package from form data (optional `image` file) or JSON.

    packageName, description, senderName and recipientName are required;
    a 400 response lists the missing ones in `details.missing_fields`.
    """
    fields, image = await read_package_payload(request)
    data = _validate(PackageCreate, fields)
    record = await service.create_package(data, image)
    return PackageCreatedResponse(id=record.id)


@router.get(
    "/packages",
    response_model=List[PackageRecord],
    responses={500: {"description": "Record store failure", "model": ErrorResponse}},
    summary="List all package records",
)
async def list_packages(
    service: PackageService = Depends(get_package_service),
) -> List[PackageRecord]:
    """Every record, in creation order. No filtering or pagination."""
    return await service.list_packages()


@router.get(
    "/packages/{package_id}",
    response_model=PackageRecord,
    responses={
        404: {"description": "Package not found", "model": ErrorResponse},
        500: {"description": "Record store failure", "model": ErrorResponse},
    },
    summary="Get a package record by id",
)
async def get_package(
    package_id: str,
    service: PackageService = Depends(get_package_service),
) -> PackageRecord:
    return await service.get_package(package_id)


@router.put(
    "/packages/{package_id}",
    response_model=PackageUpdatedResponse,
    responses={
        404: {"description": "Package not found", "model": ErrorResponse},
        400: {"description": "Invalid image", "model": ErrorResponse},
        500: {"description": "Record store failure", "model": ErrorResponse},
    },
    summary="Update a package record",
)
async def update_package(
    package_id: str,
    request: Request,
    service: PackageService = Depends(get_package_service),
) -> PackageUpdatedResponse:
    """
    Overwrite the fields present in the body; keep every other field.

    The photo is replaced only when a new `image` file is uploaded.
    Required fields are not re-checked, so a field can be set to "".
    """
    fields, image = await read_package_payload(request)
    changes = _validate(PackageUpdate, fields)
    record = await service.update_package(package_id, changes, image)
    return PackageUpdatedResponse(package=record)


@router.post(
    "/packages/{package_id}",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={404: {"description": "Package not found", "model": ErrorResponse}},
    summary="Update a package record from the HTML edit form",
)
async def update_package_form(
    package_id: str,
    request: Request,
    service: PackageService = Depends(get_package_service),
) -> RedirectResponse:
    """Same merge as PUT, for HTML forms (which cannot send PUT); redirects to the listing."""
    fields, image = await read_package_payload(request)
    changes = _validate(PackageUpdate, fields)
    await service.update_package(package_id, changes, image)
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
