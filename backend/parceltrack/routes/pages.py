"""
ParcelTrack Backend — HTML Page Route Handlers
===============================================

What:  Minimal server-rendered pages for staff: the package listing and the
       edit form.
How:   Jinja2 templates (autoescaped) rendered from PackageService data.

Pages:
    GET /            listing with name, description, status and an Edit button
    GET /edit/{id}   form pre-filled from the record, submitting to
                     POST /api/packages/{id}; 404 plain text if unknown
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from parceltrack.exceptions import NotFoundError
from parceltrack.services.package_service import PackageService, get_package_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    service: PackageService = Depends(get_package_service),
) -> HTMLResponse:
    """Listing page with one entry per package."""
    packages = await service.list_packages()
    return templates.TemplateResponse(request, "index.html", {"packages": packages})


@router.get("/edit/{package_id}", response_class=HTMLResponse)
async def edit_page(
    package_id: str,
    request: Request,
    service: PackageService = Depends(get_package_service),
):
    """Edit form for one package, or a plain-text 404."""
    try:
        package = await service.get_package(package_id)
    except NotFoundError as e:
        return PlainTextResponse(e.message, status_code=404)
    return templates.TemplateResponse(request, "edit.html", {"pkg": package})
