"""
ParcelTrack Backend — HTML Page and Health Tests
=================================================

What:  Tests for GET /, GET /edit/{id}, static files and GET /health.
"""

from pathlib import Path

import pytest

from parceltrack.config import settings
from parceltrack.services.file_service import FileService
from parceltrack.services.package_service import PackageService
from parceltrack.store import InMemoryRecordStore


class TestListingPage:

    @pytest.mark.asyncio
    async def test_empty_listing(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Express Shipping Team" in response.text
        assert "No packages available." in response.text

    @pytest.mark.asyncio
    async def test_listing_shows_packages(self, test_client, sample_package_fields):
        created = await test_client.post("/api/packages", data=sample_package_fields)
        package_id = created.json()["id"]

        response = await test_client.get("/")

        assert "No packages available." not in response.text
        assert "<h2>Box1</h2>" in response.text
        assert "<p>books</p>" in response.text
        assert "Pending" in response.text
        assert f"/edit/{package_id}" in response.text

    @pytest.mark.asyncio
    async def test_listing_escapes_html(self, test_client, sample_package_fields):
        await test_client.post(
            "/api/packages",
            data={**sample_package_fields, "packageName": "<script>alert(1)</script>"},
        )

        response = await test_client.get("/")

        assert "<script>alert(1)</script>" not in response.text
        assert "&lt;script&gt;" in response.text


class TestEditPage:

    @pytest.mark.asyncio
    async def test_edit_form_prefilled(self, test_client, sample_package_fields):
        created = await test_client.post("/api/packages", data=sample_package_fields)
        package_id = created.json()["id"]

        response = await test_client.get(f"/edit/{package_id}")

        assert response.status_code == 200
        assert "Edit Package: Box1" in response.text
        assert f'action="/api/packages/{package_id}"' in response.text
        assert 'name="packageName" value="Box1"' in response.text
        assert 'name="senderEmail" value="a@example.com"' in response.text
        assert 'name="image"' in response.text

    @pytest.mark.asyncio
    async def test_edit_form_blank_optional_fields(self, test_client):
        created = await test_client.post(
            "/api/packages",
            data={"packageName": "Box1", "description": "books", "senderName": "A", "recipientName": "B"},
        )

        response = await test_client.get(f"/edit/{created.json()['id']}")

        assert 'name="packageStatus" value=""' in response.text
        assert "None" not in response.text

    @pytest.mark.asyncio
    async def test_edit_form_keeps_free_text_quantity(self, test_client):
        created = await test_client.post(
            "/api/packages",
            data={"packageName": "Box1", "description": "books", "senderName": "A", "recipientName": "B",
                  "quantity": "two crates"},
        )

        response = await test_client.get(f"/edit/{created.json()['id']}")

        assert '<input type="text" name="quantity" value="two crates">' in response.text

    @pytest.mark.asyncio
    async def test_edit_unknown_id(self, test_client):
        response = await test_client.get("/edit/unknown-id")

        assert response.status_code == 404
        assert response.text == "Package not found."


class TestUploadsAndHealth:

    @pytest.mark.asyncio
    async def test_uploaded_photo_is_served(self, test_client, sample_image_bytes):
        from parceltrack.main import app
        from parceltrack.services.package_service import get_package_service

        # Write through the app's configured uploads directory
        service = PackageService(InMemoryRecordStore(), FileService())
        app.dependency_overrides[get_package_service] = lambda: service

        created = await test_client.post(
            "/api/packages",
            data={"packageName": "Box1", "description": "books", "senderName": "A", "recipientName": "B"},
            files={"image": ("box.jpg", sample_image_bytes, "image/jpeg")},
        )
        image = (await test_client.get(f"/api/packages/{created.json()['id']}")).json()["image"]

        assert image.startswith(settings.upload_url_prefix + "/")
        response = await test_client.get(image)
        assert response.status_code == 200
        assert response.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_public_files_served_at_root(self, test_client):
        asset = Path(settings.public_dir) / "site.css"
        asset.write_text("body { margin: 0; }", encoding="utf-8")

        response = await test_client.get("/site.css")

        assert response.status_code == 200
        assert response.text == "body { margin: 0; }"
        assert "Express Shipping Team" in (await test_client.get("/")).text

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "readable"
        assert body["uptime_seconds"] >= 0
