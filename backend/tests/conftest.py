"""
ParcelTrack Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── memory_store: In-memory RecordStore (no files)
    ├── upload_service: FileService writing into a temp directory
    ├── package_service: PackageService over memory_store + upload_service
    ├── sample_package_fields: camelCase create payload
    ├── sample_record: A stored PackageRecord
    ├── sample_image_bytes: Fake image content for upload tests
    └── test_client: HTTPX AsyncClient wired to package_service
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports, so the module-level
# singletons never touch ./packages.json or ./public
_TEST_ROOT = tempfile.mkdtemp(prefix="parceltrack_test_")
os.environ["DATA_FILE"] = os.path.join(_TEST_ROOT, "packages.json")
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["PUBLIC_DIR"] = os.path.join(_TEST_ROOT, "public")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from parceltrack.schemas.package import PackageRecord
from parceltrack.services.file_service import FileService
from parceltrack.services.package_service import PackageService, get_package_service
from parceltrack.store import InMemoryRecordStore


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def memory_store():
    """Empty in-memory record store."""
    return InMemoryRecordStore()


@pytest.fixture
def upload_dir(tmp_path):
    """Fresh uploads directory for each test."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def upload_service(upload_dir):
    """FileService writing into the per-test uploads directory."""
    return FileService(upload_dir=str(upload_dir), url_prefix="/uploads")


@pytest.fixture
def package_service(memory_store, upload_service):
    """PackageService over the in-memory store and temp uploads directory."""
    return PackageService(memory_store, upload_service)


@pytest.fixture
def sample_package_fields():
    """camelCase create payload with every field filled in."""
    return {
        "packageName": "Box1",
        "packageCondition": "Good",
        "quantity": "2",
        "description": "books",
        "senderName": "A",
        "senderAddress": "1 Main St",
        "senderCountry": "Kenya",
        "senderEmail": "a@example.com",
        "senderCountryCode": "KE",
        "recipientName": "B",
        "recipientAddress": "2 High St",
        "recipientCountry": "Ghana",
        "recipientEmail": "b@example.com",
        "recipientCountryCode": "GH",
        "sendDate": "2024-01-15",
        "deliveryDate": "2024-01-20",
        "packageStatus": "Pending",
        "packageCurrentCountry": "Kenya",
    }


@pytest.fixture
def sample_record(sample_package_fields):
    """A stored record with a photo reference."""
    return PackageRecord.model_validate(
        {
            "id": "3f1c9a52-6c1e-4c1b-8a53-0d1c2b3a4f5e",
            "image": "/uploads/6ec0bd7f-11c0-43da-975e-2a8ad9ebae0b-box.jpg",
            **sample_package_fields,
        }
    )


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes for upload tests: SOI marker + JFIF header + EOI marker.
    Not a real photograph.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(package_service):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport,
    with get_package_service overridden to the test's package_service.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/packages")
            assert response.status_code == 200
    """
    from parceltrack.main import app

    app.dependency_overrides[get_package_service] = lambda: package_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
