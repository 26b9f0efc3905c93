import io

import pytest
from django.core.cache import cache
from django.core.files.storage import InMemoryStorage
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from marketplace import storage
from marketplace.exceptions import UploadError

ADMIN_PASSWORD = "let-me-in"


class RecordingBlobStore(storage.BlobStore):
    """In-memory bucket that counts what the orchestrators ask of it."""

    def __init__(self, bucket):
        super().__init__(bucket, storage=InMemoryStorage(base_url=f"/media/{bucket}/"))
        self.uploaded = []
        self.removed = []
        self.remove_calls = 0
        self.fail_upload_at = None
        self.fail_remove = set()

    @property
    def calls(self):
        return len(self.uploaded) + self.remove_calls

    def seed(self, name, content=b"old"):
        """Put a file in place without counting it; returns its public URL."""
        path = self.storage.save(name, io.BytesIO(content))
        return self.public_url(path)

    def has(self, name):
        return self.storage.exists(name)

    def upload(self, filename, content):
        if self.fail_upload_at is not None and len(self.uploaded) >= self.fail_upload_at:
            raise UploadError(f"upload of {filename} to {self.bucket} failed: boom")
        path = super().upload(filename, content)
        self.uploaded.append(path)
        return path

    def remove(self, filenames):
        self.remove_calls += 1
        failures = {}
        for name in filenames:
            self.removed.append(name)
            if name in self.fail_remove:
                failures[name] = OSError("permission denied")
            else:
                self.storage.delete(name)
        return failures


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def blob_stores(monkeypatch, settings):
    settings.STORAGE_PUBLIC_ORIGIN = "http://localhost:8000"
    stores = {}

    def get(bucket):
        if bucket not in stores:
            stores[bucket] = RecordingBlobStore(bucket)
        return stores[bucket]

    monkeypatch.setattr(storage, "get_blob_store", get)
    return get


@pytest.fixture
def listings_store(blob_stores, settings):
    return blob_stores(settings.LISTINGS_BUCKET)


@pytest.fixture
def testimonials_store(blob_stores, settings):
    return blob_stores(settings.TESTIMONIALS_BUCKET)


def make_image(name="photo.jpg", fmt="JPEG", size=(8, 8), pad_to=None, content_type=None):
    buf = io.BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format=fmt)
    data = buf.getvalue()
    if pad_to and len(data) < pad_to:
        data += b"\0" * (pad_to - len(data))
    content_type = content_type or {"JPEG": "image/jpeg", "PNG": "image/png", "GIF": "image/gif"}[fmt]
    return SimpleUploadedFile(name, data, content_type=content_type)


def listing_data(**overrides):
    data = {
        "make": "Honda",
        "model": "CB350",
        "year": "2021",
        "price": "150000",
        "km_driven": "5000",
        "engine_displacement": "350",
        "registration": "BR06AB1234",
        "condition": "Good",
        "description": "Well maintained single owner bike.",
    }
    data.update(overrides)
    return data


def submission_data(**overrides):
    data = listing_data(
        name="Ravi Kumar",
        phone="9876543210",
        location="Patna",
        description="Well maintained single owner bike, all papers clear.",
    )
    data.update(overrides)
    return data


def testimonial_data(**overrides):
    data = {
        "name": "Asha",
        "location": "Pune",
        "review": "Sold my bike within a week, painless.",
        "rating": "5",
    }
    data.update(overrides)
    return data


@pytest.fixture
def panel_client(client, settings):
    settings.ADMIN_PASSWORD = ADMIN_PASSWORD
    resp = client.post("/admin/login/", {"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client
