# marketplace/storage.py
"""
Blob store gateway.

Each bucket is a Django storage instance rooted at MEDIA_ROOT/<bucket>, built
from settings.BLOB_STORAGE_BACKEND. The gateway only knows three calls:
upload bytes under a name, derive a public URL, remove names.
"""
import logging
from pathlib import Path
from urllib.parse import urlparse, unquote

from django.conf import settings
from django.core.files.base import ContentFile
from django.utils.module_loading import import_string

from .exceptions import UploadError

logger = logging.getLogger(__name__)


def filename_from_url(url: str, bucket: str, origin: str | None = None) -> str | None:
    """
    Storage filename for a public URL of `bucket`, or None when the URL is not
    ours (other host, malformed, no /<bucket>/ segment).
    """
    origin = origin if origin is not None else settings.STORAGE_PUBLIC_ORIGIN
    try:
        parsed = urlparse(url or "")
        ours = urlparse(origin)
    except ValueError:
        return None
    if not parsed.hostname or parsed.hostname != ours.hostname:
        return None
    marker = f"/{bucket}/"
    if marker not in parsed.path:
        return None
    name = unquote(parsed.path.split(marker, 1)[1])
    return name or None


class BlobStore:
    def __init__(self, bucket: str, storage=None):
        self.bucket = bucket
        if storage is None:
            backend = import_string(settings.BLOB_STORAGE_BACKEND)
            storage = backend(
                location=str(Path(settings.MEDIA_ROOT) / bucket),
                base_url=f"{settings.MEDIA_URL}{bucket}/",
            )
        self.storage = storage

    def __repr__(self):
        return f"BlobStore({self.bucket!r})"

    def upload(self, filename: str, content) -> str:
        """Store bytes (or a file object) under `filename`; returns the stored path."""
        if isinstance(content, bytes):
            content = ContentFile(content)
        try:
            return self.storage.save(filename, content)
        except Exception as exc:
            raise UploadError(f"upload of {filename} to {self.bucket} failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        url = self.storage.url(path)
        if urlparse(url).netloc:
            return url
        return f"{settings.STORAGE_PUBLIC_ORIGIN.rstrip('/')}{url}"

    def filename_for(self, url: str) -> str | None:
        return filename_from_url(url, self.bucket)

    def remove(self, filenames) -> dict:
        """
        Delete each name; returns {filename: error} for the ones that failed.
        Missing files count as removed.
        """
        failures = {}
        for name in filenames:
            try:
                self.storage.delete(name)
            except Exception as exc:
                failures[name] = exc
        return failures


def get_blob_store(bucket: str) -> BlobStore:
    return BlobStore(bucket)
