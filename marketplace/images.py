# marketplace/images.py
"""
Image set reconciliation for listing, submission and testimonial mutations.

A mutation starts from the URLs the record had (`original`), the subset the
admin kept (`kept`), and freshly uploaded files. The record ends with
kept + uploaded, in that order; whatever of `original` is not in the final
set is orphaned and removed from the bucket only after the record that no
longer references it has been saved.
"""
import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import List

from django.conf import settings
from django.utils.translation import gettext as _
from PIL import Image, UnidentifiedImageError

from .exceptions import DeletionWarning, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


@dataclass(frozen=True)
class ImagePlan:
    final: List[str] = field(default_factory=list)
    orphaned: List[str] = field(default_factory=list)


def reconcile(original, kept, uploaded) -> ImagePlan:
    """final = kept ++ uploaded; orphaned = original - final (each once, original order)."""
    final = list(kept) + list(uploaded)
    keep = set(final)
    orphaned = []
    for url in original or []:
        if url not in keep and url not in orphaned:
            orphaned.append(url)
    return ImagePlan(final=final, orphaned=orphaned)


def parse_kept_urls(data, key: str = "existing_images") -> List[str]:
    """Kept URLs from repeated form fields or one comma separated value."""
    if hasattr(data, "getlist"):
        raw = data.getlist(key)
    else:
        raw = data.get(key) or []
        if isinstance(raw, str):
            raw = [raw]
    out = []
    for chunk in raw:
        for url in str(chunk or "").split(","):
            url = url.strip()
            if url:
                out.append(url)
    return out


def restrict_to_original(kept, original) -> List[str]:
    """Client-supplied kept URLs that really belong to the record, client order, no dupes."""
    allowed = set(original or [])
    out = []
    dropped = []
    for url in kept:
        if url in allowed:
            if url not in out:
                out.append(url)
        else:
            dropped.append(url)
    if dropped:
        logger.warning("Ignoring %d kept image URL(s) not on the record: %s", len(dropped), dropped)
    return out


def non_empty(files) -> list:
    """Zero-byte parts mean "no file chosen"."""
    return [f for f in (files or []) if f is not None and getattr(f, "size", 0) > 0]


def validate_uploads(files, field_name: str = "images") -> None:
    """Reject oversized, wrongly typed or unreadable images before anything is uploaded."""
    max_bytes = getattr(settings, "MAX_IMAGE_UPLOAD_BYTES", 5 * 1024 * 1024)
    errors = []
    for f in non_empty(files):
        name = getattr(f, "name", "") or "file"
        if f.size > max_bytes:
            errors.append(_("%(name)s is larger than %(mb)s MB.") % {"name": name, "mb": max_bytes // (1024 * 1024)})
            continue
        content_type = getattr(f, "content_type", None)
        if content_type and content_type not in ALLOWED_CONTENT_TYPES:
            errors.append(_("%(name)s: only JPEG, PNG, WEBP or GIF images are allowed.") % {"name": name})
            continue
        try:
            f.seek(0)
            Image.open(f).verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError):
            errors.append(_("%(name)s is not a valid image.") % {"name": name})
        finally:
            f.seek(0)
    if errors:
        raise ValidationError({field_name: errors})


def storage_name(original_name: str) -> str:
    """Fresh unique name that keeps the uploaded file's extension."""
    ext = os.path.splitext(original_name or "")[1].lower()
    return f"{uuid.uuid4().hex}{ext}"


def upload_images(store, files) -> List[str]:
    """
    Upload every non-empty file one at a time; public URLs in file order.
    The first failure propagates as UploadError; files stored before it stay
    behind as orphans and are logged.
    """
    urls = []
    for f in non_empty(files):
        name = storage_name(getattr(f, "name", ""))
        try:
            f.seek(0)
            path = store.upload(name, f)
        except Exception:
            if urls:
                logger.warning("Upload aborted; %d file(s) already stored in %s are orphaned: %s",
                               len(urls), store.bucket, urls)
            raise
        url = store.public_url(path)
        logger.info("Uploaded %s to %s as %s", getattr(f, "name", name), store.bucket, path)
        urls.append(url)
    return urls


def delete_urls(store, urls) -> None:
    """Best-effort removal of our own blobs; foreign URLs are skipped, failures logged."""
    names = []
    for url in urls or []:
        name = store.filename_for(url)
        if name is None:
            logger.info("Skipping delete of %s: not a %s URL on our storage origin", url, store.bucket)
            continue
        if name not in names:
            names.append(name)
    if not names:
        return
    failures = store.remove(names)
    if failures:
        warning = DeletionWarning(store.bucket, failures)
        logger.warning("%s", warning)
    removed = len(names) - len(failures)
    if removed:
        logger.info("Removed %d orphaned image(s) from %s", removed, store.bucket)
