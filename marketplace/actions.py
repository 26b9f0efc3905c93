# marketplace/actions.py
"""
Admin and sell-form mutations.

Every mutation runs the same sequence:

    validate -> upload new files (one at a time) -> reconcile the image set
    -> one record write -> best-effort delete of orphaned blobs
    -> invalidate cached views

Validation and not-found checks happen before anything is uploaded or written.
An upload failure aborts before the record write. Once the record write has
succeeded nothing that follows (blob cleanup, cache invalidation) can turn the
mutation into a failure.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass

from django.conf import settings
from django.db import DatabaseError, IntegrityError
from django.utils import timezone

from catalog import cache
from catalog.forms import ListingForm, TestimonialForm
from catalog.models import Listing, Testimonial
from . import emails, images, storage
from .exceptions import NotFound, StoreUnavailable, ValidationError
from .forms import SubmissionForm
from .models import Submission

logger = logging.getLogger(__name__)


@dataclass
class ApprovalResult:
    listing: Listing
    submission_removed: bool


# ----------------------------- Helpers -----------------------------

def _listings_store():
    return storage.get_blob_store(settings.LISTINGS_BUCKET)


def _testimonials_store():
    return storage.get_blob_store(settings.TESTIMONIALS_BUCKET)


@contextmanager
def record_store(action: str):
    """Map ORM failures onto the marketplace error taxonomy."""
    try:
        yield
    except IntegrityError as exc:
        raise ValidationError({"__all__": [str(exc)]}) from exc
    except DatabaseError as exc:
        logger.error("Record store failure during %s: %s", action, exc)
        raise StoreUnavailable(f"{action} failed") from exc


@contextmanager
def _write(action: str, uploaded=()):
    """The one durable write of a mutation; uploads made for it become orphans if it fails."""
    try:
        with record_store(action):
            yield
    except (ValidationError, StoreUnavailable):
        if uploaded:
            logger.warning("%s failed; %d uploaded image(s) are orphaned: %s",
                           action, len(uploaded), list(uploaded))
        raise


def _validated(form_class, data) -> dict:
    form = form_class(data)
    if not form.is_valid():
        raise ValidationError(form.errors)
    return dict(form.cleaned_data)


def _get(model, pk, label: str):
    with record_store(f"load {label}"):
        obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise NotFound(label, pk)
    return obj


def _unreferenced(urls) -> list:
    """
    The subset of `urls` no listing or submission points at any more. After a
    partial approval a listing and its source submission share photos.
    """
    urls = list(urls)
    if not urls:
        return urls
    wanted = set(urls)
    in_use = set()
    try:
        with record_store("check image references"):
            for model in (Listing, Submission):
                for row in model.objects.values_list("images", flat=True):
                    in_use.update(wanted.intersection(row or []))
    except StoreUnavailable:
        logger.warning("Could not check references; keeping %d image(s): %s", len(urls), urls)
        return []
    if in_use:
        logger.info("Keeping %d image(s) still referenced by another record: %s", len(in_use), sorted(in_use))
    return [url for url in urls if url not in in_use]


# ----------------------------- Listings -----------------------------

def create_listing(data, files=()) -> Listing:
    fields = _validated(ListingForm, data)
    images.validate_uploads(files)

    store = _listings_store()
    uploaded = images.upload_images(store, files)
    plan = images.reconcile([], [], uploaded)

    with _write("create listing", uploaded):
        listing = Listing.objects.create(**fields, images=plan.final)

    logger.info("Created listing #%s with %d image(s)", listing.pk, len(plan.final))
    cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
    return listing


def update_listing(listing_id, data, kept_urls=(), files=()) -> Listing:
    fields = _validated(ListingForm, data)
    images.validate_uploads(files)
    listing = _get(Listing, listing_id, "Listing")

    original = list(listing.images or [])
    kept = images.restrict_to_original(kept_urls, original)

    store = _listings_store()
    uploaded = images.upload_images(store, files)
    plan = images.reconcile(original, kept, uploaded)

    with _write("update listing", uploaded):
        updated = Listing.objects.filter(pk=listing.pk).update(
            **fields, images=plan.final, updated_at=timezone.now()
        )
    if not updated:
        # deleted between read and write
        if uploaded:
            logger.warning("Listing #%s vanished; uploaded image(s) are orphaned: %s", listing.pk, uploaded)
        raise NotFound("Listing", listing_id)

    for k, v in fields.items():
        setattr(listing, k, v)
    listing.images = plan.final

    images.delete_urls(store, _unreferenced(plan.orphaned))
    logger.info("Updated listing #%s: kept %d, added %d, dropped %d image(s)",
                listing.pk, len(kept), len(uploaded), len(plan.orphaned))
    cache.invalidate(cache.INDEX_PATH, cache.detail_path(listing.pk), cache.ADMIN_PATH)
    return listing


def delete_listing(listing_id) -> None:
    listing = _get(Listing, listing_id, "Listing")
    urls = list(listing.images or [])
    pk = listing.pk

    with record_store("delete listing"):
        listing.delete()

    images.delete_urls(_listings_store(), _unreferenced(urls))
    logger.info("Deleted listing #%s", pk)
    cache.invalidate(cache.INDEX_PATH, cache.detail_path(pk), cache.ADMIN_PATH)


# ----------------------------- Submissions -----------------------------

def create_submission(data, files=()) -> Submission:
    fields = _validated(SubmissionForm, data)
    images.validate_uploads(files)

    uploaded = images.upload_images(_listings_store(), files)

    with _write("create submission", uploaded):
        submission = Submission.objects.create(**fields, images=uploaded or None)

    logger.info("New submission #%s (%s %s) with %d image(s)",
                submission.pk, submission.make, submission.model, len(uploaded))
    emails.notify_new_submission(submission)
    cache.invalidate(cache.ADMIN_PATH)
    return submission


def approve_submission(submission_id, data, kept_urls=(), files=()) -> ApprovalResult:
    """
    Promote a submission into a live listing: insert the listing, then delete
    the submission. There is no cross-table transaction; the insert must have
    produced a row before the submission is touched, so a failed insert leaves
    the submission in place for a retry.
    """
    fields = _validated(ListingForm, data)
    images.validate_uploads(files)
    submission = _get(Submission, submission_id, "Submission")

    original = list(submission.images or [])
    kept = images.restrict_to_original(kept_urls, original)

    store = _listings_store()
    uploaded = images.upload_images(store, files)
    plan = images.reconcile(original, kept, uploaded)

    # phase 1: insert
    with _write("approve submission", uploaded):
        listing = Listing.objects.create(**fields, images=plan.final)
    if listing.pk is None:
        raise StoreUnavailable("listing insert returned no id; submission left in place")

    # phase 2: remove the source row
    submission_removed = True
    try:
        with record_store("remove approved submission"):
            Submission.objects.filter(pk=submission.pk).delete()
    except StoreUnavailable:
        submission_removed = False
        logger.error("Listing #%s was created but submission #%s could not be removed; "
                     "both exist until an admin deletes the submission", listing.pk, submission.pk)

    if submission_removed:
        images.delete_urls(store, _unreferenced(plan.orphaned))
    elif plan.orphaned:
        # the surviving submission still points at these
        logger.warning("Keeping %d dropped image(s) of submission #%s until it is removed",
                       len(plan.orphaned), submission.pk)

    logger.info("Approved submission #%s as listing #%s", submission.pk, listing.pk)
    cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
    return ApprovalResult(listing=listing, submission_removed=submission_removed)


def delete_submission(submission_id) -> None:
    submission = _get(Submission, submission_id, "Submission")
    urls = list(submission.images or [])
    pk = submission.pk

    with record_store("delete submission"):
        submission.delete()

    images.delete_urls(_listings_store(), _unreferenced(urls))
    logger.info("Deleted submission #%s", pk)
    cache.invalidate(cache.ADMIN_PATH)


# ----------------------------- Testimonials -----------------------------

def _single(file):
    return [file] if file is not None else []


def create_testimonial(data, file=None) -> Testimonial:
    fields = _validated(TestimonialForm, data)
    fields.pop("existing_image", None)
    images.validate_uploads(_single(file), "image")

    uploaded = images.upload_images(_testimonials_store(), _single(file))

    with _write("create testimonial", uploaded):
        testimonial = Testimonial.objects.create(**fields, image=uploaded[0] if uploaded else None)

    logger.info("Created testimonial #%s", testimonial.pk)
    cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
    return testimonial


def update_testimonial(testimonial_id, data, file=None) -> Testimonial:
    """
    `existing_image` in `data` is the kept URL (blank = cleared). A new upload
    replaces whatever was kept; the superseded image is deleted after the save.
    """
    fields = _validated(TestimonialForm, data)
    kept_url = fields.pop("existing_image", None)
    images.validate_uploads(_single(file), "image")
    testimonial = _get(Testimonial, testimonial_id, "Testimonial")

    original = [testimonial.image] if testimonial.image else []
    kept = images.restrict_to_original([kept_url] if kept_url else [], original)

    store = _testimonials_store()
    uploaded = images.upload_images(store, _single(file))
    plan = images.reconcile(original, [] if uploaded else kept, uploaded)
    image = plan.final[0] if plan.final else None

    with _write("update testimonial", uploaded):
        updated = Testimonial.objects.filter(pk=testimonial.pk).update(**fields, image=image)
    if not updated:
        if uploaded:
            logger.warning("Testimonial #%s vanished; uploaded image is orphaned: %s", testimonial.pk, uploaded)
        raise NotFound("Testimonial", testimonial_id)

    for k, v in fields.items():
        setattr(testimonial, k, v)
    testimonial.image = image

    images.delete_urls(store, plan.orphaned)
    logger.info("Updated testimonial #%s", testimonial.pk)
    cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
    return testimonial


def delete_testimonial(testimonial_id) -> None:
    testimonial = _get(Testimonial, testimonial_id, "Testimonial")
    urls = [testimonial.image] if testimonial.image else []
    pk = testimonial.pk

    with record_store("delete testimonial"):
        testimonial.delete()

    images.delete_urls(_testimonials_store(), urls)
    logger.info("Deleted testimonial #%s", pk)
    cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
