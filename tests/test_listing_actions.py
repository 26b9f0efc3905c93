import pytest
from django.core.cache import cache as django_cache
from django.db import DatabaseError

from catalog import cache
from catalog.models import Listing
from marketplace import actions
from marketplace.exceptions import NotFound, StoreUnavailable, UploadError, ValidationError

from conftest import listing_data, make_image

pytestmark = pytest.mark.django_db


def _listing_with_images(store, *names):
    urls = [store.seed(name) for name in names]
    return Listing.objects.create(**listing_data(), images=urls), urls


# ---------- create ----------

def test_create_listing_with_one_large_jpeg(listings_store):
    photo = make_image("cb350.jpg", pad_to=2 * 1024 * 1024)
    listing = actions.create_listing(listing_data(), [photo])

    listing.refresh_from_db()
    assert isinstance(listing.pk, int)
    assert len(listing.images) == 1
    assert listing.images[0].endswith(".jpg")
    assert listings_store.has(listing.images[0].rsplit("/", 1)[1])
    assert listings_store.remove_calls == 0


def test_create_listing_skips_empty_file_parts(listings_store):
    empty = make_image()
    empty.size = 0
    listing = actions.create_listing(listing_data(), [empty])
    assert listing.images == []
    assert listings_store.calls == 0


@pytest.mark.parametrize("field, value", [
    ("price", "0"),
    ("condition", "Mint"),
    ("year", "1850"),
    ("make", "H"),
    ("description", "short"),
])
def test_create_listing_rejects_bad_input_before_uploading(listings_store, field, value):
    with pytest.raises(ValidationError) as exc:
        actions.create_listing(listing_data(**{field: value}), [make_image()])
    assert field in exc.value.errors
    assert listings_store.calls == 0
    assert Listing.objects.count() == 0


def test_create_listing_upload_failure_writes_nothing(listings_store):
    listings_store.fail_upload_at = 1
    with pytest.raises(UploadError):
        actions.create_listing(listing_data(), [make_image("a.jpg"), make_image("b.jpg")])
    assert Listing.objects.count() == 0


def test_create_listing_record_failure_logs_orphans(listings_store, monkeypatch, caplog):
    def broken(**kwargs):
        raise DatabaseError("database is locked")

    monkeypatch.setattr(Listing.objects, "create", broken)
    with pytest.raises(StoreUnavailable):
        actions.create_listing(listing_data(), [make_image()])
    assert len(listings_store.uploaded) == 1
    assert "orphaned" in caplog.text


# ---------- update ----------

def test_update_dropping_the_only_image(listings_store):
    listing = actions.create_listing(listing_data(), [make_image()])
    old_url = listing.images[0]
    old_name = old_url.rsplit("/", 1)[1]

    updated = actions.update_listing(listing.pk, listing_data(), kept_urls=[], files=[])

    assert updated.images == []
    listing.refresh_from_db()
    assert listing.images == []
    assert listings_store.removed == [old_name]
    assert not listings_store.has(old_name)


def test_update_keeps_subset_then_appends_uploads(listings_store):
    listing, (a, b, c) = _listing_with_images(listings_store, "a.jpg", "b.jpg", "c.jpg")

    updated = actions.update_listing(listing.pk, listing_data(price="140000"), [c, a], [make_image("new.png", fmt="PNG")])

    assert updated.images[:2] == [c, a]
    assert len(updated.images) == 3 and updated.images[2].endswith(".png")
    assert updated.price == 140000
    assert listings_store.removed == ["b.jpg"]
    assert listings_store.has("a.jpg") and listings_store.has("c.jpg")


def test_update_twice_with_same_inputs_touches_no_blobs(listings_store):
    listing, urls = _listing_with_images(listings_store, "a.jpg", "b.jpg")

    first = actions.update_listing(listing.pk, listing_data(), urls)
    second = actions.update_listing(listing.pk, listing_data(), urls)

    assert first.images == second.images == urls
    assert listings_store.calls == 0


def test_update_ignores_kept_urls_the_record_never_had(listings_store):
    listing, (a,) = _listing_with_images(listings_store, "a.jpg")
    stranger = listings_store.seed("someone-else.jpg")

    updated = actions.update_listing(listing.pk, listing_data(), [a, stranger])

    assert updated.images == [a]
    assert listings_store.has("someone-else.jpg")


def test_update_missing_listing_is_not_found_without_uploads(listings_store):
    with pytest.raises(NotFound):
        actions.update_listing(999, listing_data(), [], [make_image()])
    assert listings_store.calls == 0


def test_update_succeeds_even_if_orphan_delete_fails(listings_store, caplog):
    listing, (a, b) = _listing_with_images(listings_store, "a.jpg", "b.jpg")
    listings_store.fail_remove = {"b.jpg"}

    updated = actions.update_listing(listing.pk, listing_data(), [a])

    assert updated.images == [a]
    listing.refresh_from_db()
    assert listing.images == [a]
    assert "could not delete" in caplog.text


def test_update_never_deletes_foreign_urls(listings_store):
    foreign = "https://images.unsplash.com/photo-1.jpg"
    listing = Listing.objects.create(**listing_data(), images=[foreign])

    actions.update_listing(listing.pk, listing_data(), [])
    assert listings_store.remove_calls == 0


# ---------- delete ----------

def test_delete_listing_removes_row_then_images(listings_store):
    listing, _ = _listing_with_images(listings_store, "a.jpg", "b.jpg")

    actions.delete_listing(listing.pk)

    assert not Listing.objects.filter(pk=listing.pk).exists()
    assert sorted(listings_store.removed) == ["a.jpg", "b.jpg"]


def test_delete_missing_listing_makes_no_blob_calls(listings_store):
    with pytest.raises(NotFound):
        actions.delete_listing(12345)
    assert listings_store.calls == 0


# ---------- cache ----------

def test_mutations_invalidate_storefront_paths(listings_store):
    listing = actions.create_listing(listing_data())
    for path in (cache.INDEX_PATH, cache.detail_path(listing.pk), cache.ADMIN_PATH):
        django_cache.set(f"{cache.KEY_PREFIX}{path}", {"stale": True})

    actions.update_listing(listing.pk, listing_data(price="99999"))

    for path in (cache.INDEX_PATH, cache.detail_path(listing.pk), cache.ADMIN_PATH):
        assert django_cache.get(f"{cache.KEY_PREFIX}{path}") is None
