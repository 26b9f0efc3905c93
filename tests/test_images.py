import pytest
from django.http import QueryDict

from marketplace import images
from marketplace.exceptions import UploadError, ValidationError

from conftest import RecordingBlobStore, make_image

A = "http://localhost:8000/media/listings-images/a.jpg"
B = "http://localhost:8000/media/listings-images/b.jpg"
C = "http://localhost:8000/media/listings-images/c.jpg"
NEW = "http://localhost:8000/media/listings-images/new.png"


def test_reconcile_final_is_kept_then_uploaded():
    plan = images.reconcile([A, B, C], [C, A], [NEW])
    assert plan.final == [C, A, NEW]
    assert plan.orphaned == [B]


def test_reconcile_create_has_no_orphans():
    plan = images.reconcile([], [], [NEW])
    assert plan.final == [NEW]
    assert plan.orphaned == []


def test_reconcile_dropping_everything():
    plan = images.reconcile([A, B], [], [])
    assert plan.final == []
    assert plan.orphaned == [A, B]


def test_reconcile_same_inputs_twice_is_stable():
    first = images.reconcile([A, B], [A, B], [])
    second = images.reconcile(first.final, [A, B], [])
    assert first == second
    assert second.orphaned == []


def test_reconcile_orphans_each_url_once():
    plan = images.reconcile([A, A, B], [B], [])
    assert plan.orphaned == [A]


def test_parse_kept_urls_from_repeated_fields_and_comma_string():
    qd = QueryDict(mutable=True)
    qd.setlist("existing_images", [A, f"{B}, {C}", ""])
    assert images.parse_kept_urls(qd) == [A, B, C]
    assert images.parse_kept_urls({"existing_images": f"{A},{B}"}) == [A, B]
    assert images.parse_kept_urls({}) == []


def test_restrict_to_original_drops_foreign_and_duplicate_urls(caplog):
    kept = images.restrict_to_original([B, "http://evil.example/x.jpg", B, A], [A, B])
    assert kept == [B, A]
    assert "not on the record" in caplog.text


def test_non_empty_skips_zero_byte_parts():
    empty = make_image()
    empty.size = 0
    good = make_image()
    assert images.non_empty([empty, None, good]) == [good]


def test_validate_uploads_accepts_real_images():
    images.validate_uploads([make_image("a.jpg"), make_image("b.png", fmt="PNG")])


def test_validate_uploads_rejects_oversized(settings):
    settings.MAX_IMAGE_UPLOAD_BYTES = 1024
    with pytest.raises(ValidationError) as exc:
        images.validate_uploads([make_image(pad_to=4096)])
    assert "images" in exc.value.errors


def test_validate_uploads_rejects_wrong_type_and_garbage():
    from django.core.files.uploadedfile import SimpleUploadedFile

    pdf = SimpleUploadedFile("doc.pdf", b"%PDF-1.4", content_type="application/pdf")
    fake = SimpleUploadedFile("fake.jpg", b"definitely not a jpeg", content_type="image/jpeg")
    with pytest.raises(ValidationError) as exc:
        images.validate_uploads([pdf, fake], "image")
    assert len(exc.value.errors["image"]) == 2


def test_storage_name_keeps_lowercased_extension():
    name = images.storage_name("My Bike.JPG")
    assert name.endswith(".jpg")
    assert len(name) == 32 + 4
    assert images.storage_name("My Bike.JPG") != name


def test_upload_images_returns_urls_in_file_order():
    store = RecordingBlobStore("listings-images")
    urls = images.upload_images(store, [make_image("one.jpg"), make_image("two.png", fmt="PNG")])
    assert len(urls) == 2
    assert urls[0].endswith(".jpg") and urls[1].endswith(".png")
    assert all(url.startswith("http://localhost:8000/media/listings-images/") for url in urls)


def test_upload_images_stops_at_first_failure(caplog):
    store = RecordingBlobStore("listings-images")
    store.fail_upload_at = 1
    with pytest.raises(UploadError):
        images.upload_images(store, [make_image("one.jpg"), make_image("two.jpg"), make_image("three.jpg")])
    assert len(store.uploaded) == 1
    assert "orphaned" in caplog.text


def test_delete_urls_skips_foreign_and_dedupes():
    store = RecordingBlobStore("listings-images")
    ours = store.seed("a.jpg")
    images.delete_urls(store, [ours, ours, "https://images.unsplash.com/photo.jpg"])
    assert store.removed == ["a.jpg"]
    assert store.remove_calls == 1
    assert not store.has("a.jpg")


def test_delete_urls_with_nothing_ours_makes_no_call():
    store = RecordingBlobStore("listings-images")
    images.delete_urls(store, ["https://cdn.example.com/listings-images/a.jpg"])
    images.delete_urls(store, [])
    assert store.remove_calls == 0


def test_delete_urls_logs_failures_without_raising(caplog):
    store = RecordingBlobStore("listings-images")
    url = store.seed("a.jpg")
    store.fail_remove = {"a.jpg"}
    images.delete_urls(store, [url])
    assert "could not delete from listings-images: a.jpg" in caplog.text


def test_validate_uploads_rejects_huge_declared_dimensions(monkeypatch):
    from PIL import Image

    # a tiny file whose pixel count is far past the decoder limit
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ValidationError) as exc:
        images.validate_uploads([make_image("bomb.png", fmt="PNG", size=(64, 64))])
    assert exc.value.errors["images"] == ["bomb.png is not a valid image."]
