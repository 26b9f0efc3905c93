import pytest
from django.core.management import call_command

from catalog.management.commands.seed_catalog import LISTINGS, TESTIMONIALS
from catalog.models import Listing, Testimonial

from conftest import listing_data

pytestmark = pytest.mark.django_db


def test_seed_catalog_adds_samples(listings_store, testimonials_store):
    call_command("seed_catalog")
    assert Listing.objects.count() == len(LISTINGS)
    assert Testimonial.objects.count() == len(TESTIMONIALS)


def test_seed_catalog_flush_removes_uploaded_photos(listings_store, testimonials_store):
    url = listings_store.seed("mine.jpg")
    Listing.objects.create(**listing_data(), images=[url])
    call_command("seed_catalog")

    call_command("seed_catalog", "--flush")

    assert Listing.objects.count() == len(LISTINGS)
    assert listings_store.removed == ["mine.jpg"]
    # sample photos are hosted elsewhere and never deleted
    assert listings_store.remove_calls == 1
