from django.core.management.base import BaseCommand
from django.db import transaction

from catalog import cache
from catalog.models import Listing, Testimonial
from marketplace import actions

# Sample photos live off our storage origin, so image cleanup never touches them.
LISTINGS = [
    {
        "make": "Royal Enfield", "model": "Classic 350", "year": 2021, "price": 165000,
        "km_driven": 12500, "engine_displacement": 349, "registration": "KA01AB1234",
        "condition": "Excellent",
        "description": "Single owner, serviced at the dealership every 5000 km. New tyres.",
        "images": [
            "https://images.unsplash.com/photo-1558981403-c5f9899a28bc?w=1200",
            "https://images.unsplash.com/photo-1568772585407-9361f9bf3a87?w=1200",
        ],
    },
    {
        "make": "Yamaha", "model": "R15 V4", "year": 2022, "price": 158000,
        "km_driven": 8300, "engine_displacement": 155, "registration": "MH12CD5678",
        "condition": "Good",
        "description": "Racing blue, quick shifter, minor scratch on the left fairing.",
        "images": ["https://images.unsplash.com/photo-1609630875171-b1321377ee65?w=1200"],
    },
    {
        "make": "Honda", "model": "CB350", "year": 2020, "price": 172000,
        "km_driven": 21000, "engine_displacement": 348, "registration": "DL3CEF9012",
        "condition": "Good",
        "description": "Highness edition with crash guards and a rear carrier.",
        "images": ["https://images.unsplash.com/photo-1591637333184-19aa84b3e01f?w=1200"],
    },
    {
        "make": "Bajaj", "model": "Pulsar NS200", "year": 2018, "price": 78000,
        "km_driven": 41000, "engine_displacement": 199, "registration": "TN09GH3456",
        "condition": "Fair",
        "description": "Daily commuter, runs well, chain set due for replacement.",
        "images": [],
    },
]

TESTIMONIALS = [
    {
        "name": "Arjun Mehta", "location": "Bengaluru", "rating": 5,
        "review": "Sold my Classic in four days. The price suggestion was spot on.",
        "image": "https://randomuser.me/api/portraits/men/32.jpg",
    },
    {
        "name": "Priya Nair", "location": "Pune", "rating": 4,
        "review": "Smooth paperwork and the bike was exactly as described.",
        "image": None,
    },
]


class Command(BaseCommand):
    help = "Load sample listings and testimonials into the catalog"

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true",
            help="Delete every existing listing and testimonial (and their stored images) first.",
        )

    def handle(self, *args, **options):
        if options["flush"]:
            self._flush()

        with transaction.atomic():
            listings = Listing.objects.bulk_create(Listing(**row) for row in LISTINGS)
            testimonials = Testimonial.objects.bulk_create(Testimonial(**row) for row in TESTIMONIALS)

        cache.invalidate(cache.INDEX_PATH, cache.ADMIN_PATH)
        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(listings)} listings | {len(testimonials)} testimonials"
        ))

    # ---------- helpers ----------
    def _flush(self):
        # one by one through the orchestrators so uploaded photos go too
        n_listings, n_testimonials = 0, 0
        for pk in list(Listing.objects.values_list("pk", flat=True)):
            actions.delete_listing(pk)
            n_listings += 1
        for pk in list(Testimonial.objects.values_list("pk", flat=True)):
            actions.delete_testimonial(pk)
            n_testimonials += 1
        self.stdout.write(self.style.WARNING(
            f"Cleared {n_listings} listings | {n_testimonials} testimonials"
        ))
