from django.core.validators import MinValueValidator
from django.db import models

from catalog.models import CONDITION_CHOICES


class Submission(models.Model):
    """
    A "sell my bike" lead. Never public; it lives until an admin either
    deletes it or approves it into a catalog Listing.
    """

    # who is selling
    name = models.CharField(max_length=256)
    phone = models.CharField(max_length=50)
    location = models.CharField(max_length=256)

    # proposed bike
    make = models.CharField(max_length=256)
    model = models.CharField(max_length=256)
    year = models.PositiveIntegerField(validators=[MinValueValidator(1900)])
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    km_driven = models.PositiveIntegerField(default=0)
    engine_displacement = models.PositiveIntegerField(help_text="cc")
    registration = models.CharField(max_length=256)
    condition = models.CharField(max_length=12, choices=CONDITION_CHOICES)
    description = models.TextField()

    images = models.JSONField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-submitted_at", "-id"]

    def __str__(self):
        return f"{self.make} {self.model} {self.year} from {self.name}"

    def listing_fields(self) -> dict:
        """Field values an approval pre-fills the listing form with."""
        return {
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "price": self.price,
            "km_driven": self.km_driven,
            "engine_displacement": self.engine_displacement,
            "registration": self.registration,
            "condition": self.condition,
            "description": self.description,
        }

    def to_dict(self):
        return {
            "id": self.pk,
            "name": self.name,
            "phone": self.phone,
            "location": self.location,
            **self.listing_fields(),
            "images": list(self.images or []),
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }
