# catalog/models.py
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.urls import reverse


CONDITION_CHOICES = [
    ("Excellent", "Excellent"),
    ("Good", "Good"),
    ("Fair", "Fair"),
    ("Poor", "Poor"),
]
CONDITIONS = [code for code, _ in CONDITION_CHOICES]


class Listing(models.Model):
    """A live motorcycle on the storefront."""

    # basic
    make = models.CharField(max_length=256)
    model = models.CharField(max_length=256)
    year = models.PositiveIntegerField(validators=[MinValueValidator(1900)])

    # specs
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    km_driven = models.PositiveIntegerField(default=0)
    engine_displacement = models.PositiveIntegerField(help_text="cc")
    registration = models.CharField(max_length=256)
    condition = models.CharField(max_length=12, choices=CONDITION_CHOICES)
    description = models.TextField()

    # media: ordered public URLs, first one is the cover
    images = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return f"{self.make} {self.model} {self.year}"

    def get_absolute_url(self):
        return reverse("listing_detail", args=[self.pk])

    @property
    def cover(self):
        return self.images[0] if self.images else None

    def to_dict(self):
        return {
            "id": self.pk,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "price": self.price,
            "km_driven": self.km_driven,
            "engine_displacement": self.engine_displacement,
            "registration": self.registration,
            "condition": self.condition,
            "description": self.description,
            "images": list(self.images or []),
        }


class Testimonial(models.Model):
    name = models.CharField(max_length=256)
    location = models.CharField(max_length=256)
    review = models.TextField()
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    image = models.URLField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return f"{self.name} ({self.rating}/5)"

    def to_dict(self):
        return {
            "id": self.pk,
            "name": self.name,
            "location": self.location,
            "review": self.review,
            "rating": self.rating,
            "image": self.image,
        }
