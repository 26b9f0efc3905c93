import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from marketplace import actions
from marketplace.exceptions import NotFound
from . import cache
from .models import Listing, Testimonial

logger = logging.getLogger(__name__)


class OrchestratedAdminMixin:
    """
    Writes from the Django admin follow the admin panel's rules: deletes go
    through the orchestrators so the record's images leave the bucket with it,
    and every save drops the cached views that show the record.
    """
    delete_action = None

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        cache.invalidate(cache.INDEX_PATH, cache.detail_path(obj.pk), cache.ADMIN_PATH)

    def delete_model(self, request, obj):
        self.delete_action(obj.pk)

    def delete_queryset(self, request, queryset):
        for pk in list(queryset.values_list("pk", flat=True)):
            try:
                self.delete_action(pk)
            except NotFound:
                # someone else got there first
                logger.info("%s #%s already deleted", self.model.__name__, pk)


@admin.register(Listing)
class ListingAdmin(OrchestratedAdminMixin, admin.ModelAdmin):
    list_display  = ("__str__", "make", "model", "year", "price", "condition", "photo_count", "updated_at")
    list_filter   = ("condition", "make", "year")
    search_fields = ("make", "model", "registration", "description")
    readonly_fields = ("images", "created_at", "updated_at")
    delete_action = staticmethod(actions.delete_listing)

    fieldsets = (
        ("Basics", {
            "fields": ("make", "model", "year", "price", "condition"),
        }),
        ("Specs", {
            "fields": ("km_driven", "engine_displacement", "registration", "description"),
        }),
        ("Photos", {
            "fields": ("images",),
            "description": "Photos are managed from the admin panel.",
        }),
        ("System", {
            "fields": ("created_at", "updated_at"),
        }),
    )

    @admin.display(description=_("Photos"))
    def photo_count(self, obj):
        return len(obj.images or [])


@admin.register(Testimonial)
class TestimonialAdmin(OrchestratedAdminMixin, admin.ModelAdmin):
    list_display  = ("name", "location", "rating", "created_at")
    list_filter   = ("rating",)
    search_fields = ("name", "location", "review")
    readonly_fields = ("image", "created_at")
    delete_action = staticmethod(actions.delete_testimonial)
