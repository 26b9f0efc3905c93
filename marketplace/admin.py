# marketplace/admin.py
from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from catalog.admin import OrchestratedAdminMixin
from . import actions
from .exceptions import MarketplaceError
from .models import Submission

# Admin site titles
admin.site.site_header = _("BikeMart Admin")
admin.site.site_title = _("BikeMart Admin")
admin.site.index_title = _("Dashboard")


@admin.register(Submission)
class SubmissionAdmin(OrchestratedAdminMixin, admin.ModelAdmin):
    list_display = ("__str__", "name", "phone", "price", "condition", "photo_count", "submitted_at")
    list_filter = ("condition", "submitted_at")
    search_fields = ("name", "phone", "location", "make", "model", "registration")
    readonly_fields = ("images", "submitted_at")
    date_hierarchy = "submitted_at"
    delete_action = staticmethod(actions.delete_submission)

    actions = ["approve_as_submitted"]

    @admin.display(description=_("Photos"))
    def photo_count(self, obj):
        return len(obj.images or [])

    @admin.action(description=_("Approve selected submissions as submitted"))
    def approve_as_submitted(self, request, queryset):
        approved = 0
        for submission in list(queryset):
            try:
                result = actions.approve_submission(
                    submission.pk,
                    submission.listing_fields(),
                    kept_urls=list(submission.images or []),
                )
            except MarketplaceError as exc:
                self.message_user(request, f"#{submission.pk}: {exc}", level=messages.ERROR)
                continue
            approved += 1
            if not result.submission_removed:
                self.message_user(
                    request,
                    _("Listing #%(listing)s created, but submission #%(sub)s could not be removed.")
                    % {"listing": result.listing.pk, "sub": submission.pk},
                    level=messages.WARNING,
                )
        if approved:
            self.message_user(request, _("%(n)d submission(s) approved.") % {"n": approved}, level=messages.SUCCESS)
