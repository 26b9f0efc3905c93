# catalog/forms.py
from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .models import Listing, Testimonial


def min_length(value, n, label):
    value = (value or "").strip()
    if len(value) < n:
        raise forms.ValidationError(_("%(label)s must be at least %(n)s characters.") % {"label": label, "n": n})
    return value


class ListingForm(forms.ModelForm):
    """Listing attributes for create, update and approve. Images are handled separately."""

    class Meta:
        model = Listing
        fields = [
            "make", "model", "year", "price", "km_driven",
            "engine_displacement", "registration", "condition", "description",
        ]

    def clean_make(self):
        return min_length(self.cleaned_data.get("make"), 2, _("Make"))

    def clean_model(self):
        return min_length(self.cleaned_data.get("model"), 1, _("Model"))

    def clean_registration(self):
        return min_length(self.cleaned_data.get("registration"), 2, _("Registration"))

    def clean_description(self):
        return min_length(self.cleaned_data.get("description"), 10, _("Description"))

    def clean_year(self):
        y = self.cleaned_data["year"]
        if y < 1900 or y > timezone.now().year + 1:
            raise forms.ValidationError(_("Please enter a valid year."))
        return y

    def clean_price(self):
        p = self.cleaned_data["price"]
        if p < 1:
            raise forms.ValidationError(_("Price must be at least 1."))
        return p

    def clean_engine_displacement(self):
        cc = self.cleaned_data["engine_displacement"]
        if cc < 1:
            raise forms.ValidationError(_("Engine displacement must be at least 1 cc."))
        return cc


class TestimonialForm(forms.ModelForm):
    # kept image URL; blank means the admin cleared it
    existing_image = forms.CharField(required=False)

    class Meta:
        model = Testimonial
        fields = ["name", "location", "review", "rating"]

    def clean_name(self):
        return min_length(self.cleaned_data.get("name"), 2, _("Name"))

    def clean_location(self):
        return min_length(self.cleaned_data.get("location"), 2, _("Location"))

    def clean_review(self):
        return min_length(self.cleaned_data.get("review"), 10, _("Review"))

    def clean_rating(self):
        r = self.cleaned_data["rating"]
        if r is None or r < 1 or r > 5:
            raise forms.ValidationError(_("Rating must be between 1 and 5."))
        return r

    def clean_existing_image(self):
        return (self.cleaned_data.get("existing_image") or "").strip() or None
