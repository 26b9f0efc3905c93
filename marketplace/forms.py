from django import forms
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from catalog.forms import ListingForm, min_length
from catalog.models import CONDITION_CHOICES
from .models import Submission


class SubmissionForm(forms.ModelForm):
    """Public "sell my bike" form."""

    class Meta:
        model = Submission
        fields = [
            "name", "phone", "location",
            "make", "model", "year", "price", "km_driven",
            "engine_displacement", "registration", "condition", "description",
        ]

    def clean_name(self):
        return min_length(self.cleaned_data.get("name"), 2, _("Name"))

    def clean_phone(self):
        return min_length(self.cleaned_data.get("phone"), 10, _("Phone"))

    def clean_location(self):
        return min_length(self.cleaned_data.get("location"), 2, _("Location"))

    # same attribute rules as a live listing, but sellers owe a longer description
    clean_make = ListingForm.clean_make
    clean_model = ListingForm.clean_model
    clean_registration = ListingForm.clean_registration
    clean_year = ListingForm.clean_year
    clean_price = ListingForm.clean_price
    clean_engine_displacement = ListingForm.clean_engine_displacement

    def clean_description(self):
        return min_length(self.cleaned_data.get("description"), 20, _("Description"))


class PriceSuggestionForm(forms.Form):
    make = forms.CharField(label=_("Make"))
    model = forms.CharField(label=_("Model"))
    year = forms.IntegerField(label=_("Year"))
    condition = forms.ChoiceField(label=_("Condition"), choices=CONDITION_CHOICES)
    km_driven = forms.IntegerField(label=_("Distance driven"), min_value=0, help_text=_("Total km on the bike."))

    def clean_make(self):
        return min_length(self.cleaned_data.get("make"), 2, _("Make"))

    def clean_year(self):
        y = self.cleaned_data["year"]
        if y < 1900 or y > timezone.now().year + 1:
            raise forms.ValidationError(_("Please enter a valid year."))
        return y
