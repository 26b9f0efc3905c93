# catalog/views.py
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from . import cache
from .models import Listing, Testimonial


def _storefront_payload():
    listings = [obj.to_dict() for obj in Listing.objects.all()]
    testimonials = [t.to_dict() for t in Testimonial.objects.all()]
    return {"listings": listings, "testimonials": testimonials}


def _to_int(val):
    try:
        return int(str(val).replace(",", ""))
    except (TypeError, ValueError):
        return None


def filter_listings(listings, params):
    """
    Storefront filters over serialized listings.

    q          substring of make, model or "make model" (case-insensitive)
    make       exact make, "all" disables
    condition  exact condition, "all" disables
    price_min / price_max  inclusive bounds, malformed values ignored
    """
    q = (params.get("q") or "").strip().lower()
    make = (params.get("make") or "").strip().lower()
    condition = (params.get("condition") or "").strip()
    price_min = _to_int(params.get("price_min"))
    price_max = _to_int(params.get("price_max"))

    out = []
    for item in listings:
        if q:
            haystack = f"{item['make']} {item['model']}".lower()
            if q not in haystack:
                continue
        if make and make != "all" and item["make"].lower() != make:
            continue
        if condition and condition != "all" and item["condition"] != condition:
            continue
        if price_min is not None and item["price"] < price_min:
            continue
        if price_max is not None and item["price"] > price_max:
            continue
        out.append(item)
    return out


@require_GET
def index(request):
    data = cache.cached_payload(cache.INDEX_PATH, _storefront_payload)
    listings = data["listings"]

    # filter UI helpers come from the unfiltered set
    makes = sorted({item["make"] for item in listings})
    max_price = max([item["price"] for item in listings], default=0)

    return JsonResponse({
        "ok": True,
        "listings": filter_listings(listings, request.GET),
        "testimonials": data["testimonials"],
        "makes": makes,
        "max_price": max_price,
    })


@require_GET
def listing_detail(request, pk: int):
    def build():
        obj = Listing.objects.filter(pk=pk).first()
        return obj.to_dict() if obj else None

    data = cache.cached_payload(cache.detail_path(pk), build)
    if data is None:
        return JsonResponse({"ok": False, "error": "Listing not found"}, status=404)
    return JsonResponse({"ok": True, "listing": data})
