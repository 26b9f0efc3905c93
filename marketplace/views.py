import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from catalog import cache
from catalog.models import Listing, Testimonial
from . import actions, auth, images
from .exceptions import MarketplaceError, NotFound, UpstreamError, ValidationError
from .forms import PriceSuggestionForm
from .models import Submission
from .pricing import suggest_price as ai_suggest_price

logger = logging.getLogger(__name__)


def json_errors(view):
    """Turn marketplace errors into the JSON shapes the UI understands."""
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as exc:
            return JsonResponse({"ok": False, "error": exc.public_message, "errors": exc.errors}, status=400)
        except NotFound as exc:
            return JsonResponse({"ok": False, "error": str(exc)}, status=404)
        except UpstreamError as exc:
            return JsonResponse({"ok": False, "error": exc.public_message}, status=502)
        except MarketplaceError as exc:
            logger.exception("%s failed: %s", view.__name__, exc)
            return JsonResponse({"ok": False, "error": exc.public_message}, status=500)
    return _wrapped


# ---------- PUBLIC: SELL FORM ----------

@require_POST
@json_errors
def sell_submit(request):
    submission = actions.create_submission(request.POST, request.FILES.getlist("images"))
    return JsonResponse({
        "ok": True,
        "submission": {"id": submission.pk, "submitted_at": submission.submitted_at.isoformat()},
    }, status=201)


@require_POST
@json_errors
def suggest_price(request):
    form = PriceSuggestionForm(request.POST)
    if not form.is_valid():
        raise ValidationError(form.errors)
    result = ai_suggest_price(**form.cleaned_data)
    return JsonResponse({"ok": True, **result})


# ---------- ADMIN: SESSION ----------

@require_POST
def admin_login(request):
    if not auth.check_password(request.POST.get("password") or ""):
        logger.warning("Failed admin login from %s", request.META.get("REMOTE_ADDR"))
        return JsonResponse({"ok": False, "error": "Incorrect password."}, status=401)
    token = auth.login(request)
    return JsonResponse({"ok": True, "token": token})


@require_POST
def admin_logout(request):
    auth.logout(request)
    return JsonResponse({"ok": True})


def _dashboard_payload():
    with actions.record_store("load dashboard"):
        return {
            "submissions": [s.to_dict() for s in Submission.objects.all()],
            "listings": [obj.to_dict() for obj in Listing.objects.all()],
            "testimonials": [t.to_dict() for t in Testimonial.objects.all()],
        }


@require_GET
@auth.admin_required
@json_errors
def admin_dashboard(request):
    data = cache.cached_payload(cache.ADMIN_PATH, _dashboard_payload)
    return JsonResponse({"ok": True, **data})


# ---------- ADMIN: LISTINGS ----------

@require_POST
@auth.admin_required
@json_errors
def listing_create(request):
    listing = actions.create_listing(request.POST, request.FILES.getlist("images"))
    return JsonResponse({"ok": True, "listing": listing.to_dict()}, status=201)


@require_POST
@auth.admin_required
@json_errors
def listing_update(request, pk: int):
    listing = actions.update_listing(
        pk,
        request.POST,
        images.parse_kept_urls(request.POST),
        request.FILES.getlist("images"),
    )
    return JsonResponse({"ok": True, "listing": listing.to_dict()})


@require_POST
@auth.admin_required
@json_errors
def listing_delete(request, pk: int):
    actions.delete_listing(pk)
    return JsonResponse({"ok": True})


# ---------- ADMIN: SUBMISSIONS ----------

@require_POST
@auth.admin_required
@json_errors
def submission_approve(request, pk: int):
    result = actions.approve_submission(
        pk,
        request.POST,
        images.parse_kept_urls(request.POST),
        request.FILES.getlist("images"),
    )
    payload = {"ok": True, "listing": result.listing.to_dict(), "submission_removed": result.submission_removed}
    if not result.submission_removed:
        payload["warning"] = "Listing created, but the submission could not be removed. Delete it manually."
    return JsonResponse(payload, status=201)


@require_POST
@auth.admin_required
@json_errors
def submission_delete(request, pk: int):
    actions.delete_submission(pk)
    return JsonResponse({"ok": True})


# ---------- ADMIN: TESTIMONIALS ----------

@require_POST
@auth.admin_required
@json_errors
def testimonial_create(request):
    testimonial = actions.create_testimonial(request.POST, request.FILES.get("image"))
    return JsonResponse({"ok": True, "testimonial": testimonial.to_dict()}, status=201)


@require_POST
@auth.admin_required
@json_errors
def testimonial_update(request, pk: int):
    testimonial = actions.update_testimonial(pk, request.POST, request.FILES.get("image"))
    return JsonResponse({"ok": True, "testimonial": testimonial.to_dict()})


@require_POST
@auth.admin_required
@json_errors
def testimonial_delete(request, pk: int):
    actions.delete_testimonial(pk)
    return JsonResponse({"ok": True})
