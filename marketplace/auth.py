# marketplace/auth.py
"""
Admin panel access: one shared password checked on the server, exchanged for
a signed, timestamped token. The token lives in the session and may also be
sent as an X-Admin-Token header; every admin view re-validates it.
"""
from functools import wraps

from django.conf import settings
from django.core import signing
from django.http import JsonResponse
from django.utils.crypto import constant_time_compare

SESSION_KEY = "admin_token"
HEADER = "HTTP_X_ADMIN_TOKEN"
SALT = "bikemart.admin"


def check_password(raw: str) -> bool:
    expected = getattr(settings, "ADMIN_PASSWORD", "")
    if not expected or not raw:
        return False
    return constant_time_compare(raw, expected)


def issue_token() -> str:
    return signing.dumps({"role": "admin"}, salt=SALT)


def token_is_valid(token: str) -> bool:
    if not token:
        return False
    try:
        data = signing.loads(token, salt=SALT, max_age=settings.ADMIN_TOKEN_MAX_AGE)
    except signing.BadSignature:  # SignatureExpired is a subclass
        return False
    return data.get("role") == "admin"


def login(request) -> str:
    token = issue_token()
    request.session.cycle_key()
    request.session[SESSION_KEY] = token
    return token


def logout(request) -> None:
    request.session.pop(SESSION_KEY, None)


def is_admin(request) -> bool:
    token = request.META.get(HEADER) or request.session.get(SESSION_KEY)
    return token_is_valid(token)


def admin_required(view):
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        if not is_admin(request):
            return JsonResponse({"ok": False, "error": "Admin login required."}, status=401)
        return view(request, *args, **kwargs)
    return _wrapped
