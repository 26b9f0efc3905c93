import os
from pathlib import Path
from dotenv import load_dotenv
load_dotenv()


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("SECRET_KEY", "django-insecure-bikemart-dev-key-change-me")

DEBUG = os.getenv("DEBUG", "1") == "1"
ALLOWED_HOSTS = ["localhost", "127.0.0.1", "testserver", os.getenv("HOST", "")]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # app
    "catalog",
    "marketplace",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "bikemart.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "bikemart.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "bikemart",
    }
}
# seconds a cached storefront payload lives before it is rebuilt anyway
CATALOG_CACHE_TIMEOUT = int(os.getenv("CATALOG_CACHE_TIMEOUT", 60 * 10))

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

USE_I18N = True
LANGUAGE_CODE = "en"
TIME_ZONE = "UTC"
USE_TZ = True

# Static files (CSS, JS, images)
STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

MEDIA_URL = "/media/"
MEDIA_ROOT = Path(os.getenv("MEDIA_ROOT", str(BASE_DIR / "media")))

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Blob storage

# Any django Storage class; it is instantiated once per bucket with
# location=MEDIA_ROOT/<bucket> and base_url=MEDIA_URL<bucket>/
BLOB_STORAGE_BACKEND = os.getenv("BLOB_STORAGE_BACKEND", "django.core.files.storage.FileSystemStorage")
# only URLs on this host are ever deleted from the buckets
STORAGE_PUBLIC_ORIGIN = os.getenv("STORAGE_PUBLIC_ORIGIN", "http://localhost:8000")
LISTINGS_BUCKET     = os.getenv("LISTINGS_BUCKET", "listings-images")
TESTIMONIALS_BUCKET = os.getenv("TESTIMONIALS_BUCKET", "testimonials-images")
MAX_IMAGE_UPLOAD_BYTES = int(os.getenv("MAX_IMAGE_UPLOAD_BYTES", 5 * 1024 * 1024))
DATA_UPLOAD_MAX_MEMORY_SIZE = 30 * 1024 * 1024


# Admin panel

ADMIN_PASSWORD      = os.getenv("ADMIN_PASSWORD", "")
ADMIN_TOKEN_MAX_AGE = int(os.getenv("ADMIN_TOKEN_MAX_AGE", 60 * 60 * 8))


# AI price suggestion

GEMINI_API_KEY           = os.getenv("GEMINI_API_KEY", "")
GEMINI_API_BASE          = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
PRICE_SUGGESTION_MODEL   = os.getenv("PRICE_SUGGESTION_MODEL", "gemini-2.0-flash")
PRICE_SUGGESTION_TIMEOUT = int(os.getenv("PRICE_SUGGESTION_TIMEOUT", 30))


# Email info

EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")
EMAIL_HOST = os.getenv("EMAIL_HOST", "smtp.gmail.com")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", 587))
EMAIL_USE_TLS = True
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "BikeMart <noreply@example.com>")
SITE_NAME = "BikeMart"
# sales team inbox for new "sell my bike" leads; empty disables the mail
SUBMISSION_NOTIFICATION_EMAIL = os.getenv("SUBMISSION_NOTIFICATION_EMAIL", "")


# Logging

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "catalog":     {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
        "marketplace": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": True},
    },
}


CSRF_TRUSTED_ORIGINS = [
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]
