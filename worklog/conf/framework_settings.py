"""
Base settings for projects serving the worklog API.
Projects import * from this file in their own settings.py.
"""

import copy
import os
from pathlib import Path

import sentry_sdk

from worklog.defaults import LIBRARY_DEFAULTS

# The project's settings.py is expected to redefine BASE_DIR relative to itself.
BASE_DIR = Path(os.getcwd())

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-worklog-default-key-change-me"
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"

ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    # Third-party apps
    "django_filters",
    "corsheaders",
    # Framework apps
    "worklog",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "worklog.auth.middleware.JWTAuthenticationMiddleware",
    "worklog.cache.middleware.ResponseCacheMiddleware",
]

ROOT_URLCONF = "worklog.urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": os.environ.get(
            "DJANGO_CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"
        ),
        "LOCATION": os.environ.get("DJANGO_CACHE_LOCATION", "worklog-api"),
    }
}

AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
        "OPTIONS": {"min_length": 8},
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
APPEND_SLASH = False

# JWT settings
JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
JWT_ACCESS_TOKEN_LIFETIME = int(os.environ.get("JWT_ACCESS_TOKEN_LIFETIME", "86400"))
JWT_AUTH_HEADER_PREFIX = "Bearer"

# CORS settings
CORS_ALLOW_ALL_ORIGINS = (
    os.environ.get("CORS_ALLOW_ALL_ORIGINS", "False").lower() == "true"
)
CORS_ALLOWED_ORIGINS = (
    os.environ.get("CORS_ALLOWED_ORIGINS", "").split(",")
    if os.environ.get("CORS_ALLOWED_ORIGINS")
    else []
)
CORS_URLS_REGEX = r"^/api/.*$"

# API response cache, durations in minutes
WORKLOG_API_CACHE = copy.deepcopy(LIBRARY_DEFAULTS["api_cache"])
WORKLOG_API_CACHE.update(
    {
        "enabled": os.environ.get("API_CACHE_ENABLED", "True").lower() == "true",
        "default_duration": int(os.environ.get("API_CACHE_DURATION", "15")),
        "max_age_days": int(os.environ.get("API_CACHE_MAX_AGE", "3")),
        "schedule_sweep": os.environ.get("API_CACHE_SCHEDULE_SWEEP", "False").lower()
        == "true",
    }
)
WORKLOG_API_CACHE["long_cache_routes"]["api/attributes"] = int(
    os.environ.get("API_CACHE_ATTRIBUTES_DURATION", "60")
)
WORKLOG_API_CACHE["short_cache_routes"]["api/timesheets"] = int(
    os.environ.get("API_CACHE_TIMESHEETS_DURATION", "5")
)

WORKLOG_FILTERING = copy.deepcopy(LIBRARY_DEFAULTS["filtering"])
WORKLOG_PAGINATION = copy.deepcopy(LIBRARY_DEFAULTS["pagination"])

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "[{levelname}] {asctime} {name} {process:d} {thread:d} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "worklog": {
            "handlers": ["console"],
            "level": os.environ.get("WORKLOG_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

SENTRY_DSN = os.environ.get("SENTRY_DSN")
if SENTRY_DSN:
    sentry_sdk.init(
        dsn=SENTRY_DSN,
        environment=os.environ.get("SENTRY_ENVIRONMENT", "production"),
        traces_sample_rate=float(os.environ.get("SENTRY_TRACES_SAMPLE_RATE", "0")),
        send_default_pii=False,
    )
