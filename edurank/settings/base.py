"""
Base settings for the edurank project.

Everything environment-specific is read with os.getenv so the same module
serves development, production and the test runner.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.getenv("SECRET_KEY", "django-insecure-edurank-development-key")

DEBUG = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "apps.ranking",
]

# The ranking engine holds no persistent state; the database only exists so
# the Django test runner and management commands have a default alias.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("SQLITE_PATH", BASE_DIR / "db.sqlite3"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ("rest_framework.renderers.JSONRenderer",),
    "DEFAULT_AUTHENTICATION_CLASSES": (),
    "DEFAULT_PERMISSION_CLASSES": (),
    "UNAUTHENTICATED_USER": None,
}


def _optional_int(name):
    value = os.getenv(name)
    return int(value) if value else None


# Ranking engine configuration. WEIGHTS entries override the built-in weight
# table by factor key (see apps.ranking.conf.WeightTable).
RANKING_ENGINE = {
    "WEIGHTS": {},
    "MAX_WORKERS": _optional_int("RANKING_MAX_WORKERS"),
    "PARALLEL_THRESHOLD": int(os.getenv("RANKING_PARALLEL_THRESHOLD", "64")),
    "HIGHLIGHT_RADIUS": int(os.getenv("RANKING_HIGHLIGHT_RADIUS", "20")),
    "DEFAULT_RECOMMENDATION_LIMIT": 12,
    "DEFAULT_SEARCH_LIMIT": 20,
    "DEFAULT_SUGGESTION_LIMIT": 8,
    "DEFAULT_POPULAR_SEARCH_LIMIT": 10,
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "simple": {
            "format": "{levelname} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
        "apps.ranking": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}
