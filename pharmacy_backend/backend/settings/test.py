# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS
- In-memory SQLite, fast hashing, no throttling
- Used by pytest-django (see pyproject.toml) and `manage.py test`
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, REST_FRAMEWORK

DEBUG = False
SECRET_KEY = "test-insecure-key"
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

LOGGING = {
    **LOGGING,
    "loggers": {
        **LOGGING["loggers"],
        "accounting": {"handlers": ["console"], "level": "ERROR", "propagate": False},
    },
}
