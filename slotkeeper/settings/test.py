"""
Test settings for Slotkeeper.

These settings override the base settings for test environments.
"""

from .base import *

# File-backed SQLite so threaded admission tests share one real database.
# IMMEDIATE transactions take the write lock at BEGIN, which serializes
# concurrent admissions the way row locks do on PostgreSQL.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
        "OPTIONS": {"timeout": 20, "transaction_mode": "IMMEDIATE"},
        "TEST": {"NAME": BASE_DIR / "test_db.sqlite3"},
    }
}

# Local memory cache so availability caching is exercised
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "slotkeeper-tests",
    }
}

# Password hashers are slow; use fast ones for tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Make tests faster by avoiding real translations
USE_I18N = False

# Raise exceptions for template errors during tests
TEMPLATES[0]["OPTIONS"]["debug"] = True

# Disable logging during tests to speed them up
LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        "": {
            "handlers": ["null"],
            "level": "CRITICAL",
            "propagate": False,
        },
    },
}
