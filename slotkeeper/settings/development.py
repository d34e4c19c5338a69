"""
Development settings for Slotkeeper.

These settings override the base settings for local development environments.
"""

import os

from .base import *

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", "django-insecure-development-key-not-for-production")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG", "True") == "True"

ALLOWED_HOSTS = ["*"]

if os.environ.get("USE_SQLITE", "False").lower() != "true":
    DATABASES["default"]["HOST"] = os.environ.get("POSTGRES_HOST", "localhost")
    DATABASES["default"]["OPTIONS"]["sslmode"] = os.environ.get("POSTGRES_SSL_MODE", "disable")
    DATABASES["default"]["CONN_MAX_AGE"] = 300

# Local memory cache unless a Redis URL is given explicitly
if not os.environ.get("REDIS_URL"):
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "slotkeeper-dev",
        }
    }

SWAGGER_SETTINGS = {
    **SWAGGER_SETTINGS,
    "SHOW_REQUEST_HEADERS": True,
    "DEFAULT_MODEL_RENDERING": "example",
}

LOGGING["loggers"]["apps"]["level"] = "DEBUG"
LOGGING["loggers"]["core"]["level"] = "DEBUG"
