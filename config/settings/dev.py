"""Development settings for Cohortly.

Extends base settings with developer-friendly defaults. The test suite
runs against this module as well.
"""
from .base import *  # noqa
import os


DEBUG = True
# "testserver" is the host used by django.test.Client
ALLOWED_HOSTS = ["127.0.0.1", "localhost", "testserver"]

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-insecure-key-change-me")

# Throttle history is kept in process memory locally
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "cohortly-dev",
    }
}

LOGGING["root"]["level"] = os.environ.get("DJANGO_LOG_LEVEL", "DEBUG")  # noqa: F405
