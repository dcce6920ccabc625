"""
Test settings.

SQLite in memory, local mail outbox and a fixed HRMS endpoint.
"""

from decimal import Decimal

from .base import *  # noqa: F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

JWT_SECRET = "test-secret-key-with-enough-length-for-hs256"
BILLING_TAX_RATE = Decimal("0")
INVOICE_NUMBER_PREFIX = "INV"
INVOICE_GRACE_DAYS = 15
HRMS_URL = "https://hrms.test"
HRMS_API_KEY = "test-hrms-key"

LOG_JSON = False
LOG_LEVEL = "WARNING"
