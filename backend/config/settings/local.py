"""
Local development settings.

Extends base settings with development-friendly defaults.
"""

from .base import *  # noqa: F403
from .base import settings

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Print notification mail to the console instead of sending it
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

LOG_JSON = False
LOG_LEVEL = settings.LOG_LEVEL
