"""
Account services - credential checks.
"""

from django.contrib.auth import authenticate

from apps.accounts.models import User
from apps.core.exceptions import ValidationError
from apps.core.logging import get_logger

logger = get_logger(__name__)


def authenticate_user(email: str, password: str) -> User:
    """
    Verify email/password and return the active user.

    Raises:
        ValidationError: If the credentials are wrong or the user is inactive.
    """
    user = authenticate(username=email.strip(), password=password)
    if user is None:
        logger.warning("login_failed", email=email)
        raise ValidationError("Invalid email or password")

    logger.info("login_succeeded", user_id=user.pk)
    return user
