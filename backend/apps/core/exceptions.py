"""
Billing error taxonomy.

Services raise these; the API layer maps them onto the response envelope
using ``status_code``. The core never retries.
"""


class BillingError(Exception):
    """Base exception for billing domain errors."""

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BillingError):
    """Malformed or out-of-bounds input. No state was changed."""

    status_code = 400


class NotFoundError(BillingError):
    """Referenced entity does not exist."""

    status_code = 404


class OverageRejectedError(BillingError):
    """User count exceeds the plan maximum under a hard_stop policy."""

    status_code = 400


class AlreadyActiveError(BillingError):
    """Renewal attempted before the current period has expired."""

    status_code = 409


class InvalidStateError(BillingError):
    """Illegal status transition."""

    status_code = 409


class PersistenceFaultError(BillingError):
    """Store-layer failure. Fatal for the current request."""

    status_code = 500


class AccessDeniedError(BillingError):
    """The client's subscription does not grant the requested access."""

    status_code = 403
