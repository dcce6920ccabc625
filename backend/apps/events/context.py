"""
Audit context for non-request code paths.

Management commands and scheduled sweeps run outside the request
middleware; this binds the same structlog context so their audit entries
carry a correlation ID and origin.
"""

from collections.abc import Generator
from contextlib import contextmanager
from uuid import uuid4

import structlog

from apps.core.logging import bind_contextvars


@contextmanager
def audit_context(
    correlation_id: str | None = None,
    ip_address: str | None = None,
    user_agent: str = "",
) -> Generator[str, None, None]:
    """
    Bind audit context for the duration of the block.

    Usage:
        with audit_context() as correlation_id:
            mark_overdue_sweep(as_of)

    Args:
        correlation_id: Trace ID. Generated if not provided.
        ip_address: Origin recorded on audit entries.
        user_agent: Client user agent, for logs.

    Yields:
        The correlation ID in effect.
    """
    generated_correlation_id = correlation_id or str(uuid4())

    ctx = {
        "correlation_id": generated_correlation_id,
        "request.ip_address": ip_address,
        "request.user_agent": user_agent,
    }

    bind_contextvars(**ctx)
    try:
        yield generated_correlation_id
    finally:
        structlog.contextvars.unbind_contextvars(*ctx.keys())
