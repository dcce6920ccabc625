"""
Core utility functions.
"""

import ipaddress
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import cast, overload

from dateutil.relativedelta import relativedelta
from django.http import HttpRequest

CENT = Decimal("0.01")


def normalize_ip(value: str | None) -> str | None:
    """Canonical form of an IPv4 or IPv6 address, or None when ``value`` is not one."""
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


@overload
def get_client_ip(request: HttpRequest) -> str | None: ...


@overload
def get_client_ip(request: HttpRequest, default: str) -> str: ...


def get_client_ip(request: HttpRequest, default: str | None = None) -> str | None:
    """
    Extract client IP from X-Forwarded-For or REMOTE_ADDR.

    Handles the case where X-Forwarded-For contains multiple IPs
    (from proxy chain) by taking the first (original client). Values that
    are not IP addresses are ignored.
    """
    x_forwarded_for: str | None = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        forwarded = normalize_ip(x_forwarded_for.split(",")[0])
        if forwarded is not None:
            return forwarded
    remote_addr = normalize_ip(cast(str | None, request.META.get("REMOTE_ADDR")))
    if remote_addr is not None:
        return remote_addr
    return default


def quantize_money(value: Decimal | int | str) -> Decimal:
    """Round an amount to whole cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def add_months(start: date, months: int) -> date:
    """
    Calendar-month arithmetic.

    The day is clamped to the end of the target month, so
    2024-01-31 + 1 month is 2024-02-29.
    """
    return start + relativedelta(months=months)
