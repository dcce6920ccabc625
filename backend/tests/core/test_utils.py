"""
Tests for core utility functions.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.test import RequestFactory

from apps.core.utils import add_months, get_client_ip, normalize_ip, quantize_money


class TestAddMonths:
    @pytest.mark.parametrize(
        ("start", "months", "expected"),
        [
            (date(2024, 1, 1), 3, date(2024, 4, 1)),
            (date(2024, 1, 15), 6, date(2024, 7, 15)),
            (date(2024, 1, 1), 12, date(2025, 1, 1)),
            (date(2024, 11, 30), 3, date(2025, 2, 28)),
        ],
    )
    def test_calendar_arithmetic(self, start, months, expected):
        assert add_months(start, months) == expected

    def test_end_of_month_is_clamped(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


class TestQuantizeMoney:
    def test_rounds_half_up(self):
        assert quantize_money(Decimal("10.005")) == Decimal("10.01")

    def test_integers_gain_cents(self):
        assert str(quantize_money(645)) == "645.00"


class TestGetClientIp:
    def test_first_forwarded_address(self):
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="203.0.113.5, 10.0.0.1")

        assert get_client_ip(request) == "203.0.113.5"

    @pytest.mark.parametrize("forwarded", ["unknown", "1.2.3.4:8080", "", "  "])
    def test_malformed_forwarded_falls_back_to_remote_addr(self, forwarded):
        request = RequestFactory().get(
            "/", HTTP_X_FORWARDED_FOR=forwarded, REMOTE_ADDR="192.0.2.10"
        )

        assert get_client_ip(request) == "192.0.2.10"

    def test_nothing_usable_returns_default(self):
        request = RequestFactory().get("/", HTTP_X_FORWARDED_FOR="unknown", REMOTE_ADDR="")

        assert get_client_ip(request) is None
        assert get_client_ip(request, "0.0.0.0") == "0.0.0.0"


class TestNormalizeIp:
    def test_ipv6_is_canonical(self):
        assert normalize_ip("2001:0DB8::0001") == "2001:db8::1"

    @pytest.mark.parametrize("value", [None, "", "localhost", "300.1.1.1"])
    def test_rejects_non_addresses(self, value):
        assert normalize_ip(value) is None
