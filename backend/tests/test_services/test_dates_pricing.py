"""Unit tests for calendar-day helpers and pricing."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from hotel_booking.errors import ValidationError
from hotel_booking.services.dates import enumerate_days, to_date
from hotel_booking.services.pricing import compute_price, count_nights, verify_claimed_amount


class TestToDate:
    def test_accepts_date(self):
        assert to_date(date(2030, 1, 2)) == date(2030, 1, 2)

    def test_accepts_datetime(self):
        assert to_date(datetime(2030, 1, 2, 15, 30)) == date(2030, 1, 2)

    def test_accepts_iso_string_with_time(self):
        assert to_date("2030-01-02T10:00:00Z") == date(2030, 1, 2)

    def test_rejects_garbage(self):
        with pytest.raises(ValidationError):
            to_date("next tuesday")

    @pytest.mark.parametrize("value", ["2024-03-0199", "2024-03-01x", "2024-03-01-05"])
    def test_rejects_trailing_characters(self, value):
        with pytest.raises(ValidationError):
            to_date(value)

    def test_accepts_space_separated_time(self):
        assert to_date("2030-01-02 08:15:00") == date(2030, 1, 2)


class TestEnumerateDays:
    def test_inclusive_range(self):
        assert enumerate_days("2024-03-01", "2024-03-03") == ["2024-03-01", "2024-03-02", "2024-03-03"]

    def test_same_day_is_one_day(self):
        assert enumerate_days("2024-03-01", "2024-03-01") == ["2024-03-01"]

    def test_reversed_range_is_empty(self):
        assert enumerate_days("2024-03-05", "2024-03-01") == []

    def test_crosses_month_end(self):
        assert enumerate_days(date(2024, 2, 28), date(2024, 3, 1)) == ["2024-02-28", "2024-02-29", "2024-03-01"]


class TestPricing:
    def test_count_nights(self):
        assert count_nights("2030-01-01", "2030-01-03") == 2
        assert count_nights("2030-01-01", "2030-01-01") == 0

    def test_compute_price(self):
        assert compute_price(Decimal("100.00"), "2030-01-01", "2030-01-03") == Decimal("200.00")

    def test_compute_price_three_nights(self):
        assert compute_price(100, "2024-01-01", "2024-01-04") == 300

    def test_compute_price_keeps_cents(self):
        assert compute_price("89.99", "2030-01-01", "2030-01-04") == Decimal("269.97")

    def test_zero_night_stay_rejected(self):
        with pytest.raises(ValidationError):
            compute_price(Decimal("100.00"), "2030-01-01", "2030-01-01")

    def test_claimed_amount_exact_match(self):
        verify_claimed_amount("200", Decimal("200.00"))
        verify_claimed_amount(200, Decimal("200.00"))

    def test_claimed_amount_mismatch(self):
        with pytest.raises(ValidationError, match="does not match"):
            verify_claimed_amount("199.99", Decimal("200.00"))

    @pytest.mark.parametrize("claimed", ["abc", "", None, "1e", "NaN"])
    def test_claimed_amount_not_a_number(self, claimed):
        with pytest.raises(ValidationError, match="Invalid amount"):
            verify_claimed_amount(claimed, Decimal("200.00"))
