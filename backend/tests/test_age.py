"""
tests/test_age.py
-----------------
Unit tests for whole-year age calculation (app/age.py).

Run with:
    pytest tests/test_age.py -v
"""

from datetime import date

from app.age import calculate_age


TODAY = date(2026, 10, 17)


class TestCalculateAge:

    def test_birthday_already_passed_this_year(self):
        assert calculate_age(date(1990, 3, 1), today=TODAY) == 36

    def test_birthday_today_counts_the_year(self):
        assert calculate_age(date(1990, 10, 17), today=TODAY) == 36

    def test_birthday_tomorrow_does_not_count_yet(self):
        assert calculate_age(date(1990, 10, 18), today=TODAY) == 35

    def test_born_today_is_zero(self):
        assert calculate_age(TODAY, today=TODAY) == 0

    def test_future_date_is_negative(self):
        """Not an error here — the validator reports it."""
        assert calculate_age(date(2026, 10, 18), today=TODAY) == -1
        assert calculate_age(date(2030, 1, 1), today=TODAY) < 0

    def test_leap_day_birthday_in_common_year(self):
        assert calculate_age(date(2000, 2, 29), today=date(2025, 2, 28)) == 24
        assert calculate_age(date(2000, 2, 29), today=date(2025, 3, 1)) == 25

    def test_defaults_to_current_date(self):
        assert calculate_age(date.today()) == 0
