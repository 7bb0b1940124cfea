"""
app/age.py
----------
Whole-year age from a date of birth.

The reference date is an explicit argument so callers (and tests) control
what "today" means. A birth date in the future yields a negative age; the
validator turns that into an error message instead of this module raising.
"""

from __future__ import annotations

from datetime import date


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """
    Return the number of whole years between date_of_birth and today.

    One year is subtracted when today's month/day falls before the birth
    month/day, i.e. the birthday has not happened yet this year.

    Examples:
        >>> calculate_age(date(2000, 6, 15), today=date(2026, 6, 14))
        25
        >>> calculate_age(date(2000, 6, 15), today=date(2026, 6, 15))
        26
    """
    if today is None:
        today = date.today()

    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age
