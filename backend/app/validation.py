"""
app/validation.py
-----------------
Validation and parsing of the raw patient form.

The form arrives as loosely typed values (strings from HTML controls, or
numbers from JSON clients). validate_form() inspects them without mutating
anything and returns every problem it finds, in form field order:

    dob → anaemia → haemoglobin → parasite_count

parse_form() runs the same checks and, when they all pass, converts the
values into a PatientInput ready for scoring.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import date
from typing import Any

from app.age import calculate_age
from app.risk import (
    MAX_AGE,
    MAX_HAEMOGLOBIN,
    MIN_AGE,
    MIN_HAEMOGLOBIN,
    PARASITE_NOT_AVAILABLE,
    AnaemiaStatus,
    PatientInput,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error messages (shown to the user verbatim)
# ---------------------------------------------------------------------------

DOB_REQUIRED = "Date of birth is required"
DOB_INVALID = "Date of birth must be a valid date (YYYY-MM-DD)"
DOB_IN_FUTURE = "Date of birth cannot be in the future"
DOB_UNREALISTIC = "Please check the date of birth - age seems unrealistic"
ANAEMIA_REQUIRED = "Please select anaemia status"
HAEMOGLOBIN_REQUIRED = "Haemoglobin level is required"
HAEMOGLOBIN_OUT_OF_RANGE = (
    f"Haemoglobin must be between {MIN_HAEMOGLOBIN:g}-{MAX_HAEMOGLOBIN:g} g/L"
)
PARASITE_COUNT_REQUIRED = "Please select parasite count"
PARASITE_COUNT_INVALID = "Parasite count must be a whole number or not available"


class FormValidationError(ValueError):
    """Raised by parse_form() when one or more fields are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_form(form: Mapping[str, Any], today: date | None = None) -> list[str]:
    """
    Check a raw form against the domain constraints.

    Args:
        form: Mapping with the keys below. Missing keys, None and blank
            strings all count as "not provided".

            Key              | Expected value
            -----------------|----------------------------------------
            dob              | ISO date string "YYYY-MM-DD" or date
            anaemia          | "yes" | "no"
            haemoglobin      | number in g/L (string or numeric)
            parasite_count   | non-negative integer | "not-available"

        today: Reference date for the age check. Defaults to date.today().

    Returns:
        list[str]: Error messages in field order. Empty means the form can
        be scored.

    Examples:
        >>> validate_form({"dob": "2000-01-01", "anaemia": "no",
        ...                "haemoglobin": "130", "parasite_count": "0"})
        []
        >>> validate_form({"dob": "2000-01-01", "parasite_count": "0"})
        ['Please select anaemia status', 'Haemoglobin level is required']
    """
    errors: list[str] = []

    # Date of birth
    raw_dob = _clean(form.get("dob"))
    if raw_dob is None:
        errors.append(DOB_REQUIRED)
    else:
        dob = _parse_date(raw_dob)
        if dob is None:
            errors.append(DOB_INVALID)
        else:
            age = calculate_age(dob, today)
            if age < MIN_AGE:
                errors.append(DOB_IN_FUTURE)
            if age > MAX_AGE:
                errors.append(DOB_UNREALISTIC)

    # Anaemia
    if _parse_anaemia(_clean(form.get("anaemia"))) is None:
        errors.append(ANAEMIA_REQUIRED)

    # Haemoglobin
    raw_hb = _clean(form.get("haemoglobin"))
    if raw_hb is None:
        errors.append(HAEMOGLOBIN_REQUIRED)
    else:
        hb = _parse_float(raw_hb)
        if hb is None or hb < MIN_HAEMOGLOBIN or hb > MAX_HAEMOGLOBIN:
            errors.append(HAEMOGLOBIN_OUT_OF_RANGE)

    # Parasite count
    raw_count = _clean(form.get("parasite_count"))
    if raw_count is None:
        errors.append(PARASITE_COUNT_REQUIRED)
    elif raw_count != PARASITE_NOT_AVAILABLE and _parse_count(raw_count) is None:
        errors.append(PARASITE_COUNT_INVALID)

    return errors


def parse_form(form: Mapping[str, Any], today: date | None = None) -> PatientInput:
    """
    Validate the form and convert it into a PatientInput.

    The age is computed once, against the same reference date the validator
    used, so the scored age is always the checked age.

    Raises:
        FormValidationError: carrying the full error list when any field is
            invalid.
    """
    if today is None:
        today = date.today()

    errors = validate_form(form, today)
    if errors:
        logger.info("Form rejected with %d error(s)", len(errors))
        raise FormValidationError(errors)

    dob = _parse_date(_clean(form.get("dob")))
    raw_count = _clean(form.get("parasite_count"))

    return PatientInput(
        date_of_birth=dob,
        age=calculate_age(dob, today),
        anaemia=_parse_anaemia(_clean(form.get("anaemia"))),
        haemoglobin=_parse_float(_clean(form.get("haemoglobin"))),
        parasite_count=(
            None if raw_count == PARASITE_NOT_AVAILABLE else _parse_count(raw_count)
        ),
    )


def parse_date_of_birth(value: Any) -> date | None:
    """Parse a single date field, returning None when blank or malformed."""
    cleaned = _clean(value)
    return None if cleaned is None else _parse_date(cleaned)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _clean(value: Any) -> Any:
    """Normalise blanks to None and strip surrounding whitespace."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _parse_anaemia(value: Any) -> AnaemiaStatus | None:
    if value is None:
        return None
    try:
        return AnaemiaStatus(str(value).lower())
    except ValueError:
        return None


def _parse_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _parse_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    elif isinstance(value, str) and value.isascii() and value.isdigit():
        try:
            count = int(value)
        except ValueError:
            # beyond the interpreter's integer string conversion limit
            return None
    else:
        return None
    return count if count >= 0 else None
