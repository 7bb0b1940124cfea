"""
Pydantic schemas for the risk calculator API.

Request fields accept any JSON value because they mirror raw form
controls; the domain checks live in app.validation so that every problem
is reported together rather than one pydantic error at a time.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from app.risk import RiskTier


class RiskFormRequest(BaseModel):
    """Raw patient form as submitted by the page."""

    dob: Any = Field(
        default=None,
        description="Date of birth, ISO format YYYY-MM-DD",
        examples=["2023-01-01"],
    )
    anaemia: Any = Field(
        default=None,
        description="Anaemia status: 'yes' or 'no'",
        examples=["yes"],
    )
    haemoglobin: Any = Field(
        default=None,
        description="Haemoglobin level in g/L (20-180)",
        examples=[100],
    )
    parasite_count: Any = Field(
        default=None,
        description="Parasite count, or 'not-available'",
        examples=[4],
    )


class RiskResponse(BaseModel):
    """Successful risk assessment."""

    age: int = Field(..., ge=0, le=120, description="Age in whole years used for scoring")
    score: float = Field(..., ge=0.0, le=100.0, description="Risk score, one decimal place")
    tier: RiskTier
    label: str = Field(..., description="Human-readable interpretation of the tier")
    css_class: str = Field(..., description="Presentation class for the tier")


class ValidationErrorResponse(BaseModel):
    """Returned with HTTP 422 when the form has one or more invalid fields."""

    error: str = "validation_error"
    errors: list[str] = Field(..., description="Messages in form field order")


class AgeResponse(BaseModel):
    dob: date
    age: int


class TierBand(BaseModel):
    tier: RiskTier
    lower_bound: float
    upper_bound: float | None
    label: str
    css_class: str


class FormConfigResponse(BaseModel):
    """Constraints the page applies to its inputs before submitting."""

    max_dob: date = Field(..., description="Latest accepted date of birth (today)")
    min_haemoglobin: float
    max_haemoglobin: float
    parasite_not_available: str
    tiers: list[TierBand]
