"""
app/routers/risk.py
-------------------
HTTP surface for the risk calculator form.

Flow for POST /api/risk:
  raw form JSON
      │
      ▼
  parse_form()          → FormValidationError → HTTP 422 {"errors": [...]}
      │
      ▼
  simulated latency     (optional, SIMULATED_LATENCY_SECONDS, default off)
      │
      ▼
  assess_risk()         → score + tier + label
      │
      ▼
  HTTP 200 RiskResponse

Scoring is synchronous and pure; everything async here is the web layer.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from fastapi import APIRouter, Depends, Query

from app.age import calculate_age
from app.config import Settings, get_settings
from app.risk import (
    MAX_HAEMOGLOBIN,
    MIN_HAEMOGLOBIN,
    MIN_SCORE,
    PARASITE_NOT_AVAILABLE,
    TIER_RULES,
    assess_risk,
)
from app.schemas import (
    AgeResponse,
    FormConfigResponse,
    RiskFormRequest,
    RiskResponse,
    TierBand,
    ValidationErrorResponse,
)
from app.validation import (
    DOB_INVALID,
    FormValidationError,
    parse_date_of_birth,
    parse_form,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Risk Calculator"])


def get_today() -> date:
    """Reference date for age calculation. Overridden in tests."""
    return date.today()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/risk",
    response_model=RiskResponse,
    responses={422: {"model": ValidationErrorResponse}},
    summary="Validate the patient form and compute the risk score",
)
async def calculate(
    form: RiskFormRequest,
    today: date = Depends(get_today),
    settings: Settings = Depends(get_settings),
) -> RiskResponse:
    """
    Validate the submitted form, then score and classify it.

    All validation problems are returned together with HTTP 422; no score
    is computed in that case.

    Example body:
        {
          "dob": "2023-01-01",
          "anaemia": "yes",
          "haemoglobin": "100",
          "parasite_count": "4"
        }
    """
    # FormValidationError is turned into a 422 by the app-level handler
    patient = parse_form(form.model_dump(), today=today)

    await simulate_latency(settings.simulated_latency_seconds)

    try:
        assessment = assess_risk(patient)
    except Exception:
        logger.exception("Risk scoring failed (age=%d)", patient.age)
        raise

    logger.info(
        "Risk assessed: age=%d  score=%.1f  tier=%s",
        patient.age, assessment.score, assessment.tier.value,
    )

    return RiskResponse(
        age=patient.age,
        score=assessment.score,
        tier=assessment.tier,
        label=assessment.label,
        css_class=assessment.css_class,
    )


@router.get("/age", response_model=AgeResponse, summary="Age in whole years for a date of birth")
async def age(
    dob: str = Query(..., description="Date of birth, YYYY-MM-DD"),
    today: date = Depends(get_today),
) -> AgeResponse:
    """
    Used by the page to show the calculated age next to the date input.

    A future date returns a negative age; the form validator reports it on
    submission.
    """
    parsed = parse_date_of_birth(dob)
    if parsed is None:
        raise FormValidationError([DOB_INVALID])
    return AgeResponse(dob=parsed, age=calculate_age(parsed, today))


@router.get("/form-config", response_model=FormConfigResponse, summary="Input constraints for the form page")
async def form_config(today: date = Depends(get_today)) -> FormConfigResponse:
    bands: list[TierBand] = []
    lower = MIN_SCORE
    for rule in TIER_RULES:
        bands.append(TierBand(
            tier=rule.tier,
            lower_bound=lower,
            upper_bound=rule.upper_bound,
            label=rule.label,
            css_class=rule.css_class,
        ))
        lower = rule.upper_bound

    return FormConfigResponse(
        max_dob=today,
        min_haemoglobin=MIN_HAEMOGLOBIN,
        max_haemoglobin=MAX_HAEMOGLOBIN,
        parasite_not_available=PARASITE_NOT_AVAILABLE,
        tiers=bands,
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

async def simulate_latency(seconds: float) -> None:
    """
    Sleep before scoring to imitate a backend round trip.

    A no-op when seconds is 0. The sleep is cancelled together with the
    request task if the client disconnects.
    """
    if seconds <= 0:
        return
    logger.debug("Simulating %.2fs latency before scoring", seconds)
    await asyncio.sleep(seconds)
