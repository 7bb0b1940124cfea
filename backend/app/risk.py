"""
app/risk.py
-----------
Heuristic risk scoring engine for the patient form.

The score is a fixed arithmetic sum of four contributions (age, anaemia,
haemoglobin, parasite count), clamped to 0–100 and rounded to one decimal
place. It is NOT a clinically validated instrument.

Risk tiers (evaluated from the lowest upper bound):
  LOW      → score < 20        — standard monitoring
  MODERATE → 20 <= score < 50  — enhanced monitoring
  HIGH     → score >= 50       — immediate clinical attention

Usage:
    from app.risk import AnaemiaStatus, PatientInput, assess_risk

    assessment = assess_risk(PatientInput(
        date_of_birth=date(2023, 1, 1),
        age=3,
        anaemia=AnaemiaStatus.YES,
        haemoglobin=100.0,
        parasite_count=4,
    ))
    # → RiskAssessment(score=75.0, tier=RiskTier.HIGH, ...)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_AGE = 0
MAX_AGE = 120

MIN_HAEMOGLOBIN = 20.0    # g/L
MAX_HAEMOGLOBIN = 180.0   # g/L

PARASITE_NOT_AVAILABLE = "not-available"

_YOUNG_CHILD_AGE = 5          # strictly below → flat young-child weight
_ELDERLY_AGE = 65             # strictly above → flat elderly weight
_YOUNG_CHILD_POINTS = 20.0
_ELDERLY_POINTS = 15.0
_POINTS_PER_YEAR = 0.3

_ANAEMIA_POINTS = 25.0

_HAEMOGLOBIN_REFERENCE = 150.0   # g/L, contributes nothing at or above
_POINTS_PER_HB_UNIT = 0.2

_POINTS_PER_PARASITE = 5.0
_PARASITE_COUNT_CAP = 20         # 20 * 5 already reaches MAX_SCORE

MIN_SCORE = 0.0
MAX_SCORE = 100.0


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

class AnaemiaStatus(str, Enum):
    YES = "yes"
    NO = "no"


class RiskTier(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


@dataclass(frozen=True)
class PatientInput:
    """A single validated form submission. Never persisted."""
    date_of_birth: date
    age: int                       # whole years, 0–120
    anaemia: AnaemiaStatus
    haemoglobin: float             # g/L, 20–180
    parasite_count: int | None     # None → not available


@dataclass(frozen=True)
class RiskAssessment:
    score: float
    tier: RiskTier
    label: str
    css_class: str


@dataclass(frozen=True)
class _TierRule:
    """Upper-bounded tier band. upper_bound=None means unbounded."""
    tier: RiskTier
    upper_bound: float | None     # exclusive
    label: str
    css_class: str


# Ordered lowest band first; the first band whose bound exceeds the score wins.
TIER_RULES: tuple[_TierRule, ...] = (
    _TierRule(
        tier=RiskTier.LOW,
        upper_bound=20.0,
        label="Low risk - Standard monitoring recommended",
        css_class="low-risk",
    ),
    _TierRule(
        tier=RiskTier.MODERATE,
        upper_bound=50.0,
        label="Moderate risk - Enhanced monitoring advised",
        css_class="medium-risk",
    ),
    _TierRule(
        tier=RiskTier.HIGH,
        upper_bound=None,
        label="High risk - Immediate clinical attention required",
        css_class="high-risk",
    ),
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def calculate_risk(patient: PatientInput) -> float:
    """
    Compute the heuristic risk score for a validated patient.

    Contributions:
        age          | < 5 → 20, > 65 → 15, otherwise age * 0.3
        anaemia      | yes → 25, no → 0
        haemoglobin  | max(0, (150 - hb) * 0.2)
        parasites    | count * 5, nothing when not available

    The total is clamped to [0, 100] and rounded half-up to one decimal.
    Ages 5 and 65 fall in the linear band; haemoglobin of exactly 150
    contributes nothing.
    """
    risk = 0.0

    if patient.age < _YOUNG_CHILD_AGE:
        risk += _YOUNG_CHILD_POINTS
    elif patient.age > _ELDERLY_AGE:
        risk += _ELDERLY_POINTS
    else:
        risk += patient.age * _POINTS_PER_YEAR

    if patient.anaemia is AnaemiaStatus.YES:
        risk += _ANAEMIA_POINTS

    risk += max(0.0, (_HAEMOGLOBIN_REFERENCE - patient.haemoglobin) * _POINTS_PER_HB_UNIT)

    if patient.parasite_count is not None:
        # capped as an int so huge counts never reach float arithmetic
        risk += min(patient.parasite_count, _PARASITE_COUNT_CAP) * _POINTS_PER_PARASITE

    return round_score(min(MAX_SCORE, max(MIN_SCORE, risk)))


def round_score(value: float) -> float:
    """
    Round to one decimal place, ties away from zero.

    Rounding is applied to the shortest decimal form of the float, so
    round_score(49.95) == 50.0 and round_score(12.25) == 12.3.
    """
    if not math.isfinite(value):
        raise ValueError(f"score must be finite, got {value!r}")
    rounded = Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(rounded)


def classify_risk(score: float) -> RiskTier:
    """Map a score to its tier. Lower bounds are inclusive."""
    return _tier_rule(score).tier


def assess_risk(patient: PatientInput) -> RiskAssessment:
    """Score a validated patient and attach the tier, label and css class."""
    score = calculate_risk(patient)
    rule = _tier_rule(score)
    return RiskAssessment(
        score=score,
        tier=rule.tier,
        label=rule.label,
        css_class=rule.css_class,
    )


def _tier_rule(score: float) -> _TierRule:
    for rule in TIER_RULES[:-1]:
        if score < rule.upper_bound:
            return rule
    return TIER_RULES[-1]
