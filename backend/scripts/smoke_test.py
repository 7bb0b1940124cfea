#!/usr/bin/env python3
"""
scripts/smoke_test.py
---------------------
Verifies that a running backend:
  1. Scores a high-risk child as High (75.0)
  2. Scores an elderly patient with no other factors as Low (15.0)
  3. Rejects an incomplete form with every error, in field order
  4. Serves the form page and its configuration

This is an integration smoke test against a live server — the unit tests
in tests/ cover the same logic without one. Run it while the FastAPI dev
server is running:

    # Terminal 1 – backend running
    uvicorn app.main:app --reload

    # Terminal 2 – run this script
    python scripts/smoke_test.py [--base-url http://localhost:8000]

ALL checks pass → exits 0
ANY check fails → exits 1
Server unreachable → exits 2
"""

from __future__ import annotations

import argparse
import sys
from datetime import date

import httpx

# ---------------------------------------------------------------------------
# Payloads (dates are relative to today so ages stay stable)
# ---------------------------------------------------------------------------
_today = date.today()

HIGH_RISK_PAYLOAD = {
    "dob":            _today.replace(year=_today.year - 3, month=1, day=1).isoformat(),
    "anaemia":        "yes",
    "haemoglobin":    "100",
    "parasite_count": "4",
}

LOW_RISK_PAYLOAD = {
    "dob":            _today.replace(year=_today.year - 71, month=1, day=1).isoformat(),
    "anaemia":        "no",
    "haemoglobin":    "150",
    "parasite_count": "not-available",
}

INCOMPLETE_PAYLOAD = {
    "dob":            "1990-01-01",
    "anaemia":        "",
    "haemoglobin":    "",
    "parasite_count": "0",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def check(label: str, condition: bool, detail: str = "") -> None:
    """Print a pass/fail line and raise on failure."""
    icon = "✅" if condition else "❌"
    print(f"  {icon}  {label}", f"— {detail}" if detail else "")
    if not condition:
        raise AssertionError(f"FAILED: {label}  {detail}")


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def check_high_risk(base_url: str) -> None:
    print("\n🔴 Check 1 — Anaemic child with parasites → expect High")
    resp = httpx.post(f"{base_url}/api/risk", json=HIGH_RISK_PAYLOAD, timeout=15.0)
    check("HTTP 200", resp.status_code == 200, f"got: {resp.status_code}")
    body = resp.json()
    check("score == 75.0", body.get("score") == 75.0, f"got: {body.get('score')}")
    check("tier == High", body.get("tier") == "High", f"got: {body.get('tier')}")
    print(f"\n     label: {body.get('label')}")


def check_low_risk(base_url: str) -> None:
    print("\n🟢 Check 2 — Elderly patient, nothing else → expect Low")
    resp = httpx.post(f"{base_url}/api/risk", json=LOW_RISK_PAYLOAD, timeout=15.0)
    check("HTTP 200", resp.status_code == 200, f"got: {resp.status_code}")
    body = resp.json()
    check("score == 15.0", body.get("score") == 15.0, f"got: {body.get('score')}")
    check("tier == Low", body.get("tier") == "Low", f"got: {body.get('tier')}")


def check_incomplete_form(base_url: str) -> None:
    print("\n⚠️  Check 3 — Missing anaemia and haemoglobin → expect 422 with two errors")
    resp = httpx.post(f"{base_url}/api/risk", json=INCOMPLETE_PAYLOAD, timeout=15.0)
    check("HTTP 422", resp.status_code == 422, f"got: {resp.status_code}")
    errors = resp.json().get("errors", [])
    check("exactly two errors", len(errors) == 2, f"got: {errors}")
    check("anaemia error first", "anaemia" in errors[0].lower(), f"got: {errors[0]}")


def check_page(base_url: str) -> None:
    print("\n📄 Check 4 — Form page and configuration")
    page = httpx.get(f"{base_url}/", timeout=10.0)
    check("form page served", page.status_code == 200 and "risk-calculator-form" in page.text)
    config = httpx.get(f"{base_url}/api/form-config", timeout=10.0).json()
    check("max_dob is today", config.get("max_dob") == date.today().isoformat(),
          f"got: {config.get('max_dob')}")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(description="Smoke-test a running risk calculator backend")
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    args = parser.parse_args()
    base_url: str = args.base_url.rstrip("/")

    print("=" * 60)
    print("  Medical Risk Calculator — API Smoke Test")
    print("  Target:", base_url)
    print("=" * 60)

    try:
        for run_check in (check_high_risk, check_low_risk, check_incomplete_form, check_page):
            run_check(base_url)

        print("\n" + "=" * 60)
        print("  ✅  ALL CHECKS PASSED")
        print("=" * 60)
        sys.exit(0)

    except AssertionError as exc:
        print("\n" + "=" * 60)
        print(f"  ❌  CHECK FAILED: {exc}")
        print("=" * 60)
        sys.exit(1)

    except httpx.ConnectError:
        print("\n❌  Cannot reach", base_url)
        print("   → Make sure the backend is running:  uvicorn app.main:app --reload")
        sys.exit(2)


if __name__ == "__main__":
    main()
