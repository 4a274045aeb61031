#!/usr/bin/env python3
"""
Guest booking lifecycle flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_booking_lifecycle.py --clinic-id <UUID> --preferred-date 2026-12-01

Flow:
    1. Submit a guest booking request
    2. Look up the booking with the access code
    3. Login as ops
    4. Move the booking through contactingHospital -> proposedOptions -> confirmed
    5. Look up the booking again and print its status history
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:4000"

# Test credentials
GUEST_EMAIL = "guest@example.com"
OPS_EMAIL = "admin@globalbeauty.com"
OPS_PASSWORD = "Admin@1234"


def api_request(client: httpx.Client, method: str, endpoint: str, data: dict | None = None, params: dict | None = None) -> dict:
    """Make an API request with the client's cookies."""
    response = client.request(method, endpoint, json=data, params=params)
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def main():
    parser = argparse.ArgumentParser(description="Guest booking lifecycle flow")
    parser.add_argument("--clinic-id", required=True, help="Clinic UUID")
    parser.add_argument("--preferred-date", required=True, help="Preferred date (YYYY-MM-DD)")
    parser.add_argument("--procedure", default="Botox consultation", help="Procedure")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL")
    args = parser.parse_args()

    guest = httpx.Client(base_url=args.base_url, timeout=10.0, follow_redirects=True)
    ops = httpx.Client(base_url=args.base_url, timeout=10.0, follow_redirects=True)

    # Step 1: Submit booking
    print_step(1, "Submit guest booking request")
    created = api_request(guest, "POST", "/api/v1/booking-requests/", {
        "clinic_id": args.clinic_id,
        "guest_email": GUEST_EMAIL,
        "procedure": args.procedure,
        "preferred_date": args.preferred_date,
        "locale": "en",
    })
    if not print_result(created, ["id", "access_code", "status"]):
        sys.exit(1)

    booking_id = created["data"]["id"]
    access_code = created["data"]["access_code"]

    # Step 2: Guest lookup
    print_step(2, "Look up booking with access code")
    detail = api_request(guest, "GET", f"/api/v1/booking-requests/{booking_id}", params={"access_code": access_code})
    if not print_result(detail, ["id", "status", "procedure"]):
        sys.exit(1)

    # Step 3: Ops login
    print_step(3, "Login as ops")
    login = api_request(ops, "POST", "/api/v1/ops/auth/login", {"email": OPS_EMAIL, "password": OPS_PASSWORD})
    if not print_result(login, ["email", "role"]):
        sys.exit(1)

    # Step 4: Transitions
    transitions = [
        {"status": "contactingHospital", "note": "Calling the clinic"},
        {
            "status": "proposedOptions",
            "proposed_options": [
                {"date": args.preferred_date, "time_slot": "10:00", "price": 150000},
                {"date": args.preferred_date, "time_slot": "15:00", "price": 150000},
            ],
        },
        {
            "status": "confirmed",
            "confirmed_option": {"date": args.preferred_date, "time_slot": "10:00", "price": 150000},
        },
    ]
    for offset, payload in enumerate(transitions):
        print_step(4 + offset, f"Move booking to {payload['status']}")
        result = api_request(ops, "POST", f"/api/v1/ops/booking-requests/{booking_id}/status", payload)
        if not print_result(result):
            sys.exit(1)

    # Final lookup
    print_step(4 + len(transitions), "Look up booking history")
    detail = api_request(guest, "GET", f"/api/v1/booking-requests/{booking_id}", params={"access_code": access_code})
    if not print_result(detail, ["status", "status_history", "confirmed_option"]):
        sys.exit(1)

    print("\n" + "="*60)
    print("FULL FLOW COMPLETE")
    print("="*60)
    print(f"Booking:     {booking_id}")
    print(f"Access code: {access_code}")


if __name__ == "__main__":
    main()
