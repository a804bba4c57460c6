#!/usr/bin/env python3
"""
Booking/payment status flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_confirm_payment.py --check-in 2026-11-01 --check-out 2026-11-04
    python scripts/flow_confirm_payment.py --check-in 2026-11-01 --check-out 2026-11-04 --yes

Flow:
    1. Create booking
    2. Record payment intent
    3. Take a deposit
    4. Settle the payment (booking is confirmed automatically)
    5. Mark a second booking Paid from Unpaid (confirmation prompt)
    6. Try to cancel the paid booking (refused: payment locked)
    7. Try to revert the paid payment (refused: irreversible)
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"
ACTOR_ID = "flow-script"


def api_request(method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make API request."""
    headers = {"X-Actor-Id": ACTOR_ID}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    elif method == "PUT":
        response = httpx.put(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict) -> bool:
    """Print result; returns False for error responses."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    print(json.dumps(result["data"], indent=2))
    return True


def change_status(endpoint: str, status: str, assume_yes: bool) -> dict:
    """Send a status change, answering a confirmation prompt if one comes back."""
    result = api_request("PUT", endpoint, {"status": status, "confirmed": False})
    if result["status"] >= 400 or result["data"].get("outcome") != "confirmation_required":
        return result

    prompt = result["data"]["prompt"]
    print(f"CONFIRMATION REQUIRED: {prompt}")
    if not assume_yes:
        answer = input("Proceed? [y/N] ").strip().lower()
        if answer != "y":
            print("Not confirmed; nothing was changed.")
            return result

    return api_request("PUT", endpoint, {"status": status, "confirmed": True})


def create_booking(check_in: str, check_out: str) -> dict:
    result = api_request("POST", "/api/v1/bookings/", {
        "check_in_date": f"{check_in}T14:00:00+00:00",
        "check_out_date": f"{check_out}T12:00:00+00:00",
    })
    if not print_result(result):
        sys.exit(1)
    return result["data"]


def main():
    parser = argparse.ArgumentParser(description="Booking/payment status flow")
    parser.add_argument("--check-in", required=True, help="Check-in date (YYYY-MM-DD)")
    parser.add_argument("--check-out", required=True, help="Check-out date (YYYY-MM-DD)")
    parser.add_argument("--amount", type=int, default=1500000, help="Payment amount")
    parser.add_argument("--yes", action="store_true", help="Answer confirmation prompts with yes")
    args = parser.parse_args()

    print_step(1, "Create booking")
    booking = create_booking(args.check_in, args.check_out)
    booking_id = booking["id"]

    print_step(2, "Record payment intent")
    result = api_request("POST", f"/api/v1/bookings/{booking_id}/payments", {
        "amount": args.amount,
        "method": "bank_transfer",
    })
    if not print_result(result):
        sys.exit(1)
    payment_id = result["data"]["id"]

    print_step(3, "Take a deposit (Pending -> Deposit)")
    result = change_status(f"/api/v1/payments/{payment_id}/status", "Deposit", args.yes)
    if not print_result(result):
        sys.exit(1)

    print_step(4, "Settle the payment (Deposit -> Paid)")
    result = change_status(f"/api/v1/payments/{payment_id}/status", "Paid", args.yes)
    if not print_result(result):
        sys.exit(1)

    print_step(5, "Unpaid -> Paid on a second booking (needs confirmation)")
    second = create_booking(args.check_in, args.check_out)
    result = change_status(f"/api/v1/bookings/{second['id']}/payment-status", "Paid", args.yes)
    print_result(result)

    print_step(6, "Cancel the paid booking (expect payment_locked)")
    print_result(api_request("PUT", f"/api/v1/bookings/{booking_id}/status", {"status": "Cancelled"}))

    print_step(7, "Revert the paid payment (expect irreversible_payment)")
    print_result(change_status(f"/api/v1/payments/{payment_id}/status", "Unpaid", True))

    print("\nFlow complete.")


if __name__ == "__main__":
    main()
