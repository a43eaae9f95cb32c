#!/usr/bin/env python3
"""
Booking engagement flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_engagement.py --offer-id <UUID> --booker-id <UUID> --owner-id <UUID>
    python scripts/flow_engagement.py --offer-id <UUID> --booker-id <UUID> --owner-id <UUID> --dispute

Flow:
    1. Booker requests a booking
    2. Owner accepts it
    3. Booker confirms completion
    4. Owner confirms completion (or: booker raises a dispute)
    5. Both parties list their notifications

Tokens are minted locally with the service's JWT secret, so the users must
already exist in the database.
"""

import argparse
import json
import sys

import httpx

from skillswap.core.security import create_access_token

BASE_URL = "http://localhost:8000"


def mint_token(user_id: str) -> str:
    """Create a development access token for a user."""
    return create_access_token({"sub": user_id})


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
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


BOOKING_FIELDS = ["id", "status", "completed_by_booker", "completed_by_owner", "completed_at", "version"]


def main():
    parser = argparse.ArgumentParser(description="Booking engagement flow")
    parser.add_argument("--offer-id", required=True, help="Offer UUID")
    parser.add_argument("--booker-id", required=True, help="Booker user UUID")
    parser.add_argument("--owner-id", required=True, help="Offer owner user UUID")
    parser.add_argument("--message", default="Interested in a session", help="Booking message")
    parser.add_argument("--dispute", action="store_true", help="Raise a dispute instead of the owner confirming")
    args = parser.parse_args()

    booker_token = mint_token(args.booker_id)
    owner_token = mint_token(args.owner_id)

    # Step 1: Create booking
    print_step(1, "Booker requests a booking")
    result = api_request(booker_token, "POST", "/api/v1/bookings/", {
        "offer_id": args.offer_id,
        "message": args.message,
    })
    if not print_result(result, BOOKING_FIELDS):
        sys.exit(1)
    booking_id = result["data"]["id"]

    # Step 2: Accept
    print_step(2, "Owner accepts")
    result = api_request(owner_token, "PUT", f"/api/v1/bookings/{booking_id}/status", {"status": "accepted"})
    if not print_result(result, BOOKING_FIELDS):
        sys.exit(1)

    # Step 3: Booker confirms
    print_step(3, "Booker confirms completion")
    result = api_request(booker_token, "POST", f"/api/v1/bookings/{booking_id}/complete", {
        "notes": "Covered the basics, great session",
    })
    if not print_result(result, BOOKING_FIELDS):
        sys.exit(1)

    # Step 4: Owner confirms, or the booker disputes
    if args.dispute:
        print_step(4, "Booker raises a dispute")
        result = api_request(booker_token, "POST", f"/api/v1/bookings/{booking_id}/dispute", {
            "reason": "The session ended after ten minutes",
        })
        fields = BOOKING_FIELDS + ["dispute_reason", "disputed_by_id"]
    else:
        print_step(4, "Owner confirms completion")
        result = api_request(owner_token, "POST", f"/api/v1/bookings/{booking_id}/complete")
        fields = BOOKING_FIELDS
    if not print_result(result, fields):
        sys.exit(1)

    # Step 5: Notifications
    print_step(5, "Notifications")
    for label, token in (("booker", booker_token), ("owner", owner_token)):
        result = api_request(token, "GET", "/api/v1/notifications/")
        if result["status"] >= 400:
            print_result(result)
            continue
        print(f"{label}: {result['data']['unread_count']} unread")
        for notification in result["data"]["notifications"]:
            print(f"  - [{notification['notification_type']}] {notification['title']}: {notification['body']}")

    print("\nFlow completed.")


if __name__ == "__main__":
    main()
