#!/usr/bin/env python3
"""Seed a RoomBook environment with an admin, a vendor and sample listings.

Creates any missing tables first, so it can be pointed at an empty
DynamoDB (including DynamoDB Local via AWS_ENDPOINT_URL).

Usage:
    python scripts/seed_data.py --env dev
    python scripts/seed_data.py --env dev --tables-only
    python scripts/seed_data.py --env dev --admin-email admin@example.com
"""

import argparse
import datetime as dt
import json
import os
import sys

from roombook.config import get_settings
from roombook.models import BookingError, UserRole
from roombook.services.dynamodb import DynamoDBService
from roombook.services.images import ImageStorage
from roombook.services.notifications import NotificationService
from roombook.services.properties import PropertyService
from roombook.services.users import UserService

DEFAULT_PASSWORD = "Roombook1!"

SAMPLE_LISTINGS = [
    {
        "name": "Lakeside Cottage",
        "type": "Cottage",
        "description": "Two-bedroom cottage with a private jetty.",
        "location": "Sylhet",
        "address": "12 Lake Road, Sylhet",
        "price": "150",
        "bedrooms": "2",
        "bathrooms": "1",
        "squareFeet": "900",
        "maxGuests": "4",
        "amenities": {"wifi": True, "parking": True, "kitchen": True},
    },
    {
        "name": "City Loft",
        "type": "Apartment",
        "description": "Bright loft in the centre, walking distance to the old town.",
        "location": "Dhaka",
        "address": "45 Gulshan Avenue, Dhaka",
        "price": "95",
        "bedrooms": "1",
        "bathrooms": "1",
        "squareFeet": "600",
        "maxGuests": "2",
        "amenities": {"wifi": True, "airConditioning": True, "workspace": True},
    },
    {
        "name": "Beach House",
        "type": "House",
        "description": "Family house a short walk from the beach.",
        "location": "Cox's Bazar",
        "address": "7 Marine Drive, Cox's Bazar",
        "price": "220",
        "bedrooms": "4",
        "bathrooms": "3",
        "squareFeet": "2100",
        "maxGuests": "8",
        "amenities": {"wifi": True, "parking": True, "breakfast": True, "tv": True},
    },
]


def ensure_user(
    users: UserService, username: str, email: str, role: UserRole
) -> str:
    """Create an account unless one already exists; return its ID."""
    existing = users.get_user_by_email(email)
    if existing:
        print(f"  = {role.value} {email} already exists")
        return existing.user_id
    user = users.create_user(username, email, DEFAULT_PASSWORD, role=role)
    print(f"  + {role.value} {email} (password {DEFAULT_PASSWORD})")
    return user.user_id


def seed_listings(properties: PropertyService, vendor_id: str, vendor_email: str) -> int:
    if properties.list_by_owner(vendor_id):
        print("  = vendor already has listings")
        return 0

    today = dt.datetime.now(dt.UTC).date()
    availability = {
        "startDate": today.isoformat(),
        "endDate": (today + dt.timedelta(days=365)).isoformat(),
    }
    for listing in SAMPLE_LISTINGS:
        fields = {
            **listing,
            "amenities": json.dumps(listing["amenities"]),
            "availability": json.dumps(availability),
            "mobile": "+8801712345678",
            "email": vendor_email,
        }
        prop = properties.create(vendor_id, fields, uploads=[])
        print(f"  + listing {prop.name} ({prop.property_id})")
    return len(SAMPLE_LISTINGS)


def main() -> int:
    """Run the seed script."""
    parser = argparse.ArgumentParser(description="Seed RoomBook tables with sample data")
    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default=os.environ.get("ENVIRONMENT", "dev"),
        help="Target environment (default: dev)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_DEFAULT_REGION", "eu-west-1"),
        help="AWS region (default: eu-west-1 or AWS_DEFAULT_REGION env var)",
    )
    parser.add_argument(
        "--tables-only",
        action="store_true",
        help="Only create missing tables",
    )
    parser.add_argument("--admin-email", default="admin@example.com")
    parser.add_argument("--vendor-email", default="vendor@example.com")

    args = parser.parse_args()
    os.environ["AWS_DEFAULT_REGION"] = args.region

    if args.env == "prod":
        confirm = input("WARNING: You are about to modify PRODUCTION data. Type 'yes' to continue: ")
        if confirm.lower() != "yes":
            print("Aborted.")
            return 1

    prefix = os.environ.get("DYNAMODB_TABLE_PREFIX", f"roombook-{args.env}")
    db = DynamoDBService(prefix)

    print(f"\nSeeding {prefix} (region: {args.region})\n")
    created = db.create_tables()
    for name in created:
        print(f"  + table {name}")
    if args.tables_only:
        return 0

    settings = get_settings()
    users = UserService(db)
    notifications = NotificationService(db)
    properties = PropertyService(
        db,
        ImageStorage(settings.upload_dir, settings.max_upload_bytes),
        notifications,
    )

    try:
        ensure_user(users, "admin", args.admin_email, UserRole.ADMIN)
        vendor_id = ensure_user(users, "vendor", args.vendor_email, UserRole.VENDOR)
        seed_listings(properties, vendor_id, args.vendor_email)
    except BookingError as e:
        print(f"  Failed to seed: {e.message}")
        return 1

    print("\nSeed completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
