#!/usr/bin/env python3
"""
Print the bookings a user can see, as the /bookings endpoint would return them.

Useful for checking what a given admin or attendee is shown without going
through the HTTP layer.

Usage:
    python scripts/list_bookings.py --user-id 42 --status upcoming
    python scripts/list_bookings.py --user-id 42 --status past --limit 5 --cursor 5
    python scripts/list_bookings.py --user-id 42 --status upcoming --team-id 3 --team-id 4
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session

from bookingscope.bookings.filters import BookingFilters, BookingListingStatus
from bookingscope.bookings.service import BookingListQuery, list_bookings
from bookingscope.bookings.visibility import Viewer
from bookingscope.core.config import settings
from bookingscope.core.database import engine
from bookingscope.core.exceptions import ServiceError
from bookingscope.models import User


def main():
    parser = argparse.ArgumentParser(description="List the bookings a user can see")
    parser.add_argument("--user-id", type=int, required=True, help="Viewer user ID")
    parser.add_argument(
        "--status",
        choices=[s.value for s in BookingListingStatus],
        default=BookingListingStatus.UPCOMING.value,
    )
    parser.add_argument("--limit", type=int, default=settings.default_page_size)
    parser.add_argument("--cursor", type=int, default=0)
    parser.add_argument("--team-id", type=int, action="append", dest="team_ids")
    parser.add_argument("--user-filter", type=int, action="append", dest="user_ids")
    parser.add_argument("--event-type-id", type=int, action="append", dest="event_type_ids")
    args = parser.parse_args()

    with Session(engine) as session:
        user = session.get(User, args.user_id)
        if not user:
            print(f"Error: no user with id {args.user_id}")
            sys.exit(1)
        viewer = Viewer(id=user.id, email=user.email)

    query = BookingListQuery(
        filters=BookingFilters(
            status=BookingListingStatus(args.status),
            team_ids=args.team_ids,
            user_ids=args.user_ids,
            event_type_ids=args.event_type_ids,
        ),
        limit=args.limit,
        cursor=args.cursor,
    )

    try:
        response = asyncio.run(list_bookings(engine, viewer, query))
    except ServiceError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(response.model_dump_json(by_alias=True, indent=2))


if __name__ == "__main__":
    main()
