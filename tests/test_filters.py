"""Tests for status and scoping filter resolution."""

from datetime import timedelta

import pytest
from sqlmodel import Session, select

from bookingscope.bookings.filters import (
    BookingFilters,
    BookingListingStatus,
    resolve_filters,
)
from bookingscope.models import Booking, BookingStatus, Host
from tests.conftest import NOW


def matching_uids(session: Session, filters: BookingFilters) -> set[str]:
    resolved = resolve_filters(filters, now=NOW)
    return set(session.exec(select(Booking.uid).where(resolved.where)).all())


@pytest.fixture(name="status_grid")
def status_grid_fixture(make_booking):
    """One booking per interesting (time, series, status) combination."""
    future = NOW + timedelta(days=1)
    past = NOW - timedelta(days=1)
    make_booking(uid="future-single-accepted", start=future)
    make_booking(uid="future-single-pending", start=future, status=BookingStatus.PENDING)
    make_booking(uid="future-single-awaiting", start=future, status=BookingStatus.AWAITING_HOST)
    make_booking(uid="future-single-cancelled", start=future, status=BookingStatus.CANCELLED)
    make_booking(uid="future-series-accepted", start=future, recurring_event_id="series-1")
    make_booking(
        uid="future-series-pending",
        start=future,
        recurring_event_id="series-1",
        status=BookingStatus.PENDING,
    )
    make_booking(
        uid="future-series-rejected",
        start=future,
        recurring_event_id="series-1",
        status=BookingStatus.REJECTED,
    )
    make_booking(uid="past-single-accepted", start=past)
    make_booking(uid="past-single-pending", start=past, status=BookingStatus.PENDING)
    make_booking(uid="past-single-rejected", start=past, status=BookingStatus.REJECTED)
    make_booking(uid="past-series-accepted", start=past, recurring_event_id="series-2")


class TestStatusWindows:
    """Each listing status selects exactly its window."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            (
                BookingListingStatus.UPCOMING,
                {
                    "future-single-accepted",
                    "future-single-pending",
                    "future-single-awaiting",
                    "future-series-accepted",
                },
            ),
            (
                BookingListingStatus.RECURRING,
                {"future-series-accepted", "future-series-pending"},
            ),
            (
                BookingListingStatus.PAST,
                {"past-single-accepted", "past-single-pending", "past-series-accepted"},
            ),
            (
                BookingListingStatus.CANCELLED,
                {"future-single-cancelled", "future-series-rejected", "past-single-rejected"},
            ),
            (
                BookingListingStatus.UNCONFIRMED,
                {"future-single-pending", "future-series-pending"},
            ),
        ],
    )
    def test_status_window(self, session: Session, status_grid, status, expected):
        assert matching_uids(session, BookingFilters(status=status)) == expected

    def test_upcoming_and_recurring_overlap(self, session: Session, status_grid):
        upcoming = matching_uids(session, BookingFilters(status=BookingListingStatus.UPCOMING))
        recurring = matching_uids(session, BookingFilters(status=BookingListingStatus.RECURRING))
        assert upcoming & recurring == {"future-series-accepted"}

    def test_booking_ending_now_is_both_upcoming_and_past(self, session: Session, make_booking):
        make_booking(uid="ends-now", start=NOW - timedelta(hours=1))

        assert "ends-now" in matching_uids(session, BookingFilters(status="upcoming"))
        assert "ends-now" in matching_uids(session, BookingFilters(status="past"))

    def test_string_status_is_accepted(self):
        resolved = resolve_filters(BookingFilters(status="past"), now=NOW)
        assert resolved.status is BookingListingStatus.PAST

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            resolve_filters(BookingFilters(status="someday"), now=NOW)


class TestOrdering:
    @pytest.mark.parametrize(
        "status, descending",
        [
            ("upcoming", False),
            ("recurring", False),
            ("past", True),
            ("cancelled", True),
            ("unconfirmed", False),
        ],
    )
    def test_direction(self, status, descending):
        assert resolve_filters(BookingFilters(status=status), now=NOW).descending is descending

    def test_past_is_newest_first(self, session: Session, make_booking):
        make_booking(uid="older", start=NOW - timedelta(days=3))
        make_booking(uid="newer", start=NOW - timedelta(days=2))
        resolved = resolve_filters(BookingFilters(status="past"), now=NOW)

        uids = session.exec(
            select(Booking.uid).where(resolved.where).order_by(*resolved.order_by)
        ).all()
        assert uids == ["newer", "older"]


class TestScopeFilters:
    """Scoping filters AND together; missing or empty filters constrain nothing."""

    @pytest.fixture(name="scoped")
    def scoped_fixture(self, session, make_booking, make_event_type, make_team, other_user, make_user):
        team = make_team("Sales")
        team_type = make_event_type(team_id=team.id)
        owned_type = make_event_type(owner_id=other_user.id)
        hosted_type = make_event_type()
        host = make_user("roundrobin@example.com")
        session.add(Host(event_type_id=hosted_type.id, user_id=host.id))
        session.commit()

        make_booking(uid="team-booking", event_type_id=team_type.id)
        make_booking(uid="owned-type-booking", event_type_id=owned_type.id)
        make_booking(uid="hosted-booking", event_type_id=hosted_type.id)
        make_booking(uid="organized-by-other", user_id=other_user.id)
        make_booking(uid="unrelated")
        return {
            "team": team,
            "team_type": team_type,
            "owned_type": owned_type,
            "host": host,
            "other_user": other_user,
        }

    def test_no_filters_match_everything(self, session, scoped):
        assert len(matching_uids(session, BookingFilters(status="upcoming"))) == 5

    def test_empty_filters_constrain_nothing(self, session, scoped):
        filters = BookingFilters(status="upcoming", team_ids=[], user_ids=[], event_type_ids=[])
        assert len(matching_uids(session, filters)) == 5

    def test_team_ids(self, session, scoped):
        filters = BookingFilters(status="upcoming", team_ids=[scoped["team"].id])
        assert matching_uids(session, filters) == {"team-booking"}

    def test_user_ids_match_organizer_host_and_event_type_owner(self, session, scoped):
        filters = BookingFilters(
            status="upcoming",
            user_ids=[scoped["other_user"].id, scoped["host"].id],
        )
        assert matching_uids(session, filters) == {
            "owned-type-booking",
            "hosted-booking",
            "organized-by-other",
        }

    def test_event_type_ids(self, session, scoped):
        filters = BookingFilters(status="upcoming", event_type_ids=[scoped["owned_type"].id])
        assert matching_uids(session, filters) == {"owned-type-booking"}

    def test_filters_are_combined_with_and(self, session, scoped):
        filters = BookingFilters(
            status="upcoming",
            team_ids=[scoped["team"].id],
            event_type_ids=[scoped["owned_type"].id],
        )
        assert matching_uids(session, filters) == set()

    def test_scope_applies_on_top_of_status(self, session, scoped, make_booking):
        make_booking(
            uid="team-booking-past",
            start=NOW - timedelta(days=2),
            event_type_id=scoped["team_type"].id,
        )
        filters = BookingFilters(status="past", team_ids=[scoped["team"].id])
        assert matching_uids(session, filters) == {"team-booking-past"}
