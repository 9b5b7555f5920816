"""Resolve a listing status and scoping filters into store predicates.

Each listing status maps to a time/status predicate and an ordering:

    upcoming     end >= now, and either a series occurrence that is ACCEPTED
                 or a one-off that is not CANCELLED/REJECTED    start asc
    recurring    end >= now, part of a series, not CANCELLED/REJECTED
                                                                start asc
    past         end <= now, not CANCELLED/REJECTED             start desc
    cancelled    CANCELLED or REJECTED                          start desc
    unconfirmed  end >= now, PENDING                            start asc

``upcoming`` and ``recurring`` overlap; a request picks exactly one status.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import ColumnElement, and_, or_
from sqlmodel import select

from bookingscope.models import Booking, BookingStatus, EventType, Host

CLOSED_STATUSES = (BookingStatus.CANCELLED, BookingStatus.REJECTED)


class BookingListingStatus(str, Enum):
    UPCOMING = "upcoming"
    RECURRING = "recurring"
    PAST = "past"
    CANCELLED = "cancelled"
    UNCONFIRMED = "unconfirmed"


@dataclass(frozen=True)
class BookingFilters:
    """What the viewer asked to see.

    ``None`` for an id filter means the filter was not supplied. An empty
    sequence is treated the same way.
    """
    status: BookingListingStatus
    team_ids: Sequence[int] | None = None
    user_ids: Sequence[int] | None = None
    event_type_ids: Sequence[int] | None = None


@dataclass(frozen=True)
class ResolvedFilter:
    status: BookingListingStatus
    status_clause: ColumnElement[bool]
    scope_clauses: tuple[ColumnElement[bool], ...]
    descending: bool

    @property
    def where(self) -> ColumnElement[bool]:
        return and_(self.status_clause, *self.scope_clauses)

    @property
    def order_by(self) -> tuple:
        """Ordering on start time, with the primary key as a stable tie-breaker."""
        if self.descending:
            return (Booking.start_time.desc(), Booking.id.desc())
        return (Booking.start_time.asc(), Booking.id.asc())


def status_clause(status: BookingListingStatus, now: datetime) -> ColumnElement[bool]:
    """Time/status predicate for one listing status."""
    if status is BookingListingStatus.UPCOMING:
        return and_(
            Booking.end_time >= now,
            or_(
                and_(
                    Booking.recurring_event_id.is_not(None),
                    Booking.status == BookingStatus.ACCEPTED,
                ),
                and_(
                    Booking.recurring_event_id.is_(None),
                    Booking.status.not_in(CLOSED_STATUSES),
                ),
            ),
        )
    if status is BookingListingStatus.RECURRING:
        return and_(
            Booking.end_time >= now,
            Booking.recurring_event_id.is_not(None),
            Booking.status.not_in(CLOSED_STATUSES),
        )
    if status is BookingListingStatus.PAST:
        return and_(
            Booking.end_time <= now,
            Booking.status.not_in(CLOSED_STATUSES),
        )
    if status is BookingListingStatus.CANCELLED:
        return Booking.status.in_(CLOSED_STATUSES)
    if status is BookingListingStatus.UNCONFIRMED:
        return and_(
            Booking.end_time >= now,
            Booking.status == BookingStatus.PENDING,
        )
    raise ValueError(f"Unknown booking listing status: {status!r}")


DESCENDING_STATUSES = {BookingListingStatus.PAST, BookingListingStatus.CANCELLED}


def _ids(values: Sequence[int] | None) -> list[int] | None:
    if not values:
        return None
    return list(values)


def scope_clauses(filters: BookingFilters) -> tuple[ColumnElement[bool], ...]:
    """One predicate per supplied id filter, to be AND-combined."""
    clauses = []

    team_ids = _ids(filters.team_ids)
    if team_ids is not None:
        clauses.append(
            Booking.event_type_id.in_(
                select(EventType.id).where(EventType.team_id.in_(team_ids))
            )
        )

    user_ids = _ids(filters.user_ids)
    if user_ids is not None:
        clauses.append(
            or_(
                Booking.event_type_id.in_(
                    select(Host.event_type_id).where(Host.user_id.in_(user_ids))
                ),
                Booking.user_id.in_(user_ids),
                Booking.event_type_id.in_(
                    select(EventType.id).where(EventType.owner_id.in_(user_ids))
                ),
            )
        )

    event_type_ids = _ids(filters.event_type_ids)
    if event_type_ids is not None:
        clauses.append(Booking.event_type_id.in_(event_type_ids))

    return tuple(clauses)


def resolve_filters(filters: BookingFilters, now: datetime | None = None) -> ResolvedFilter:
    """Turn a status tag and optional scoping filters into a ResolvedFilter."""
    now = now or datetime.now(UTC)
    status = BookingListingStatus(filters.status)
    return ResolvedFilter(
        status=status,
        status_clause=status_clause(status, now),
        scope_clauses=scope_clauses(filters),
        descending=status in DESCENDING_STATUSES,
    )
