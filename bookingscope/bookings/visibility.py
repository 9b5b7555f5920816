"""Visibility paths: the independent ways a viewer may see a booking.

Each path is a separate, narrow predicate rather than one combined
permission check:

1. OwnerPath          the viewer organizes the booking
2. AttendeePath       the viewer's email is on the attendee list
3. TeamEventPath      the booking is for a team event type (or a managed
                      child of one) and the viewer is ADMIN/OWNER of that
                      team or of its organization
4. TeamPersonalPath   the booking is a personal booking of a member of a
                      team inside an organization the viewer administers
5. SeatHolderPath     the viewer holds a seat in the booking

Every path returns only ``(id, uid)`` rows, ordered like the final listing
and capped at ``take + 1`` rows from offset ``skip``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy import ColumnElement, and_, or_
from sqlmodel import select

from bookingscope.bookings.filters import ResolvedFilter
from bookingscope.models import (
    ADMIN_ROLES,
    Attendee,
    Booking,
    BookingSeat,
    EventType,
    Membership,
    Team,
)


@dataclass(frozen=True)
class Viewer:
    """The user the listing is computed for."""
    id: int
    email: str


def administered_team_ids(viewer_id: int):
    """Teams and organizations where the viewer is ADMIN or OWNER."""
    return select(Membership.team_id).where(
        Membership.user_id == viewer_id,
        Membership.role.in_(ADMIN_ROLES),
    )


def managed_team_ids(viewer_id: int):
    """Teams the viewer administers directly or through their organization."""
    admin_of = administered_team_ids(viewer_id)
    return select(Team.id).where(
        or_(Team.id.in_(admin_of), Team.parent_id.in_(admin_of))
    )


class VisibilityPath(ABC):
    """One access path, expressed as a predicate over Booking."""

    name: str

    @abstractmethod
    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        """Predicate selecting the bookings this path makes visible."""

    def statement(self, viewer: Viewer, resolved: ResolvedFilter, take: int, skip: int):
        return (
            select(Booking.id, Booking.uid)
            .where(self.clause(viewer))
            .where(resolved.where)
            .order_by(*resolved.order_by)
            .offset(skip)
            .limit(take + 1)
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class OwnerPath(VisibilityPath):
    name = "owner"

    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        return Booking.user_id == viewer.id


class AttendeePath(VisibilityPath):
    name = "attendee"

    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        return Booking.id.in_(
            select(Attendee.booking_id).where(Attendee.email == viewer.email)
        )


class TeamEventPath(VisibilityPath):
    """Collective, round-robin and managed team bookings."""

    name = "team_event"

    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        teams = managed_team_ids(viewer.id)
        team_event_types = select(EventType.id).where(EventType.team_id.in_(teams))
        return Booking.event_type_id.in_(
            select(EventType.id).where(
                or_(
                    EventType.team_id.in_(teams),
                    EventType.parent_id.in_(team_event_types),
                )
            )
        )


class TeamPersonalPath(VisibilityPath):
    """Personal bookings of organization members.

    Team event types and managed children are excluded here; those are
    covered by TeamEventPath.
    """

    name = "team_personal"

    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        org_team_members = select(Membership.user_id).where(
            Membership.team_id.in_(select(Team.id).where(Team.parent_id.is_not(None)))
        )
        administered_members = select(Membership.user_id).where(
            Membership.team_id.in_(managed_team_ids(viewer.id))
        )
        personal_event_types = select(EventType.id).where(
            EventType.team_id.is_(None),
            EventType.parent_id.is_(None),
        )
        return and_(
            Booking.user_id.in_(org_team_members),
            Booking.user_id.in_(administered_members),
            Booking.event_type_id.in_(personal_event_types),
        )


class SeatHolderPath(VisibilityPath):
    name = "seat_holder"

    def clause(self, viewer: Viewer) -> ColumnElement[bool]:
        return Booking.id.in_(
            select(BookingSeat.booking_id)
            .join(Attendee, Attendee.id == BookingSeat.attendee_id)
            .where(Attendee.email == viewer.email)
        )


# Order matters only for which duplicate is kept during deduplication.
VISIBILITY_PATHS: tuple[VisibilityPath, ...] = (
    OwnerPath(),
    AttendeePath(),
    TeamEventPath(),
    TeamPersonalPath(),
    SeatHolderPath(),
)
