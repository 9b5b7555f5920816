"""Event type model describing a bookable offering.

Event types carry two loosely-typed JSON blobs, the recurrence rule and the
metadata. They are stored as-is and only validated when a booking listing
projects them (see ``bookingscope.bookings.schemas``).
"""

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.team import Team


class EventType(SQLModel, table=True):
    """A bookable offering.

    Attributes:
        id: Primary key.
        slug: URL slug.
        title: Display name of the event.
        price: Price in minor units; None when the offering is free.
        currency: ISO currency code; None when unset.
        recurring_event: Recurrence rule blob (freq, interval, count, ...).
        event_metadata: Free-form metadata blob, stored in the ``metadata``
            column.
        seats_show_attendees: When False, seat holders only see themselves
            in a seated booking's attendee list.
        seats_show_availability_count: Whether remaining seats are shown.
        team_id: Owning team for collective/round-robin event types.
        parent_id: Managed-event parent; children are per-member copies of
            a team's managed event type.
        owner_id: User who owns a personal event type.
        team: Reference to the owning Team.
    """
    id: int | None = Field(default=None, primary_key=True)
    slug: str
    title: str
    price: int | None = None
    currency: str | None = None
    recurring_event: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    event_metadata: dict[str, Any] | None = Field(
        default=None, sa_column=Column("metadata", JSON, nullable=True)
    )
    seats_show_attendees: bool = Field(default=False)
    seats_show_availability_count: bool = Field(default=True)
    team_id: int | None = Field(default=None, foreign_key="team.id", index=True)
    parent_id: int | None = Field(default=None, foreign_key="eventtype.id", index=True)
    owner_id: int | None = Field(default=None, foreign_key="user.id", index=True)

    # Relationship
    team: Optional["Team"] = Relationship()


class Host(SQLModel, table=True):
    """A user assigned to host an event type."""
    event_type_id: int = Field(foreign_key="eventtype.id", primary_key=True)
    user_id: int = Field(foreign_key="user.id", primary_key=True)
    is_fixed: bool = Field(default=False)
