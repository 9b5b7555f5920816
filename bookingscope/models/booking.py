"""Booking model, the scheduled occurrence the listing returns.

This module defines the Booking model and its status enum. Bookings are
read-only for the listing; they are created and changed by booking
workflows elsewhere.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.attendee import Attendee
    from bookingscope.models.event_type import EventType
    from bookingscope.models.payment import Payment
    from bookingscope.models.reference import BookingReference
    from bookingscope.models.seat import BookingSeat
    from bookingscope.models.user import User


class BookingStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"
    PENDING = "PENDING"
    AWAITING_HOST = "AWAITING_HOST"


class Booking(SQLModel, table=True):
    """A single scheduled occurrence.

    Attributes:
        id: Primary key.
        uid: Externally stable identifier, unique per booking. Used as the
            identity key when the same booking is reached through several
            visibility paths.
        title: Booking title.
        description: Optional free text.
        location: Where the booking takes place (address, link, ...).
        recurring_event_id: Series identifier shared by every occurrence
            generated from one recurrence rule.
        status: Booking status.
        start_time: When the booking starts.
        end_time: When the booking ends.
        user_id: Owning user (the organizer).
        event_type_id: Event type the booking was made for.
        paid: Whether payment has completed.
        rescheduled: Whether the booking was rescheduled away.
        is_recorded: Whether a recording exists.
        created_at: Creation timestamp.
    """
    id: int | None = Field(default=None, primary_key=True)
    uid: str = Field(index=True, unique=True)
    title: str
    description: str | None = None
    location: str | None = None
    recurring_event_id: str | None = Field(default=None, index=True)
    status: BookingStatus = Field(default=BookingStatus.ACCEPTED, index=True)
    start_time: datetime = Field(index=True)
    end_time: datetime = Field(index=True)
    user_id: int | None = Field(default=None, foreign_key="user.id", index=True)
    event_type_id: int | None = Field(default=None, foreign_key="eventtype.id", index=True)
    paid: bool = Field(default=False)
    rescheduled: bool | None = None
    is_recorded: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    user: Optional["User"] = Relationship()
    event_type: Optional["EventType"] = Relationship()
    attendees: list["Attendee"] = Relationship(back_populates="booking")
    payments: list["Payment"] = Relationship(back_populates="booking")
    references: list["BookingReference"] = Relationship(back_populates="booking")
    seats: list["BookingSeat"] = Relationship(back_populates="booking")
