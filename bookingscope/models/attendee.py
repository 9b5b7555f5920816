"""Attendee model for people booked into a booking.

Attendee emails drive two visibility paths: attendees see the bookings they
are on, and seat holders see the bookings they hold a seat in.
"""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.booking import Booking


class Attendee(SQLModel, table=True):
    """A person booked into a booking.

    Attributes:
        id: Primary key.
        booking_id: Foreign key to the parent Booking.
        email: Email address, matched exactly against the viewer's email.
        name: Display name.
        time_zone: IANA time zone the attendee booked in.
        booking: Reference to the parent Booking.
    """
    id: int | None = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="booking.id", index=True)
    email: str = Field(index=True)
    name: str = ""
    time_zone: str = "UTC"

    # Relationship
    booking: Optional["Booking"] = Relationship(back_populates="attendees")
