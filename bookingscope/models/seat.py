"""Seat reference model for seat-based bookings."""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.attendee import Attendee
    from bookingscope.models.booking import Booking


class BookingSeat(SQLModel, table=True):
    """Links an attendee to a booking when the event type sells seats.

    Attributes:
        id: Primary key.
        reference_uid: Public identifier of the seat.
        booking_id: Foreign key to the Booking the seat belongs to.
        attendee_id: Foreign key to the Attendee holding the seat.
    """
    id: int | None = Field(default=None, primary_key=True)
    reference_uid: str = Field(index=True, unique=True)
    booking_id: int = Field(foreign_key="booking.id", index=True)
    attendee_id: int = Field(foreign_key="attendee.id", index=True)

    # Relationships
    booking: Optional["Booking"] = Relationship(back_populates="seats")
    attendee: Optional["Attendee"] = Relationship()
