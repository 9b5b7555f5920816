"""External references (video rooms, calendar entries) of a booking."""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.booking import Booking


class BookingReference(SQLModel, table=True):
    """A booking's handle in an external system.

    Attributes:
        id: Primary key.
        booking_id: Foreign key to the parent Booking.
        type: Integration type, e.g. "google_calendar" or "daily_video".
        uid: Identifier of the booking in that integration.
        meeting_url: Join link, for conferencing integrations.
    """
    id: int | None = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="booking.id", index=True)
    type: str
    uid: str
    meeting_url: str | None = None

    # Relationship
    booking: Optional["Booking"] = Relationship(back_populates="references")
