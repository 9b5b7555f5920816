"""Payment model attached to paid bookings."""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from bookingscope.models.booking import Booking


class Payment(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="booking.id", index=True)
    amount: int = 0
    currency: str = "usd"
    success: bool = Field(default=False)
    payment_option: str | None = Field(default="ON_BOOKING")

    # Relationship
    booking: Optional["Booking"] = Relationship(back_populates="payments")
