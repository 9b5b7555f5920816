"""User model for people who own, attend or administer bookings."""

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """An account that can view bookings.

    The listing resolves the viewer to a User row and then matches bookings
    by ``id`` (ownership, team roles) or by ``email`` (attendee and seat
    holder paths).

    Attributes:
        id: Primary key.
        email: Unique email address, compared exactly against attendee emails.
        name: Display name.
    """
    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str | None = None
