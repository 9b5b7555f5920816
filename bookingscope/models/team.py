"""Team and membership models.

A team with ``parent_id`` set belongs to an organization; the organization is
itself a Team row. Membership roles decide delegated booking visibility:
ADMIN and OWNER members see the bookings of their team, and of every team
under an organization they administer.
"""

from enum import Enum

from sqlmodel import Field, SQLModel


class MembershipRole(str, Enum):
    MEMBER = "MEMBER"
    ADMIN = "ADMIN"
    OWNER = "OWNER"


ADMIN_ROLES = (MembershipRole.ADMIN, MembershipRole.OWNER)


class Team(SQLModel, table=True):
    """A team, or an organization when other teams point at it.

    Attributes:
        id: Primary key.
        name: Display name.
        slug: URL slug.
        parent_id: Organization this team belongs to, if any.
    """
    id: int | None = Field(default=None, primary_key=True)
    name: str
    slug: str | None = None
    parent_id: int | None = Field(default=None, foreign_key="team.id", index=True)


class Membership(SQLModel, table=True):
    """A user's role on a team or organization."""
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    role: MembershipRole = Field(default=MembershipRole.MEMBER)
    accepted: bool = Field(default=False)
