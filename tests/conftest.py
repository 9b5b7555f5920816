"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from bookingscope.bookings.visibility import Viewer
from bookingscope.core.database import build_engine, get_engine, get_session
from bookingscope.main import app
from bookingscope.models import (
    Attendee,
    Booking,
    BookingSeat,
    BookingStatus,
    EventType,
    Membership,
    MembershipRole,
    Team,
    User,
)

# Reference time for status windows in service-level tests.
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def as_utc(value: datetime) -> datetime:
    """Normalize a timestamp read back from SQLite to aware UTC.

    Depending on the SQLAlchemy release, stored timestamps come back either
    naive or with a UTC offset.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


@pytest.fixture(name="engine")
def engine_fixture(tmp_path):
    """Create a file-backed SQLite database for testing.

    The listing runs its queries on several threads at once, each with its
    own connection, so an in-memory database shared through one connection
    won't do.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session, engine):
    """Create a test client with the test database."""

    def get_session_override():
        return session

    def get_engine_override():
        return engine

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_engine] = get_engine_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_user")
def make_user_fixture(session: Session):
    """Factory for users."""

    def make_user(email: str, name: str | None = None) -> User:
        user = User(email=email, name=name or email.split("@")[0])
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return make_user


@pytest.fixture(name="viewer_user")
def viewer_user_fixture(make_user) -> User:
    return make_user("viewer@example.com", "Viewer")


@pytest.fixture(name="viewer")
def viewer_fixture(viewer_user: User) -> Viewer:
    return Viewer(id=viewer_user.id, email=viewer_user.email)


@pytest.fixture(name="other_user")
def other_user_fixture(make_user) -> User:
    return make_user("host@example.com", "Host")


@pytest.fixture(name="make_team")
def make_team_fixture(session: Session):
    """Factory for teams; pass parent to place the team in an organization."""

    def make_team(name: str, parent: Team | None = None) -> Team:
        team = Team(name=name, slug=name.lower(), parent_id=parent.id if parent else None)
        session.add(team)
        session.commit()
        session.refresh(team)
        return team

    return make_team


@pytest.fixture(name="add_member")
def add_member_fixture(session: Session):
    """Factory for memberships."""

    def add_member(user: User, team: Team, role: MembershipRole = MembershipRole.MEMBER) -> Membership:
        membership = Membership(user_id=user.id, team_id=team.id, role=role, accepted=True)
        session.add(membership)
        session.commit()
        return membership

    return add_member


@pytest.fixture(name="make_event_type")
def make_event_type_fixture(session: Session):
    """Factory for event types."""
    numbers = count(1)

    def make_event_type(**kwargs) -> EventType:
        n = next(numbers)
        kwargs.setdefault("slug", f"event-{n}")
        kwargs.setdefault("title", f"Event {n}")
        event_type = EventType(**kwargs)
        session.add(event_type)
        session.commit()
        session.refresh(event_type)
        return event_type

    return make_event_type


@pytest.fixture(name="make_booking")
def make_booking_fixture(session: Session):
    """Factory for bookings with optional attendees and seats.

    ``start`` defaults to one day after NOW. ``attendees`` are emails;
    ``seats`` are emails of attendees who also get a seat reference.
    """
    numbers = count(1)

    def make_booking(
        start: datetime | None = None,
        duration: timedelta = timedelta(hours=1),
        status: BookingStatus = BookingStatus.ACCEPTED,
        attendees: tuple[str, ...] = (),
        seats: tuple[str, ...] = (),
        **kwargs,
    ) -> Booking:
        n = next(numbers)
        start = start or NOW + timedelta(days=1)
        kwargs.setdefault("uid", f"uid-{n}")
        kwargs.setdefault("title", f"Booking {n}")
        booking = Booking(start_time=start, end_time=start + duration, status=status, **kwargs)
        session.add(booking)
        session.flush()

        for email in attendees + tuple(e for e in seats if e not in attendees):
            attendee = Attendee(booking_id=booking.id, email=email, name=email.split("@")[0])
            session.add(attendee)
            session.flush()
            if email in seats:
                session.add(
                    BookingSeat(
                        reference_uid=f"seat-{n}-{attendee.id}",
                        booking_id=booking.id,
                        attendee_id=attendee.id,
                    )
                )

        session.commit()
        session.refresh(booking)
        return booking

    return make_booking
