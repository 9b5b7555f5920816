"""Response schemas for the booking listing, and the event type blob schemas.

The response models serialize with camelCase keys (``nextCursor``,
``recurringInfo``, ``startTime``) and accept snake_case names in Python.

``RecurringEvent`` and ``EventTypeMetadata`` validate the JSON blobs stored on
EventType. Unknown metadata keys are dropped; wrongly typed known keys fail
validation.
"""

from datetime import UTC, datetime
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from bookingscope.models import BookingStatus


def to_iso(value: datetime) -> str:
    """Serialize a timestamp as ISO-8601 UTC, e.g. 2026-01-01T10:00:00.000Z.

    Naive values are taken to be UTC; some SQLite drivers return stored
    timestamps without an offset.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Frequency(IntEnum):
    """Recurrence frequency, numbered as in RFC 5545 rrule libraries."""
    YEARLY = 0
    MONTHLY = 1
    WEEKLY = 2
    DAILY = 3
    HOURLY = 4
    MINUTELY = 5
    SECONDLY = 6


class RecurringEvent(CamelModel):
    """Recurrence rule stored on an event type."""
    freq: Frequency
    count: int
    interval: int
    dtstart: datetime | None = None
    until: datetime | None = None
    tzid: str | None = None


class ConfirmationThreshold(CamelModel):
    time: int
    unit: str


class EventTypeConfig(CamelModel):
    use_host_schedules_for_team_event: bool | None = None


class EventTypeMetadata(CamelModel):
    """Known event type metadata keys."""
    model_config = ConfigDict(extra="ignore")

    apps: dict[str, Any] | None = None
    additional_notes_required: bool | None = None
    disable_success_page: bool | None = None
    disable_standard_emails: dict[str, Any] | None = None
    requires_confirmation_threshold: ConfirmationThreshold | None = None
    multiple_duration: list[int] | None = None
    giphy_thank_you_page: str | None = None
    managed_event_config: dict[str, Any] | None = None
    config: EventTypeConfig | None = None


class TeamView(CamelModel):
    id: int
    name: str


class EnrichedEventType(CamelModel):
    """Event type as returned with a booking.

    Present even when the booking has no event type, in which case only the
    defaulted fields are set.
    """
    id: int | None = None
    slug: str | None = None
    event_name: str | None = None
    price: int = 0
    currency: str
    recurring_event: RecurringEvent | None = None
    metadata: EventTypeMetadata
    seats_show_attendees: bool | None = None
    seats_show_availability_count: bool | None = None
    team: TeamView | None = None


class AttendeeView(CamelModel):
    id: int
    email: str
    name: str
    time_zone: str


class PaymentView(CamelModel):
    payment_option: str | None = None
    amount: int
    currency: str
    success: bool


class BookingReferenceView(CamelModel):
    id: int
    type: str
    uid: str
    meeting_url: str | None = None


class SeatReferenceView(CamelModel):
    reference_uid: str
    attendee_email: str


class BookingUserView(CamelModel):
    id: int
    name: str | None = None
    email: str


class EnrichedBooking(CamelModel):
    id: int
    uid: str
    title: str
    description: str | None = None
    location: str | None = None
    recurring_event_id: str | None = None
    status: BookingStatus
    start_time: str
    end_time: str
    paid: bool
    rescheduled: bool | None = None
    is_recorded: bool
    user: BookingUserView | None = None
    event_type: EnrichedEventType
    attendees: list[AttendeeView]
    payment: list[PaymentView]
    references: list[BookingReferenceView]
    seats_references: list[SeatReferenceView]


class RecurringSeriesSummary(CamelModel):
    """Occurrences of one series owned by the viewer, bucketed by status."""
    recurring_event_id: str
    count: int
    first_date: datetime | None = None
    bookings: dict[BookingStatus, list[datetime]]

    @field_serializer("first_date", when_used="json")
    def serialize_first_date(self, value: datetime | None) -> str | None:
        return to_iso(value) if value is not None else None

    @field_serializer("bookings", when_used="json")
    def serialize_bookings(self, value: dict[BookingStatus, list[datetime]]) -> dict[str, list[str]]:
        return {status.value: [to_iso(t) for t in times] for status, times in value.items()}


class BookingListResponse(CamelModel):
    bookings: list[EnrichedBooking]
    recurring_info: list[RecurringSeriesSummary]
    next_cursor: int | None = None
