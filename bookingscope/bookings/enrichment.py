"""Full projection of the deduplicated bookings, redacted and normalized.

The visibility paths only return ``(id, uid)``. Once they are merged, one
query loads every field the listing returns, re-applying the listing order
that concatenating the paths lost. Each loaded booking is then turned into
an ``EnrichedBooking``:

- attendee lists of seated bookings are reduced to the viewer when the event
  type hides attendees
- event type blobs are validated, price and currency get their defaults
- timestamps become ISO-8601 UTC strings

Nothing here mutates the ORM objects; every step builds new values.
"""

import logging
from collections.abc import Sequence
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from bookingscope.bookings.filters import ResolvedFilter
from bookingscope.bookings.schemas import (
    AttendeeView,
    BookingReferenceView,
    BookingUserView,
    EnrichedBooking,
    EnrichedEventType,
    EventTypeMetadata,
    PaymentView,
    RecurringEvent,
    SeatReferenceView,
    TeamView,
    to_iso,
)
from bookingscope.bookings.visibility import Viewer
from bookingscope.core.config import settings
from bookingscope.core.exceptions import ValidationError
from bookingscope.models import Attendee, Booking, BookingSeat, EventType

logger = logging.getLogger(__name__)


def enrichment_statement(booking_ids: Sequence[int], resolved: ResolvedFilter):
    """Load the full projection for the given ids, in listing order."""
    return (
        select(Booking)
        .where(Booking.id.in_(list(booking_ids)))
        .options(
            selectinload(Booking.event_type).selectinload(EventType.team),
            selectinload(Booking.user),
            selectinload(Booking.attendees),
            selectinload(Booking.payments),
            selectinload(Booking.references),
            selectinload(Booking.seats).selectinload(BookingSeat.attendee),
        )
        .order_by(*resolved.order_by)
    )


def viewer_seats(seats: Sequence[BookingSeat], viewer_email: str) -> list[SeatReferenceView]:
    """Seat references held by the viewer; other seats are not projected."""
    return [
        SeatReferenceView(reference_uid=seat.reference_uid, attendee_email=seat.attendee.email)
        for seat in seats
        if seat.attendee is not None and seat.attendee.email == viewer_email
    ]


def redact_attendees(
    attendees: Sequence[Attendee],
    seat_references: Sequence[SeatReferenceView],
    show_attendees: bool,
    viewer_email: str,
) -> list[Attendee]:
    """
    Apply the event type's attendee visibility to a booking's attendees.

    A seated booking whose event type hides attendees only shows the viewer
    (at most one entry, none if the viewer is not an attendee). Every other
    booking keeps its full list.

    Returns:
        A new list; the input is left untouched
    """
    if seat_references and not show_attendees:
        return [attendee for attendee in attendees if attendee.email == viewer_email][:1]
    return list(attendees)


def _validate_blob(model, blob, field: str, event_type_id: int | None):
    try:
        return model.model_validate(blob)
    except PydanticValidationError as e:
        logger.error(f"Invalid {field} on event type {event_type_id}: {e}")
        raise ValidationError(
            f"Event type {event_type_id} has an invalid {field}: {e}", field=field
        ) from e


def normalize_event_type(event_type: EventType | None) -> EnrichedEventType:
    """
    Validate an event type's blobs and apply the listing defaults.

    Missing price becomes 0, missing currency becomes the configured default,
    a missing metadata blob becomes an empty one and a missing recurrence
    rule stays None.

    Raises:
        ValidationError: If the recurrence rule or metadata blob is malformed
    """
    if event_type is None:
        return EnrichedEventType(
            currency=settings.default_currency,
            metadata=EventTypeMetadata(),
        )

    recurring_event = None
    if event_type.recurring_event is not None:
        recurring_event = _validate_blob(
            RecurringEvent, event_type.recurring_event, "recurring_event", event_type.id
        )
    metadata = _validate_blob(
        EventTypeMetadata, event_type.event_metadata or {}, "metadata", event_type.id
    )

    team = None
    if event_type.team is not None:
        team = TeamView(id=event_type.team.id, name=event_type.team.name)

    return EnrichedEventType(
        id=event_type.id,
        slug=event_type.slug,
        event_name=event_type.title,
        price=event_type.price or 0,
        currency=event_type.currency or settings.default_currency,
        recurring_event=recurring_event,
        metadata=metadata,
        seats_show_attendees=event_type.seats_show_attendees,
        seats_show_availability_count=event_type.seats_show_availability_count,
        team=team,
    )


def enrich_booking(booking: Booking, viewer: Viewer) -> EnrichedBooking:
    """Build the listing entry for one loaded booking."""
    event_type = normalize_event_type(booking.event_type)
    seats = viewer_seats(booking.seats, viewer.email)
    attendees = redact_attendees(
        booking.attendees,
        seats,
        bool(event_type.seats_show_attendees),
        viewer.email,
    )

    user = None
    if booking.user is not None:
        user = BookingUserView(id=booking.user.id, name=booking.user.name, email=booking.user.email)

    return EnrichedBooking(
        id=booking.id,
        uid=booking.uid,
        title=booking.title,
        description=booking.description,
        location=booking.location,
        recurring_event_id=booking.recurring_event_id,
        status=booking.status,
        start_time=to_iso(booking.start_time),
        end_time=to_iso(booking.end_time),
        paid=booking.paid,
        rescheduled=booking.rescheduled,
        is_recorded=booking.is_recorded,
        user=user,
        event_type=event_type,
        attendees=[
            AttendeeView(id=a.id, email=a.email, name=a.name, time_zone=a.time_zone)
            for a in attendees
        ],
        payment=[
            PaymentView(
                payment_option=p.payment_option,
                amount=p.amount,
                currency=p.currency,
                success=p.success,
            )
            for p in booking.payments
        ],
        references=[
            BookingReferenceView(id=r.id, type=r.type, uid=r.uid, meeting_url=r.meeting_url)
            for r in booking.references
        ],
        seats_references=seats,
    )


def fetch_enriched_bookings(
    session: Session,
    booking_ids: Sequence[int],
    resolved: ResolvedFilter,
    viewer: Viewer,
) -> list[EnrichedBooking]:
    """Load, order, redact and normalize the given bookings."""
    if not booking_ids:
        return []

    bookings = session.exec(enrichment_statement(booking_ids, resolved)).all()
    return [enrich_booking(booking, viewer) for booking in bookings]
