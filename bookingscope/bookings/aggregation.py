"""Recurring series summaries for the viewer's own bookings.

Two grouped queries feed the summary:

- basic: one row per series with its occurrence count and first start time
- extended: one row per (series, status, start time)

Both are scoped to bookings the viewer owns, which is narrower than the
booking list itself: series summaries describe the viewer's own calendar.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func
from sqlmodel import select

from bookingscope.bookings.schemas import RecurringSeriesSummary
from bookingscope.models import Booking, BookingStatus

logger = logging.getLogger(__name__)


def basic_recurring_statement(viewer_id: int):
    """Series id, occurrence count and first start time per owned series."""
    return (
        select(
            Booking.recurring_event_id,
            func.count(Booking.recurring_event_id),
            func.min(Booking.start_time),
        )
        .where(Booking.recurring_event_id.is_not(None))
        .where(Booking.user_id == viewer_id)
        .group_by(Booking.recurring_event_id)
    )


def extended_recurring_statement(viewer_id: int):
    """One row per (series, status, start time) for owned series."""
    return (
        select(
            Booking.recurring_event_id,
            Booking.status,
            Booking.start_time,
            func.min(Booking.start_time),
        )
        .where(Booking.recurring_event_id.is_not(None))
        .where(Booking.user_id == viewer_id)
        .group_by(Booking.recurring_event_id, Booking.status, Booking.start_time)
        .order_by(Booking.start_time)
    )


def empty_status_buckets() -> dict[BookingStatus, list[datetime]]:
    return {status: [] for status in BookingStatus}


def summarize_recurring_series(
    basic_rows: Iterable[tuple[str, int, datetime | None]],
    extended_rows: Iterable[tuple],
) -> list[RecurringSeriesSummary]:
    """
    Combine the basic and extended aggregates into per-series summaries.

    Extended rows are first grouped by series, then each basic row becomes
    one summary whose status buckets hold the start times of that series'
    occurrences, in extended-row order. All five statuses are always
    present. Output order follows the basic rows.

    Args:
        basic_rows: (series id, count, first start time) tuples
        extended_rows: (series id, status, start time, ...) tuples

    Returns:
        One RecurringSeriesSummary per basic row
    """
    start_times_by_series: dict[str, list[tuple[BookingStatus, datetime]]] = defaultdict(list)
    for row in extended_rows:
        series_id, status, start_time = row[0], row[1], row[2]
        start_times_by_series[series_id].append((BookingStatus(status), start_time))

    summaries = []
    for series_id, count, first_date in basic_rows:
        buckets = empty_status_buckets()
        for status, start_time in start_times_by_series.get(series_id, ()):
            buckets[status].append(start_time)
        summaries.append(
            RecurringSeriesSummary(
                recurring_event_id=series_id,
                count=count,
                first_date=first_date,
                bookings=buckets,
            )
        )

    logger.debug(f"Summarized {len(summaries)} recurring series")
    return summaries
