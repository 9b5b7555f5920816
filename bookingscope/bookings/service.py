"""Booking listing: which bookings a viewer may see, one page at a time.

Flow of one request:

1. resolve the status tag and scoping filters (``filters``)
2. run the five visibility paths and the two recurring aggregates
   concurrently, each on its own session (``run_queries``)
3. merge the five id lists, first occurrence of each uid wins
4. load the full projection of the merged ids in listing order, redacting
   and normalizing each booking (``enrichment``)
5. summarize the viewer's recurring series (``aggregation``)
6. derive the next cursor from how many bookings came back

Pagination is offset-based: every path over-fetches ``take + 1`` rows from
``skip``, and the merged count decides whether another page exists.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from bookingscope.bookings.aggregation import (
    basic_recurring_statement,
    extended_recurring_statement,
    summarize_recurring_series,
)
from bookingscope.bookings.enrichment import fetch_enriched_bookings
from bookingscope.bookings.filters import BookingFilters, ResolvedFilter, resolve_filters
from bookingscope.bookings.schemas import BookingListResponse
from bookingscope.bookings.visibility import VISIBILITY_PATHS, Viewer
from bookingscope.core.config import settings
from bookingscope.core.exceptions import StoreQueryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BookingListQuery:
    """One listing request: filters plus offset pagination."""
    filters: BookingFilters
    limit: int = field(default_factory=lambda: settings.default_page_size)
    cursor: int = 0


@dataclass(frozen=True)
class NamedQuery:
    """A read-only query to run on its own session."""
    name: str
    run: Callable[[Session], Any]


def _execute(engine: Engine, query: NamedQuery):
    try:
        with Session(engine) as session:
            return query.run(session)
    except SQLAlchemyError as e:
        logger.error(f"Booking query '{query.name}' failed: {e}")
        raise StoreQueryError(query.name, e) from e


async def run_queries(engine: Engine, queries: Sequence[NamedQuery]) -> list:
    """
    Run queries concurrently, each on a worker thread with its own session.

    Results come back in the order of ``queries``. Any failure fails the
    whole batch with the first error in query order; no partial results are
    returned and nothing is retried.

    Raises:
        StoreQueryError: If any query fails
    """
    loop = asyncio.get_running_loop()
    results = await asyncio.gather(
        *(loop.run_in_executor(None, _execute, engine, query) for query in queries),
        return_exceptions=True,
    )
    # Every outcome is collected so later failures are not left unretrieved.
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def dedupe_by_uid(rows: Iterable[T], key: Callable[[T], str] = lambda row: row.uid) -> list[T]:
    """Keep the first row for every uid, preserving order."""
    seen: set[str] = set()
    unique = []
    for row in rows:
        uid = key(row)
        if uid in seen:
            continue
        seen.add(uid)
        unique.append(row)
    return unique


def next_cursor(skip: int, take: int, fetched: int) -> int | None:
    """Offset of the next page, or None when this page is the last one."""
    if fetched > take:
        return skip + fetched
    return None


def _all_rows(statement):
    def run(session: Session):
        return list(session.exec(statement).all())
    return run


def build_queries(viewer: Viewer, resolved: ResolvedFilter, take: int, skip: int) -> list[NamedQuery]:
    """The five visibility paths followed by the two recurring aggregates."""
    queries = [
        NamedQuery(path.name, _all_rows(path.statement(viewer, resolved, take, skip)))
        for path in VISIBILITY_PATHS
    ]
    queries.append(NamedQuery("recurring_basic", _all_rows(basic_recurring_statement(viewer.id))))
    queries.append(
        NamedQuery("recurring_extended", _all_rows(extended_recurring_statement(viewer.id)))
    )
    return queries


async def list_bookings(
    engine: Engine,
    viewer: Viewer,
    query: BookingListQuery,
    now: datetime | None = None,
) -> BookingListResponse:
    """
    List the bookings a viewer may see for one status and page.

    Args:
        engine: Engine to open the per-query sessions on
        viewer: The user the listing is for
        query: Status, scoping filters, limit and cursor
        now: Reference time for the status windows (defaults to now, UTC)

    Returns:
        BookingListResponse with the enriched bookings, the viewer's recurring
        series summaries and the next cursor

    Raises:
        StoreQueryError: If any store query fails
        ValidationError: If any returned event type has a malformed blob
    """
    take = query.limit
    skip = query.cursor
    resolved = resolve_filters(query.filters, now=now)

    results = await run_queries(engine, build_queries(viewer, resolved, take, skip))
    path_results = results[: len(VISIBILITY_PATHS)]
    basic_rows, extended_rows = results[len(VISIBILITY_PATHS):]

    for path, rows in zip(VISIBILITY_PATHS, path_results):
        logger.debug(f"Visibility path {path.name} matched {len(rows)} bookings")

    merged = dedupe_by_uid(row for rows in path_results for row in rows)
    booking_ids = [row.id for row in merged]

    (bookings,) = await run_queries(
        engine,
        [
            NamedQuery(
                "enrichment",
                lambda session: fetch_enriched_bookings(session, booking_ids, resolved, viewer),
            )
        ],
    )
    recurring_info = summarize_recurring_series(basic_rows, extended_rows)
    cursor = next_cursor(skip, take, len(bookings))

    logger.info(
        f"Listed {len(bookings)} {resolved.status.value} bookings for user {viewer.id} "
        f"(skip={skip}, take={take}, next_cursor={cursor})"
    )
    return BookingListResponse(
        bookings=bookings,
        recurring_info=recurring_info,
        next_cursor=cursor,
    )
