"""Booking listing routes."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import Engine

from bookingscope.bookings.filters import BookingFilters, BookingListingStatus
from bookingscope.bookings.schemas import BookingListResponse
from bookingscope.bookings.service import BookingListQuery, list_bookings
from bookingscope.bookings.visibility import Viewer
from bookingscope.core.config import settings
from bookingscope.core.database import get_engine
from bookingscope.core.viewer import get_current_viewer

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=BookingListResponse)
async def get_bookings(
    status: BookingListingStatus,
    team_ids: list[int] | None = Query(default=None, alias="teamIds"),
    user_ids: list[int] | None = Query(default=None, alias="userIds"),
    event_type_ids: list[int] | None = Query(default=None, alias="eventTypeIds"),
    limit: int | None = Query(default=None, ge=1, le=settings.max_page_size),
    cursor: int | None = Query(default=None, ge=0),
    viewer: Viewer = Depends(get_current_viewer),
    engine: Engine = Depends(get_engine),
):
    """
    List the bookings the viewer may see.

    Bookings are those the viewer owns, attends, holds a seat in, or can see
    as an admin/owner of the booking's team or organization, filtered by the
    given status and optional team/user/event type ids. Pass ``nextCursor``
    from the response as ``cursor`` to fetch the next page; it is null on the
    last page.
    """
    query = BookingListQuery(
        filters=BookingFilters(
            status=status,
            team_ids=team_ids,
            user_ids=user_ids,
            event_type_ids=event_type_ids,
        ),
        limit=limit if limit is not None else settings.default_page_size,
        cursor=cursor if cursor is not None else 0,
    )
    return await list_bookings(engine, viewer, query)
