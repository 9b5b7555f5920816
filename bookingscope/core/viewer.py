"""Viewer resolution for request handlers.

Session handling lives outside this service; the caller's identity arrives
as an ``X-User-Id`` header set by the authenticating proxy, and is resolved
against the user table here.
"""

from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from bookingscope.bookings.visibility import Viewer
from bookingscope.core.database import get_session
from bookingscope.models import User


def get_current_viewer(
    x_user_id: int | None = Header(default=None),
    session: Session = Depends(get_session),
) -> Viewer:
    """Dependency returning the authenticated viewer. Returns 401 if unknown."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = session.get(User, x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")

    return Viewer(id=user.id, email=user.email)
