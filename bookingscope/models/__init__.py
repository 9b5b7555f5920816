from bookingscope.models.attendee import Attendee
from bookingscope.models.booking import Booking, BookingStatus
from bookingscope.models.event_type import EventType, Host
from bookingscope.models.payment import Payment
from bookingscope.models.reference import BookingReference
from bookingscope.models.seat import BookingSeat
from bookingscope.models.team import ADMIN_ROLES, Membership, MembershipRole, Team
from bookingscope.models.user import User

__all__ = [
    "Attendee",
    "Booking",
    "BookingReference",
    "BookingSeat",
    "BookingStatus",
    "EventType",
    "Host",
    "Membership",
    "MembershipRole",
    "ADMIN_ROLES",
    "Payment",
    "Team",
    "User",
]
