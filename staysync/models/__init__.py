"""Database models."""

from staysync.models.admin import AuditLog
from staysync.models.booking import Booking
from staysync.models.payment import Payment

__all__ = [
    # Booking
    "Booking",
    # Payment
    "Payment",
    # Admin
    "AuditLog",
]
