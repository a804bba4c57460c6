"""Pydantic schemas for request/response validation."""

from staysync.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingPaymentStatusUpdate,
    BookingResponse,
    BookingStatusUpdate,
)
from staysync.schemas.payment import (
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentStatusUpdate,
)
from staysync.schemas.status import ErrorResponse, StatusChangeResponse

__all__ = [
    # Booking
    "BookingCreate",
    "BookingDetailResponse",
    "BookingListResponse",
    "BookingPaymentStatusUpdate",
    "BookingResponse",
    "BookingStatusUpdate",
    # Payment
    "PaymentCreate",
    "PaymentListResponse",
    "PaymentResponse",
    "PaymentStatusUpdate",
    # Status changes
    "ErrorResponse",
    "StatusChangeResponse",
]
