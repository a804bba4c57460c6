"""Booking-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from staysync.domain.booking_state import BookingStatus
from staysync.domain.payment_state import BookingPaymentStatus
from staysync.schemas.payment import PaymentResponse


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    user_id: UUID | None = None
    hotel_id: UUID | None = None
    room_id: UUID | None = None
    check_in_date: datetime
    check_out_date: datetime

    @field_validator("check_out_date")
    @classmethod
    def validate_checkout(cls, v: datetime, info) -> datetime:
        check_in = info.data.get("check_in_date")
        if check_in and v <= check_in:
            raise ValueError("check_out_date must be after check_in_date")
        return v


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None
    hotel_id: UUID | None
    room_id: UUID | None
    check_in_date: datetime
    check_out_date: datetime
    status: BookingStatus
    payment_status: BookingPaymentStatus
    version: int
    created_at: datetime
    updated_at: datetime


class BookingDetailResponse(BookingResponse):
    """Booking together with its payment record."""

    payment: PaymentResponse | None = None


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int


class BookingStatusUpdate(BaseModel):
    """Request a booking lifecycle status change."""

    status: BookingStatus
    confirmed: bool = False
    expected_version: int | None = Field(None, ge=1)


class BookingPaymentStatusUpdate(BaseModel):
    """Request a payment status change from the booking side."""

    status: BookingPaymentStatus
    confirmed: bool = False
    expected_version: int | None = Field(None, ge=1)
