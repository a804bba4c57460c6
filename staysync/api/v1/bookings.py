"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staysync.api.deps import Pagination, get_actor_id, get_db, get_pagination
from staysync.core.exceptions import NotFoundError
from staysync.models.booking import Booking
from staysync.models.payment import Payment
from staysync.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingPaymentStatusUpdate,
    BookingResponse,
    BookingStatusUpdate,
)
from staysync.schemas.payment import PaymentCreate, PaymentResponse
from staysync.schemas.status import ErrorResponse, StatusChangeResponse
from staysync.services.status_sync_service import status_sync_service

router = APIRouter()

STATUS_CHANGE_ERRORS = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor_id: Annotated[str | None, Depends(get_actor_id)],
) -> BookingResponse:
    """Create a booking (Pending, Unpaid)."""
    booking = await status_sync_service.create_booking(
        db,
        check_in_date=booking_data.check_in_date,
        check_out_date=booking_data.check_out_date,
        user_id=booking_data.user_id,
        hotel_id=booking_data.hotel_id,
        room_id=booking_data.room_id,
        actor_id=actor_id,
    )
    return BookingResponse.model_validate(booking)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[Pagination, Depends(get_pagination)],
) -> BookingListResponse:
    """List bookings, newest first."""
    total = (await db.execute(select(func.count()).select_from(Booking))).scalar_one()
    result = await db.execute(
        select(Booking)
        .order_by(Booking.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in result.scalars().all()],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(
    booking_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingDetailResponse:
    """Get a booking with its payment record."""
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking", str(booking_id))

    result = await db.execute(select(Payment).where(Payment.booking_id == booking.id))
    payment = result.scalar_one_or_none()

    response = BookingDetailResponse.model_validate(booking)
    response.payment = PaymentResponse.model_validate(payment) if payment else None
    return response


@router.put("/{booking_id}/status", response_model=StatusChangeResponse, responses=STATUS_CHANGE_ERRORS)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor_id: Annotated[str | None, Depends(get_actor_id)],
) -> StatusChangeResponse:
    """Change a booking's lifecycle status.

    Cancelling voids the booking's payment. Fully paid bookings are locked.
    """
    result = await status_sync_service.request_booking_status(
        db,
        booking_id,
        request.status,
        confirmed=request.confirmed,
        expected_version=request.expected_version,
        actor_id=actor_id,
    )
    return StatusChangeResponse.from_result(result)


@router.put(
    "/{booking_id}/payment-status",
    response_model=StatusChangeResponse,
    responses=STATUS_CHANGE_ERRORS,
)
async def update_booking_payment_status(
    booking_id: UUID,
    request: BookingPaymentStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor_id: Annotated[str | None, Depends(get_actor_id)],
) -> StatusChangeResponse:
    """Change a booking's payment status to Deposit or Paid; the payment record follows."""
    result = await status_sync_service.request_booking_payment_status(
        db,
        booking_id,
        request.status,
        confirmed=request.confirmed,
        expected_version=request.expected_version,
        actor_id=actor_id,
    )
    return StatusChangeResponse.from_result(result)


@router.post(
    "/{booking_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    booking_id: UUID,
    payment_data: PaymentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor_id: Annotated[str | None, Depends(get_actor_id)],
) -> PaymentResponse:
    """Record a booking's payment intent (status Pending)."""
    payment = await status_sync_service.record_payment(
        db,
        booking_id,
        amount=payment_data.amount,
        method=payment_data.method,
        actor_id=actor_id,
    )
    return PaymentResponse.model_validate(payment)
