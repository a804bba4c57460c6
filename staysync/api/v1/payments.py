"""Payment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staysync.api.deps import Pagination, get_actor_id, get_db, get_pagination
from staysync.core.exceptions import NotFoundError
from staysync.models.payment import Payment
from staysync.schemas.payment import PaymentListResponse, PaymentResponse, PaymentStatusUpdate
from staysync.schemas.status import ErrorResponse, StatusChangeResponse
from staysync.services.status_sync_service import status_sync_service

router = APIRouter()


@router.get("/", response_model=PaymentListResponse)
async def list_payments(
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[Pagination, Depends(get_pagination)],
) -> PaymentListResponse:
    """List payments, newest first."""
    total = (await db.execute(select(func.count()).select_from(Payment))).scalar_one()
    result = await db.execute(
        select(Payment)
        .order_by(Payment.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
    )
    return PaymentListResponse(
        payments=[PaymentResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PaymentResponse:
    """Get a payment."""
    payment = await db.get(Payment, payment_id)
    if not payment:
        raise NotFoundError("Payment", str(payment_id))
    return PaymentResponse.model_validate(payment)


@router.put(
    "/{payment_id}/status",
    response_model=StatusChangeResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_payment_status(
    payment_id: UUID,
    request: PaymentStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor_id: Annotated[str | None, Depends(get_actor_id)],
) -> StatusChangeResponse:
    """Change a payment's status; the booking follows.

    Unpaid -> Paid returns outcome "confirmation_required" until re-sent with
    confirmed=true. Paid -> Unpaid is always refused.
    """
    result = await status_sync_service.request_payment_status(
        db,
        payment_id,
        request.status,
        confirmed=request.confirmed,
        expected_version=request.expected_version,
        actor_id=actor_id,
    )
    return StatusChangeResponse.from_result(result)
