"""Payment-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from staysync.domain.payment_state import PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for recording a booking's payment intent."""

    amount: int | None = Field(None, ge=0)  # smallest currency unit
    method: str = Field(default="cash", pattern="^(cash|card|bank_transfer|e_wallet|manual)$")


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    amount: int | None
    method: str | None
    status: PaymentStatus
    paid_at: datetime | None
    version: int
    created_at: datetime
    updated_at: datetime


class PaymentListResponse(BaseModel):
    """Schema for paginated payment list."""

    payments: list[PaymentResponse]
    total: int
    page: int
    page_size: int


class PaymentStatusUpdate(BaseModel):
    """Request a payment settlement status change."""

    status: PaymentStatus
    confirmed: bool = False
    expected_version: int | None = Field(None, ge=1)
