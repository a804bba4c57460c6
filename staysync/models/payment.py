"""Payment database model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staysync.database import Base
from staysync.domain.payment_state import PaymentStatus
from staysync.utils.clock import utcnow


class Payment(Base):
    """Settlement record of one booking."""

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # Amount
    amount: Mapped[int | None] = mapped_column(Integer)  # smallest currency unit
    method: Mapped[str | None] = mapped_column(String(30))  # cash, card, bank_transfer, manual

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING.value
    )  # Pending, Unpaid, Deposit, Paid
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )  # set only while Deposit or Paid

    # Optimistic concurrency
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "(status IN ('Deposit', 'Paid')) = (paid_at IS NOT NULL)",
            name="ck_payments_paid_at",
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    @property
    def payment_status(self) -> PaymentStatus:
        return PaymentStatus(self.status)
