"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staysync.database import Base
from staysync.domain.booking_state import BookingStatus
from staysync.domain.payment_state import BookingPaymentStatus
from staysync.utils.clock import utcnow


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Weak references: lookup keys only, owned elsewhere
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    hotel_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)
    room_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, index=True)

    # Dates
    check_in_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.PENDING.value, index=True
    )  # Pending, Confirmed, Cancelled
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingPaymentStatus.UNPAID.value
    )  # Unpaid, Deposit, Paid (mirror of Payment.status)

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
        CheckConstraint("check_out_date > check_in_date", name="ck_bookings_dates"),
        CheckConstraint(
            "status <> 'Cancelled' OR payment_status = 'Unpaid'",
            name="ck_bookings_cancelled_unpaid",
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    @property
    def booking_status(self) -> BookingStatus:
        return BookingStatus(self.status)

    @property
    def booking_payment_status(self) -> BookingPaymentStatus:
        return BookingPaymentStatus(self.payment_status)
