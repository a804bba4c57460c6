"""Booking/payment status synchronization service.

Every operation reads the booking and its payment in one transaction, asks the
sync policy for a decision, passes it through the confirmation gate and
applies the result to both rows in a single flush.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from staysync.core.exceptions import (
    AppException,
    ConflictError,
    InvalidTransition,
    InvariantViolation,
    IrreversiblePayment,
    NotFoundError,
    PaymentLocked,
    ValidationError,
)
from staysync.domain.booking_state import BookingStatus
from staysync.domain.confirmation import ConfirmationGate, ConfirmationRequired, confirmation_gate
from staysync.domain.invariants import pair_violations
from staysync.domain.payment_state import (
    BookingPaymentStatus,
    PaymentStatus,
    is_settled,
)
from staysync.domain.sync_policy import (
    AllowWithForcedSideEffect,
    Decision,
    PairState,
    Reject,
    RejectCode,
    evaluate,
    evaluate_booking_payment,
)
from staysync.models.booking import Booking
from staysync.models.payment import Payment
from staysync.services.audit_service import audit_service
from staysync.utils.clock import utcnow

logger = logging.getLogger(__name__)

REJECTION_ERRORS: dict[RejectCode, type[AppException]] = {
    RejectCode.INVALID_TRANSITION: InvalidTransition,
    RejectCode.PAYMENT_LOCKED: PaymentLocked,
    RejectCode.IRREVERSIBLE_PAYMENT: IrreversiblePayment,
}


class Outcome(str, Enum):
    """Result kind of a status change request."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    CONFIRMATION_REQUIRED = "confirmation_required"


@dataclass
class StatusChangeResult:
    """Snapshot of the pair after a status change request."""

    outcome: Outcome
    booking: Booking
    payment: Payment | None = None
    prompt: str | None = None
    side_effects: tuple[str, ...] = ()


def _booking_values(booking: Booking) -> dict[str, Any]:
    return {"status": booking.status, "payment_status": booking.payment_status}


def _payment_values(payment: Payment) -> dict[str, Any]:
    paid_at = payment.paid_at.isoformat() if payment.paid_at else None
    return {"status": payment.status, "paid_at": paid_at}


class StatusSyncService:
    """Booking and payment transition operations."""

    def __init__(self, gate: ConfirmationGate = confirmation_gate) -> None:
        self.gate = gate

    # ==================== Operations ====================

    async def create_booking(
        self,
        db: AsyncSession,
        check_in_date: datetime,
        check_out_date: datetime,
        user_id: UUID | None = None,
        hotel_id: UUID | None = None,
        room_id: UUID | None = None,
        actor_id: str | None = None,
    ) -> Booking:
        """Create a booking in Pending/Unpaid."""
        if check_out_date <= check_in_date:
            raise ValidationError("check_out_date must be after check_in_date")

        booking = Booking(
            id=uuid.uuid4(),
            user_id=user_id,
            hotel_id=hotel_id,
            room_id=room_id,
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            status=BookingStatus.PENDING.value,
            payment_status=BookingPaymentStatus.UNPAID.value,
        )
        db.add(booking)
        await audit_service.log_booking_change(
            db, actor_id, "booking_created", booking.id, None, _booking_values(booking)
        )
        await db.flush()
        logger.info(f"Booking {booking.id} created")
        return booking

    async def record_payment(
        self,
        db: AsyncSession,
        booking_id: UUID,
        amount: int | None = None,
        method: str | None = None,
        actor_id: str | None = None,
    ) -> Payment:
        """Record the first payment intent of a booking (status Pending).

        Raises:
            NotFoundError: If the booking does not exist
            ValidationError: If the booking is cancelled or already has a payment
            ConflictError: If another request created the payment concurrently
        """
        booking = await self._load_booking(db, booking_id)
        if booking.booking_status == BookingStatus.CANCELLED:
            raise ValidationError("Cannot record a payment for a cancelled booking")
        if await self._load_payment_for_booking(db, booking.id) is not None:
            raise ValidationError("A payment record already exists for this booking")

        payment = Payment(
            id=uuid.uuid4(),
            booking_id=booking.id,
            amount=amount,
            method=method,
            status=PaymentStatus.PENDING.value,
            paid_at=None,
        )
        self._validate_pair(booking, payment)
        db.add(payment)
        await audit_service.log_payment_change(
            db, actor_id, "payment_recorded", payment.id, None, _payment_values(payment)
        )

        try:
            await db.flush()
        except IntegrityError as e:
            logger.warning(f"Concurrent payment creation for booking {booking.id}")
            raise ConflictError("Booking", str(booking.id)) from e

        logger.info(f"Payment {payment.id} recorded for booking {booking.id}")
        return payment

    async def request_booking_status(
        self,
        db: AsyncSession,
        booking_id: UUID,
        target: BookingStatus,
        confirmed: bool = False,
        expected_version: int | None = None,
        actor_id: str | None = None,
    ) -> StatusChangeResult:
        """Change a booking's lifecycle status.

        Raises:
            NotFoundError: If the booking does not exist
            PaymentLocked: If the booking is fully paid
            InvalidTransition: If the target is unreachable from the current status
            ConflictError: If the booking changed since it was read
        """
        booking = await self._load_booking(db, booking_id)
        self._check_version("Booking", booking.id, booking.version, expected_version)
        payment = await self._load_payment_for_booking(db, booking.id)

        decision = evaluate(self._pair_state(booking, payment), booking_status=target)
        return await self._apply(
            db, decision, booking, payment, confirmed, actor_id,
            request=f"booking {booking.id} status -> {target.value}",
        )

    async def request_payment_status(
        self,
        db: AsyncSession,
        payment_id: UUID,
        target: PaymentStatus,
        confirmed: bool = False,
        expected_version: int | None = None,
        actor_id: str | None = None,
    ) -> StatusChangeResult:
        """Change a payment's settlement status and mirror it onto the booking.

        Raises:
            NotFoundError: If the payment does not exist
            IrreversiblePayment: If a Paid payment would be reverted
            InvalidTransition: If money would be collected on a cancelled booking
            ConflictError: If the payment or booking changed since it was read
        """
        result = await db.execute(select(Payment.booking_id).where(Payment.id == payment_id))
        booking_id = result.scalar_one_or_none()
        if booking_id is None:
            raise NotFoundError("Payment", str(payment_id))

        # Lock order is always booking first, then payment
        booking = await self._load_booking(db, booking_id)
        payment = await self._load_payment_for_booking(db, booking.id)
        if payment is None or payment.id != payment_id:
            raise ConflictError("Payment", str(payment_id))
        self._check_version("Payment", payment.id, payment.version, expected_version)

        decision = evaluate(self._pair_state(booking, payment), payment_status=target)
        return await self._apply(
            db, decision, booking, payment, confirmed, actor_id,
            request=f"payment {payment.id} status -> {target.value}",
        )

    async def request_booking_payment_status(
        self,
        db: AsyncSession,
        booking_id: UUID,
        target: BookingPaymentStatus,
        confirmed: bool = False,
        expected_version: int | None = None,
        actor_id: str | None = None,
    ) -> StatusChangeResult:
        """Change a booking's payment status from the booking side.

        Only Deposit and Paid are accepted; Unpaid is changed on the payment.
        Otherwise the payment rules apply. When the booking has no payment
        record yet, one is created with the target status so the projection
        always has a source.

        Raises:
            InvalidTransition: If the target is Unpaid or the booking is cancelled
            IrreversiblePayment: If a Paid payment would be reverted
        """
        booking = await self._load_booking(db, booking_id)
        self._check_version("Booking", booking.id, booking.version, expected_version)
        payment = await self._load_payment_for_booking(db, booking.id)

        decision = evaluate_booking_payment(self._pair_state(booking, payment), target)
        return await self._apply(
            db, decision, booking, payment, confirmed, actor_id,
            request=f"booking {booking.id} payment status -> {target.value}",
        )

    # ==================== Internals ====================

    async def _load_booking(self, db: AsyncSession, booking_id: UUID) -> Booking:
        result = await db.execute(
            select(Booking).where(Booking.id == booking_id).with_for_update()
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def _load_payment_for_booking(self, db: AsyncSession, booking_id: UUID) -> Payment | None:
        result = await db.execute(
            select(Payment).where(Payment.booking_id == booking_id).with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _check_version(
        resource: str, identifier: UUID, current: int, expected: int | None
    ) -> None:
        if expected is not None and current != expected:
            logger.warning(
                f"Stale {resource.lower()} {identifier}: expected version {expected}, found {current}"
            )
            raise ConflictError(resource, str(identifier))

    @staticmethod
    def _pair_state(booking: Booking, payment: Payment | None) -> PairState:
        return PairState(
            booking_status=booking.booking_status,
            booking_payment_status=booking.booking_payment_status,
            payment_status=payment.payment_status if payment else None,
        )

    @staticmethod
    def _validate_pair(booking: Booking, payment: Payment | None) -> None:
        violations = pair_violations(
            booking.booking_status,
            booking.booking_payment_status,
            payment.payment_status if payment else None,
            payment.paid_at if payment else None,
        )
        if violations:
            logger.error(f"Invariant violation on booking {booking.id}: {'; '.join(violations)}")
            raise InvariantViolation("; ".join(violations))

    async def _apply(
        self,
        db: AsyncSession,
        decision: Decision,
        booking: Booking,
        payment: Payment | None,
        confirmed: bool,
        actor_id: str | None,
        request: str,
    ) -> StatusChangeResult:
        resolved = self.gate.resolve(decision, confirmed)

        if isinstance(resolved, ConfirmationRequired):
            logger.info(f"Confirmation required for {request}")
            return StatusChangeResult(
                Outcome.CONFIRMATION_REQUIRED, booking, payment, prompt=resolved.prompt
            )

        if isinstance(resolved, Reject):
            logger.warning(f"Rejected {request}: {resolved.code.value}: {resolved.reason}")
            raise REJECTION_ERRORS[resolved.code](resolved.reason)

        changes = resolved.changes
        if not changes:
            return StatusChangeResult(Outcome.UNCHANGED, booking, payment)

        old_booking = _booking_values(booking)
        old_payment = _payment_values(payment) if payment else None

        if changes.booking_status is not None:
            booking.status = changes.booking_status.value
        if changes.booking_payment_status is not None:
            booking.payment_status = changes.booking_payment_status.value
        if changes.payment_status is not None:
            if payment is None:
                payment = Payment(id=uuid.uuid4(), booking_id=booking.id, method="manual")
                db.add(payment)
            payment.status = changes.payment_status.value
            payment.paid_at = utcnow() if is_settled(changes.payment_status) else None

        self._validate_pair(booking, payment)

        new_booking = _booking_values(booking)
        if new_booking != old_booking:
            await audit_service.log_booking_change(
                db, actor_id, "booking_status_change", booking.id, old_booking, new_booking
            )
        if payment is not None and changes.payment_status is not None:
            await audit_service.log_payment_change(
                db, actor_id, "payment_status_change", payment.id, old_payment, _payment_values(payment)
            )

        try:
            await db.flush()
        except StaleDataError as e:
            logger.warning(f"Conflict while applying {request}: {e}")
            raise ConflictError("Booking", str(booking.id)) from e
        except IntegrityError as e:
            logger.warning(f"Conflict while applying {request}: {e}")
            raise ConflictError("Booking", str(booking.id)) from e

        side_effects = resolved.side_effects if isinstance(resolved, AllowWithForcedSideEffect) else ()
        logger.info(
            f"Applied {request}: booking={booking.status}/{booking.payment_status} "
            f"payment={payment.status if payment else None}"
        )
        return StatusChangeResult(Outcome.APPLIED, booking, payment, side_effects=side_effects)


status_sync_service = StatusSyncService()
