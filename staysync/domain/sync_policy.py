"""Cross-entity sync policy for booking and payment statuses.

Every status change on either entity is decided here against one consistent
snapshot of the pair. The outcome is one of:

- Allow: apply the changes (empty changes mean the request is a no-op)
- AllowWithForcedSideEffect: apply, including changes on the other entity
- RequireConfirmation: defer until the caller re-sends with confirmed=True
- Reject: refuse with a typed reason

Rules:
- A target equal to the current status is always a no-op.
- A fully paid booking's lifecycle status is frozen.
- Cancelling a booking voids its payment (Unpaid, paid_at cleared).
- A Paid payment never goes back to Unpaid or Pending.
- A cancelled booking cannot collect money (Deposit/Paid rejected).
- Unpaid -> Paid needs confirmation; reaching Paid auto-confirms the booking.
- A change that rewrites the other entity reports it as a forced side effect.
- From the booking side only Deposit and Paid can be chosen, and Paid over a
  booking showing Unpaid needs confirmation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from staysync.domain.booking_state import BookingStatus, can_transition_booking, is_terminal
from staysync.domain.payment_state import (
    BookingPaymentStatus,
    PaymentStatus,
    is_irreversible,
    lift,
    project,
    requires_confirmation,
)


class RejectCode(str, Enum):
    """Why a transition was refused."""

    INVALID_TRANSITION = "invalid_transition"
    PAYMENT_LOCKED = "payment_locked"
    IRREVERSIBLE_PAYMENT = "irreversible_payment"


@dataclass(frozen=True)
class StatusChanges:
    """Fields to write; None means leave unchanged."""

    booking_status: BookingStatus | None = None
    booking_payment_status: BookingPaymentStatus | None = None
    payment_status: PaymentStatus | None = None

    def __bool__(self) -> bool:
        return any(
            value is not None
            for value in (self.booking_status, self.booking_payment_status, self.payment_status)
        )


@dataclass(frozen=True)
class PairState:
    """Statuses of one booking and its payment, read together."""

    booking_status: BookingStatus
    booking_payment_status: BookingPaymentStatus
    payment_status: PaymentStatus | None = None

    @property
    def has_payment(self) -> bool:
        return self.payment_status is not None

    @property
    def effective_payment_status(self) -> PaymentStatus:
        """Payment status to reason about, falling back to the booking's projection."""
        if self.payment_status is not None:
            return self.payment_status
        return lift(self.booking_payment_status)

    def apply(self, changes: StatusChanges) -> PairState:
        updates = {
            name: value
            for name, value in (
                ("booking_status", changes.booking_status),
                ("booking_payment_status", changes.booking_payment_status),
                ("payment_status", changes.payment_status),
            )
            if value is not None
        }
        return replace(self, **updates)


@dataclass(frozen=True)
class Allow:
    changes: StatusChanges = field(default_factory=StatusChanges)

    @property
    def is_noop(self) -> bool:
        return not self.changes


@dataclass(frozen=True)
class AllowWithForcedSideEffect:
    changes: StatusChanges
    side_effects: tuple[str, ...]


@dataclass(frozen=True)
class RequireConfirmation:
    prompt: str
    on_confirm: Allow | AllowWithForcedSideEffect


@dataclass(frozen=True)
class Reject:
    code: RejectCode
    reason: str


Decision = Allow | AllowWithForcedSideEffect | RequireConfirmation | Reject


def evaluate(
    state: PairState,
    booking_status: BookingStatus | None = None,
    payment_status: PaymentStatus | None = None,
) -> Decision:
    """Decide a proposed status change against the current pair.

    Args:
        state: Current statuses of the booking and its payment
        booking_status: Requested booking lifecycle status
        payment_status: Requested payment settlement status

    Returns:
        Decision: exactly one of Allow, AllowWithForcedSideEffect,
        RequireConfirmation or Reject

    Raises:
        ValueError: If not exactly one target is given
    """
    if (booking_status is None) == (payment_status is None):
        raise ValueError("Exactly one of booking_status or payment_status must be given")
    if booking_status is not None:
        return _evaluate_booking_change(state, booking_status)
    return _evaluate_payment_change(state, payment_status)


def _evaluate_booking_change(state: PairState, target: BookingStatus) -> Decision:
    current = state.booking_status
    if target == current:
        return Allow()

    if state.booking_payment_status == BookingPaymentStatus.PAID:
        return Reject(
            RejectCode.PAYMENT_LOCKED,
            f"Booking is fully paid; its status cannot be changed from {current.value} to {target.value}",
        )

    if not can_transition_booking(current, target):
        if is_terminal(current):
            reason = f"Booking is {current.value}; it cannot be changed to {target.value}"
        else:
            reason = f"Invalid booking transition: {current.value} → {target.value}"
        return Reject(RejectCode.INVALID_TRANSITION, reason)

    if target != BookingStatus.CANCELLED:
        return Allow(StatusChanges(booking_status=target))

    # Cancellation voids payment state unconditionally
    side_effects: list[str] = []
    booking_payment_status = None
    payment_status = None
    if state.booking_payment_status != BookingPaymentStatus.UNPAID:
        booking_payment_status = BookingPaymentStatus.UNPAID
        side_effects.append(
            f"Booking payment status reset from {state.booking_payment_status.value} to Unpaid"
        )
    if state.payment_status is not None and state.payment_status != PaymentStatus.UNPAID:
        payment_status = PaymentStatus.UNPAID
        side_effects.append(
            f"Payment voided: status changed from {state.payment_status.value} to Unpaid"
        )

    changes = StatusChanges(
        booking_status=target,
        booking_payment_status=booking_payment_status,
        payment_status=payment_status,
    )
    if side_effects:
        return AllowWithForcedSideEffect(changes, tuple(side_effects))
    return Allow(changes)


def _evaluate_payment_change(state: PairState, target: PaymentStatus) -> Decision:
    current = state.effective_payment_status
    if target == current:
        return Allow()

    if is_irreversible(current, target):
        return Reject(
            RejectCode.IRREVERSIBLE_PAYMENT,
            f"Payment is already Paid and cannot be reverted to {target.value}; "
            "reversals require a refund",
        )

    if state.booking_status == BookingStatus.CANCELLED and target in (
        PaymentStatus.DEPOSIT,
        PaymentStatus.PAID,
    ):
        return Reject(
            RejectCode.INVALID_TRANSITION,
            f"Booking is Cancelled; its payment cannot be set to {target.value}",
        )

    projected = project(target)
    side_effects: list[str] = []
    booking_status = None
    if projected != state.booking_payment_status:
        side_effects.append(
            f"Booking payment status changed from {state.booking_payment_status.value} "
            f"to {projected.value}"
        )
    if target == PaymentStatus.PAID and state.booking_status != BookingStatus.CONFIRMED:
        booking_status = BookingStatus.CONFIRMED
        side_effects.append("Booking confirmed automatically because it is fully paid")

    changes = StatusChanges(
        booking_status=booking_status,
        booking_payment_status=projected if projected != state.booking_payment_status else None,
        payment_status=target,
    )
    decision: Allow | AllowWithForcedSideEffect
    if side_effects:
        decision = AllowWithForcedSideEffect(changes, tuple(side_effects))
    else:
        decision = Allow(changes)

    if requires_confirmation(current, target):
        return RequireConfirmation(prompt=_confirmation_prompt(current.value, target), on_confirm=decision)
    return decision


def evaluate_booking_payment(state: PairState, target: BookingPaymentStatus) -> Decision:
    """Decide a payment status change requested from the booking side.

    Only Deposit and Paid can be chosen there; Unpaid is reached through the
    payment itself. Paid needs confirmation whenever the booking currently
    shows Unpaid, whatever the underlying payment status.
    """
    if target == BookingPaymentStatus.UNPAID:
        return Reject(
            RejectCode.INVALID_TRANSITION,
            "Payment status cannot be set to Unpaid from the booking; change the payment instead",
        )

    decision = _evaluate_payment_change(state, lift(target))
    if (
        isinstance(decision, (Allow, AllowWithForcedSideEffect))
        and decision.changes
        and target == BookingPaymentStatus.PAID
        and state.booking_payment_status == BookingPaymentStatus.UNPAID
    ):
        return RequireConfirmation(
            prompt=_confirmation_prompt(state.booking_payment_status.value, PaymentStatus.PAID),
            on_confirm=decision,
        )
    return decision


def _confirmation_prompt(current: str, target: PaymentStatus) -> str:
    return (
        f"Change payment status from {current} to {target.value}? "
        "The booking will be updated to match and, once Paid, "
        "its status can no longer be changed."
    )
