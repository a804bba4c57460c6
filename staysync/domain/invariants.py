"""Consistency rules for a booking/payment pair."""

from datetime import datetime

from staysync.domain.booking_state import BookingStatus
from staysync.domain.payment_state import (
    BookingPaymentStatus,
    PaymentStatus,
    is_settled,
    project,
)


def pair_violations(
    booking_status: BookingStatus,
    booking_payment_status: BookingPaymentStatus,
    payment_status: PaymentStatus | None = None,
    paid_at: datetime | None = None,
) -> list[str]:
    """List every broken invariant of a booking/payment pair.

    Returns:
        list[str]: Human-readable violations, empty when the pair is consistent
    """
    violations: list[str] = []

    if booking_status == BookingStatus.CANCELLED and booking_payment_status != BookingPaymentStatus.UNPAID:
        violations.append(
            f"Cancelled booking has payment status {booking_payment_status.value}"
        )

    if payment_status is None:
        return violations

    if project(payment_status) != booking_payment_status:
        violations.append(
            f"Booking payment status {booking_payment_status.value} does not mirror "
            f"payment status {payment_status.value}"
        )
    if is_settled(payment_status) and paid_at is None:
        violations.append(f"Payment is {payment_status.value} but has no paid date")
    if not is_settled(payment_status) and paid_at is not None:
        violations.append(f"Payment is {payment_status.value} but has a paid date")

    return violations
