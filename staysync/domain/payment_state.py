"""Payment state machine.

Payment.status is authoritative; Booking.payment_status is its projection.
Pending and Unpaid both project to Unpaid on the booking.
"""

from enum import Enum


class PaymentStatus(str, Enum):
    """Settlement status of a Payment record."""

    PENDING = "Pending"
    UNPAID = "Unpaid"
    DEPOSIT = "Deposit"
    PAID = "Paid"


class BookingPaymentStatus(str, Enum):
    """Payment status as mirrored on a Booking."""

    UNPAID = "Unpaid"
    DEPOSIT = "Deposit"
    PAID = "Paid"


PROJECTION: dict[PaymentStatus, BookingPaymentStatus] = {
    PaymentStatus.PENDING: BookingPaymentStatus.UNPAID,
    PaymentStatus.UNPAID: BookingPaymentStatus.UNPAID,
    PaymentStatus.DEPOSIT: BookingPaymentStatus.DEPOSIT,
    PaymentStatus.PAID: BookingPaymentStatus.PAID,
}

# Statuses that record collected money and therefore carry paid_at
SETTLED_STATUSES = frozenset({PaymentStatus.DEPOSIT, PaymentStatus.PAID})

# Edges that revert a completed payment; rejected even when confirmed
IRREVERSIBLE_TRANSITIONS: frozenset[tuple[PaymentStatus, PaymentStatus]] = frozenset(
    {
        (PaymentStatus.PAID, PaymentStatus.UNPAID),
        (PaymentStatus.PAID, PaymentStatus.PENDING),
    }
)

# Edges that need an explicit human confirmation before they commit
CONFIRMATION_TRANSITIONS: frozenset[tuple[PaymentStatus, PaymentStatus]] = frozenset(
    {
        (PaymentStatus.UNPAID, PaymentStatus.PAID),
    }
)


def project(status: PaymentStatus) -> BookingPaymentStatus:
    """Booking-side view of a payment status."""
    return PROJECTION[status]


def lift(status: BookingPaymentStatus) -> PaymentStatus:
    """Payment status a booking-side value stands for when no Payment exists."""
    return PaymentStatus(status.value)


def is_settled(status: PaymentStatus) -> bool:
    return status in SETTLED_STATUSES


def is_irreversible(current: PaymentStatus, target: PaymentStatus) -> bool:
    return (current, target) in IRREVERSIBLE_TRANSITIONS


def requires_confirmation(current: PaymentStatus, target: PaymentStatus) -> bool:
    return (current, target) in CONFIRMATION_TRANSITIONS
