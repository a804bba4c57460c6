"""Booking/payment status rules, independent of persistence."""

from staysync.domain.booking_state import BookingStatus
from staysync.domain.confirmation import ConfirmationGate, ConfirmationRequired, confirmation_gate
from staysync.domain.payment_state import BookingPaymentStatus, PaymentStatus
from staysync.domain.sync_policy import (
    Allow,
    AllowWithForcedSideEffect,
    Decision,
    PairState,
    Reject,
    RejectCode,
    RequireConfirmation,
    StatusChanges,
    evaluate,
    evaluate_booking_payment,
)

__all__ = [
    "Allow",
    "AllowWithForcedSideEffect",
    "BookingPaymentStatus",
    "BookingStatus",
    "ConfirmationGate",
    "ConfirmationRequired",
    "Decision",
    "PairState",
    "PaymentStatus",
    "Reject",
    "RejectCode",
    "RequireConfirmation",
    "StatusChanges",
    "confirmation_gate",
    "evaluate",
    "evaluate_booking_payment",
]
