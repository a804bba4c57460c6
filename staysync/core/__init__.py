"""Core utilities: exceptions and middleware."""

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

__all__ = [
    "AppException",
    "ConflictError",
    "InvalidTransition",
    "InvariantViolation",
    "IrreversiblePayment",
    "NotFoundError",
    "PaymentLocked",
    "ValidationError",
]
