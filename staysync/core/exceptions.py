"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    code: str = "error"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InvalidTransition(AppException):
    """Target status is not reachable from the current status."""

    code = "invalid_transition"

    def __init__(self, detail: str = "This status change is not allowed from the current status") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PaymentLocked(AppException):
    """Booking status change attempted while the booking is fully paid."""

    code = "payment_locked"

    def __init__(self, detail: str = "Booking is fully paid; its status can no longer be changed") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class IrreversiblePayment(AppException):
    """A completed payment cannot be reverted to an unsettled status."""

    code = "irreversible_payment"

    def __init__(self, detail: str = "A paid payment cannot be reverted to unpaid") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(AppException):
    """Stale version at commit time; retry with a fresh read."""

    code = "conflict"

    def __init__(
        self,
        resource: str = "Resource",
        identifier: str | None = None,
        detail: str | None = None,
    ) -> None:
        if detail is None:
            detail = f"{resource} was modified by another request"
            if identifier:
                detail = f"{resource} with ID '{identifier}' was modified by another request"
            detail = f"{detail}. Reload and try again."
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvariantViolation(AppException):
    """A transition would commit a booking/payment pair in an inconsistent state."""

    code = "invariant_violation"

    def __init__(self, detail: str = "Booking and payment state would become inconsistent") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
