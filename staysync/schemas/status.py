"""Status change response schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from staysync.schemas.booking import BookingResponse
from staysync.schemas.payment import PaymentResponse
from staysync.services.status_sync_service import StatusChangeResult


class StatusChangeResponse(BaseModel):
    """Pair snapshot returned by every status change request.

    outcome is "confirmation_required" when the request must be re-sent with
    confirmed=true; prompt then carries the text to show the user.
    """

    outcome: Literal["applied", "unchanged", "confirmation_required"]
    booking: BookingResponse
    payment: PaymentResponse | None = None
    prompt: str | None = None
    side_effects: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: StatusChangeResult) -> "StatusChangeResponse":
        return cls(
            outcome=result.outcome.value,
            booking=BookingResponse.model_validate(result.booking),
            payment=PaymentResponse.model_validate(result.payment) if result.payment else None,
            prompt=result.prompt,
            side_effects=list(result.side_effects),
        )


class ErrorResponse(BaseModel):
    """Body of every error response."""

    detail: str
    code: str
