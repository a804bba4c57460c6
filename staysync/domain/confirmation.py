"""Two-call confirmation protocol.

The first call (confirmed=False) either proceeds or returns a
ConfirmationRequired prompt without touching state. The caller re-sends the
identical request with confirmed=True to proceed. Nothing is remembered
between the two calls.
"""

from dataclasses import dataclass

from staysync.domain.sync_policy import Decision, RequireConfirmation


@dataclass(frozen=True)
class ConfirmationRequired:
    """Deferred-action signal returned instead of applying a change."""

    prompt: str


class ConfirmationGate:
    """Intercepts decisions that need an explicit human confirmation."""

    def resolve(self, decision: Decision, confirmed: bool) -> Decision | ConfirmationRequired:
        """Unwrap a RequireConfirmation decision.

        Args:
            decision: Outcome of the sync policy
            confirmed: Whether the caller has already confirmed the request

        Returns:
            The decision to apply, or ConfirmationRequired when the caller
            still has to confirm. Never returns RequireConfirmation.
        """
        if not isinstance(decision, RequireConfirmation):
            return decision
        if confirmed:
            return decision.on_confirm
        return ConfirmationRequired(prompt=decision.prompt)


confirmation_gate = ConfirmationGate()
