"""Status-change audit trail service."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staysync.models.admin import AuditLog


class AuditService:
    """Service for immutable audit logging of status changes."""

    async def log_action(
        self,
        db: AsyncSession,
        actor_id: str | None,
        action: str,
        resource_type: str,
        resource_id: UUID,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Log an action (immutable).

        The entry is added to the caller's session so it commits, or rolls
        back, together with the change it describes.

        Args:
            db: Database session
            actor_id: Opaque caller-supplied identity
            action: Action name (e.g., "booking_status_change")
            resource_type: Resource type ("booking" or "payment")
            resource_id: Resource ID
            old_values: Previous state
            new_values: New state

        Returns:
            Created audit log entry
        """
        audit = AuditLog(
            actor_id=actor_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
        )
        db.add(audit)
        return audit

    async def log_booking_change(
        self,
        db: AsyncSession,
        actor_id: str | None,
        action: str,
        booking_id: UUID,
        old_values: dict[str, Any] | None,
        new_values: dict[str, Any],
    ) -> AuditLog:
        """Log booking creation or status change."""
        return await self.log_action(
            db=db,
            actor_id=actor_id,
            action=action,
            resource_type="booking",
            resource_id=booking_id,
            old_values=old_values,
            new_values=new_values,
        )

    async def log_payment_change(
        self,
        db: AsyncSession,
        actor_id: str | None,
        action: str,
        payment_id: UUID,
        old_values: dict[str, Any] | None,
        new_values: dict[str, Any],
    ) -> AuditLog:
        """Log payment creation or status change."""
        return await self.log_action(
            db=db,
            actor_id=actor_id,
            action=action,
            resource_type="payment",
            resource_id=payment_id,
            old_values=old_values,
            new_values=new_values,
        )


audit_service = AuditService()
