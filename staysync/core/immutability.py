"""Immutability enforcement for audit records using SQLAlchemy events."""

import logging

from sqlalchemy import event

from staysync.core.exceptions import ValidationError
from staysync.utils.clock import utcnow

logger = logging.getLogger(__name__)

_registered = False


class ImmutabilityViolationError(ValidationError):
    """Raised when attempting to modify an append-only record."""

    code = "immutability_violation"

    def __init__(self, model_name: str, operation: str, record_id: str):
        self.model_name = model_name
        self.operation = operation
        self.record_id = record_id
        super().__init__(
            f"Immutability violation: Cannot {operation} {model_name} record {record_id}. "
            "Audit records are immutable after creation."
        )


def _log_immutability_violation(model_name: str, operation: str, record_id: str) -> None:
    logger.error(
        f"IMMUTABILITY_VIOLATION: Attempted to {operation} {model_name} "
        f"record_id={record_id} at {utcnow().isoformat()}"
    )


def register_immutability_enforcement() -> None:
    """Register SQLAlchemy event listeners that make AuditLog append-only.

    Safe to call more than once; listeners are only attached the first time.
    """
    global _registered
    if _registered:
        return

    from staysync.models.admin import AuditLog

    @event.listens_for(AuditLog, "before_update")
    def prevent_audit_update(mapper, connection, target):
        _log_immutability_violation("AuditLog", "UPDATE", str(target.id))
        raise ImmutabilityViolationError("AuditLog", "UPDATE", str(target.id))

    @event.listens_for(AuditLog, "before_delete")
    def prevent_audit_delete(mapper, connection, target):
        _log_immutability_violation("AuditLog", "DELETE", str(target.id))
        raise ImmutabilityViolationError("AuditLog", "DELETE", str(target.id))

    _registered = True
    logger.info("Immutability enforcement registered for audit records")
