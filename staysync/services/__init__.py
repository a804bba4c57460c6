"""Application services."""

from staysync.services.audit_service import AuditService, audit_service
from staysync.services.status_sync_service import (
    Outcome,
    StatusChangeResult,
    StatusSyncService,
    status_sync_service,
)

__all__ = [
    "AuditService",
    "Outcome",
    "StatusChangeResult",
    "StatusSyncService",
    "audit_service",
    "status_sync_service",
]
