"""Audit logging package."""

from supportbank.audit.logger import (
    AuditLogger,
    configure_file_logging,
    create_correlation_id,
)
from supportbank.audit.storage import AuditStorageInterface, InMemoryAuditStorage

__all__ = [
    "AuditLogger",
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "configure_file_logging",
    "create_correlation_id",
]
