"""Utility modules for audit logging."""

from artemis.utils.audit_logger import AuditLogger

__all__ = [
    "AuditLogger",
]
