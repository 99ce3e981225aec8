"""
Application services module.
"""

from realty_finance.services.audit import AuditService, get_audit_service

__all__ = ["AuditService", "get_audit_service"]
