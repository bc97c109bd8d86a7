"""Audit logging package."""

from fundledger.audit.logger import LedgerAuditLogger, configure_logging, create_correlation_id

__all__ = ["LedgerAuditLogger", "configure_logging", "create_correlation_id"]
