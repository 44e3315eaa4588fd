"""
Data Models Package

This package contains all Pydantic models used in the Petty Cash Manager.
All data flowing through the system must conform to these schemas.
"""

from petty_cash.models.transaction import (
    DateRange,
    LedgerSnapshot,
    LedgerStats,
    Repayment,
    ReportData,
    ReportPeriod,
    ReportStats,
    ReportType,
    StatusFilter,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionStatus,
    ValidationIssue,
    ValidationResult,
    utc_now,
)
from petty_cash.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DateRange",
    "LedgerSnapshot",
    "LedgerStats",
    "Repayment",
    "ReportData",
    "ReportPeriod",
    "ReportStats",
    "ReportType",
    "StatusFilter",
    "Transaction",
    "TransactionDraft",
    "TransactionFilter",
    "TransactionStatus",
    "ValidationIssue",
    "ValidationResult",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
