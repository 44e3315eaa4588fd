"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every admin decision is logged.
This provides:
1. Complete traceability of who was advanced what
2. Debugging capability when balances look wrong
3. A history the ledger itself does not keep (edits overwrite in place)

The audit logger:
- Is async to match the storage backends
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from petty_cash.config import get_settings
from petty_cash.models.audit import AuditEvent, AuditEventBuilder
from petty_cash.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """Configure stdlib logging and structlog to emit JSON lines."""
    level_name = (level or get_settings().app.log_level).upper()
    logging.basicConfig(format="%(message)s", level=getattr(logging, level_name, logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("petty_cash.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_transaction_added(
        self,
        transaction_id: int,
        borrower: str,
        amount: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new cash advance."""
        await self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            borrower=borrower,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_transaction_updated(
        self,
        transaction_id: int,
        changed_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an edit."""
        await self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        ))

    async def log_repayment_recorded(
        self,
        transaction_id: int,
        amount: Decimal,
        returned_total: Decimal,
        status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a repayment."""
        await self.log(AuditEventBuilder.repayment_recorded(
            transaction_id=transaction_id,
            amount=amount,
            returned_total=returned_total,
            status=status,
            correlation_id=correlation_id,
        ))

    async def log_transaction_deleted(
        self,
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a deletion."""
        await self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        operation: str,
        issues: list[dict],
        transaction_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected input."""
        await self.log(AuditEventBuilder.validation_failed(
            operation=operation,
            issues=issues,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    async def log_funds_updated(
        self,
        previous: Decimal,
        new: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.funds_updated(
            previous=previous,
            new=new,
            correlation_id=correlation_id,
        ))

    async def log_funds_update_denied(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.funds_update_denied(
            correlation_id=correlation_id,
        ))

    async def log_report_generated(
        self,
        report_type: str,
        period: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log report generation."""
        await self.log(AuditEventBuilder.report_generated(
            report_type=report_type,
            period=period,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    async def log_data_exported(
        self,
        filename: str,
        row_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a CSV export."""
        await self.log(AuditEventBuilder.data_exported(
            filename=filename,
            row_count=row_count,
            correlation_id=correlation_id,
        ))

    async def log_data_loaded(self, transaction_count: int, seeded: bool) -> None:
        await self.log(AuditEventBuilder.data_loaded(
            transaction_count=transaction_count,
            seeded=seeded,
        ))

    async def log_save_failed(
        self,
        backend: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.save_failed(
            backend=backend,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_remote_sync_failed(
        self,
        operation: str,
        transaction_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed mirror write to the remote store."""
        await self.log(AuditEventBuilder.remote_sync_failed(
            operation=operation,
            transaction_id=transaction_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., recording a repayment).
    Pass it through all subsequent operations.
    """
    return uuid4()
