"""
Main Orchestrator for Petty Cash Manager

This module ties together all the components and defines the
end-to-end flows for:
1. Ledger writes (add, edit, return, delete, admin funds change)
2. Reporting (period report, CSV export)

DESIGN DECISION: The UI never talks to the store directly. Each flow
method returns a (success, message) notification so the UI only has to
show it, and every exception the ledger raises is translated here:
- TransactionValidationError: the validation messages
- TransactionNotFoundError: "Transaction not found"
- AdminAccessDeniedError: "Incorrect admin password!"
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from petty_cash.audit import AuditLogger, create_correlation_id
from petty_cash.config import get_settings, google_sheets_configured
from petty_cash.ledger import (
    AdminAccessDeniedError,
    TransactionNotFoundError,
    TransactionStore,
    TransactionValidationError,
)
from petty_cash.models.transaction import (
    ReportData,
    ReportPeriod,
    ReportType,
    Repayment,
    Transaction,
    TransactionDraft,
)
from petty_cash.reports import (
    MissingCustomRangeError,
    ReportGenerator,
    export_filename,
    render_csv,
    render_report_html,
)
from petty_cash.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    LedgerStorageInterface,
    LocalJsonStorage,
)


logger = structlog.get_logger(__name__)

Notification = tuple[bool, str]


def _input_error_message(error: ValidationError) -> str:
    """One entry per rejected form field, e.g. "Amount: Input should be a finite number"."""
    messages = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]).replace("_", " ")
        messages.append(f"{field.capitalize()}: {err['msg']}" if field else err["msg"])
    return "; ".join(messages)


class LedgerFlow:
    """
    Orchestrates every change to the ledger.

    Each call gets its own correlation id so the audit trail groups the
    validation, sync and save events of one user action.
    """

    def __init__(self, store: TransactionStore, currency: Optional[str] = None):
        self._store = store
        self._currency = currency or get_settings().app.currency_symbol

    @property
    def store(self) -> TransactionStore:
        return self._store

    def _with_warnings(self, message: str, warnings: list[str]) -> str:
        if not warnings:
            return message
        return message + "\n" + "\n".join(f"• {w}" for w in warnings)

    async def save_transaction(
        self,
        draft: Union[TransactionDraft, dict],
        edit_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, str, Optional[Transaction]]:
        """
        Add a new transaction, or overwrite `edit_id` when given.

        `draft` may be the raw form fields; they are validated here.

        Returns:
            (success, message, transaction)
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            if not isinstance(draft, TransactionDraft):
                draft = TransactionDraft.model_validate(draft)
        except ValidationError as e:
            return False, _input_error_message(e), None
        warnings = self._store.check_draft(draft, exclude_id=edit_id).warnings

        try:
            if edit_id is None:
                transaction = await self._store.add(draft, correlation_id)
                message = "Transaction added successfully!"
            else:
                transaction = await self._store.edit(edit_id, draft, correlation_id)
                message = "Transaction updated successfully!"
        except TransactionValidationError as e:
            return False, str(e), None
        except TransactionNotFoundError:
            return False, "Transaction not found", None

        return True, self._with_warnings(message, warnings), transaction

    async def record_return(
        self,
        transaction_id: int,
        return_date: Optional[date],
        amount: Optional[Decimal],
        notes: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, str, Optional[Transaction]]:
        """Record a repayment against an advance."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            repayment = Repayment(return_date=return_date, amount=amount, notes=notes)
        except ValidationError as e:
            return False, _input_error_message(e), None

        try:
            transaction = await self._store.record_return(
                transaction_id, repayment, correlation_id
            )
        except TransactionValidationError as e:
            return False, str(e), None
        except TransactionNotFoundError:
            return False, "Transaction not found", None

        return (
            True,
            f"Returned {self._currency}{repayment.amount:.2f} successfully!",
            transaction,
        )

    async def delete_transaction(
        self,
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> Notification:
        correlation_id = correlation_id or create_correlation_id()
        if await self._store.delete(transaction_id, correlation_id):
            return True, "Transaction deleted successfully!"
        return False, "Transaction not found"

    async def update_available_funds(
        self,
        amount: Optional[Decimal],
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> Notification:
        """Admin-gated change of the float on hand."""
        correlation_id = correlation_id or create_correlation_id()
        try:
            await self._store.set_available_funds(amount, password, correlation_id)
        except AdminAccessDeniedError:
            return False, "Incorrect admin password!"
        except TransactionValidationError:
            return False, "Please enter a valid amount."
        return True, "Available funds updated!"


class ReportFlow:
    """
    Orchestrates report generation and export.

    Reports read a consistent copy of the store; they never modify it.
    """

    def __init__(
        self,
        store: TransactionStore,
        generator: Optional[ReportGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        currency: Optional[str] = None,
    ):
        settings = get_settings().app
        self._store = store
        self._generator = generator or ReportGenerator(week_start=settings.week_start_index)
        self._audit_logger = audit_logger or AuditLogger()
        self._currency = currency or settings.currency_symbol

    async def generate_report(
        self,
        period: Union[str, ReportPeriod],
        report_type: Union[str, ReportType] = ReportType.SUMMARY,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, str, Optional[ReportData], Optional[str]]:
        """
        Build a report and its printable HTML.

        Returns:
            (success, message, report_data, html)
        """
        correlation_id = correlation_id or create_correlation_id()
        try:
            data = self._generator.generate(
                self._store.transactions,
                period,
                report_type=report_type,
                date_from=date_from,
                date_to=date_to,
            )
        except MissingCustomRangeError as e:
            return False, str(e), None, None

        await self._audit_logger.log_report_generated(
            report_type=data.report_type,
            period=data.period,
            transaction_count=data.stats.total_transactions,
            correlation_id=correlation_id,
        )
        return True, "Report generated", data, render_report_html(data, self._currency)

    async def export_csv(
        self,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[str, str]:
        """
        Export the whole ledger.

        Returns:
            (filename, csv_text)
        """
        correlation_id = correlation_id or create_correlation_id()
        transactions = self._store.transactions
        filename = export_filename(today or datetime.now().date())
        await self._audit_logger.log_data_exported(
            filename=filename,
            row_count=len(transactions),
            correlation_id=correlation_id,
        )
        return filename, render_csv(transactions)


def create_app_components(
    use_remote: bool = True,
    storage: Optional[LedgerStorageInterface] = None,
) -> tuple[LedgerFlow, ReportFlow, TransactionStore]:
    """
    Factory function to create all application components.

    Args:
        use_remote: Whether to mirror to Google Sheets when it is configured.
                    Set to False for testing without network access.
        storage: Local ledger storage (defaults to the JSON file)

    Returns:
        (ledger_flow, report_flow, store)

    The store still has to be loaded with `await store.load()`.
    """
    remote = None
    audit_logger = AuditLogger()  # Local-only logging

    sheets_settings = google_sheets_configured() if use_remote else None
    if sheets_settings is not None:
        # Connection is lazy; failures surface as remote_sync_failed events
        sheets_client = GoogleSheetsClient(sheets_settings)
        remote = GoogleSheetsTransactionStorage(sheets_client)
        audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
    else:
        logger.info("remote_storage_disabled")

    store = TransactionStore(
        storage=storage or LocalJsonStorage(),
        remote=remote,
        audit_logger=audit_logger,
    )

    ledger_flow = LedgerFlow(store)
    report_flow = ReportFlow(store, audit_logger=audit_logger)

    return ledger_flow, report_flow, store
