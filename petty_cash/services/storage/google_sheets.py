"""
Google Sheets Remote Storage

DESIGN DECISION: Google Sheets is the remote document store because:
1. The person holding the cash box can read the ledger in Sheets directly
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for a petty cash box)
- No transactions (the local JSON copy remains the source of truth)
- Limited query capabilities (we filter in Python)
- Cells hold at most 50,000 characters, so oversized attachments are
  not mirrored
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from petty_cash.config import GoogleSheetsSettings, get_settings
from petty_cash.models.audit import AuditEvent, AuditEventType, AuditSeverity
from petty_cash.models.transaction import Transaction
from petty_cash.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    NotFoundError,
    RemoteTransactionStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

SHEETS_CELL_LIMIT = 50000

# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "remote_id",
    "id",
    "created_at",
    "borrow_date",
    "amount",
    "returned_amount",
    "borrower",
    "contact",
    "description",
    "status",
    "return_date",
    "return_notes",
    "attachment",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, rows=1000
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


def transaction_to_row(transaction: Transaction, remote_id: str) -> list:
    """Convert a Transaction to a spreadsheet row."""
    attachment = transaction.attachment or ""
    if len(attachment) > SHEETS_CELL_LIMIT:
        logger.warning(
            "attachment_not_mirrored",
            transaction_id=transaction.id,
            size=len(attachment),
        )
        attachment = ""

    return [
        remote_id,
        str(transaction.id),
        transaction.created_at.isoformat(),
        transaction.borrow_date.isoformat(),
        str(transaction.amount),
        str(transaction.returned_amount),
        transaction.borrower,
        transaction.contact or "",
        transaction.description or "",
        transaction.status.value,
        transaction.return_date.isoformat() if transaction.return_date else "",
        transaction.return_notes or "",
        attachment,
    ]


def row_to_transaction(row: list) -> Transaction:
    """Convert a spreadsheet row to a Transaction."""
    # Handle missing columns gracefully
    def safe_get(index: int, default: str = "") -> str:
        try:
            return row[index] if row[index] else default
        except IndexError:
            return default

    return Transaction(
        remote_id=safe_get(0),
        id=int(safe_get(1)),
        created_at=datetime.fromisoformat(safe_get(2)),
        borrow_date=date.fromisoformat(safe_get(3)),
        amount=Decimal(safe_get(4)),
        returned_amount=Decimal(safe_get(5, "0")),
        borrower=safe_get(6),
        contact=safe_get(7) or None,
        description=safe_get(8) or None,
        return_date=date.fromisoformat(safe_get(10)) if safe_get(10) else None,
        return_notes=safe_get(11) or None,
        attachment=safe_get(12) or None,
    )


class GoogleSheetsTransactionStorage(RemoteTransactionStorageInterface):
    """
    Google Sheets implementation of the remote transaction collection.

    One transaction per row; the first column is the remote identifier.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, remote_id: str) -> tuple[int, list]:
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is the header
            if row and row[0] == remote_id:
                return idx, row
        raise NotFoundError(f"Remote transaction not found: {remote_id}")

    async def list_transactions(self) -> list[Transaction]:
        """List transactions, newest created first."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

        transactions = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                transactions.append(row_to_transaction(row))
            except (ValueError, ArithmeticError) as e:
                logger.warning("malformed_sheet_row", remote_id=row[0], error=str(e))

        transactions.sort(key=lambda t: t.created_at, reverse=True)
        return transactions

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def create_transaction(self, transaction: Transaction) -> str:
        """Append a row and return its new remote identifier."""
        remote_id = uuid4().hex
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(
                transaction_to_row(transaction, remote_id),
                value_input_option="RAW",
            )
        except Exception as e:
            raise StorageError(f"Failed to create transaction: {e}")
        return remote_id

    async def update_transaction(self, remote_id: str, data: dict) -> bool:
        """Merge `data` into the stored row."""
        try:
            sheet = self._client.get_transactions_sheet()
            idx, row = self._find_row(sheet, remote_id)
            current = row_to_transaction(row)
            merged = Transaction.model_validate({**current.model_dump(), **data})
            sheet.update(
                range_name=f"A{idx}",
                values=[transaction_to_row(merged, remote_id)],
                value_input_option="RAW",
            )
            return True
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update transaction: {e}")

    async def delete_transaction(self, remote_id: str) -> bool:
        """Delete a row by remote identifier."""
        try:
            sheet = self._client.get_transactions_sheet()
            idx, _ = self._find_row(sheet, remote_id)
            sheet.delete_rows(idx)
            return True
        except NotFoundError:
            return False
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AuditEvent(
            event_id=safe_get(0),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=safe_get(5) or None,
            correlation_id=safe_get(6) or None,
            description=safe_get(7),
            details=json.loads(safe_get(8)) if safe_get(8) else {},
            error_message=safe_get(9) or None,
            is_user_action=safe_get(10).lower() == "true",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        sheet = self._client.get_audit_sheet()
        sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if row and row[0]:
                try:
                    events.append(self._row_to_event(row))
                except (ValueError, KeyError):
                    continue

        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
