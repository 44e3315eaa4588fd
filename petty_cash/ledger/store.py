"""
Transaction Store

The single owner of the ledger in memory. Every write goes through here:

1. Validate the input (nothing is touched when validation fails)
2. Apply the change in memory
3. Mirror it to the remote store, if one is configured (best effort)
4. Save the snapshot locally
5. Emit an audit event

DESIGN DECISION: A failed save does not roll back the in-memory change.
The change is reported as unsaved and the autosaver retries it, which is
how the browser version behaved when local storage was full.
"""

import secrets
import threading
import time
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog
from pydantic import ValidationError

from petty_cash.audit import AuditLogger
from petty_cash.config import AppSettings, get_settings
from petty_cash.ledger.calculator import calculate_stats
from petty_cash.ledger.exceptions import (
    AdminAccessDeniedError,
    TransactionNotFoundError,
    TransactionValidationError,
)
from petty_cash.ledger.sample_data import sample_transactions
from petty_cash.models.transaction import (
    LedgerSnapshot,
    LedgerStats,
    Repayment,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    ValidationIssue,
    ValidationResult,
)
from petty_cash.queries.filters import filter_transactions
from petty_cash.services.storage import (
    LedgerStorageInterface,
    RemoteTransactionStorageInterface,
    StorageError,
)
from petty_cash.validation import TransactionValidator


logger = structlog.get_logger(__name__)

# Fields compared when reporting what an edit changed
EDITABLE_FIELDS = (
    "borrow_date",
    "amount",
    "returned_amount",
    "borrower",
    "contact",
    "description",
    "return_date",
    "return_notes",
    "attachment",
)


def _result_from_pydantic(error: ValidationError) -> ValidationResult:
    """Turn model construction errors into validator-style issues."""
    issues = [
        ValidationIssue(
            field=".".join(str(part) for part in err["loc"]) or "transaction",
            issue_type=err["type"],
            message=err["msg"],
            severity="error",
        )
        for err in error.errors()
    ]
    return ValidationResult(schema_valid=False, semantic_valid=False, issues=issues)


class TransactionStore:
    """
    In-memory ledger backed by a storage adapter.

    Usage:
        store = TransactionStore(LocalJsonStorage())
        await store.load()
        txn = await store.add(TransactionDraft(...))
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        remote: Optional[RemoteTransactionStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[TransactionValidator] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app
        self._storage = storage
        self._remote = remote
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or TransactionValidator(self._settings)
        self._lock = threading.RLock()
        self._transactions: list[Transaction] = []
        self._available_funds: Decimal = self._settings.initial_available_funds
        self._loaded = False

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions in store order (insertion order)."""
        with self._lock:
            return tuple(self._transactions)

    @property
    def available_funds(self) -> Decimal:
        with self._lock:
            return self._available_funds

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def validator(self) -> TransactionValidator:
        return self._validator

    def get(self, transaction_id: int) -> Optional[Transaction]:
        with self._lock:
            for t in self._transactions:
                if t.id == transaction_id:
                    return t
        return None

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                transactions=list(self._transactions),
                available_funds=self._available_funds,
            )

    def stats(self) -> LedgerStats:
        with self._lock:
            return calculate_stats(self._transactions, self._available_funds)

    def filtered(self, criteria: Optional[TransactionFilter] = None) -> list[Transaction]:
        return filter_transactions(self.transactions, criteria)

    def check_draft(
        self,
        draft: TransactionDraft,
        exclude_id: Optional[int] = None,
    ) -> ValidationResult:
        """Run validation without writing anything."""
        return self._validator.validate_draft(draft, self.transactions, exclude_id=exclude_id)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    async def load(self) -> LedgerSnapshot:
        """
        Load the saved ledger, seeding it when nothing was saved yet.

        Raises:
            StorageError: If saved data exists but cannot be read
        """
        try:
            snapshot = await self._storage.load()
        except StorageError as e:
            logger.error("ledger_load_failed", backend=self._storage.name, error=str(e))
            await self._audit.log_error("ledger_load_failed", str(e))
            raise

        seeded = snapshot is None
        if seeded:
            transactions = sample_transactions() if self._settings.seed_sample_data else []
            snapshot = LedgerSnapshot(
                transactions=transactions,
                available_funds=self._settings.initial_available_funds,
            )

        with self._lock:
            self._transactions = list(snapshot.transactions)
            self._available_funds = snapshot.available_funds
            self._loaded = True

        logger.info(
            "ledger_loaded",
            backend=self._storage.name,
            transaction_count=len(snapshot.transactions),
            seeded=seeded,
        )
        await self._audit.log_data_loaded(len(snapshot.transactions), seeded)

        if seeded:
            await self.save()
        return snapshot

    async def save(self, correlation_id: Optional[UUID] = None) -> bool:
        """Write the current snapshot; failures are logged, not raised."""
        snapshot = self.snapshot()
        try:
            return await self._storage.save(snapshot)
        except StorageError as e:
            logger.error("ledger_save_failed", backend=self._storage.name, error=str(e))
            await self._audit.log_save_failed(self._storage.name, str(e), correlation_id)
            return False

    async def _mirror(
        self,
        operation: str,
        transaction: Transaction,
        correlation_id: Optional[UUID],
    ) -> Optional[str]:
        """
        Push one change to the remote store.

        Returns the remote id assigned on create.
        """
        if self._remote is None:
            return None
        try:
            if operation == "create":
                return await self._remote.create_transaction(transaction)
            if transaction.remote_id is None:
                return None
            if operation == "update":
                await self._remote.update_transaction(
                    transaction.remote_id,
                    transaction.model_dump(mode="json", exclude={"id", "remote_id", "created_at", "status"}),
                )
            elif operation == "delete":
                await self._remote.delete_transaction(transaction.remote_id)
        except StorageError as e:
            logger.warning(
                "remote_sync_failed",
                operation=operation,
                transaction_id=transaction.id,
                error=str(e),
            )
            await self._audit.log_remote_sync_failed(
                operation, transaction.id, str(e), correlation_id
            )
        return None

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def _next_id(self) -> int:
        """Millisecond timestamp, bumped until unique within the ledger."""
        candidate = int(time.time() * 1000)
        taken = {t.id for t in self._transactions}
        while candidate in taken:
            candidate += 1
        return candidate

    def _find_index(self, transaction_id: int) -> int:
        for index, t in enumerate(self._transactions):
            if t.id == transaction_id:
                return index
        raise TransactionNotFoundError(transaction_id)

    async def _reject(
        self,
        operation: str,
        result: ValidationResult,
        transaction_id: Optional[int],
        correlation_id: Optional[UUID],
    ) -> None:
        error = TransactionValidationError(result)
        await self._audit.log_validation_failed(
            operation, error.issues, transaction_id, correlation_id
        )
        raise error

    async def add(
        self,
        draft: TransactionDraft,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Record a new cash advance.

        Raises:
            TransactionValidationError: If the draft has errors
        """
        with self._lock:
            result = self._validator.validate_draft(draft, self._transactions)
            if result.is_valid:
                try:
                    transaction = Transaction(
                        id=self._next_id(),
                        borrow_date=draft.borrow_date,
                        amount=draft.amount,
                        returned_amount=draft.initial_return,
                        borrower=draft.borrower,
                        contact=draft.contact,
                        description=draft.description,
                        return_date=draft.return_date,
                        return_notes=draft.return_notes,
                        attachment=draft.attachment,
                    )
                except ValidationError as e:
                    result = _result_from_pydantic(e)
                else:
                    self._transactions.append(transaction)

        if not result.is_valid:
            await self._reject("add", result, None, correlation_id)

        remote_id = await self._mirror("create", transaction, correlation_id)
        if remote_id is not None:
            transaction = transaction.model_copy(update={"remote_id": remote_id})
            with self._lock:
                self._transactions[self._find_index(transaction.id)] = transaction

        await self.save(correlation_id)
        await self._audit.log_transaction_added(
            transaction.id, transaction.borrower, transaction.amount, correlation_id
        )
        return transaction

    async def edit(
        self,
        transaction_id: int,
        draft: TransactionDraft,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Overwrite an existing transaction with the form values.

        The stored attachment is kept when the draft carries none.

        Raises:
            TransactionNotFoundError: If no transaction has this id
            TransactionValidationError: If the draft has errors
        """
        with self._lock:
            index = self._find_index(transaction_id)
            current = self._transactions[index]
            result = self._validator.validate_draft(
                draft, self._transactions, exclude_id=transaction_id
            )
            if result.is_valid:
                try:
                    updated = Transaction(
                        id=current.id,
                        remote_id=current.remote_id,
                        created_at=current.created_at,
                        borrow_date=draft.borrow_date,
                        amount=draft.amount,
                        returned_amount=draft.initial_return,
                        borrower=draft.borrower,
                        contact=draft.contact,
                        description=draft.description,
                        return_date=draft.return_date,
                        return_notes=draft.return_notes,
                        attachment=draft.attachment or current.attachment,
                    )
                except ValidationError as e:
                    result = _result_from_pydantic(e)
                else:
                    self._transactions[index] = updated

        if not result.is_valid:
            await self._reject("edit", result, transaction_id, correlation_id)

        changed = [
            name for name in EDITABLE_FIELDS
            if getattr(current, name) != getattr(updated, name)
        ]
        await self._mirror("update", updated, correlation_id)
        await self.save(correlation_id)
        await self._audit.log_transaction_updated(transaction_id, changed, correlation_id)
        return updated

    async def record_return(
        self,
        transaction_id: int,
        repayment: Repayment,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Add a repayment to the cumulative returned amount.

        The return date and notes are replaced by the repayment's.
        Available funds are not touched.

        Raises:
            TransactionNotFoundError: If no transaction has this id
            TransactionValidationError: If the repayment is rejected
        """
        with self._lock:
            index = self._find_index(transaction_id)
            current = self._transactions[index]
            result = self._validator.validate_repayment(repayment, current)
            if result.is_valid:
                updated = current.model_copy(update={
                    "returned_amount": current.returned_amount + repayment.amount,
                    "return_date": repayment.return_date,
                    "return_notes": repayment.notes,
                })
                self._transactions[index] = updated

        if not result.is_valid:
            await self._reject("return", result, transaction_id, correlation_id)

        await self._mirror("update", updated, correlation_id)
        await self.save(correlation_id)
        await self._audit.log_repayment_recorded(
            transaction_id,
            repayment.amount,
            updated.returned_amount,
            updated.status.value,
            correlation_id,
        )
        return updated

    async def delete(
        self,
        transaction_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Remove a transaction.

        Returns False (and changes nothing) when the id is unknown.
        """
        with self._lock:
            try:
                index = self._find_index(transaction_id)
            except TransactionNotFoundError:
                logger.info("delete_unknown_transaction", transaction_id=transaction_id)
                return False
            removed = self._transactions.pop(index)

        await self._mirror("delete", removed, correlation_id)
        await self.save(correlation_id)
        await self._audit.log_transaction_deleted(transaction_id, correlation_id)
        return True

    async def set_available_funds(
        self,
        amount: Decimal,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> Decimal:
        """
        Replace the administered float.

        Raises:
            AdminAccessDeniedError: If the password is wrong
            TransactionValidationError: If the amount is missing, not a
                finite number, or negative
        """
        if not secrets.compare_digest(
            (password or "").encode("utf-8"),
            self._settings.admin_password.encode("utf-8"),
        ):
            await self._audit.log_funds_update_denied(correlation_id)
            raise AdminAccessDeniedError("Incorrect admin password")

        message = None
        if amount is None or not Decimal(amount).is_finite():
            message = "Available funds must be a valid number"
        elif amount < 0:
            message = "Available funds cannot be negative"
        if message:
            result = ValidationResult(
                schema_valid=False,
                semantic_valid=False,
                issues=[ValidationIssue(
                    field="available_funds",
                    issue_type="invalid_value",
                    message=message,
                    severity="error",
                )],
            )
            await self._reject("set_funds", result, None, correlation_id)

        with self._lock:
            # The new snapshot must validate before any state changes
            try:
                LedgerSnapshot(
                    transactions=list(self._transactions),
                    available_funds=Decimal(amount),
                )
            except ValidationError as e:
                result = _result_from_pydantic(e)
            else:
                result = None
                previous = self._available_funds
                self._available_funds = Decimal(amount)
        if result is not None:
            await self._reject("set_funds", result, None, correlation_id)

        await self.save(correlation_id)
        await self._audit.log_funds_updated(previous, self._available_funds, correlation_id)
        return self._available_funds
