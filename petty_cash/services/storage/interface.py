"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Keep a local JSON file as the primary copy of the ledger
2. Use in-memory storage for testing
3. Mirror transactions to a remote document store when configured
4. Keep ledger logic decoupled from storage implementation

Two contracts exist because the two backends are used differently:
the local store saves the whole snapshot at once, the remote store is
kept in sync record by record.
"""

from abc import ABC, abstractmethod
from typing import Optional

from petty_cash.models.transaction import LedgerSnapshot, Transaction
from petty_cash.models.audit import AuditEvent


class LedgerStorageInterface(ABC):
    """
    Abstract interface for whole-ledger persistence.

    Must round-trip every Transaction field, optional ones included.
    """

    name: str = "storage"

    @abstractmethod
    async def load(self) -> Optional[LedgerSnapshot]:
        """
        Load the saved ledger.

        Returns:
            The snapshot, or None when nothing has been saved yet

        Raises:
            StorageError: If the saved data cannot be read
        """
        pass

    @abstractmethod
    async def save(self, snapshot: LedgerSnapshot) -> bool:
        """
        Replace the saved ledger with this snapshot.

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass


class RemoteTransactionStorageInterface(ABC):
    """
    Abstract interface for a remote transaction collection.

    Records are keyed by an identifier the remote assigns on create,
    distinct from the local transaction id.
    """

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """
        List all transactions, newest created first.

        Returns:
            Transactions with remote_id populated
        """
        pass

    @abstractmethod
    async def create_transaction(self, transaction: Transaction) -> str:
        """
        Store a new transaction.

        Returns:
            The remote identifier assigned to it
        """
        pass

    @abstractmethod
    async def update_transaction(self, remote_id: str, data: dict) -> bool:
        """
        Merge `data` into the stored record.

        Raises:
            NotFoundError: If no record has this identifier
        """
        pass

    @abstractmethod
    async def delete_transaction(self, remote_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True if a record was deleted
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
