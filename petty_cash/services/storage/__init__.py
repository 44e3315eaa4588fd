"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage:
a local JSON file for the ledger, Google Sheets as an optional remote
mirror and audit log, and in-memory backends for tests.
"""

from petty_cash.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    RemoteTransactionStorageInterface,
    StorageError,
)
from petty_cash.services.storage.local_json import LocalJsonStorage
from petty_cash.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryRemoteStorage,
)
from petty_cash.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    "RemoteTransactionStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "InMemoryRemoteStorage",
    "LocalJsonStorage",
]
