"""Services package."""

from petty_cash.services.attachments import (
    AttachmentError,
    encode_attachment,
    make_thumbnail,
)
from petty_cash.services.autosave import AutoSaver
from petty_cash.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryRemoteStorage,
    LedgerStorageInterface,
    LocalJsonStorage,
    NotFoundError,
    RemoteTransactionStorageInterface,
    StorageError,
)

__all__ = [
    # Attachments
    "AttachmentError",
    "encode_attachment",
    "make_thumbnail",
    # Autosave
    "AutoSaver",
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "DuplicateError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "InMemoryRemoteStorage",
    "LedgerStorageInterface",
    "LocalJsonStorage",
    "NotFoundError",
    "RemoteTransactionStorageInterface",
    "StorageError",
]
