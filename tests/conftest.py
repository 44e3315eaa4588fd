"""Shared fixtures for the petty cash tests."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from petty_cash.audit import AuditLogger
from petty_cash.config import AppSettings
from petty_cash.ledger import TransactionStore
from petty_cash.models.transaction import Transaction
from petty_cash.services.storage import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    InMemoryRemoteStorage,
)


def make_transaction(
    id: int = 1,
    amount: str = "100.00",
    returned: str = "0",
    borrower: str = "John Smith",
    borrow_date: date = date(2025, 7, 10),
    created_at: datetime = None,
    **extra,
) -> Transaction:
    """Build a Transaction with sensible defaults."""
    return Transaction(
        id=id,
        amount=Decimal(amount),
        returned_amount=Decimal(returned),
        borrower=borrower,
        borrow_date=borrow_date,
        created_at=created_at or datetime(2025, 7, 10, 10, 0, tzinfo=timezone.utc),
        **extra,
    )


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(
        currency_symbol="Rs",
        initial_available_funds=Decimal("5000.00"),
        admin_password="letmein",
        allow_overpayment=True,
        seed_sample_data=True,
        max_transaction_amount=Decimal("100000"),
        future_date_tolerance_days=7,
        week_starts_on="sunday",
    )


@pytest.fixture
def ledger_storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def remote_storage() -> InMemoryRemoteStorage:
    return InMemoryRemoteStorage()


@pytest.fixture
def store(app_settings, ledger_storage, audit_storage) -> TransactionStore:
    """A store with no remote, backed by memory."""
    return TransactionStore(
        storage=ledger_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=app_settings,
    )


@pytest.fixture
def synced_store(app_settings, ledger_storage, audit_storage, remote_storage) -> TransactionStore:
    """A store mirroring to the in-memory remote."""
    return TransactionStore(
        storage=ledger_storage,
        remote=remote_storage,
        audit_logger=AuditLogger(audit_storage),
        settings=app_settings,
    )


@pytest.fixture
def txn():
    """Factory fixture for transactions."""
    return make_transaction
