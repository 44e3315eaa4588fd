"""Transactions seeded into an empty ledger on first start."""

from datetime import date, datetime, timezone
from decimal import Decimal

from petty_cash.models.transaction import Transaction


def sample_transactions() -> list[Transaction]:
    """Fresh copies of the three demo advances."""
    return [
        Transaction(
            id=1,
            borrow_date=date(2025, 7, 10),
            amount=Decimal("150.00"),
            returned_amount=Decimal("0.00"),
            borrower="John Smith",
            contact="john@example.com",
            description="Office supplies purchase",
            created_at=datetime(2025, 7, 10, 10, 0, tzinfo=timezone.utc),
        ),
        Transaction(
            id=2,
            borrow_date=date(2025, 7, 9),
            amount=Decimal("75.00"),
            returned_amount=Decimal("75.00"),
            borrower="Sarah Johnson",
            contact="+1234567890",
            description="Client lunch meeting",
            return_date=date(2025, 7, 11),
            return_notes="Returned with receipt",
            created_at=datetime(2025, 7, 9, 14, 30, tzinfo=timezone.utc),
        ),
        Transaction(
            id=3,
            borrow_date=date(2025, 7, 8),
            amount=Decimal("200.00"),
            returned_amount=Decimal("0.00"),
            borrower="Mike Wilson",
            contact="mike@example.com",
            description="Travel expenses",
            created_at=datetime(2025, 7, 8, 9, 15, tzinfo=timezone.utc),
        ),
    ]
