"""
Tests for Petty Cash Manager models

Test strategy:
1. Unit tests for individual components (models, validators, calculators)
2. Integration tests for the store and flows (with in-memory storage)
3. No real API calls in tests (use mocks)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from petty_cash.models.transaction import (
    DateRange,
    LedgerSnapshot,
    StatusFilter,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionStatus,
    ValidationIssue,
    ValidationResult,
)
from petty_cash.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        t = Transaction(
            id=1,
            borrow_date=date(2025, 7, 10),
            amount=Decimal("150.00"),
            borrower="John Smith",
        )
        assert t.borrower == "John Smith"
        assert t.returned_amount == Decimal("0")
        assert t.status == TransactionStatus.BORROWED
        assert t.created_at.tzinfo is not None

    def test_status_is_returned_when_fully_repaid(self, txn):
        """Status flips exactly when returned reaches amount."""
        assert txn(amount="150", returned="149.99").status == TransactionStatus.BORROWED
        assert txn(amount="150", returned="150").status == TransactionStatus.RETURNED

    def test_overpaid_transaction_is_returned(self, txn):
        t = txn(amount="100", returned="120")
        assert t.status == TransactionStatus.RETURNED
        assert t.outstanding == Decimal("0")

    def test_borrower_whitespace_is_stripped(self, txn):
        assert txn(borrower="  Sarah Johnson  ").borrower == "Sarah Johnson"

    def test_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in ("0", "-5"):
            with pytest.raises(ValueError):
                Transaction(
                    id=1,
                    borrow_date=date(2025, 7, 10),
                    amount=Decimal(amount),
                    borrower="John Smith",
                )

    def test_rejects_empty_borrower(self):
        with pytest.raises(ValueError):
            Transaction(id=1, borrow_date=date(2025, 7, 10), amount=Decimal("10"), borrower="")

    def test_blank_optional_fields_become_none(self, txn):
        t = txn(contact="", description="   ", return_notes="", attachment="")
        assert t.contact is None
        assert t.description is None
        assert t.return_notes is None
        assert t.attachment is None

    def test_null_returned_amount_loads_as_zero(self):
        """Older snapshots stored null for untouched advances."""
        t = Transaction.model_validate({
            "id": 5,
            "borrow_date": "2025-07-10",
            "amount": "20",
            "borrower": "Mike Wilson",
            "returned_amount": None,
        })
        assert t.returned_amount == Decimal("0")

    def test_stored_status_is_ignored(self):
        """Status is always derived from the amounts."""
        t = Transaction.model_validate({
            "id": 5,
            "borrow_date": "2025-07-10",
            "amount": "20",
            "returned_amount": "20",
            "borrower": "Mike Wilson",
            "status": "borrowed",
        })
        assert t.status == TransactionStatus.RETURNED

    def test_naive_created_at_is_utc(self, txn):
        t = txn(created_at=datetime(2025, 7, 10, 10, 0))
        assert t.created_at.tzinfo == timezone.utc

    def test_snapshot_round_trip_keeps_optional_fields(self, txn):
        snapshot = LedgerSnapshot(
            transactions=[txn(
                contact="+1234567890",
                return_date=date(2025, 7, 11),
                return_notes="Returned with receipt",
                attachment="data:image/png;base64,AAAA",
                remote_id="abc",
            )],
            available_funds=Decimal("0"),
        )
        restored = LedgerSnapshot.model_validate(snapshot.model_dump(mode="json"))
        assert restored.model_dump() == snapshot.model_dump()
        assert restored.available_funds == Decimal("0")


class TestDraftAndFilterModels:
    """Tests for form and filter input models."""

    def test_draft_blank_values_are_none(self):
        draft = TransactionDraft(borrower="", amount="", borrow_date="")
        assert draft.borrower is None
        assert draft.amount is None
        assert draft.borrow_date is None

    def test_draft_initial_return_defaults_to_zero(self):
        assert TransactionDraft().initial_return == Decimal("0")
        assert TransactionDraft(return_amount="25").initial_return == Decimal("25")

    def test_filter_defaults_to_no_constraint(self):
        criteria = TransactionFilter()
        assert criteria.status == StatusFilter.ALL
        assert criteria.date_from is None
        assert criteria.borrower is None

    def test_filter_malformed_values_are_ignored(self):
        """Malformed criteria mean no constraint."""
        criteria = TransactionFilter(
            status="pending",
            date_from="2025-13-45",
            date_to="not a date",
            borrower="   ",
        )
        assert criteria.status == StatusFilter.ALL
        assert criteria.date_from is None
        assert criteria.date_to is None
        assert criteria.borrower is None

    def test_filter_parses_iso_dates_and_status_case(self):
        criteria = TransactionFilter(status="Returned", date_from="2025-07-01")
        assert criteria.status == StatusFilter.RETURNED
        assert criteria.date_from == date(2025, 7, 1)

    def test_date_range_contains_uses_midnight(self):
        r = DateRange(
            start=datetime(2025, 7, 1, 0, 0, 0),
            end=datetime(2025, 7, 31, 23, 59, 59),
        )
        assert r.contains(date(2025, 7, 1))
        assert r.contains(date(2025, 7, 31))
        assert not r.contains(date(2025, 8, 1))
        assert not r.contains(date(2025, 6, 30))


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Advance recorded",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.REPAYMENT_RECORDED,
            description="Repayment recorded",
            details={"amount": "50.00"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "repayment_recorded"
        assert log_dict["details"]["amount"] == "50.00"

    def test_audit_event_to_sheets_row(self):
        """Test conversion to sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            description="Transaction deleted",
            is_user_action=True,
        )
        row = event.to_sheets_row()
        assert len(row) == 11  # Expected number of columns
        assert row[2] == "transaction_deleted"  # event_type
        assert row[10] == "True"  # is_user_action

    def test_audit_event_builder_transaction_added(self):
        """Test AuditEventBuilder.transaction_added."""
        correlation_id = uuid4()

        event = AuditEventBuilder.transaction_added(
            transaction_id=42,
            borrower="John Smith",
            amount=Decimal("150.00"),
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.entity_id == "42"
        assert event.correlation_id == correlation_id
        assert event.details["amount"] == "150.00"
        assert event.is_user_action is True

    def test_audit_event_builder_funds_update_denied(self):
        event = AuditEventBuilder.funds_update_denied()
        assert event.event_type == AuditEventType.FUNDS_UPDATE_DENIED
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_type == "funds"

    def test_audit_event_builder_data_loaded_seeded(self):
        event = AuditEventBuilder.data_loaded(transaction_count=3, seeded=True)
        assert event.event_type == AuditEventType.SAMPLE_DATA_SEEDED
        assert event.is_user_action is False


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Please fill in all required fields",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_warnings_do_not_block(self):
        """Warnings are reported but the result stays valid."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount seems high",
                    severity="warning",
                ),
            ],
        )
        assert result.is_valid is True
        assert result.warnings == ["Amount seems high"]

    def test_invalid_severity_is_rejected(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
