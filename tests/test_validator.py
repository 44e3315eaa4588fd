"""Tests for the two-stage validator."""

from datetime import date
from decimal import Decimal

import pytest

from petty_cash.config import AppSettings
from petty_cash.models.transaction import Repayment, TransactionDraft
from petty_cash.validation import TransactionValidator


TODAY = date(2025, 7, 15)


@pytest.fixture
def validator(app_settings):
    return TransactionValidator(app_settings)


def draft(**overrides):
    values = {
        "borrow_date": date(2025, 7, 10),
        "amount": Decimal("150"),
        "borrower": "John Smith",
    }
    values.update(overrides)
    return TransactionDraft(**values)


def messages(result, severity="error"):
    return [i.message for i in result.issues if i.severity == severity]


class TestSchemaValidation:
    """Stage 1: presence and bounds."""

    def test_valid_draft(self, validator):
        result = validator.validate_draft(draft(), today=TODAY)
        assert result.is_valid
        assert result.schema_valid
        assert result.issues == []

    @pytest.mark.parametrize("missing", ["borrow_date", "amount", "borrower"])
    def test_required_fields(self, validator, missing):
        result = validator.validate_draft(draft(**{missing: None}), today=TODAY)
        assert not result.is_valid
        assert "Please fill in all required fields" in messages(result)
        assert result.issues[0].field == missing

    def test_zero_amount(self, validator):
        result = validator.validate_draft(draft(amount=Decimal("0")), today=TODAY)
        assert messages(result) == ["Borrow amount must be greater than 0"]

    def test_negative_return_amount(self, validator):
        result = validator.validate_draft(draft(return_amount=Decimal("-1")), today=TODAY)
        assert messages(result) == ["Return amount cannot be negative"]

    def test_return_amount_above_amount(self, validator):
        result = validator.validate_draft(draft(return_amount=Decimal("151")), today=TODAY)
        assert messages(result) == ["Return amount cannot exceed borrow amount of Rs150.00"]

    def test_return_amount_equal_to_amount_is_fine(self, validator):
        assert validator.validate_draft(draft(return_amount=Decimal("150")), today=TODAY).is_valid

    def test_semantic_stage_skipped_after_schema_errors(self, validator):
        result = validator.validate_draft(
            draft(amount=Decimal("0"), borrow_date=date(2030, 1, 1)),
            today=TODAY,
        )
        assert not result.semantic_valid
        assert messages(result, "warning") == []


class TestSemanticValidation:
    """Stage 2: warnings only."""

    def test_future_date_beyond_tolerance_warns(self, validator):
        result = validator.validate_draft(draft(borrow_date=date(2025, 7, 30)), today=TODAY)
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "in the future" in result.warnings[0]

    def test_future_date_within_tolerance_is_silent(self, validator):
        result = validator.validate_draft(draft(borrow_date=date(2025, 7, 20)), today=TODAY)
        assert result.warnings == []

    def test_large_amount_warns(self, validator):
        result = validator.validate_draft(draft(amount=Decimal("250000")), today=TODAY)
        assert result.is_valid
        assert "unusually high" in result.warnings[0]

    def test_return_before_borrow_warns(self, validator):
        result = validator.validate_draft(draft(return_date=date(2025, 7, 1)), today=TODAY)
        assert result.warnings == ["Return date is before borrow date"]

    def test_duplicate_warns(self, validator, txn):
        existing = [txn(id=7, amount="150", borrower="john smith")]
        result = validator.validate_draft(draft(), existing, today=TODAY)
        assert result.is_valid
        assert "already has an advance" in result.warnings[0]

    def test_duplicate_check_skips_edited_row(self, validator, txn):
        existing = [txn(id=7, amount="150")]
        result = validator.validate_draft(draft(), existing, exclude_id=7, today=TODAY)
        assert result.warnings == []


class TestRepaymentValidation:
    """Repayment policy."""

    def test_valid_repayment(self, validator, txn):
        result = validator.validate_repayment(
            Repayment(return_date=TODAY, amount=Decimal("50")), txn(amount="150")
        )
        assert result.is_valid
        assert result.issues == []

    def test_return_date_required(self, validator, txn):
        result = validator.validate_repayment(Repayment(amount=Decimal("50")), txn())
        assert messages(result) == ["Please select a return date"]

    @pytest.mark.parametrize("amount", [None, Decimal("0"), Decimal("-10")])
    def test_amount_must_be_positive(self, validator, txn, amount):
        result = validator.validate_repayment(Repayment(return_date=TODAY, amount=amount), txn())
        assert messages(result) == ["Return amount must be greater than 0"]

    def test_overpayment_is_a_warning_by_default(self, validator, txn):
        result = validator.validate_repayment(
            Repayment(return_date=TODAY, amount=Decimal("200")), txn(amount="150")
        )
        assert result.is_valid
        assert result.warnings == ["Return amount exceeds the remaining Rs150.00"]

    def test_overpayment_can_be_refused(self, txn):
        strict = TransactionValidator(AppSettings(allow_overpayment=False))
        result = strict.validate_repayment(
            Repayment(return_date=TODAY, amount=Decimal("200")), txn(amount="150")
        )
        assert not result.is_valid


class TestSummary:
    def test_summary_lists_errors_once(self, validator):
        result = validator.validate_draft(
            TransactionDraft(), today=TODAY
        )
        assert validator.get_user_friendly_summary(result) == "Please fill in all required fields"

    def test_summary_all_clear(self, validator):
        result = validator.validate_draft(draft(), today=TODAY)
        assert validator.get_user_friendly_summary(result) == "All checks passed."
