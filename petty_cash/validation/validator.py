"""
Two-Stage Validation Pipeline

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (borrow date, amount, borrower)
- Amount bounds (amount > 0, 0 <= initial repayment <= amount)
- Errors here block the operation

STAGE 2 - SEMANTIC VALIDATION:
- Future borrow dates
- Unusually large amounts
- Return date before borrow date
- Likely duplicate entries
- Warnings only, shown to the user but never blocking

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and the store refuses the write when errors exist.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from petty_cash.config import AppSettings, get_settings
from petty_cash.models.transaction import (
    Repayment,
    Transaction,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)


class TransactionValidator:
    """
    Validates form drafts and repayments before they reach the ledger.

    The repayment policy is consistent across the app: a repayment must be
    positive, and exceeding the outstanding balance is allowed only when
    `allow_overpayment` is set (the default, matching how cash is counted
    at the till: whatever came back is recorded).
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _currency(self, amount: Decimal) -> str:
        return f"{self._settings.currency_symbol}{amount:,.2f}"

    def _validate_schema(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: presence and bounds.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        for field, value in (
            ("borrow_date", draft.borrow_date),
            ("amount", draft.amount),
            ("borrower", draft.borrower),
        ):
            if value is None:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message="Please fill in all required fields",
                    severity="error",
                    suggested_fix=f"Enter the {field.replace('_', ' ')}",
                ))

        if draft.amount is not None and draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Borrow amount must be greater than 0",
                severity="error",
            ))

        returned = draft.initial_return
        if returned < 0:
            issues.append(ValidationIssue(
                field="return_amount",
                issue_type="invalid_value",
                message="Return amount cannot be negative",
                severity="error",
            ))
        elif draft.amount is not None and draft.amount > 0 and returned > draft.amount:
            issues.append(ValidationIssue(
                field="return_amount",
                issue_type="exceeds_amount",
                message=f"Return amount cannot exceed borrow amount of {self._currency(draft.amount)}",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        draft: TransactionDraft,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: plausibility checks, all warnings.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if draft.borrow_date and draft.borrow_date > max_future_date:
            issues.append(ValidationIssue(
                field="borrow_date",
                issue_type="future_date",
                message=f"Borrow date ({draft.borrow_date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if draft.amount and draft.amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({self._currency(draft.amount)}) seems unusually high for petty cash",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if (
            draft.return_date
            and draft.borrow_date
            and draft.return_date < draft.borrow_date
        ):
            issues.append(ValidationIssue(
                field="return_date",
                issue_type="inconsistent",
                message="Return date is before borrow date",
                severity="warning",
                suggested_fix="Please verify both dates",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _check_duplicates(
        self,
        draft: TransactionDraft,
        existing: Iterable[Transaction],
        exclude_id: Optional[int],
    ) -> list[ValidationIssue]:
        """Same borrower, same day, same amount is probably a double entry."""
        if not draft.borrower or not draft.borrow_date or draft.amount is None:
            return []

        for t in existing:
            if t.id == exclude_id:
                continue
            if (
                t.borrower.lower() == draft.borrower.lower()
                and t.borrow_date == draft.borrow_date
                and t.amount == draft.amount
            ):
                return [ValidationIssue(
                    field="duplicate",
                    issue_type="potential_duplicate",
                    message=(
                        f"{t.borrower} already has an advance of "
                        f"{self._currency(t.amount)} on {t.borrow_date}"
                    ),
                    severity="warning",
                    suggested_fix="Please verify this isn't a duplicate entry",
                )]
        return []

    def validate_draft(
        self,
        draft: TransactionDraft,
        existing: Iterable[Transaction] = (),
        exclude_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run the two-stage pipeline on an add/edit form.

        Args:
            draft: The submitted form data
            existing: Current ledger, for duplicate detection
            exclude_id: Id of the transaction being edited
            today: Reference day (defaults to the local date)

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(draft, today or date.today())
            all_issues.extend(semantic_issues)
            all_issues.extend(self._check_duplicates(draft, existing, exclude_id))

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=all_issues,
        )

    def validate_repayment(
        self,
        repayment: Repayment,
        transaction: Transaction,
    ) -> ValidationResult:
        """
        Validate a repayment against the advance it pays back.

        A return date is required and the amount must be positive.
        Exceeding the outstanding balance is an error only when
        overpayment is disabled; otherwise it is flagged as a warning.
        """
        issues = []

        if repayment.return_date is None:
            issues.append(ValidationIssue(
                field="return_date",
                issue_type="missing",
                message="Please select a return date",
                severity="error",
            ))

        if repayment.amount is None or repayment.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Return amount must be greater than 0",
                severity="error",
            ))
        elif repayment.amount > transaction.outstanding:
            severity = "warning" if self._settings.allow_overpayment else "error"
            issues.append(ValidationIssue(
                field="amount",
                issue_type="exceeds_outstanding",
                message=(
                    f"Return amount exceeds the remaining "
                    f"{self._currency(transaction.outstanding)}"
                ),
                severity=severity,
            ))

        schema_valid = not any(issue.severity == "error" for issue in issues)
        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=schema_valid,
            issues=issues,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Short summary suitable for a transient notification."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        seen = set()
        for issue in result.issues:
            if issue.severity == "error" and issue.message not in seen:
                seen.add(issue.message)
                lines.append(issue.message)

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
