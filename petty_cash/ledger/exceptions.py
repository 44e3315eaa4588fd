"""Errors raised by ledger operations."""

from petty_cash.models.transaction import ValidationResult


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class TransactionValidationError(LedgerError):
    """Input rejected before any state was touched."""

    def __init__(self, result: ValidationResult):
        self.result = result
        errors = dict.fromkeys(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__("; ".join(errors) or "Invalid transaction")

    @property
    def issues(self) -> list[dict]:
        return [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in self.result.issues
            if i.severity == "error"
        ]


class TransactionNotFoundError(LedgerError):
    """No transaction with the given id."""

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class AdminAccessDeniedError(LedgerError):
    """Wrong credential supplied to an admin-gated operation."""
    pass
