"""Validation package."""

from petty_cash.validation.validator import TransactionValidator

__all__ = ["TransactionValidator"]
