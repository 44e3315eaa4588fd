"""
Core Data Models for Petty Cash Manager

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce the ledger invariants at construction time
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: A transaction's status is never stored on its own.
It is a computed field derived from amount and returned_amount, so no
mutation path can leave it stale.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def _blank_to_none(value: Any) -> Any:
    """Treat empty form values as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionStatus(str, Enum):
    """
    Repayment status of a cash advance.

    RETURNED iff returned_amount >= amount.
    """
    BORROWED = "borrowed"
    RETURNED = "returned"


class StatusFilter(str, Enum):
    """Status criterion accepted by the filter engine."""
    ALL = "all"
    BORROWED = "borrowed"
    RETURNED = "returned"


class ReportPeriod(str, Enum):
    """Report periods understood by the date-range resolver."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"


class ReportType(str, Enum):
    """Report flavours offered in the report dialog."""
    SUMMARY = "summary"
    DETAILED = "detailed"


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single cash advance and its repayment history.

    Mutation is a destructive overwrite: the store replaces the whole
    record with a freshly validated copy after every edit or repayment.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    # Identity
    id: int = Field(
        ...,
        ge=1,
        description="Local identifier, unique within the ledger"
    )
    remote_id: Optional[str] = Field(
        default=None,
        description="Identifier assigned by the remote document store"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the transaction was recorded (UTC)"
    )

    # Advance
    borrow_date: date = Field(
        ...,
        description="Day the cash was handed out"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount borrowed"
    )
    borrower: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Person who received the cash"
    )
    contact: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Phone number or email of the borrower"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="What the cash was for"
    )

    # Repayment
    returned_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Cumulative amount repaid so far"
    )
    return_date: Optional[date] = Field(
        default=None,
        description="Date of the most recent repayment"
    )
    return_notes: Optional[str] = Field(
        default=None,
        max_length=1000,
    )

    # Receipt image as a data: URL
    attachment: Optional[str] = None

    @field_validator('contact', 'description', 'return_notes', 'attachment', 'return_date', mode='before')
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator('returned_amount', mode='before')
    @classmethod
    def missing_returned_is_zero(cls, v: Any) -> Any:
        """Older snapshots stored null for untouched advances."""
        if v is None or v == "":
            return Decimal("0")
        return v

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @computed_field
    @property
    def status(self) -> TransactionStatus:
        if self.returned_amount >= self.amount:
            return TransactionStatus.RETURNED
        return TransactionStatus.BORROWED

    @property
    def outstanding(self) -> Decimal:
        """Amount still owed (never negative)."""
        return max(self.amount - self.returned_amount, Decimal("0"))

    @property
    def is_returned(self) -> bool:
        return self.status == TransactionStatus.RETURNED


class TransactionDraft(BaseModel):
    """
    Data entered in the add/edit form.

    Every field is optional because the form can be submitted half
    filled. The validator reports what is missing; nothing here raises
    for absent values.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    borrow_date: Optional[date] = None
    amount: Optional[Decimal] = None
    return_amount: Optional[Decimal] = Field(
        default=None,
        description="Cumulative amount already repaid"
    )
    borrower: Optional[str] = None
    contact: Optional[str] = None
    description: Optional[str] = None
    return_date: Optional[date] = None
    return_notes: Optional[str] = None
    attachment: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def initial_return(self) -> Decimal:
        return self.return_amount if self.return_amount is not None else Decimal("0")


class Repayment(BaseModel):
    """A repayment recorded against an open advance."""
    model_config = ConfigDict(str_strip_whitespace=True)

    return_date: Optional[date] = None
    amount: Optional[Decimal] = None
    notes: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class LedgerSnapshot(BaseModel):
    """Everything that is persisted: the transactions and the float."""

    transactions: list[Transaction] = Field(default_factory=list)
    available_funds: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Administered float on hand"
    )


# =============================================================================
# FILTER AND AGGREGATE MODELS
# =============================================================================

class TransactionFilter(BaseModel):
    """
    Criteria for the transaction list.

    Malformed values are treated as "no constraint" instead of raising,
    so a half-typed date in the UI never blanks the list.
    """

    status: StatusFilter = StatusFilter.ALL
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    borrower: Optional[str] = None

    @field_validator('status', mode='before')
    @classmethod
    def unknown_status_is_all(cls, v: Any) -> Any:
        if isinstance(v, StatusFilter):
            return v
        try:
            return StatusFilter(str(v).strip().lower())
        except ValueError:
            return StatusFilter.ALL

    @field_validator('date_from', 'date_to', mode='before')
    @classmethod
    def unparseable_date_is_none(cls, v: Any) -> Any:
        if v is None or isinstance(v, date):
            return v
        try:
            return date.fromisoformat(str(v).strip())
        except ValueError:
            return None

    @field_validator('borrower', mode='before')
    @classmethod
    def blank_borrower_is_none(cls, v: Any) -> Any:
        if v is None:
            return None
        text = str(v).strip()
        return text or None


class LedgerStats(BaseModel):
    """Aggregate figures shown on the dashboard."""

    total_borrowed: Decimal = Decimal("0")
    total_returned: Decimal = Decimal("0")
    pending_returns: Decimal = Decimal("0")
    current_balance: Decimal = Decimal("0")


class ReportStats(BaseModel):
    """Aggregate figures for a report period."""

    total_transactions: int = Field(default=0, ge=0)
    total_borrowed: Decimal = Decimal("0")
    total_returned: Decimal = Decimal("0")
    pending_returns: Decimal = Decimal("0")
    borrowed_count: int = Field(default=0, ge=0)
    returned_count: int = Field(default=0, ge=0)


class DateRange(BaseModel):
    """An inclusive [start, end] range of local wall-clock instants."""

    start: datetime
    end: datetime

    def contains(self, day: date) -> bool:
        """Whether midnight of `day` lies inside the range."""
        instant = datetime.combine(day, time.min)
        return self.start <= instant <= self.end


class ReportData(BaseModel):
    """Everything a report renderer needs."""

    report_type: str
    period: str
    date_range: DateRange
    stats: ReportStats
    transactions: list[Transaction] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (presence and bounds)
    Stage 2: Semantic validation (plausibility warnings)
    """

    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Warnings never block, only errors do."""
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

