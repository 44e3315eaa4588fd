"""
Configuration Management for Petty Cash Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The admin credential, the starting float and the storage locations
all live in one place and are validated at startup.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class LocalStorageSettings(BaseSettings):
    """File-backed local storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOCAL_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_path: str = Field(
        default="data/petty_cash.json",
        description="Path of the JSON document holding the ledger"
    )
    storage_key: str = Field(
        default="pettyCashData",
        min_length=1,
        description="Key the ledger snapshot is stored under"
    )


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets remote sync configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    transactions_sheet_name: str = Field(
        default="Transactions",
        description="Name of the sheet for transactions"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local log output"
    )

    # Ledger
    currency_symbol: str = Field(
        default="Rs",
        max_length=5,
        description="Prefix used when displaying amounts"
    )
    initial_available_funds: Decimal = Field(
        default=Decimal("5000.00"),
        ge=0,
        description="Float on hand when no saved data exists"
    )
    admin_password: str = Field(
        default="admin123",
        min_length=1,
        description="Credential required to change available funds (not a security boundary)"
    )
    allow_overpayment: bool = Field(
        default=True,
        description="Accept repayments that exceed the outstanding amount"
    )
    seed_sample_data: bool = Field(
        default=True,
        description="Seed demo transactions when no saved data exists"
    )
    autosave_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between background saves"
    )

    # Reports
    week_starts_on: str = Field(
        default="sunday",
        description="First day of the week for weekly reports"
    )

    # Validation thresholds
    max_transaction_amount: Decimal = Field(
        default=Decimal("100000"),
        gt=0,
        description="Amounts above this are flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=7,
        ge=0,
        description="How many days in the future a borrow date can be"
    )

    # Attachments
    max_attachment_size_mb: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum attachment size in MB"
    )
    supported_attachment_formats: str = Field(
        default="jpg,jpeg,png,webp",
        description="Comma-separated list of supported image formats"
    )

    @field_validator('week_starts_on')
    @classmethod
    def validate_week_start(cls, v: str) -> str:
        """Only accept full English weekday names."""
        value = v.strip().lower()
        if value not in WEEKDAYS:
            raise ValueError(f"Unknown weekday: {v}. Allowed: {', '.join(WEEKDAYS)}")
        return value

    @property
    def week_start_index(self) -> int:
        """Weekday number of the week start (Monday is 0)."""
        return WEEKDAYS.index(self.week_starts_on)

    @property
    def supported_formats_list(self) -> list[str]:
        """Get supported formats as a list."""
        return [fmt.strip().lower() for fmt in self.supported_attachment_formats.split(",")]

    @property
    def max_attachment_size_bytes(self) -> int:
        """Get max attachment size in bytes."""
        return self.max_attachment_size_mb * 1024 * 1024


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def local_storage(self) -> LocalStorageSettings:
        return LocalStorageSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus an
    "<name>_error" entry for every section that failed.
    """
    results: dict[str, object] = {}
    settings = get_settings()

    sections = {
        "app": lambda: settings.app,
        "local_storage": lambda: settings.local_storage,
        "google_sheets": lambda: settings.google_sheets,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results


def google_sheets_configured() -> Optional[GoogleSheetsSettings]:
    """Return the Google Sheets settings, or None when they are incomplete."""
    try:
        return get_settings().google_sheets
    except Exception:
        return None
