"""Tests for settings loading from the environment and .env."""

import pytest

from petty_cash.config import (
    GoogleSheetsSettings,
    LocalStorageSettings,
    get_settings,
    google_sheets_configured,
)


ENV_KEYS = (
    "LOCAL_STORAGE_DATA_PATH",
    "LOCAL_STORAGE_STORAGE_KEY",
    "GOOGLE_SHEETS_CREDENTIALS_PATH",
    "GOOGLE_SHEETS_SPREADSHEET_ID",
    "CURRENCY_SYMBOL",
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """An empty working directory with none of the settings exported."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


class TestDotEnv:
    """Every settings section reads the same .env file."""

    def test_local_storage_defaults(self, workdir):
        settings = LocalStorageSettings()
        assert settings.data_path == "data/petty_cash.json"
        assert settings.storage_key == "pettyCashData"

    def test_local_storage_from_dotenv(self, workdir):
        (workdir / ".env").write_text(
            "LOCAL_STORAGE_DATA_PATH=custom/ledger.json\n"
            "LOCAL_STORAGE_STORAGE_KEY=cashBox\n",
            encoding="utf-8",
        )
        settings = get_settings().local_storage
        assert settings.data_path == "custom/ledger.json"
        assert settings.storage_key == "cashBox"

    def test_google_sheets_from_dotenv(self, workdir):
        (workdir / ".env").write_text(
            "GOOGLE_SHEETS_CREDENTIALS_PATH=creds/sa.json\n"
            "GOOGLE_SHEETS_SPREADSHEET_ID=sheet-123\n"
            "CURRENCY_SYMBOL=USD\n",
            encoding="utf-8",
        )
        configured = google_sheets_configured()
        assert isinstance(configured, GoogleSheetsSettings)
        assert configured.credentials_path == "creds/sa.json"
        assert configured.spreadsheet_id == "sheet-123"
        assert get_settings().app.currency_symbol == "USD"

    def test_google_sheets_missing(self, workdir):
        assert google_sheets_configured() is None

    def test_environment_overrides_dotenv(self, workdir, monkeypatch):
        (workdir / ".env").write_text(
            "LOCAL_STORAGE_DATA_PATH=custom/ledger.json\n", encoding="utf-8"
        )
        monkeypatch.setenv("LOCAL_STORAGE_DATA_PATH", "env/ledger.json")
        assert LocalStorageSettings().data_path == "env/ledger.json"
