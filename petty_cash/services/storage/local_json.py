"""
Local JSON Storage

The desktop counterpart of browser local storage: a single JSON document
on disk holding the ledger snapshot under a fixed key.

    {"pettyCashData": {"transactions": [...], "available_funds": "5000.00"}}

Other keys in the document are preserved on save.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from petty_cash.config import LocalStorageSettings, get_settings
from petty_cash.models.transaction import LedgerSnapshot
from petty_cash.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
)


class LocalJsonStorage(LedgerStorageInterface):
    """File-backed ledger storage."""

    name = "local_json"

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        storage_key: Optional[str] = None,
        settings: Optional[LocalStorageSettings] = None,
    ):
        if path is None or storage_key is None:
            settings = settings or get_settings().local_storage
        self._path = Path(path if path is not None else settings.data_path)
        self._key = storage_key if storage_key is not None else settings.storage_key

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}")
        if not isinstance(document, dict):
            raise StorageError(f"Unexpected content in {self._path}")
        return document

    async def load(self) -> Optional[LedgerSnapshot]:
        """Load the snapshot, or None if the file or key is absent."""
        document = self._read_document()
        data = document.get(self._key)
        if data is None:
            return None
        try:
            return LedgerSnapshot.model_validate(data)
        except ValidationError as e:
            raise StorageError(f"Saved ledger is invalid: {e}")

    async def save(self, snapshot: LedgerSnapshot) -> bool:
        """Write atomically: temp file in the same directory, then replace."""
        try:
            document = self._read_document()
        except StorageError:
            # A corrupt file is overwritten by the in-memory copy
            document = {}
        document[self._key] = snapshot.model_dump(mode="json")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to save ledger to {self._path}: {e}")

        return True
