"""In-memory storage backends for tests and storage-less runs."""

from typing import Optional
from uuid import uuid4

from petty_cash.models.audit import AuditEvent
from petty_cash.models.transaction import LedgerSnapshot, Transaction
from petty_cash.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    NotFoundError,
    RemoteTransactionStorageInterface,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Keeps a serialized copy so callers can't mutate what was saved."""

    name = "memory"

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self._data: Optional[dict] = snapshot.model_dump(mode="json") if snapshot else None
        self.save_count = 0

    async def load(self) -> Optional[LedgerSnapshot]:
        if self._data is None:
            return None
        return LedgerSnapshot.model_validate(self._data)

    async def save(self, snapshot: LedgerSnapshot) -> bool:
        self._data = snapshot.model_dump(mode="json")
        self.save_count += 1
        return True


class InMemoryRemoteStorage(RemoteTransactionStorageInterface):
    """Dictionary-backed stand-in for the remote document store."""

    def __init__(self):
        self._records: dict[str, dict] = {}

    async def list_transactions(self) -> list[Transaction]:
        items = [
            Transaction.model_validate({**data, "remote_id": remote_id})
            for remote_id, data in self._records.items()
        ]
        items.sort(key=lambda t: t.created_at, reverse=True)
        return items

    async def create_transaction(self, transaction: Transaction) -> str:
        remote_id = uuid4().hex
        self._records[remote_id] = transaction.model_dump(mode="json", exclude={"remote_id"})
        return remote_id

    async def update_transaction(self, remote_id: str, data: dict) -> bool:
        if remote_id not in self._records:
            raise NotFoundError(f"Remote transaction not found: {remote_id}")
        self._records[remote_id].update(data)
        return True

    async def delete_transaction(self, remote_id: str) -> bool:
        return self._records.pop(remote_id, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of events."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return sorted(self.events, key=lambda e: e.timestamp, reverse=True)[:limit]
