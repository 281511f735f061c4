"""
Synchronous key/value storage for the record collections.

Values are opaque bytes (JSON documents in practice). `apply` takes a
mapping of key -> bytes-or-None (None deletes) and is the unit that
`BufferedStore.flush` uses to push a whole operation's writes at once.
"""
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recovery_desk.models.kv_entry import KVEntry
from recovery_desk.utils.dates import now_iso


class KeyValueStore:
    def get(self, key: str) -> bytes | None:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def apply(self, changes: dict[str, bytes | None]) -> None:
        for key, value in changes.items():
            if value is None:
                self.delete(key)
            else:
                self.set(key, value)


class MemoryStore(KeyValueStore):
    def __init__(self, initial: dict[str, bytes] | None = None):
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """Store backed by the kv_store table; `apply` commits once."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> bytes | None:
        entry = self.db.get(KVEntry, key)
        return entry.value if entry else None

    def set(self, key: str, value: bytes) -> None:
        self.apply({key: value})

    def delete(self, key: str) -> None:
        self.apply({key: None})

    def apply(self, changes: dict[str, bytes | None]) -> None:
        now = now_iso()
        try:
            for key, value in changes.items():
                entry = self.db.get(KVEntry, key)
                if value is None:
                    if entry:
                        self.db.delete(entry)
                elif entry:
                    entry.value = value
                    entry.updated_at = now
                else:
                    self.db.add(KVEntry(key=key, value=value, updated_at=now))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise


class BufferedStore(KeyValueStore):
    """Holds writes in memory until `flush`; reads see pending writes."""

    def __init__(self, inner: KeyValueStore):
        self.inner = inner
        self._pending: dict[str, bytes | None] = {}

    def get(self, key: str) -> bytes | None:
        if key in self._pending:
            return self._pending[key]
        return self.inner.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._pending[key] = value

    def delete(self, key: str) -> None:
        self._pending[key] = None

    @property
    def pending(self) -> dict[str, bytes | None]:
        return dict(self._pending)

    def flush(self) -> None:
        if self._pending:
            self.inner.apply(dict(self._pending))
        self._pending.clear()

    def discard(self) -> None:
        self._pending.clear()
