"""Session stores: where session state lives between requests."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from starlette.concurrency import run_in_threadpool

from jobportal.models.session_record import SessionRecordRow

if TYPE_CHECKING:
    from jobportal.database import Database

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class SessionRecord:
    """Stored session state."""

    sid: str
    data: dict[str, Any] = field(default_factory=dict)
    expires_at: datetime = field(default_factory=utcnow)


class SessionStore(ABC):
    """
    Async storage contract used by the session stage.

    ``get`` must treat records whose ``expires_at`` has passed as absent.
    ``set`` sweeps expired records, so abandoned sessions do not pile up.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or utcnow

    def now(self) -> datetime:
        return self._clock()

    @abstractmethod
    async def get(self, sid: str) -> SessionRecord | None:
        """Return the live record for ``sid``, or None."""

    @abstractmethod
    async def set(self, sid: str, data: dict[str, Any], expires_at: datetime) -> None:
        """Create or replace the record for ``sid``."""

    @abstractmethod
    async def touch(self, sid: str, expires_at: datetime) -> None:
        """Extend the expiry of an existing record."""

    @abstractmethod
    async def destroy(self, sid: str) -> None:
        """Delete the record for ``sid`` if present."""

    @abstractmethod
    async def count(self) -> int:
        """Number of stored records, expired ones included."""

    @abstractmethod
    async def prune(self) -> int:
        """Delete every expired record. Returns how many were removed."""

    async def close(self) -> None:
        logger.info("%s closed", type(self).__name__)


class MemorySessionStore(SessionStore):
    """In-process store. Sessions are lost on restart."""

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._records: dict[str, SessionRecord] = {}

    async def get(self, sid: str) -> SessionRecord | None:
        record = self._records.get(sid)
        if record is None:
            return None
        if record.expires_at <= self.now():
            del self._records[sid]
            return None
        return SessionRecord(sid, dict(record.data), record.expires_at)

    async def set(self, sid: str, data: dict[str, Any], expires_at: datetime) -> None:
        await self.prune()
        self._records[sid] = SessionRecord(sid, dict(data), expires_at)

    async def touch(self, sid: str, expires_at: datetime) -> None:
        record = self._records.get(sid)
        if record is not None:
            record.expires_at = expires_at

    async def destroy(self, sid: str) -> None:
        self._records.pop(sid, None)

    async def count(self) -> int:
        return len(self._records)

    async def prune(self) -> int:
        now = self.now()
        expired = [sid for sid, record in self._records.items() if record.expires_at <= now]
        for sid in expired:
            del self._records[sid]
        return len(expired)

    async def close(self) -> None:
        self._records.clear()
        await super().close()


class DatabaseSessionStore(SessionStore):
    """
    Store backed by the ``sessions`` table.

    SQLAlchemy calls are blocking, so each operation runs in the threadpool
    and the event loop keeps serving other requests meanwhile.
    """

    def __init__(self, database: "Database", clock: Clock | None = None) -> None:
        super().__init__(clock)
        self.database = database

    def _get(self, sid: str) -> SessionRecord | None:
        with self.database.session() as db:
            row = db.get(SessionRecordRow, sid)
            if row is None:
                return None
            if row.expires_at <= self.now():
                db.delete(row)
                db.commit()
                return None
            return SessionRecord(row.sid, dict(row.data or {}), row.expires_at)

    def _set(self, sid: str, data: dict[str, Any], expires_at: datetime) -> None:
        with self.database.session() as db:
            self._delete_expired(db)
            row = db.get(SessionRecordRow, sid)
            if row is None:
                db.add(SessionRecordRow(sid=sid, data=dict(data), expires_at=expires_at))
            else:
                row.data = dict(data)
                row.expires_at = expires_at
            db.commit()

    def _touch(self, sid: str, expires_at: datetime) -> None:
        with self.database.session() as db:
            row = db.get(SessionRecordRow, sid)
            if row is not None:
                row.expires_at = expires_at
                db.commit()

    def _destroy(self, sid: str) -> None:
        with self.database.session() as db:
            db.query(SessionRecordRow).filter(SessionRecordRow.sid == sid).delete()
            db.commit()

    def _count(self) -> int:
        with self.database.session() as db:
            return db.query(SessionRecordRow).count()

    def _delete_expired(self, db) -> int:
        return (
            db.query(SessionRecordRow)
            .filter(SessionRecordRow.expires_at <= self.now())
            .delete(synchronize_session=False)
        )

    def _prune(self) -> int:
        with self.database.session() as db:
            removed = self._delete_expired(db)
            db.commit()
            return removed

    async def get(self, sid: str) -> SessionRecord | None:
        return await run_in_threadpool(self._get, sid)

    async def set(self, sid: str, data: dict[str, Any], expires_at: datetime) -> None:
        await run_in_threadpool(self._set, sid, data, expires_at)

    async def touch(self, sid: str, expires_at: datetime) -> None:
        await run_in_threadpool(self._touch, sid, expires_at)

    async def destroy(self, sid: str) -> None:
        await run_in_threadpool(self._destroy, sid)

    async def count(self) -> int:
        return await run_in_threadpool(self._count)

    async def prune(self) -> int:
        return await run_in_threadpool(self._prune)
