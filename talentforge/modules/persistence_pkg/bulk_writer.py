# talentforge/modules/persistence_pkg/bulk_writer.py
"""
Write-behind queue for avatar snapshots.

Updates are aggregated per avatar (the latest snapshot wins) and written in a
single transaction, either on demand or periodically from a timer thread.
"""
import copy
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from . import crud

logger = logging.getLogger("talentforge.persistence.bulk_writer")

PendingWrite = Tuple[int, int, Dict[str, Any]]  # owner_uid, avatar_id, snapshot


class BulkWriter:
    def __init__(self, session_factory: Callable[[], Session], interval_seconds: float = 5.0):
        self._session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._pending: Dict[str, PendingWrite] = {}
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def queue_avatar(self, owner_uid: int, avatar) -> None:
        """Queues the avatar's current state; the snapshot is taken now."""
        snapshot = copy.deepcopy(avatar.to_snapshot())
        with self._lock:
            self._pending[avatar.guid] = (owner_uid, avatar.avatar_id, snapshot)

    def flush(self) -> int:
        """
        Writes every queued snapshot in one transaction.

        Returns:
            int: Number of snapshots written.

        On failure the batch is put back in the queue (newer queued snapshots
        for the same avatar are kept) and the exception is re-raised.
        """
        with self._lock:
            batch, self._pending = self._pending, {}
        if not batch:
            return 0

        db = self._session_factory()
        try:
            for guid, (owner_uid, avatar_id, snapshot) in batch.items():
                crud.upsert_snapshot(db, owner_uid, avatar_id, guid, snapshot)
            db.commit()
        except Exception:
            db.rollback()
            with self._lock:
                for guid, pending in batch.items():
                    self._pending.setdefault(guid, pending)
            raise
        finally:
            db.close()

        logger.info(f"Bulk wrote {len(batch)} avatar snapshots")
        return len(batch)

    def _tick(self) -> None:
        try:
            self.flush()
        except Exception as e:
            logger.exception(f"Bulk write failed: {e}")
        finally:
            with self._lock:
                if self._running:
                    self._schedule()

    def _schedule(self) -> None:
        self._timer = threading.Timer(self.interval_seconds, self._tick)
        self._timer.daemon = True
        self._timer.start()

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._schedule()
        logger.info(f"Bulk writer started ({self.interval_seconds}s interval)")

    def stop(self, flush: bool = True) -> None:
        with self._lock:
            self._running = False
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        if flush:
            self.flush()
