"""
One client's view of the inventory: store + persistence backend + merge engine.

Every mutation is applied to the store first (optimistic) and then written
through to the backend. A failed write is logged and recorded in
``write_errors``; the local change is kept, there is no rollback.
Inbound change events are queued by the backend subscription and folded in
by ``sync()``, which every operation runs before and after its own work.
"""

import functools
import logging
import threading
from collections import deque

from django.utils import timezone

from ..exceptions import BackendUnavailable, WriteFailed
from ..persistence import local_backend, select_backend, sync_config
from .merge import MergeEngine
from .query import SortState, facets, summarize, view
from .store import RecordStore

logger = logging.getLogger(__name__)

IMPORT_REPLACE = "replace"
IMPORT_MERGE = "merge"
MAX_WRITE_ERRORS = 20


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class InventorySession:

    def __init__(self, backend=None, config=None):
        self.config = config or sync_config()
        self.backend = backend or select_backend(self.config)
        self.store = RecordStore(
            auto_status=self.config.get("AUTO_STATUS", True),
            low_threshold=self.config.get("LOW_THRESHOLD", 1),
        )
        self.merge = MergeEngine(self.store)
        self.cover_url = None
        self.load_error = None
        self.write_errors = deque(maxlen=MAX_WRITE_ERRORS)
        self.started = False
        self._unsubscribe = None
        self._lock = threading.RLock()

    # -------------------------
    # Lifecycle
    # -------------------------
    @_locked
    def start(self):
        try:
            snapshot = self.backend.load()
        except BackendUnavailable as exc:
            # Degrade to this device's storage for the rest of the session
            logger.error("Remote load failed, continuing local-only: %s", exc.message)
            self.load_error = exc.message
            self.backend = local_backend(self.config)
            snapshot = self.backend.load()

        self.store.replace_all(snapshot.records)
        self.store.replace_checkers(snapshot.checkers)
        self.cover_url = snapshot.cover_url
        self._unsubscribe = self.backend.subscribe(self.merge.enqueue)
        self.started = True
        logger.info(
            "Inventory session started (%s): %d records, %d checkers",
            self.backend.kind, len(self.store), len(self.store.checkers),
        )
        return self

    @_locked
    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.started = False

    @_locked
    def sync(self):
        return self.merge.drain()

    @property
    def backend_kind(self):
        return self.backend.kind

    @property
    def cover(self):
        return self.cover_url or self.config.get("DEFAULT_COVER_URL")

    def _write(self, operation, *args):
        try:
            return operation(*args)
        except WriteFailed as exc:
            logger.exception("Write-through failed: %s", exc.operation)
            self.write_errors.append(
                {"code": exc.code, "message": exc.message, "at": timezone.now().isoformat()}
            )
            return None
        finally:
            self.merge.drain()

    # -------------------------
    # Reads
    # -------------------------
    @_locked
    def records(self, filters=None, sort=None):
        self.sync()
        return view(self.store.list(), filters, sort or SortState())

    @_locked
    def get(self, record_id):
        self.sync()
        return self.store.get(record_id)

    @_locked
    def checkers(self):
        self.sync()
        return self.store.checkers

    @_locked
    def summary(self):
        self.sync()
        records = self.store.list()
        return {
            **summarize(records),
            **facets(records),
            "backend": self.backend_kind,
            "load_error": self.load_error,
            "write_errors": list(self.write_errors),
        }

    # -------------------------
    # Record mutations
    # -------------------------
    @_locked
    def create(self, **fields):
        self.sync()
        record = self.store.create(**fields)
        self._write(self.backend.save_record, record)
        return record

    @_locked
    def update(self, record_id, patch):
        self.sync()
        record = self.store.update(record_id, patch)
        self._write(self.backend.save_record, record)
        return record

    @_locked
    def adjust_quantity(self, record_id, delta):
        self.sync()
        record = self.store.adjust_quantity(record_id, delta)
        self._write(self.backend.save_record, record)
        return record

    @_locked
    def confirm_check(self, record_id, names):
        self.sync()
        record = self.store.confirm_check(record_id, names)
        self._write(self.backend.save_record, record)
        return record

    @_locked
    def delete(self, record_id):
        self.sync()
        removed = self.store.delete(record_id)
        if removed is not None:
            self._write(self.backend.delete_record, removed.id)
        return removed

    @_locked
    def import_records(self, records, mode=IMPORT_REPLACE):
        self.sync()
        records = list(records)
        if mode == IMPORT_MERGE:
            for record in records:
                self.store.put(record)
                self._write(self.backend.save_record, record)
        else:
            self.store.replace_all(records)
            self._write(self.backend.replace_records, records)
        logger.info("Imported %d records (%s)", len(records), mode)
        return self.store.list()

    # -------------------------
    # Roster
    # -------------------------
    @_locked
    def add_checker(self, name):
        self.sync()
        roster = self.store.add_checker(name)
        self._write(self.backend.save_checkers, roster)
        return roster

    @_locked
    def remove_checker(self, name):
        self.sync()
        roster = self.store.remove_checker(name)
        self._write(self.backend.save_checkers, roster)
        return roster

    @_locked
    def set_checkers(self, names):
        self.sync()
        roster = self.store.set_checkers(names)
        self._write(self.backend.save_checkers, roster)
        return roster

    # -------------------------
    # Cover & preferences
    # -------------------------
    @_locked
    def set_cover(self, cover_url):
        self.cover_url = cover_url or None
        self._write(self.backend.save_cover, self.cover_url)
        return self.cover

    @_locked
    def set_preferences(self, auto_status=None, low_threshold=None):
        if auto_status is not None:
            self.store.auto_status = bool(auto_status)
        if low_threshold is not None:
            self.store.low_threshold = low_threshold
        return self.preferences()

    def preferences(self):
        return {
            "auto_status": self.store.auto_status,
            "low_threshold": self.store.low_threshold,
        }


# ============================================
# PROCESS-WIDE SESSION
# ============================================

_session = None
_session_lock = threading.Lock()


def get_session():
    """Session served by the API, started on first use."""
    global _session
    with _session_lock:
        if _session is None:
            _session = InventorySession().start()
        return _session


def reset_session():
    global _session
    with _session_lock:
        if _session is not None:
            _session.close()
        _session = None
