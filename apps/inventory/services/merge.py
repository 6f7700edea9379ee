import logging
from collections import deque

from ..realtime import CHECKERS, DELETE, INSERT, ITEMS, UPDATE
from ..records import record_from_row

logger = logging.getLogger(__name__)


class MergeEngine:
    """
    Folds remote change events into a RecordStore.

    Events are queued as they arrive (from any thread) and applied one at a
    time, in arrival order, when drain() runs. Policy is last-writer-wins
    with whole-record replacement; there is no version check, so a late
    stale event overwrites newer local state. Re-applying an event, such as
    the echo of this client's own write, is harmless.
    """

    def __init__(self, store):
        self.store = store
        self._inbox = deque()

    def enqueue(self, event):
        self._inbox.append(event)

    def pending(self):
        return len(self._inbox)

    def drain(self):
        applied = 0
        while True:
            try:
                event = self._inbox.popleft()
            except IndexError:
                return applied
            self.apply(event)
            applied += 1

    def apply(self, event):
        row = event.row or {}

        if event.table == ITEMS:
            if event.operation in (INSERT, UPDATE):
                return self.store.put(record_from_row(row))
            if event.operation == DELETE:
                return self.store.discard(int(row["id"]))

        elif event.table == CHECKERS:
            # Exact-match union; roster additions made here skip the
            # case-insensitive duplicate check
            if event.operation == INSERT:
                return self.store.merge_checker(row["name"])
            if event.operation == DELETE:
                return self.store.drop_checker(row["name"])
            if event.operation == UPDATE:
                return None

        logger.warning("Ignoring change event %s/%s", event.table, event.operation)
        return None
