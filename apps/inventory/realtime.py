"""
Process-wide change feed for the shared inventory tables.

Signal handlers publish a ChangeEvent once the writing transaction commits;
every session subscribed to the same database alias receives it, including
the session whose write produced it.
"""

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)

ITEMS = "items"
CHECKERS = "checkers"

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    operation: str
    row: dict  # new row, or the old row on delete


class ChangeFeed:

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers = []

    def subscribe(self, callback, using="default"):
        entry = (using, callback)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe():
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, event, using="default"):
        with self._lock:
            targets = [cb for alias, cb in self._subscribers if alias == using]
        for callback in targets:
            try:
                callback(event)
            except Exception:
                # One failing listener must not starve the others
                logger.exception("Change listener failed for %s/%s", event.table, event.operation)

    def __len__(self):
        with self._lock:
            return len(self._subscribers)


change_feed = ChangeFeed()
