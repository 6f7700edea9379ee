"""
Authoritative in-memory inventory state.

The store is the single source of truth the API renders from. User-facing
mutations (create / update / adjust / confirm / delete / roster changes)
apply the status rule and refresh timestamps. The merge primitives (put,
discard, merge_checker, drop_checker, replace_all) install state exactly as
received and are used when folding remote events or loading snapshots.
"""

import logging

from django.utils import timezone

from ..exceptions import (
    DuplicateChecker,
    DuplicateRecord,
    InvalidChecker,
    RecordNotFound,
)
from ..records import InventoryRecord, Status, unique_names
from .status_rule import clamp_threshold, derive_status

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"category", "name", "unit", "location", "quantity", "status"}


class RecordStore:

    def __init__(self, records=(), checkers=(), auto_status=True, low_threshold=1):
        self._records = {}
        self._checkers = []
        self.auto_status = bool(auto_status)
        self.low_threshold = low_threshold
        self.replace_all(records)
        self._checkers = list(unique_names(checkers))

    # -------------------------
    # Preferences
    # -------------------------
    @property
    def low_threshold(self):
        return self._low_threshold

    @low_threshold.setter
    def low_threshold(self, value):
        self._low_threshold = clamp_threshold(value)

    def _status_for(self, quantity, fallback):
        if self.auto_status:
            return derive_status(quantity, self.low_threshold)
        return fallback

    # -------------------------
    # Reads
    # -------------------------
    def list(self):
        return list(self._records.values())

    def get(self, record_id):
        try:
            return self._records[int(record_id)]
        except (KeyError, TypeError, ValueError):
            raise RecordNotFound(record_id)

    def __contains__(self, record_id):
        return record_id in self._records

    def __len__(self):
        return len(self._records)

    @property
    def checkers(self):
        return list(self._checkers)

    def next_id(self):
        return max(self._records, default=0) + 1

    # -------------------------
    # User mutations
    # -------------------------
    def create(self, record=None, **fields):
        """
        Add a record. Without an id the next free id (max + 1) is assigned.
        With auto-status the status follows the quantity.
        """
        if record is None:
            if fields.get("id") is None:
                fields["id"] = self.next_id()
            record = InventoryRecord(**fields)

        if record.id in self._records:
            raise DuplicateRecord(record.id)

        record = record.evolve(
            status=self._status_for(record.quantity, record.status),
            last_modified_at=record.last_modified_at or timezone.now(),
        )
        self._records[record.id] = record
        logger.info("Record created: %s - %s", record.id, record.name)
        return record

    def update(self, record_id, patch):
        """
        Edit fields of one record. Status overrides only stick while
        auto-status is disabled.
        """
        current = self.get(record_id)
        changes = {k: v for k, v in patch.items() if k in EDITABLE_FIELDS}

        quantity = max(0, int(changes.pop("quantity", current.quantity)))
        status = changes.pop("status", current.status)
        if self.auto_status and "status" in patch:
            logger.debug("Status override ignored for %s: auto-status is on", record_id)

        updated = current.evolve(
            quantity=quantity,
            status=self._status_for(quantity, Status.parse(status)),
            last_modified_at=timezone.now(),
            **changes,
        )
        self._records[updated.id] = updated
        return updated

    def adjust_quantity(self, record_id, delta):
        current = self.get(record_id)
        quantity = max(0, current.quantity + int(delta))
        updated = current.evolve(
            quantity=quantity,
            status=self._status_for(quantity, current.status),
            last_modified_at=timezone.now(),
        )
        self._records[updated.id] = updated
        logger.info(
            "Quantity adjusted: %s %+d -> %s (%s)",
            updated.id, int(delta), updated.quantity, updated.status.label,
        )
        return updated

    def confirm_check(self, record_id, names):
        """Replace who verified the record; order of first selection is kept."""
        current = self.get(record_id)
        updated = current.evolve(
            checked_by=unique_names(names),
            last_modified_at=timezone.now(),
        )
        self._records[updated.id] = updated
        return updated

    def delete(self, record_id):
        """Remove a record. Unknown ids are a no-op and return None."""
        removed = self._records.pop(record_id, None)
        if removed is not None:
            logger.info("Record deleted: %s - %s", removed.id, removed.name)
        return removed

    # -------------------------
    # Roster
    # -------------------------
    def set_checkers(self, roster):
        """
        Replace the roster. Names are trimmed; blank names and names equal
        ignoring case are rejected and leave the roster unchanged. Existing
        checked_by attributions are never touched.
        """
        names = []
        folded = set()
        for raw in roster:
            name = str(raw or "").strip()
            if not name:
                raise InvalidChecker()
            if name.casefold() in folded:
                raise DuplicateChecker(name)
            folded.add(name.casefold())
            names.append(name)
        self._checkers = names
        return self.checkers

    def add_checker(self, name):
        """
        Append one name. Only the new name is compared (ignoring case) with
        the roster, which may already hold case variants merged from remote.
        """
        name = str(name or "").strip()
        if not name:
            raise InvalidChecker()
        if any(name.casefold() == existing.casefold() for existing in self._checkers):
            raise DuplicateChecker(name)
        self._checkers.append(name)
        return self.checkers

    def remove_checker(self, name):
        self._checkers = [n for n in self._checkers if n != name]
        return self.checkers

    # -------------------------
    # Merge primitives
    # -------------------------
    def put(self, record):
        """Insert or wholly replace by id, exactly as given."""
        self._records[record.id] = record
        return record

    def discard(self, record_id):
        return self._records.pop(record_id, None)

    def merge_checker(self, name):
        # Exact match on purpose; add_checker compares case-insensitively
        if name not in self._checkers:
            self._checkers.append(name)

    def drop_checker(self, name):
        if name in self._checkers:
            self._checkers.remove(name)

    def replace_all(self, records):
        fresh = {}
        for record in records:
            if record.id in fresh:
                raise DuplicateRecord(record.id)
            fresh[record.id] = record
        self._records = fresh

    def replace_checkers(self, names):
        self._checkers = list(unique_names(names))
