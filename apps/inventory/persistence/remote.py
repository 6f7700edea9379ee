import logging

from django.db import DatabaseError, transaction

from ..exceptions import BackendUnavailable, WriteFailed
from ..models import Checker, Item, Setting
from ..realtime import change_feed
from ..records import record_from_row, record_to_row
from ..utils.seed import DEFAULT_CHECKERS, SEED
from .base import PersistenceBackend, Snapshot

logger = logging.getLogger(__name__)


class RemoteBackend(PersistenceBackend):
    """
    Shared backend on a Django database alias.

    - records: upsert keyed on id, delete by id
    - roster: full-replace diff, only the delta is written
    - cover: the ``coverUrl`` row of the settings table
    Committed changes come back through the change feed.
    """

    kind = "remote"

    def __init__(self, alias="default", feed=change_feed):
        self.alias = alias
        self.feed = feed

    def _items(self):
        return Item.objects.using(self.alias)

    def _checkers(self):
        return Checker.objects.using(self.alias)

    def _settings(self):
        return Setting.objects.using(self.alias)

    # -------------------------
    # Load
    # -------------------------
    def load(self):
        try:
            records = [record_from_row(item.as_row()) for item in self._items().order_by("id")]
            checkers = list(self._checkers().order_by("name").values_list("name", flat=True))
            cover_url = (
                self._settings()
                .filter(key=Setting.COVER_URL)
                .values_list("value", flat=True)
                .first()
            )

            # Empty backend: write the seed dataset once
            if not records:
                logger.info("Remote inventory is empty, bootstrapping %d seed records", len(SEED))
                with transaction.atomic(using=self.alias):
                    for record in SEED:
                        self._upsert(record)
                records = list(SEED)
        except DatabaseError as exc:
            raise BackendUnavailable(str(exc)) from exc

        return Snapshot(
            records=records,
            checkers=checkers or list(DEFAULT_CHECKERS),
            cover_url=cover_url,
        )

    # -------------------------
    # Write-through
    # -------------------------
    def _upsert(self, record):
        row = record_to_row(record)
        record_id = row.pop("id")
        self._items().update_or_create(id=record_id, defaults=row)

    def save_record(self, record):
        try:
            self._upsert(record)
        except DatabaseError as exc:
            raise WriteFailed(f"upsert item {record.id}", str(exc)) from exc

    def delete_record(self, record_id):
        try:
            self._items().filter(id=record_id).delete()
        except DatabaseError as exc:
            raise WriteFailed(f"delete item {record_id}", str(exc)) from exc

    def replace_records(self, records):
        records = list(records)
        keep = {record.id for record in records}
        try:
            with transaction.atomic(using=self.alias):
                self._items().exclude(id__in=keep).delete()
                for record in records:
                    self._upsert(record)
        except DatabaseError as exc:
            raise WriteFailed("replace items", str(exc)) from exc

    def save_checkers(self, names):
        """Reconcile the roster table to ``names``; returns (added, removed)."""
        wanted = list(names)
        try:
            with transaction.atomic(using=self.alias):
                current = set(self._checkers().values_list("name", flat=True))
                removed = sorted(current.difference(wanted))
                added = [name for name in wanted if name not in current]
                if removed:
                    self._checkers().filter(name__in=removed).delete()
                for name in added:
                    self._checkers().create(name=name)
        except DatabaseError as exc:
            raise WriteFailed("update checkers", str(exc)) from exc

        logger.info("Roster reconciled: +%s -%s", added, removed)
        return added, removed

    def save_cover(self, cover_url):
        try:
            if cover_url is None:
                self._settings().filter(key=Setting.COVER_URL).delete()
            else:
                self._settings().update_or_create(
                    key=Setting.COVER_URL, defaults={"value": cover_url}
                )
        except DatabaseError as exc:
            raise WriteFailed("update cover", str(exc)) from exc

    # -------------------------
    # Realtime
    # -------------------------
    def subscribe(self, callback):
        return self.feed.subscribe(callback, using=self.alias)
