import json
import logging
import os
import tempfile
from pathlib import Path

from ..exceptions import WriteFailed
from ..records import record_from_dict, record_to_dict
from ..utils.seed import DEFAULT_CHECKERS, SEED
from .base import PersistenceBackend, Snapshot

logger = logging.getLogger(__name__)

RECORDS_KEY = "inventory.thai.lab.v6"
CHECKERS_KEY = "inventory.checkers.v2"
COVER_KEY = "inventory.coverUrl.v2"


class LocalStorage:
    """Key-value string storage, one file per key inside ``directory``."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key):
        return self.directory / key

    def get_item(self, key):
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key, value):
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def remove_item(self, key):
        self._path(key).unlink(missing_ok=True)


class LocalBackend(PersistenceBackend):
    """Single-device persistence. No network, no change events."""

    kind = "local"

    def __init__(self, storage):
        self.storage = storage

    # -------------------------
    # Load
    # -------------------------
    def _read_json(self, key, default):
        raw = self.storage.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Unreadable local blob %s, using defaults", key)
            return default

    def _read_records(self):
        data = self._read_json(RECORDS_KEY, None)
        if not isinstance(data, list):
            return list(SEED)
        try:
            return [record_from_dict(row) for row in data]
        except (KeyError, TypeError, ValueError):
            logger.warning("Invalid records in local storage, using seed data")
            return list(SEED)

    def load(self):
        checkers = self._read_json(CHECKERS_KEY, None)
        if not isinstance(checkers, list):
            checkers = list(DEFAULT_CHECKERS)
        return Snapshot(
            records=self._read_records(),
            checkers=checkers,
            cover_url=self.storage.get_item(COVER_KEY),
        )

    # -------------------------
    # Write-through
    # -------------------------
    def _write(self, key, value, operation):
        try:
            self.storage.set_item(key, value)
        except OSError as exc:
            raise WriteFailed(operation, str(exc)) from exc

    def _write_records(self, records, operation):
        payload = json.dumps([record_to_dict(r) for r in records], ensure_ascii=False)
        self._write(RECORDS_KEY, payload, operation)

    def save_record(self, record):
        records = self._read_records()
        if any(r.id == record.id for r in records):
            records = [record if r.id == record.id else r for r in records]
        else:
            records.append(record)
        self._write_records(records, f"save record {record.id}")

    def delete_record(self, record_id):
        records = [r for r in self._read_records() if r.id != record_id]
        self._write_records(records, f"delete record {record_id}")

    def replace_records(self, records):
        self._write_records(list(records), "replace records")

    def save_checkers(self, names):
        self._write(CHECKERS_KEY, json.dumps(list(names), ensure_ascii=False), "save checkers")

    def save_cover(self, cover_url):
        if cover_url is None:
            try:
                self.storage.remove_item(COVER_KEY)
            except OSError as exc:
                raise WriteFailed("clear cover", str(exc)) from exc
        else:
            self._write(COVER_KEY, cover_url, "save cover")
