import io
import json
import tempfile
from datetime import datetime, timezone as dt_timezone
from itertools import product
from pathlib import Path
from unittest import mock

import pandas as pd
from rest_framework.test import APITestCase
from rest_framework import status
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from apps.inventory.exceptions import (
    BackendUnavailable,
    DuplicateChecker,
    DuplicateRecord,
    InvalidChecker,
    InvalidQuery,
    MalformedImport,
    RecordNotFound,
    WriteFailed,
)
from apps.inventory.models import Checker, Item, Setting
from apps.inventory.persistence import (
    LocalBackend,
    LocalStorage,
    RemoteBackend,
    select_backend,
)
from apps.inventory.persistence.local import CHECKERS_KEY, RECORDS_KEY
from apps.inventory.realtime import (
    CHECKERS,
    DELETE,
    INSERT,
    ITEMS,
    UPDATE,
    ChangeEvent,
    ChangeFeed,
)
from apps.inventory.records import (
    InventoryRecord,
    Status,
    record_from_dict,
    record_to_row,
)
from apps.inventory.services.merge import MergeEngine
from apps.inventory.services.query import (
    ALL,
    ALL_LABEL,
    Filters,
    SortState,
    facets,
    summarize,
    view,
)
from apps.inventory.services.session import (
    IMPORT_MERGE,
    InventorySession,
    reset_session,
)
from apps.inventory.services.status_rule import clamp_threshold, derive_status
from apps.inventory.services.store import RecordStore
from apps.inventory.utils.interchange import (
    HEADERS,
    decode_csv,
    decode_json,
    encode_csv,
    encode_json,
    encode_xlsx,
)
from apps.inventory.utils.seed import DEFAULT_CHECKERS, SEED

STAMP = datetime(2024, 5, 1, 10, 30, tzinfo=dt_timezone.utc)


def sample_records():
    return [
        InventoryRecord(1, "หมวดเลี้ยงเซลล์", "Tips 200 ul", 4, "แพ็ค", Status.NORMAL, "ชั้นเก็บของ",
                        ("Nice", "Fah"), STAMP),
        InventoryRecord(2, "หมวดของใช้จิปาถะ", "ทิชชู่", 0, "ม้วน", Status.EMPTY, "ชั้นเก็บของ"),
        InventoryRecord(3, "หมวดของใช้จิปาถะ", 'Dettol, "large"', 1, "ขวด", Status.LOW, "อ่างล้างจาน",
                        ("Air",)),
        InventoryRecord(4, "", "ถุง 7 ", 12, "", Status.NORMAL, "ตู้เย็น"),
        InventoryRecord(5, "หมวดเลี้ยงเซลล์", "apple medium", 2, "ขวด", Status.LOW, "ตู้เย็น"),
    ]


def local_config(directory, **extra):
    config = {
        "REMOTE_DB_ALIAS": None,
        "LOCAL_STORAGE_DIR": str(directory),
        "LOW_THRESHOLD": 1,
        "AUTO_STATUS": True,
        "DEFAULT_COVER_URL": "/BioMINTech.png",
    }
    config.update(extra)
    return config


# ============================================
# STATUS RULE / RECORDS
# ============================================

class StatusRuleTest(SimpleTestCase):

    def test_boundaries(self):
        for threshold in range(1, 11):
            self.assertEqual(derive_status(0, threshold), Status.EMPTY)
            self.assertEqual(derive_status(threshold, threshold), Status.LOW)
            self.assertEqual(derive_status(threshold + 1, threshold), Status.NORMAL)

    def test_threshold_is_clamped(self):
        self.assertEqual(clamp_threshold(0), 1)
        self.assertEqual(clamp_threshold(-5), 1)
        self.assertEqual(clamp_threshold("abc"), 1)
        self.assertEqual(clamp_threshold("4"), 4)


class InventoryRecordTest(SimpleTestCase):

    def test_status_parse(self):
        self.assertEqual(Status.parse("ใกล้หมด"), Status.LOW)
        self.assertEqual(Status.parse("empty"), Status.EMPTY)
        self.assertEqual(Status.parse(" Normal "), Status.NORMAL)
        with self.assertRaises(ValueError):
            Status.parse("plenty")

    def test_fields_are_normalised(self):
        record = InventoryRecord(
            id="3", name="x", quantity=-4, status="Empty",
            checked_by=[" Nice", "Nice", ""], last_modified_at="2024-05-01T10:30:00",
        )
        self.assertEqual(record.id, 3)
        self.assertEqual(record.quantity, 0)
        self.assertEqual(record.status, Status.EMPTY)
        self.assertEqual(record.checked_by, ("Nice",))
        self.assertEqual(record.last_modified_at, STAMP)

    def test_legacy_keys_are_read(self):
        record = record_from_dict(
            {"id": 9, "name": "Foil", "qty": 3, "status": "ปกติ", "lastUpdated": "2024-05-01T10:30:00Z"}
        )
        self.assertEqual(record.quantity, 3)
        self.assertEqual(record.last_modified_at, STAMP)
        self.assertEqual(record.category, "")


# ============================================
# QUERY ENGINE
# ============================================

class QueryEngineTest(SimpleTestCase):

    def setUp(self):
        self.records = sample_records()

    def test_filter_output_is_a_matching_subset(self):
        categories = [None, ALL, "หมวดเลี้ยงเซลล์", "หมวดของใช้จิปาถะ", "missing"]
        statuses = [None, ALL_LABEL, "ปกติ", "ใกล้หมด", "หมด"]
        locations = [None, "", "ตู้เย็น", "ชั้นเก็บของ"]
        ids = {r.id for r in self.records}

        for category, status_, location, only_low in product(
            categories, statuses, locations, [False, True]
        ):
            filters = Filters(category=category, status=status_, location=location, only_low=only_low)
            out = view(self.records, filters)

            self.assertTrue({r.id for r in out} <= ids)
            for record in out:
                if category not in (None, "", ALL, ALL_LABEL):
                    self.assertEqual(record.category, category)
                if status_ not in (None, "", ALL, ALL_LABEL):
                    self.assertEqual(record.status, Status.parse(status_))
                if location not in (None, "", ALL, ALL_LABEL):
                    self.assertEqual(record.location, location)
                if only_low:
                    self.assertNotEqual(record.status, Status.NORMAL)

    def test_search_is_case_insensitive_over_name_category_location(self):
        self.assertEqual([r.id for r in view(self.records, Filters(q="TIPS"))], [1])
        self.assertEqual([r.id for r in view(self.records, Filters(q="ตู้เย็น"))], [4, 5])
        self.assertEqual([r.id for r in view(self.records, Filters(q="จิปาถะ"))], [2, 3])

    def test_quantity_desc_is_reverse_of_asc(self):
        asc = view(self.records, sort=SortState("quantity", True))
        desc = view(self.records, sort=SortState("quantity", False))
        self.assertEqual([r.id for r in asc], [2, 3, 5, 1, 4])
        self.assertEqual([r.id for r in desc], [r.id for r in reversed(asc)])

    def test_text_sort_is_collated(self):
        records = [
            InventoryRecord(1, name="banana"),
            InventoryRecord(2, name="Apple"),
            InventoryRecord(3, name="apricot"),
        ]
        out = view(records, sort=SortState("name"))
        self.assertEqual([r.name for r in out], ["Apple", "apricot", "banana"])

    def test_missing_timestamps_sort_first(self):
        out = view(self.records, sort=SortState("last_modified_at"))
        self.assertEqual(out[-1].id, 1)

    def test_input_is_not_mutated(self):
        before = list(self.records)
        view(self.records, Filters(only_low=True), SortState("name", False))
        self.assertEqual(self.records, before)

    def test_sort_state_toggle(self):
        state = SortState().select("id")
        self.assertEqual(state, SortState("id", False))
        self.assertEqual(state.select("name"), SortState("name", True))

    def test_invalid_query(self):
        with self.assertRaises(InvalidQuery):
            view(self.records, sort=SortState("price"))
        with self.assertRaises(InvalidQuery):
            view(self.records, Filters(status="plenty"))

    def test_only_low_scenario(self):
        store = RecordStore(low_threshold=1)
        store.create(id=1, name="a", quantity=0)
        store.create(id=2, name="b", quantity=5)

        out = view(store.list(), Filters(only_low=True))
        self.assertEqual([r.id for r in out], [1])

    def test_summary_and_facets(self):
        self.assertEqual(summarize(self.records), {"total": 5, "low": 2, "empty": 1})
        options = facets(self.records)
        self.assertEqual(options["categories"], [ALL, "หมวดเลี้ยงเซลล์", "หมวดของใช้จิปาถะ", ""])
        self.assertEqual(options["locations"], [ALL, "ชั้นเก็บของ", "อ่างล้างจาน", "ตู้เย็น"])
        self.assertEqual(options["statuses"], [ALL, "ปกติ", "ใกล้หมด", "หมด"])


# ============================================
# RECORD STORE
# ============================================

class RecordStoreTest(SimpleTestCase):

    def setUp(self):
        self.store = RecordStore(sample_records(), checkers=["Ann", "Bo"])

    def test_create_assigns_next_id_and_status(self):
        record = self.store.create(name="Foil", quantity=1)
        self.assertEqual(record.id, 6)
        self.assertEqual(record.status, Status.LOW)
        self.assertIsNotNone(record.last_modified_at)

    def test_create_duplicate_id(self):
        with self.assertRaises(DuplicateRecord):
            self.store.create(id=1, name="again")

    def test_manual_status_kept_when_auto_off(self):
        self.store.auto_status = False
        record = self.store.create(name="Foil", quantity=0, status=Status.NORMAL)
        self.assertEqual(record.status, Status.NORMAL)

        updated = self.store.update(record.id, {"status": "หมด"})
        self.assertEqual(updated.status, Status.EMPTY)

    def test_update_ignores_status_when_auto_on(self):
        updated = self.store.update(4, {"status": "หมด", "name": "ถุง 8", "quantity": -3})
        self.assertEqual(updated.quantity, 0)
        self.assertEqual(updated.status, Status.EMPTY)
        self.assertEqual(updated.name, "ถุง 8")
        self.assertIsNotNone(updated.last_modified_at)

    def test_adjust_clamps_at_zero(self):
        updated = self.store.adjust_quantity(2, -1)
        self.assertEqual(updated.quantity, 0)
        self.assertEqual(updated.status, Status.EMPTY)

        self.assertEqual(self.store.adjust_quantity(2, +2).status, Status.NORMAL)

    def test_threshold_changes_derivation(self):
        self.store.low_threshold = 5
        self.assertEqual(self.store.adjust_quantity(4, -7).status, Status.LOW)
        self.store.low_threshold = 0
        self.assertEqual(self.store.low_threshold, 1)

    def test_confirm_check_replaces_names(self):
        updated = self.store.confirm_check(1, ["Bo", "Ann", "Bo"])
        self.assertEqual(updated.checked_by, ("Bo", "Ann"))
        self.assertGreater(updated.last_modified_at, STAMP)

    def test_unknown_id(self):
        with self.assertRaises(RecordNotFound):
            self.store.update(99, {"name": "x"})
        with self.assertRaises(RecordNotFound):
            self.store.adjust_quantity(99, 1)
        with self.assertRaises(RecordNotFound):
            self.store.confirm_check(99, [])

    def test_delete_is_idempotent(self):
        self.assertEqual(self.store.delete(3).id, 3)
        self.assertIsNone(self.store.delete(3))
        self.assertNotIn(3, self.store)

    def test_duplicate_checker_ignoring_case(self):
        with self.assertRaises(DuplicateChecker):
            self.store.add_checker("ann")
        self.assertEqual(self.store.checkers, ["Ann", "Bo"])

    def test_blank_checker(self):
        with self.assertRaises(InvalidChecker):
            self.store.add_checker("   ")
        self.assertEqual(self.store.add_checker("  Cy "), ["Ann", "Bo", "Cy"])

    def test_removed_checker_keeps_attributions(self):
        self.store.set_checkers(["Nice", "Fah"])
        self.store.remove_checker("Fah")
        self.assertEqual(self.store.checkers, ["Nice"])
        self.assertEqual(self.store.get(1).checked_by, ("Nice", "Fah"))

    def test_roster_edits_after_merged_case_variant(self):
        MergeEngine(self.store).apply(ChangeEvent(CHECKERS, INSERT, {"name": "ann"}))
        self.assertEqual(self.store.checkers, ["Ann", "Bo", "ann"])

        self.assertEqual(self.store.remove_checker("Bo"), ["Ann", "ann"])
        self.assertEqual(self.store.add_checker("Cy"), ["Ann", "ann", "Cy"])
        with self.assertRaises(DuplicateChecker):
            self.store.add_checker("ANN")
        self.assertEqual(self.store.checkers, ["Ann", "ann", "Cy"])


# ============================================
# MERGE ENGINE / CHANGE FEED
# ============================================

def item_event(operation, record):
    return ChangeEvent(ITEMS, operation, record_to_row(record))


class MergeEngineTest(SimpleTestCase):

    def setUp(self):
        self.store = RecordStore(sample_records(), checkers=["Ann"])
        self.merge = MergeEngine(self.store)

    def test_upsert_is_idempotent(self):
        event = item_event(UPDATE, InventoryRecord(1, "x", "Tips", 40, status=Status.NORMAL))

        self.merge.apply(event)
        once = self.store.list()
        self.merge.apply(event)
        self.assertEqual(self.store.list(), once)
        self.assertEqual(self.store.get(1).quantity, 40)

    def test_upsert_replaces_whole_record_without_derivation(self):
        self.merge.apply(item_event(INSERT, InventoryRecord(1, name="Bare", quantity=0)))
        record = self.store.get(1)
        self.assertEqual(record.status, Status.NORMAL)
        self.assertEqual(record.checked_by, ())
        self.assertIsNone(record.last_modified_at)

    def test_last_applied_event_wins(self):
        first = item_event(UPDATE, InventoryRecord(7, name="A", quantity=3))
        second = item_event(UPDATE, InventoryRecord(7, name="B", quantity=8))

        self.merge.enqueue(first)
        self.merge.enqueue(second)
        self.assertEqual(self.merge.pending(), 2)
        self.assertEqual(self.merge.drain(), 2)
        self.assertEqual(self.store.get(7).name, "B")

        self.merge.enqueue(second)
        self.merge.enqueue(first)
        self.merge.drain()
        self.assertEqual(self.store.get(7).name, "A")

    def test_delete_event(self):
        self.merge.apply(ChangeEvent(ITEMS, DELETE, {"id": 2}))
        self.assertNotIn(2, self.store)
        self.merge.apply(ChangeEvent(ITEMS, DELETE, {"id": 2}))
        self.assertEqual(len(self.store), 4)

    def test_checker_events_use_exact_match(self):
        self.merge.apply(ChangeEvent(CHECKERS, INSERT, {"name": "Ann"}))
        self.merge.apply(ChangeEvent(CHECKERS, INSERT, {"name": "ann"}))
        self.assertEqual(self.store.checkers, ["Ann", "ann"])

        self.merge.apply(ChangeEvent(CHECKERS, DELETE, {"name": "Ann"}))
        self.assertEqual(self.store.checkers, ["ann"])

    def test_unknown_event_is_ignored(self):
        with self.assertLogs("apps.inventory.services.merge", level="WARNING"):
            self.merge.apply(ChangeEvent("orders", INSERT, {"id": 1}))
        self.assertEqual(len(self.store), 5)


class ChangeFeedTest(SimpleTestCase):

    def test_delivery_by_alias(self):
        feed = ChangeFeed()
        default, other = [], []
        unsubscribe = feed.subscribe(default.append)
        feed.subscribe(other.append, using="remote")

        event = ChangeEvent(CHECKERS, INSERT, {"name": "Ann"})
        feed.publish(event)
        self.assertEqual(default, [event])
        self.assertEqual(other, [])

        unsubscribe()
        feed.publish(event)
        self.assertEqual(len(default), 1)
        self.assertEqual(len(feed), 1)

    def test_failing_listener_does_not_block_others(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe(mock.Mock(side_effect=RuntimeError("boom")))
        feed.subscribe(received.append)

        with self.assertLogs("apps.inventory.realtime", level="ERROR"):
            feed.publish(ChangeEvent(ITEMS, DELETE, {"id": 1}))
        self.assertEqual(len(received), 1)


# ============================================
# INTERCHANGE
# ============================================

class InterchangeTest(SimpleTestCase):

    def test_csv_round_trip(self):
        records = sample_records()
        text = encode_csv(records)

        self.assertTrue(text.startswith(",".join(HEADERS)))
        self.assertEqual(decode_csv(text), records)

    def test_json_round_trip_is_exact(self):
        records = sample_records()
        text = encode_json(records)

        self.assertEqual(decode_json(text), records)
        self.assertEqual(encode_json(decode_json(text)), text)
        self.assertNotIn("checkedBy", json.loads(text)[1])

    def test_malformed_json(self):
        bad_payloads = [
            "not json",
            '{"id": 1}',
            '[{"id": 1}]',
            '[{"id": 1, "category": "", "name": "a", "quantity": -1, "unit": "", "status": "ปกติ", "location": ""}]',
        ]
        for payload in bad_payloads:
            with self.assertRaises(MalformedImport):
                decode_json(payload)

    def test_duplicate_ids_rejected(self):
        row = {"id": 1, "category": "", "name": "a", "quantity": 1, "unit": "", "status": "ปกติ", "location": ""}
        with self.assertRaises(MalformedImport):
            decode_json([row, dict(row)])

    def test_csv_missing_columns(self):
        with self.assertRaises(MalformedImport):
            decode_csv("id,name\n1,a\n")

    def test_csv_duplicate_ids_rejected(self):
        text = encode_csv([InventoryRecord(1, name="A"), InventoryRecord(1, name="B")])
        with self.assertRaises(MalformedImport):
            decode_csv(text)

    def test_csv_negative_quantity_rejected(self):
        text = encode_csv([InventoryRecord(1, name="A", quantity=3)]).replace(",A,3,", ",A,-3,")
        with self.assertRaises(MalformedImport):
            decode_csv(text)

    def test_csv_names_with_separator_round_trip(self):
        records = [InventoryRecord(1, name="A", checked_by=("Lab|A", "back\\slash", "Bo"))]
        text = encode_csv(records)

        self.assertIn("Lab\\|A|back\\\\slash|Bo", text)
        self.assertEqual(decode_csv(text), records)

    def test_xlsx_export(self):
        data = encode_xlsx(sample_records())
        self.assertTrue(data.startswith(b"PK"))

        df = pd.read_excel(io.BytesIO(data), sheet_name="inventory")
        self.assertEqual(list(df.columns), HEADERS)
        self.assertEqual(len(df), 5)


# ============================================
# LOCAL BACKEND
# ============================================

class LocalBackendTest(SimpleTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.storage = LocalStorage(self.tmp.name)
        self.backend = LocalBackend(self.storage)

    def test_empty_storage_loads_seed(self):
        snapshot = self.backend.load()
        self.assertEqual(snapshot.records, list(SEED))
        self.assertEqual(snapshot.checkers, list(DEFAULT_CHECKERS))
        self.assertIsNone(snapshot.cover_url)

    def test_writes_persist(self):
        records = sample_records()
        self.backend.replace_records(records[:2])
        self.backend.save_record(records[2])
        self.backend.save_record(records[0].evolve(quantity=9))
        self.backend.delete_record(2)
        self.backend.save_checkers(["Ann", "Bo"])
        self.backend.save_cover("data:image/png;base64,AAAA")

        snapshot = LocalBackend(LocalStorage(self.tmp.name)).load()
        self.assertEqual([r.id for r in snapshot.records], [1, 3])
        self.assertEqual(snapshot.records[0].quantity, 9)
        self.assertEqual(snapshot.checkers, ["Ann", "Bo"])
        self.assertEqual(snapshot.cover_url, "data:image/png;base64,AAAA")
        self.assertTrue((Path(self.tmp.name) / RECORDS_KEY).exists())

        self.backend.save_cover(None)
        self.assertIsNone(self.backend.load().cover_url)

    def test_unreadable_blobs_fall_back(self):
        self.storage.set_item(RECORDS_KEY, "{broken")
        self.storage.set_item(CHECKERS_KEY, '{"not": "a list"}')
        snapshot = self.backend.load()
        self.assertEqual(len(snapshot.records), len(SEED))
        self.assertEqual(snapshot.checkers, list(DEFAULT_CHECKERS))

    def test_write_failure(self):
        blocker = Path(self.tmp.name) / "blocker"
        blocker.write_text("")
        backend = LocalBackend(LocalStorage(blocker))

        with self.assertRaises(WriteFailed):
            backend.save_checkers(["Ann"])


# ============================================
# REMOTE BACKEND
# ============================================

class RemoteBackendTest(TestCase):

    def setUp(self):
        self.backend = RemoteBackend("default")

    def test_empty_table_is_bootstrapped_once(self):
        snapshot = self.backend.load()

        self.assertEqual(snapshot.records, list(SEED))
        self.assertEqual(Item.objects.count(), len(SEED))
        self.assertEqual(snapshot.checkers, list(DEFAULT_CHECKERS))
        self.assertEqual(Checker.objects.count(), 0)

        Item.objects.filter(id__gt=1).delete()
        self.assertEqual(len(self.backend.load().records), 1)

    def test_load_reads_all_tables(self):
        Item.objects.create(id=3, name="Foil", quantity=2, status="ใกล้หมด", checked_by=["Ann"])
        Checker.objects.create(name="Bo")
        Checker.objects.create(name="Ann")
        Setting.objects.create(key=Setting.COVER_URL, value="/lab.png")

        snapshot = self.backend.load()
        self.assertEqual(snapshot.records[0].checked_by, ("Ann",))
        self.assertEqual(snapshot.checkers, ["Ann", "Bo"])
        self.assertEqual(snapshot.cover_url, "/lab.png")

    def test_load_failure_is_wrapped(self):
        with mock.patch.object(RemoteBackend, "_items", side_effect=DatabaseError("down")):
            with self.assertRaises(BackendUnavailable):
                self.backend.load()

    def test_write_failure_is_wrapped(self):
        with mock.patch.object(RemoteBackend, "_items", side_effect=DatabaseError("down")):
            with self.assertRaises(WriteFailed):
                self.backend.save_record(sample_records()[0])

    def test_record_writes(self):
        records = sample_records()
        self.backend.replace_records(records)
        self.backend.save_record(records[0].evolve(quantity=0, status=Status.EMPTY))
        self.backend.delete_record(5)
        self.backend.delete_record(500)

        self.assertEqual(list(Item.objects.values_list("id", flat=True)), [1, 2, 3, 4])
        self.assertEqual(Item.objects.get(id=1).status, "หมด")

        self.backend.replace_records(records[:1])
        self.assertEqual(Item.objects.count(), 1)

    def test_roster_writes_only_the_difference(self):
        Checker.objects.create(name="Ann")
        Checker.objects.create(name="Bo")

        added, removed = self.backend.save_checkers(["Bo", "Cy"])

        self.assertEqual(added, ["Cy"])
        self.assertEqual(removed, ["Ann"])
        self.assertEqual(sorted(Checker.objects.values_list("name", flat=True)), ["Bo", "Cy"])

    def test_cover_upsert_and_clear(self):
        self.backend.save_cover("/a.png")
        self.backend.save_cover("/b.png")
        self.assertEqual(Setting.objects.get(key=Setting.COVER_URL).value, "/b.png")

        self.backend.save_cover(None)
        self.assertFalse(Setting.objects.exists())

    def test_committed_changes_are_published(self):
        received = []
        unsubscribe = self.backend.subscribe(received.append)
        self.addCleanup(unsubscribe)

        with self.captureOnCommitCallbacks(execute=True):
            item = Item.objects.create(id=1, name="Foil", quantity=2)
            item.quantity = 1
            item.save()
            Checker.objects.create(name="Ann")
        with self.captureOnCommitCallbacks(execute=True):
            item.delete()

        self.assertEqual(
            [(e.table, e.operation) for e in received],
            [(ITEMS, INSERT), (ITEMS, UPDATE), (CHECKERS, INSERT), (ITEMS, DELETE)],
        )
        self.assertEqual(received[1].row["quantity"], 1)
        self.assertEqual(received[3].row["id"], 1)

    def test_select_backend(self):
        self.assertIsInstance(select_backend({"REMOTE_DB_ALIAS": "default"}), RemoteBackend)
        self.assertIsInstance(select_backend({"REMOTE_DB_ALIAS": None}), LocalBackend)
        with self.assertLogs("apps.inventory.persistence", level="WARNING"):
            self.assertIsInstance(select_backend({"REMOTE_DB_ALIAS": "missing"}), LocalBackend)


# ============================================
# SESSION
# ============================================

class LocalSessionTest(SimpleTestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.config = local_config(self.tmp.name)
        self.session = InventorySession(config=self.config).start()

    def reopen(self):
        return InventorySession(config=self.config).start()

    def test_start_from_seed(self):
        self.assertEqual(self.session.backend_kind, "local")
        self.assertEqual(len(self.session.records()), len(SEED))
        self.assertEqual(self.session.cover, "/BioMINTech.png")

    def test_mutations_write_through(self):
        created = self.session.create(name="Foil", quantity=3, category="หมวดของใช้จิปาถะ")
        self.session.adjust_quantity(1, 4)
        self.session.delete(2)
        self.session.add_checker("Zed")
        self.session.set_cover("/lab.png")

        other = self.reopen()
        self.assertEqual(other.get(created.id).name, "Foil")
        self.assertEqual(other.get(1).quantity, 4)
        with self.assertRaises(RecordNotFound):
            other.get(2)
        self.assertIn("Zed", other.checkers())
        self.assertEqual(other.cover, "/lab.png")

    def test_failed_write_keeps_local_change(self):
        with mock.patch.object(
            self.session.backend, "save_record", side_effect=WriteFailed("save record 1")
        ):
            with self.assertLogs("apps.inventory.services.session", level="ERROR"):
                record = self.session.adjust_quantity(1, 5)

        self.assertEqual(self.session.get(1).quantity, record.quantity)
        errors = self.session.summary()["write_errors"]
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0]["code"], "write_failed")

    def test_remote_load_failure_falls_back_to_local(self):
        backend = RemoteBackend("default")
        with mock.patch.object(backend, "load", side_effect=BackendUnavailable("connection refused")):
            with self.assertLogs("apps.inventory.services.session", level="ERROR"):
                session = InventorySession(backend=backend, config=self.config).start()

        self.assertEqual(session.backend_kind, "local")
        self.assertEqual(session.load_error, "connection refused")
        self.assertEqual(session.summary()["load_error"], "connection refused")
        self.assertEqual(len(session.records()), len(SEED))

    def test_import_modes(self):
        records = sample_records()
        self.session.import_records(records[:2], mode=IMPORT_MERGE)
        self.assertEqual(len(self.session.records()), len(SEED))
        self.assertEqual(self.session.get(1).name, "Tips 200 ul")

        self.session.import_records(records)
        self.assertEqual(self.reopen().records(), records)

    def test_preferences(self):
        self.assertEqual(
            self.session.set_preferences(auto_status=False, low_threshold=0),
            {"auto_status": False, "low_threshold": 1},
        )
        record = self.session.update(1, {"status": "low"})
        self.assertEqual(record.status, Status.LOW)


class RemoteSessionTest(TestCase):

    config = {"REMOTE_DB_ALIAS": "default", "DEFAULT_COVER_URL": "/BioMINTech.png"}

    def open_session(self):
        session = InventorySession(backend=RemoteBackend("default"), config=self.config).start()
        self.addCleanup(session.close)
        return session

    def test_own_echo_is_harmless(self):
        session = self.open_session()

        with self.captureOnCommitCallbacks(execute=True):
            updated = session.confirm_check(3, ["Nice"])
        self.assertEqual(session.merge.pending(), 1)

        session.sync()
        self.assertEqual(session.get(3), updated)
        self.assertEqual(Item.objects.get(id=3).checked_by, ["Nice"])

    def test_changes_reach_other_sessions(self):
        first = self.open_session()
        second = self.open_session()

        with self.captureOnCommitCallbacks(execute=True):
            first.delete(1)
            first.add_checker("Zed")

        with self.assertRaises(RecordNotFound):
            second.get(1)
        self.assertIn("Zed", second.checkers())

    def test_concurrent_upserts_last_writer_wins(self):
        first = self.open_session()
        second = self.open_session()

        with self.captureOnCommitCallbacks(execute=True):
            first.update(7, {"quantity": 5})
        with self.captureOnCommitCallbacks(execute=True):
            second.update(7, {"quantity": 9})

        self.assertEqual(first.get(7).quantity, 9)
        self.assertEqual(second.get(7).quantity, 9)
        self.assertEqual(Item.objects.get(id=7).quantity, 9)

    def test_bootstrap_command(self):
        out = io.StringIO()
        with override_settings(INVENTORY_SYNC=self.config):
            call_command("bootstrap_inventory", stdout=out)
        self.assertIn(f"remote: {len(SEED)} records", out.getvalue())
        self.assertEqual(Item.objects.count(), len(SEED))


# ============================================
# API
# ============================================

class InventoryAPITestCase(APITestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

        override = override_settings(INVENTORY_SYNC=local_config(self.tmp.name))
        override.enable()
        self.addCleanup(override.disable)

        reset_session()
        self.addCleanup(reset_session)


class InventoryRecordAPITest(InventoryAPITestCase):

    def test_list(self):
        response = self.client.get(reverse("inventory-items"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), len(SEED))
        self.assertEqual(response.data[0]["id"], 1)
        self.assertEqual(response.data[0]["status_label"], "Empty")

    def test_list_filters_and_sort(self):
        url = reverse("inventory-items")

        response = self.client.get(url, {"status": "low"})
        self.assertTrue(response.data)
        self.assertTrue(all(row["status"] == "ใกล้หมด" for row in response.data))

        response = self.client.get(url, {"only_low": "true", "sort": "quantity", "order": "desc"})
        quantities = [row["quantity"] for row in response.data]
        self.assertEqual(quantities, sorted(quantities, reverse=True))
        self.assertTrue(all(row["status"] != "ปกติ" for row in response.data))

    def test_list_bad_query(self):
        url = reverse("inventory-items")
        self.assertEqual(self.client.get(url, {"sort": "price"}).status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(url, {"status": "plenty"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_query")

    def test_create(self):
        url = reverse("inventory-items")
        payload = {"category": "หมวดของใช้จิปาถะ", "name": "ฟรอยด์ ใหม่", "quantity": 0, "unit": "กล่อง"}

        response = self.client.post(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["id"], len(SEED) + 1)
        self.assertEqual(response.data["status"], "หมด")

        response = self.client.post(url, {"id": 1, "name": "dup"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_record")

    def test_detail_patch_delete(self):
        url = reverse("inventory-item-detail", args=[14])

        response = self.client.patch(url, {"quantity": -3, "location": "ตู้เย็น"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["quantity"], 0)
        self.assertEqual(response.data["status"], "หมด")
        self.assertEqual(response.data["location"], "ตู้เย็น")

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "record_not_found")

    def test_adjust_and_check(self):
        response = self.client.post(
            reverse("inventory-item-adjust", args=[1]), {"delta": -1}, format="json"
        )
        self.assertEqual(response.data["quantity"], 0)

        response = self.client.post(
            reverse("inventory-item-check", args=[1]), {"checked_by": ["Nice", "Fah"]}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["checked_by"], ["Nice", "Fah"])

        response = self.client.post(reverse("inventory-item-adjust", args=[999]), {"delta": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_summary(self):
        response = self.client.get(reverse("inventory-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], len(SEED))
        self.assertEqual(response.data["backend"], "local")
        self.assertIsNone(response.data["load_error"])
        self.assertEqual(response.data["categories"][0], "all")


class CheckerAPITest(InventoryAPITestCase):

    def test_roster(self):
        url = reverse("inventory-checkers")
        self.assertEqual(self.client.get(url).data["names"], list(DEFAULT_CHECKERS))

        response = self.client.post(url, {"name": "nice"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        response = self.client.post(url, {"name": "Zed"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["names"][-1], "Zed")

        response = self.client.delete(reverse("inventory-checker-detail", args=["Zed"]))
        self.assertNotIn("Zed", response.data["names"])

    def test_replace_roster(self):
        url = reverse("inventory-checkers")

        response = self.client.put(url, {"names": ["Ann", " Bo "]}, format="json")
        self.assertEqual(response.data["names"], ["Ann", "Bo"])

        response = self.client.put(url, {"names": ["Ann", ""]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_checker")
        self.assertEqual(self.client.get(url).data["names"], ["Ann", "Bo"])

    def test_remove_name_with_slash(self):
        url = reverse("inventory-checkers")
        self.client.put(url, {"names": ["Ann", "Lab A/B"]}, format="json")

        response = self.client.delete(reverse("inventory-checker-detail", args=["Lab A/B"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["names"], ["Ann"])


class SettingsAPITest(InventoryAPITestCase):

    def test_cover(self):
        url = reverse("inventory-cover")
        self.assertEqual(self.client.get(url).data["cover_url"], "/BioMINTech.png")

        response = self.client.put(url, {"cover_url": "data:image/png;base64,AAAA"}, format="json")
        self.assertEqual(response.data["cover_url"], "data:image/png;base64,AAAA")

        response = self.client.put(url, {"cover_url": None}, format="json")
        self.assertEqual(response.data["cover_url"], "/BioMINTech.png")

    def test_preferences(self):
        url = reverse("inventory-preferences")
        self.assertEqual(self.client.get(url).data, {"auto_status": True, "low_threshold": 1})

        response = self.client.patch(url, {"low_threshold": 0}, format="json")
        self.assertEqual(response.data["low_threshold"], 1)

        self.client.patch(url, {"low_threshold": 10}, format="json")
        response = self.client.post(reverse("inventory-item-adjust", args=[14]), {"delta": 0}, format="json")
        self.assertEqual(response.data["status"], "ใกล้หมด")


class TransferAPITest(InventoryAPITestCase):

    def test_export_formats(self):
        url = reverse("inventory-export")

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("attachment;", response["Content-Disposition"])
        self.assertTrue(response.content.decode("utf-8").startswith(",".join(HEADERS)))

        response = self.client.get(url, {"format": "json"})
        self.assertEqual(len(json.loads(response.content)), len(SEED))

        response = self.client.get(url, {"format": "xlsx"})
        self.assertTrue(response.content.startswith(b"PK"))

        self.assertEqual(self.client.get(url, {"format": "pdf"}).status_code, status.HTTP_400_BAD_REQUEST)

    def test_import_replace_and_merge(self):
        url = reverse("inventory-import")
        payload = json.loads(encode_json(sample_records()[:2]))

        response = self.client.post(f"{url}?mode=merge", payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), len(SEED))

        response = self.client.post(url, payload, format="json")
        self.assertEqual([row["id"] for row in response.data], [1, 2])

    def test_import_csv_file(self):
        upload = SimpleUploadedFile(
            "inventory.csv", encode_csv(sample_records()).encode("utf-8"), content_type="text/csv"
        )
        response = self.client.post(reverse("inventory-import"), {"file": upload}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 5)

    def test_malformed_import_leaves_table(self):
        url = reverse("inventory-import")

        response = self.client.post(url, {"id": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "malformed_import")
        self.assertEqual(len(self.client.get(reverse("inventory-items")).data), len(SEED))
