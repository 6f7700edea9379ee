"""
Query pipeline over an in-memory record collection.

view() filters and sorts into a new list and never mutates its input.
Text columns are ordered with the Unicode Collation Algorithm so Thai and
Latin names sort the way people read them instead of by code point.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from functools import lru_cache

from pyuca import Collator

from ..exceptions import InvalidQuery
from ..records import Status

# Filter values meaning "no filtering on this dimension"
ALL = "all"
ALL_LABEL = "ทั้งหมด"
_IDENTITY = (None, "", ALL, ALL_LABEL)

NUMERIC_KEYS = ("id", "quantity")
TIMESTAMP_KEYS = ("last_modified_at",)
TEXT_KEYS = ("category", "name", "unit", "status", "location", "checked_by")
SORT_KEYS = NUMERIC_KEYS + TEXT_KEYS + TIMESTAMP_KEYS

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@lru_cache(maxsize=1)
def collator():
    # Loading the collation table is slow; build it once per process
    return Collator()


@dataclass(frozen=True)
class Filters:
    q: str = ""
    category: str | None = None
    status: str | None = None
    location: str | None = None
    only_low: bool = False


@dataclass(frozen=True)
class SortState:
    key: str = "id"
    ascending: bool = True

    def select(self, key):
        """Re-selecting the current key flips direction; a new key starts ascending."""
        if key == self.key:
            return replace(self, ascending=not self.ascending)
        return SortState(key=key, ascending=True)


def _is_identity(value):
    return value in _IDENTITY


def _numeric(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _sort_value(record, key):
    value = getattr(record, key, None)
    if key in NUMERIC_KEYS:
        return _numeric(value)
    if key in TIMESTAMP_KEYS:
        return value or EPOCH
    if key == "checked_by":
        value = ", ".join(value or ())
    elif isinstance(value, Status):
        value = value.value
    return collator().sort_key(str(value or ""))


def matches(record, filters):
    q = (filters.q or "").strip().lower()
    if q and not any(
        q in (text or "").lower()
        for text in (record.name, record.category, record.location)
    ):
        return False
    if not _is_identity(filters.category) and record.category != filters.category:
        return False
    if not _is_identity(filters.status) and record.status != filters.status:
        return False
    if not _is_identity(filters.location) and record.location != filters.location:
        return False
    if filters.only_low and record.status == Status.NORMAL:
        return False
    return True


def view(records, filters=None, sort=None):
    filters = filters or Filters()
    sort = sort or SortState()

    if sort.key not in SORT_KEYS:
        raise InvalidQuery(f"Unsupported sort key: {sort.key}")
    if not _is_identity(filters.status):
        try:
            filters = replace(filters, status=Status.parse(filters.status))
        except ValueError as exc:
            raise InvalidQuery(str(exc))

    out = [record for record in records if matches(record, filters)]
    # sorted() is stable in both directions, ties keep source order
    return sorted(
        out,
        key=lambda record: _sort_value(record, sort.key),
        reverse=not sort.ascending,
    )


# -------------------------
# Derived panels
# -------------------------
def summarize(records):
    records = list(records)
    return {
        "total": len(records),
        "low": sum(1 for r in records if r.status == Status.LOW),
        "empty": sum(1 for r in records if r.status == Status.EMPTY),
    }


def facets(records):
    """Filter options in first-seen order, each led by the "all" choice."""
    categories, locations = [], []
    for record in records:
        if record.category not in categories:
            categories.append(record.category)
        if record.location not in locations:
            locations.append(record.location)
    return {
        "categories": [ALL] + categories,
        "locations": [ALL] + locations,
        "statuses": [ALL] + [status.value for status in Status],
    }
