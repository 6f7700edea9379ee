from dataclasses import dataclass, field, replace
from datetime import datetime, timezone as dt_timezone

from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_datetime


class Status(models.TextChoices):
    """Stock level of a record, stored as the lab's working-language label."""

    NORMAL = "ปกติ", "Normal"
    LOW = "ใกล้หมด", "Low"
    EMPTY = "หมด", "Empty"

    @classmethod
    def parse(cls, value):
        """Accept a stored label or an English name (``"low"``, ``"Empty"``)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.lower() in (member.name.lower(), member.label.lower()):
                return member
        raise ValueError(f"Unknown status: {value!r}")


def unique_names(names):
    """Drop blanks and exact duplicates, keeping first-seen order."""
    seen = []
    for name in names or ():
        name = str(name).strip()
        if name and name not in seen:
            seen.append(name)
    return tuple(seen)


def to_aware(value):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
        if parsed is None:
            raise ValueError(f"Invalid timestamp: {value!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


@dataclass(frozen=True)
class InventoryRecord:
    id: int
    category: str = ""
    name: str = ""
    quantity: int = 0
    unit: str = ""
    status: Status = Status.NORMAL
    location: str = ""
    checked_by: tuple = field(default_factory=tuple)
    last_modified_at: datetime | None = None

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "id", int(self.id))
        object.__setattr__(self, "quantity", max(0, int(self.quantity)))
        object.__setattr__(self, "status", Status.parse(self.status))
        object.__setattr__(self, "checked_by", unique_names(self.checked_by))
        object.__setattr__(self, "last_modified_at", to_aware(self.last_modified_at))

    def evolve(self, **changes):
        return replace(self, **changes)


# -------------------------
# JSON / local storage shape
# -------------------------
def record_to_dict(record):
    data = {
        "id": record.id,
        "category": record.category,
        "name": record.name,
        "quantity": record.quantity,
        "unit": record.unit,
        "status": record.status.value,
        "location": record.location,
    }
    if record.checked_by:
        data["checkedBy"] = list(record.checked_by)
    if record.last_modified_at is not None:
        data["lastModifiedAt"] = record.last_modified_at.isoformat()
    return data


def record_from_dict(data):
    """Build a record from the interchange shape.

    Older local blobs used ``qty`` and ``lastUpdated``; both are still read.
    """
    quantity = data.get("quantity", data.get("qty", 0))
    return InventoryRecord(
        id=data["id"],
        category=data.get("category") or "",
        name=data.get("name") or "",
        quantity=quantity or 0,
        unit=data.get("unit") or "",
        status=data.get("status") or Status.NORMAL,
        location=data.get("location") or "",
        checked_by=data.get("checkedBy") or (),
        last_modified_at=data.get("lastModifiedAt", data.get("lastUpdated")),
    )


# -------------------------
# Remote table row shape
# -------------------------
def record_to_row(record):
    return {
        "id": record.id,
        "category": record.category,
        "name": record.name,
        "quantity": record.quantity,
        "unit": record.unit,
        "status": record.status.value,
        "location": record.location,
        "checked_by": list(record.checked_by),
        "last_updated": record.last_modified_at,
    }


def record_from_row(row):
    return InventoryRecord(
        id=row["id"],
        category=row.get("category") or "",
        name=row.get("name") or "",
        quantity=row.get("quantity") or 0,
        unit=row.get("unit") or "",
        status=row.get("status") or Status.NORMAL,
        location=row.get("location") or "",
        checked_by=row.get("checked_by") or (),
        last_modified_at=row.get("last_updated"),
    )
