import io
import json
import re

import pandas as pd

from ..exceptions import MalformedImport
from ..records import record_from_dict, record_to_dict
from ..serializers import InterchangeRecordSerializer

# Display-column order of the stock table: (field, header)
COLUMNS = [
    ("id", "ลำดับ"),
    ("category", "หมวดหมู่"),
    ("name", "ชื่อสิ่งของ"),
    ("quantity", "จำนวนคงเหลือ"),
    ("unit", "หน่วย"),
    ("status", "สถานะ"),
    ("location", "สถานที่จัดเก็บ"),
    ("last_modified_at", "อัปเดตล่าสุด"),
    ("checked_by", "ตรวจโดย"),
]
HEADERS = [header for _, header in COLUMNS]
NAME_SEPARATOR = "|"
# One name per match; a backslash escapes the next character
_NAME_TOKEN = re.compile(r"(?:\\.|[^|\\])+")
_ESCAPED = re.compile(r"\\(.)")


def join_names(names):
    return NAME_SEPARATOR.join(
        name.replace("\\", "\\\\").replace(NAME_SEPARATOR, "\\" + NAME_SEPARATOR)
        for name in names
    )


def split_names(text):
    return [_ESCAPED.sub(r"\1", token) for token in _NAME_TOKEN.findall(text or "")]


def _table_row(record):
    return [
        record.id,
        record.category,
        record.name,
        record.quantity,
        record.unit,
        record.status.value,
        record.location,
        record.last_modified_at.isoformat() if record.last_modified_at else "",
        join_names(record.checked_by),
    ]


def _validated_records(rows):
    """Records from interchange dicts; any invalid row or repeated id rejects the lot."""
    serializer = InterchangeRecordSerializer(data=rows, many=True)
    if not serializer.is_valid():
        raise MalformedImport(f"Invalid records: {serializer.errors}")

    ids = [int(row["id"]) for row in rows]
    if len(ids) != len(set(ids)):
        raise MalformedImport("Duplicate record ids in import.")

    return [record_from_dict(row) for row in rows]


def to_dataframe(records):
    return pd.DataFrame([_table_row(r) for r in records], columns=HEADERS)


# -------------------------
# CSV
# -------------------------
def encode_csv(records):
    return to_dataframe(records).to_csv(index=False, lineterminator="\n")


def decode_csv(text):
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    except (ValueError, pd.errors.ParserError) as exc:
        raise MalformedImport(f"CSV parse failed: {exc}") from exc

    missing = [h for h in HEADERS if h not in df.columns]
    if missing:
        raise MalformedImport(f"Missing columns: {missing}")

    rows = []
    for _, row in df.iterrows():
        data = {
            "id": row["ลำดับ"],
            "category": row["หมวดหมู่"],
            "name": row["ชื่อสิ่งของ"],
            "quantity": row["จำนวนคงเหลือ"] or "0",
            "unit": row["หน่วย"],
            "status": row["สถานะ"],
            "location": row["สถานที่จัดเก็บ"],
            "checkedBy": split_names(row["ตรวจโดย"]),
        }
        if row["อัปเดตล่าสุด"]:
            data["lastModifiedAt"] = row["อัปเดตล่าสุด"]
        rows.append(data)
    return _validated_records(rows)


# -------------------------
# JSON
# -------------------------
def encode_json(records):
    return json.dumps([record_to_dict(r) for r in records], ensure_ascii=False, indent=2)


def decode_json(payload):
    """
    Parse an import payload (JSON text or already-decoded data).
    Anything other than an array of valid, id-unique records is rejected.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise MalformedImport(f"Invalid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise MalformedImport()

    return _validated_records(payload)


# -------------------------
# Excel
# -------------------------
def encode_xlsx(records):
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        to_dataframe(records).to_excel(writer, index=False, sheet_name="inventory")
    return buffer.getvalue()
