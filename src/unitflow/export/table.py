"""CSV interchange for log entries.

One fixed header covers both modes; each entry fills the columns of its own
mode and leaves the rest empty. Every value is quoted with inner quotes
doubled, and embedded newlines are collapsed to spaces so one entry is always
one line.
"""

import csv
import io
from datetime import UTC, datetime

from unitflow.entry.entry import EXTERNAL_NAMES

COLUMNS = [
    "mode",
    "timestamp",
    "author",
    "shift",
    "unit",
    "type",
    "severity",
    "qty",
    "notes",
    "cartType",
    "location",
    "cartNumber",
    "reason",
    "centralOld",
    "centralNew",
    "medOld",
    "medNew",
    "checkedBy",
    "seal",
]

_ATTRIBUTE_FOR_COLUMN = {column: attribute for attribute, column in EXTERNAL_NAMES.items()}


def iso_timestamp(timestamp: int) -> str:
    moment = datetime.fromtimestamp((timestamp or 0) / 1000, UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def single_line(value) -> str:
    text = "" if value is None else str(value)
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def table_row(entry) -> list[str]:
    row = []
    for column in COLUMNS:
        if column == "mode":
            value = entry.mode or ""
        elif column == "timestamp":
            value = iso_timestamp(entry.timestamp)
        else:
            value = single_line(entry.field_value(_ATTRIBUTE_FOR_COLUMN[column]))
            if column == "notes":
                value = value.strip()
        row.append(value)
    return row


def to_table(entries) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(COLUMNS)
    for entry in entries:
        writer.writerow(table_row(entry))
    return buffer.getvalue()


def from_table(text: str) -> list[dict[str, str]]:
    """Read an exported table back into one dict per row, keyed by column."""
    reader = csv.DictReader(io.StringIO(text))
    return [dict(row) for row in reader]


def export_filename(prefix: str, on: datetime | None = None) -> str:
    on = on or datetime.now(UTC)
    return f"{prefix}_{on.strftime('%Y-%m-%d')}.csv"
