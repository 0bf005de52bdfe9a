"""ImportBackup: restore entries from the device's JSON log layout.

The layout is a JSON array of objects carrying ``id``, ``mode``, ``ts`` and
the camelCase field names listed in ``EXTERNAL_NAMES``. Anything that does
not decode to an array reads as an empty backup. Entries whose id already
exists are skipped; identifiers are never reused.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Text
from protean.utils.globals import current_domain

from unitflow.domain import unitflow
from unitflow.entry.entry import CRASH_FIELDS, EXTERNAL_NAMES, SUPPLY_FIELDS, EntryMode, LogEntry

logger = structlog.get_logger(__name__)


def parse_backup(raw) -> list[dict]:
    """Decode a backup payload; malformed input yields an empty list."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Backup payload is not valid JSON, nothing to import")
        return []

    if not isinstance(value, list):
        logger.warning("Backup payload is not a list of entries", payload_type=type(value).__name__)
        return []
    return [item for item in value if isinstance(item, dict)]


def _timestamp(item) -> int:
    try:
        return int(item.get("ts") or 0)
    except (TypeError, ValueError):
        return 0


def entry_from_backup(item: dict) -> LogEntry | None:
    """Rebuild one entry, keeping only the fields of its own mode."""
    mode = item.get("mode")
    if mode == EntryMode.SUPPLY.value:
        fields, factory = SUPPLY_FIELDS + ("notes",), LogEntry.record_supply
    elif mode == EntryMode.CRASH.value:
        fields, factory = CRASH_FIELDS + ("notes",), LogEntry.record_crash
    else:
        return None

    values = {name: item.get(EXTERNAL_NAMES[name]) for name in fields}
    return factory(**values, timestamp=_timestamp(item), entry_id=str(item["id"]) if item.get("id") else None)


@unitflow.command(part_of="LogEntry")
class ImportBackup:
    backup = Text(required=True, sanitize=False)


@unitflow.command_handler(part_of=LogEntry)
class ImportBackupHandler:
    @handle(ImportBackup)
    def import_backup(self, command):
        repo = current_domain.repository_for(LogEntry)
        known = repo.known_ids()

        imported = 0
        skipped = 0
        for item in parse_backup(command.backup):
            if str(item.get("id") or "") in known:
                skipped += 1
                continue
            try:
                entry = entry_from_backup(item)
            except ValidationError as exc:
                logger.warning("Skipping unreadable backup entry", entry_id=item.get("id"), error=str(exc))
                entry = None
            if entry is None:
                skipped += 1
                continue

            repo.append(entry)
            known.add(str(entry.id))
            imported += 1

        logger.info("Backup imported", imported=imported, skipped=skipped)
        return imported
