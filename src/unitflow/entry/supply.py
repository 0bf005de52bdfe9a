"""LogSupplyRestock: append a supply-room restock entry.

A non-empty author is remembered for the next submission; an empty one falls
back to the remembered name. Nothing else is validated.
"""

import structlog
from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from unitflow.domain import unitflow
from unitflow.entry.entry import LogEntry, clean
from unitflow.preferences.preferences import DevicePreferences, load_preferences

logger = structlog.get_logger(__name__)


@unitflow.command(part_of="LogEntry")
class LogSupplyRestock:
    author = Text(sanitize=False)
    shift = Text(sanitize=False)
    unit = Text(sanitize=False)
    entry_type = Text(sanitize=False)
    severity = Text(sanitize=False)
    qty = Text(sanitize=False)
    notes = Text(sanitize=False)


@unitflow.command_handler(part_of=LogEntry)
class LogSupplyRestockHandler:
    @handle(LogSupplyRestock)
    def log_supply_restock(self, command):
        preferences = load_preferences()
        author = clean(command.author)
        if author:
            preferences.remember_author(author)
            current_domain.repository_for(DevicePreferences).add(preferences)

        entry = LogEntry.record_supply(
            author=author or preferences.author,
            shift=command.shift,
            unit=command.unit,
            entry_type=command.entry_type,
            severity=command.severity,
            qty=command.qty,
            notes=command.notes,
        )
        current_domain.repository_for(LogEntry).append(entry)

        logger.info(
            "Supply restock logged",
            entry_id=str(entry.id),
            severity=entry.severity,
            unit=entry.unit,
        )
        return str(entry.id)
