"""LogCrashCartCheck: append a crash-cart inspection entry.

Rejected without any write when location, cart number, reason or checked-by
is empty after trimming. An empty checked-by falls back to the remembered
author before that check runs.
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
class LogCrashCartCheck:
    cart_type = Text(sanitize=False)
    location = Text(sanitize=False)
    cart_number = Text(sanitize=False)
    reason = Text(sanitize=False)
    central_old = Text(sanitize=False)
    central_new = Text(sanitize=False)
    med_old = Text(sanitize=False)
    med_new = Text(sanitize=False)
    checked_by = Text(sanitize=False)
    seal = Text(sanitize=False)
    notes = Text(sanitize=False)


@unitflow.command_handler(part_of=LogEntry)
class LogCrashCartCheckHandler:
    @handle(LogCrashCartCheck)
    def log_crash_cart_check(self, command):
        preferences = load_preferences()
        checked_by = clean(command.checked_by)

        entry = LogEntry.record_crash(
            cart_type=command.cart_type,
            location=command.location,
            cart_number=command.cart_number,
            reason=command.reason,
            central_old=command.central_old,
            central_new=command.central_new,
            med_old=command.med_old,
            med_new=command.med_new,
            checked_by=checked_by or preferences.author,
            seal=command.seal,
            notes=command.notes,
        )

        if checked_by:
            preferences.remember_author(checked_by)
            current_domain.repository_for(DevicePreferences).add(preferences)

        current_domain.repository_for(LogEntry).append(entry)

        logger.info(
            "Crash cart check logged",
            entry_id=str(entry.id),
            cart_type=entry.cart_type,
            cart_number=entry.cart_number,
            location=entry.location,
        )
        return str(entry.id)
