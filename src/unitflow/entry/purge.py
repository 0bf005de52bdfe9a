"""PurgeLogbook: clear every entry from the device. Irreversible."""

import structlog
from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from unitflow.domain import unitflow
from unitflow.entry.entry import LogEntry
from unitflow.entry.repository import STORE_CEILING
from unitflow.projections.cart_roster import CartRoster

logger = structlog.get_logger(__name__)


@unitflow.command(part_of="LogEntry")
class PurgeLogbook:
    requested_by = Text(sanitize=False)


@unitflow.command_handler(part_of=LogEntry)
class PurgeLogbookHandler:
    @handle(PurgeLogbook)
    def purge_logbook(self, command):
        removed = current_domain.repository_for(LogEntry).clear()

        roster_repo = current_domain.repository_for(CartRoster)
        for row in roster_repo._dao.query.limit(STORE_CEILING).all().items:
            roster_repo._dao.delete(row)

        logger.warning("Logbook purged", removed=removed, requested_by=command.requested_by)
        return removed
