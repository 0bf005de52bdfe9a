"""Record store for LogEntry aggregates."""

from unitflow.domain import unitflow
from unitflow.entry.entry import LogEntry

# Queries are otherwise capped by the provider's default page size; a single
# device never gets close to this many entries.
STORE_CEILING = 1_000_000


@unitflow.repository(part_of=LogEntry)
class LogEntryRepository:
    """Append-only access to the device log.

    Reads return entries in no particular order; callers sort by
    ``timestamp`` themselves.
    """

    def append(self, entry: LogEntry) -> None:
        self.add(entry)

    def all_entries(self) -> list[LogEntry]:
        return self._dao.query.limit(STORE_CEILING).all().items

    def for_mode(self, mode: str) -> list[LogEntry]:
        return self._dao.query.filter(mode=mode).limit(STORE_CEILING).all().items

    def known_ids(self) -> set[str]:
        return {str(entry.id) for entry in self.all_entries()}

    def clear(self) -> int:
        """Delete every entry; returns how many were removed."""
        entries = self.all_entries()
        for entry in entries:
            self._dao.delete(entry)
        return len(entries)
