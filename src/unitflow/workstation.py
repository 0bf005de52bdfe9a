"""Workstation: the application context a UI drives.

One instance per running device. It owns the ephemeral ``SelectionSession``
and turns UI requests into commands, derived views and exports. Every view
is rebuilt from the store on each call; nothing derived is kept between
renders.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from unitflow.crash_cart.alerts import build_alerts
from unitflow.crash_cart.status import CartKey, CartStatus, latest_expirations, status_for_cart
from unitflow.entry.backup import ImportBackup
from unitflow.entry.crash import LogCrashCartCheck
from unitflow.entry.entry import EntryMode, LogEntry
from unitflow.entry.phi import supply_phi_warning
from unitflow.entry.purge import PurgeLogbook
from unitflow.entry.repository import STORE_CEILING
from unitflow.entry.supply import LogSupplyRestock
from unitflow.exceptions import PERSISTENCE_ERRORS, StorageFault
from unitflow.export.presentation import to_presentation_view
from unitflow.export.table import export_filename, to_table
from unitflow.preferences.management import RememberAuthor, SetLocations
from unitflow.preferences.preferences import load_preferences
from unitflow.projections.cart_roster import CartRoster
from unitflow.selection.session import ListScope, SelectionSession
from unitflow.views.cards import EntryCard, crash_card, supply_card
from unitflow.views.windows import Window, filter_since, newest_first, oldest_first, window_start

logger = structlog.get_logger(__name__)

SELECTED = "selected"
ALL = "all"


@dataclass(frozen=True)
class Submission:
    entry: LogEntry
    phi_warning: bool = False


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: str
    media_type: str = "text/csv; charset=utf-8"


class Workstation:
    def __init__(self, clock=datetime.now):
        self._clock = clock
        self.session = SelectionSession.idle()

    # -------------------------------------------------------------------
    # Store access
    # -------------------------------------------------------------------
    @property
    def _entries(self):
        return current_domain.repository_for(LogEntry)

    def entries(self, mode=None) -> list[LogEntry]:
        if mode is None:
            return self._entries.all_entries()
        return self._entries.for_mode(EntryMode(mode).value)

    def _dispatch(self, command):
        """Process a command synchronously; storage failures become ``StorageFault``."""
        try:
            return current_domain.process(command, asynchronous=False)
        except PERSISTENCE_ERRORS as exc:
            logger.error("Write rejected by the device store", command=type(command).__name__, error=str(exc))
            raise StorageFault(f"Could not save to the device store: {exc}") from exc

    # -------------------------------------------------------------------
    # Submissions
    # -------------------------------------------------------------------
    def submit_supply_entry(self, **fields) -> Submission:
        entry_id = self._dispatch(LogSupplyRestock(**fields))
        entry = self._entries.get(entry_id)
        return Submission(entry=entry, phi_warning=supply_phi_warning(entry.unit, entry.notes))

    def submit_crash_entry(self, **fields) -> Submission:
        entry_id = self._dispatch(LogCrashCartCheck(**fields))
        return Submission(entry=self._entries.get(entry_id))

    def clear_all(self, requested_by=None) -> int:
        """Bulk purge. Also ends any selection in progress."""
        removed = self._dispatch(PurgeLogbook(requested_by=requested_by))
        self.session = SelectionSession.idle()
        return removed

    def import_backup(self, backup: str) -> int:
        return self._dispatch(ImportBackup(backup=backup))

    # -------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------
    def author(self) -> str:
        return load_preferences().author or ""

    def locations(self) -> list[str]:
        return load_preferences().location_list

    def remember_author(self, name: str) -> None:
        self._dispatch(RememberAuthor(author=name))

    def set_locations(self, payload: str) -> list[str]:
        return self._dispatch(SetLocations(locations=payload))

    # -------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------
    def _today(self):
        return self._clock().date()

    def _window_entries(self, scope: ListScope) -> list[LogEntry]:
        threshold = window_start(scope.window, self._clock())
        return newest_first(filter_since(self.entries(scope.mode), threshold))

    def _rendered_ids(self, scope: ListScope) -> set[str]:
        return {str(entry.id) for entry in self._window_entries(scope)}

    def rendered(self, scope) -> list[EntryCard]:
        """Cards for one list, newest first; crash cards carry their cart's status."""
        scope = ListScope(scope)
        entries = self._window_entries(scope)
        if scope.mode is EntryMode.SUPPLY:
            return [supply_card(entry, scope.value) for entry in entries]

        latest = latest_expirations(self.entries(EntryMode.CRASH))
        today = self._today()
        return [
            crash_card(entry, scope.value, status_for_cart(latest, CartKey.of(entry), today)) for entry in entries
        ]

    def rendered_today(self, mode) -> list[EntryCard]:
        return self.rendered(ListScope.for_list(EntryMode(mode), Window.TODAY))

    def rendered_week(self, mode) -> list[EntryCard]:
        return self.rendered(ListScope.for_list(EntryMode(mode), Window.WEEK))

    def current_alerts(self) -> list[str]:
        return build_alerts(latest_expirations(self.entries(EntryMode.CRASH)), self._today())

    def cart_status(self, cart_type, location, cart_number) -> CartStatus:
        latest = latest_expirations(self.entries(EntryMode.CRASH))
        return status_for_cart(latest, CartKey(cart_type, location, cart_number), self._today())

    def cart_statuses(self) -> list[dict]:
        """Every known cart with its current status, most recently checked first."""
        latest = latest_expirations(self.entries(EntryMode.CRASH))
        today = self._today()
        rows = current_domain.repository_for(CartRoster)._dao.query.limit(STORE_CEILING).all().items
        carts = []
        for row in sorted(rows, key=lambda r: r.last_checked_at or 0, reverse=True):
            key = CartKey(row.cart_type or "", row.location or "", row.cart_number or "")
            known = latest.get(key)
            carts.append(
                {
                    "cart_type": key.cart_type,
                    "location": key.location,
                    "cart_number": key.cart_number,
                    "check_count": row.check_count or 0,
                    "last_checked_at": row.last_checked_at,
                    "last_checked_by": row.last_checked_by or "",
                    "central_new": known.central_new if known else None,
                    "med_new": known.med_new if known else None,
                    "status": status_for_cart(latest, key, today).value,
                }
            )
        return carts

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def begin_selection(self, scope) -> dict:
        self.session = self.session.begin(ListScope(scope))
        logger.debug("Selection started", scope=self.session.scope.value)
        return self.selection_state()

    def cancel_selection(self) -> dict:
        self.session = self.session.cancel()
        logger.debug("Selection cancelled")
        return self.selection_state()

    def navigate_away(self, target=None) -> dict:
        """Any screen or tab change ends the selection unconditionally."""
        if self.session.active:
            logger.debug("Selection ended by navigation", target=target)
        self.session = SelectionSession.idle()
        return self.selection_state()

    def toggle_selection(self, entry_id: str, scope, checked: bool | None = None) -> bool:
        item_scope = ListScope(scope)
        rendered_ids = self._rendered_ids(item_scope) if item_scope == self.session.scope else set()
        self.session, accepted = self.session.toggle(str(entry_id), item_scope, rendered_ids, checked)
        if not accepted:
            logger.debug(
                "Selection toggle rejected",
                entry_id=str(entry_id),
                item_scope=item_scope.value,
                active_scope=self.session.scope.value if self.session.scope else None,
            )
        return accepted

    def _synced_session(self) -> SelectionSession:
        if self.session.active and self.session.selected:
            self.session = self.session.prune(self._rendered_ids(self.session.scope))
        return self.session

    def selection_state(self) -> dict:
        return self._synced_session().as_dict()

    def selected_entries(self) -> list[LogEntry]:
        selected = self._synced_session().selected
        if not selected:
            return []
        return oldest_first(entry for entry in self.entries() if str(entry.id) in selected)

    # -------------------------------------------------------------------
    # Export / print / table
    # -------------------------------------------------------------------
    def _export_set(self, target: str, mode=None) -> tuple[list[LogEntry], str]:
        if target == SELECTED:
            return self.selected_entries(), "unitflow_selected"
        if target == ALL:
            if mode is None:
                return oldest_first(self.entries()), "unitflow_all"
            mode = EntryMode(mode)
            return oldest_first(self.entries(mode)), f"unitflow_{mode.value}_all"
        raise ValueError(f"Unknown export target: {target}")

    def request_export(self, target: str, mode=None) -> ExportArtifact | None:
        entries, prefix = self._export_set(target, mode)
        if not entries:
            return None
        logger.info("CSV export prepared", target=target, mode=mode, count=len(entries))
        return ExportArtifact(filename=export_filename(prefix), content=to_table(entries))

    def request_print(self, target: str, mode=None) -> str | None:
        entries, _ = self._export_set(target, mode)
        if not entries:
            return None
        if target == SELECTED:
            title = "UnitFlow - Selected"
        else:
            title = f"UnitFlow - {EntryMode(mode).value.capitalize()} log" if mode else "UnitFlow - All entries"
        return to_presentation_view(entries, title=title, generated_at=self._clock())

    def request_table_view(self) -> str | None:
        return self.request_print(SELECTED)
