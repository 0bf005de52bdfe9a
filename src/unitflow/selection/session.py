"""Multi-select session over exactly one rendered list.

State machine::

    Idle --begin(scope)--> Selecting(scope)
    Selecting --cancel / purge / navigation--> Idle

While selecting, a toggle is accepted only for an entry rendered in the
session's own scope. Everything else (toggles while idle, items from another
list, ids that are no longer on screen) is rejected and leaves the session as
it was. ``SelectionSession`` is an immutable value; every transition returns a
new one.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from unitflow.entry.entry import EntryMode
from unitflow.views.windows import Window


class ListScope(Enum):
    SUPPLY_TODAY = "supply-today"
    SUPPLY_WEEK = "supply-week"
    CRASH_TODAY = "crash-today"
    CRASH_WEEK = "crash-week"

    @property
    def mode(self) -> EntryMode:
        return EntryMode(self.value.split("-")[0])

    @property
    def window(self) -> Window:
        return Window(self.value.split("-")[1])

    @classmethod
    def for_list(cls, mode: EntryMode, window: Window) -> "ListScope":
        return cls(f"{mode.value}-{window.value}")


@dataclass(frozen=True)
class SelectionSession:
    active: bool = False
    scope: ListScope | None = None
    selected: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def idle(cls) -> "SelectionSession":
        return cls()

    @property
    def count(self) -> int:
        return len(self.selected)

    @property
    def action_bar_visible(self) -> bool:
        return self.active and self.count > 0

    def begin(self, scope: ListScope) -> "SelectionSession":
        return SelectionSession(active=True, scope=scope, selected=frozenset())

    def cancel(self) -> "SelectionSession":
        return SelectionSession.idle()

    def accepts(self, entry_id: str, item_scope: ListScope, rendered_ids) -> bool:
        return self.active and item_scope == self.scope and entry_id in rendered_ids

    def toggle(
        self, entry_id: str, item_scope: ListScope, rendered_ids, checked: bool | None = None
    ) -> tuple["SelectionSession", bool]:
        """Flip (or set, when ``checked`` is given) one entry's membership.

        Returns the resulting session and whether the toggle was accepted.
        """
        if not self.accepts(entry_id, item_scope, rendered_ids):
            return self, False

        if checked is None:
            checked = entry_id not in self.selected
        selected = self.selected | {entry_id} if checked else self.selected - {entry_id}
        return replace(self, selected=frozenset(selected)), True

    def prune(self, rendered_ids) -> "SelectionSession":
        """Drop members that are no longer rendered in the session's list."""
        kept = self.selected & frozenset(rendered_ids)
        if kept == self.selected:
            return self
        return replace(self, selected=kept)

    def as_dict(self) -> dict:
        return {
            "active": self.active,
            "scope": self.scope.value if self.scope else "",
            "count": self.count,
            "action_bar_visible": self.action_bar_visible,
        }
