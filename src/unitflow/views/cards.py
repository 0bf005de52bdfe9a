"""Display-ready cards for the Today / This week lists.

Pure functions from entries to plain data; the presentation layer decides
how to draw them and is responsible for escaping.
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from unitflow.crash_cart.status import CartStatus
from unitflow.entry.entry import Severity

SUPPLY_BADGES = {
    Severity.HIGH.value: "high",
    Severity.MEDIUM.value: "med",
}


@dataclass(frozen=True)
class EntryCard:
    entry_id: str
    scope: str
    mode: str
    timestamp: int
    when: str
    headline: str
    meta: str
    detail: str
    badge_label: str
    badge_class: str
    status: str | None = None

    def as_dict(self) -> dict:
        return asdict(self)


def format_when(timestamp: int) -> str:
    return datetime.fromtimestamp((timestamp or 0) / 1000).strftime("%Y-%m-%d %H:%M")


def count_label(count: int) -> str:
    return f"{count} entr{'y' if count == 1 else 'ies'}"


def _join(parts) -> str:
    return " • ".join(part for part in parts if part)


def supply_card(entry, scope: str) -> EntryCard:
    severity = entry.severity or Severity.LOW.value
    return EntryCard(
        entry_id=str(entry.id),
        scope=scope,
        mode=entry.mode,
        timestamp=entry.timestamp,
        when=format_when(entry.timestamp),
        headline=entry.entry_type or "Entry",
        meta=_join(
            [
                format_when(entry.timestamp),
                entry.author,
                entry.shift,
                entry.unit,
                f"Qty: {entry.qty}" if entry.qty else "",
            ]
        ),
        detail=entry.notes or "",
        badge_label=severity,
        badge_class=SUPPLY_BADGES.get(severity, "low"),
    )


def crash_card(entry, scope: str, status: CartStatus) -> EntryCard:
    expirations = _join(
        [
            f"Central: {entry.central_new}" if entry.central_new else "",
            f"Med: {entry.med_new}" if entry.med_new else "",
        ]
    )
    return EntryCard(
        entry_id=str(entry.id),
        scope=scope,
        mode=entry.mode,
        timestamp=entry.timestamp,
        when=format_when(entry.timestamp),
        headline=_join([entry.cart_type, f"Cart {entry.cart_number}", entry.location]),
        meta=_join(
            [
                format_when(entry.timestamp),
                entry.reason,
                entry.checked_by,
                f"Seal: {entry.seal}" if entry.seal else "",
            ]
        ),
        detail=expirations or entry.notes or "",
        badge_label=status.value,
        badge_class=status.badge,
        status=status.value,
    )
