"""Crash-cart freshness derived from expiration dates.

A cart is identified by ``CartKey(cart_type, location, cart_number)``. Its
status comes from the latest known Central and Med Box expiration dates seen
anywhere in its history, whatever the display window. Status is a pure
function of that history and today's date; nothing here is cached or stored.

Thresholds, on the most urgent of the two day offsets:
    < 0      EXPIRED
    0..7     ACTION
    8..30    ATTN
    > 30     READY
    no dates UNVERIFIED
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import NamedTuple

ACTION_WITHIN_DAYS = 7
ATTENTION_WITHIN_DAYS = 30


class CartStatus(Enum):
    UNVERIFIED = "UNVERIFIED"
    READY = "READY"
    ATTN = "ATTN"
    ACTION = "ACTION"
    EXPIRED = "EXPIRED"

    @property
    def badge(self) -> str:
        return _BADGES[self]


_BADGES = {
    CartStatus.UNVERIFIED: "unv",
    CartStatus.READY: "ready",
    CartStatus.ATTN: "attn",
    CartStatus.ACTION: "crit",
    CartStatus.EXPIRED: "crit",
}


class CartKey(NamedTuple):
    cart_type: str
    location: str
    cart_number: str

    @classmethod
    def of(cls, entry) -> "CartKey":
        return cls(entry.cart_type or "", entry.location or "", entry.cart_number or "")

    @property
    def label(self) -> str:
        return f"{self.cart_type} Cart {self.cart_number} ({self.location})"


@dataclass
class LatestExpirations:
    """Most recent non-empty expiration dates for one cart.

    Central and Med Box are tracked separately, each with the timestamp of
    the entry that supplied it.
    """

    central_new: str | None = None
    central_at: int | None = None
    med_new: str | None = None
    med_at: int | None = None

    def observe(self, entry) -> None:
        timestamp = entry.timestamp or 0
        if entry.central_new and (self.central_at is None or timestamp >= self.central_at):
            self.central_new = entry.central_new
            self.central_at = timestamp
        if entry.med_new and (self.med_at is None or timestamp >= self.med_at):
            self.med_new = entry.med_new
            self.med_at = timestamp

    @property
    def has_dates(self) -> bool:
        return bool(self.central_new or self.med_new)


def latest_expirations(entries) -> dict[CartKey, LatestExpirations]:
    """Aggregate the latest expirations per cart over a full crash history.

    Supply entries are ignored. Ties on timestamp go to the entry scanned last.
    """
    latest: dict[CartKey, LatestExpirations] = {}
    for entry in entries:
        if not entry.is_crash:
            continue
        latest.setdefault(CartKey.of(entry), LatestExpirations()).observe(entry)
    return latest


def parse_iso_date(value) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        return None


def day_offset(value, today: date) -> int | None:
    """Signed whole days from ``today`` to an ISO date; ``None`` if unusable."""
    expires = parse_iso_date(value)
    if expires is None:
        return None
    return (expires - today).days


def status_for_offset(offset: int) -> CartStatus:
    if offset < 0:
        return CartStatus.EXPIRED
    if offset <= ACTION_WITHIN_DAYS:
        return CartStatus.ACTION
    if offset <= ATTENTION_WITHIN_DAYS:
        return CartStatus.ATTN
    return CartStatus.READY


def derive_status(central_new, med_new, today: date | None = None) -> CartStatus:
    today = today or date.today()
    offsets = [
        offset for offset in (day_offset(central_new, today), day_offset(med_new, today)) if offset is not None
    ]
    if not offsets:
        return CartStatus.UNVERIFIED
    return status_for_offset(min(offsets))


def status_for_cart(latest: dict[CartKey, LatestExpirations], key: CartKey, today: date | None = None) -> CartStatus:
    """Status of one cart; a cart with no crash history is UNVERIFIED."""
    known = latest.get(key)
    if known is None:
        return CartStatus.UNVERIFIED
    return derive_status(known.central_new, known.med_new, today)
