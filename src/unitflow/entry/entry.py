"""LogEntry aggregate: one immutable supply restock or crash-cart check.

Both record shapes share a single store, discriminated by ``mode``. An entry
is written once by a factory and never changed afterwards; the only way
entries leave the store is the bulk purge.

Free text is kept exactly as typed, with no length cap and no markup
escaping; escaping belongs to the HTML view.

Field groups:
    supply: author, shift, unit, entry_type, severity, qty, notes
    crash:  cart_type, location, cart_number, reason, central_old,
            central_new, med_old, med_new, checked_by, seal, notes
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Integer, String, Text

from unitflow.domain import unitflow
from unitflow.entry.events import CrashCartChecked, SupplyRestockLogged


class EntryMode(Enum):
    SUPPLY = "supply"
    CRASH = "crash"


class Severity(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


DEFAULT_SUPPLY_TYPE = "Replenishment"
DEFAULT_CART_TYPE = "Adult"

SUPPLY_FIELDS = ("author", "shift", "unit", "entry_type", "severity", "qty")
CRASH_FIELDS = (
    "cart_type",
    "location",
    "cart_number",
    "reason",
    "central_old",
    "central_new",
    "med_old",
    "med_new",
    "checked_by",
    "seal",
)

# Field names used by the on-device JSON layout and the CSV export
EXTERNAL_NAMES = {
    "author": "author",
    "shift": "shift",
    "unit": "unit",
    "entry_type": "type",
    "severity": "severity",
    "qty": "qty",
    "notes": "notes",
    "cart_type": "cartType",
    "location": "location",
    "cart_number": "cartNumber",
    "reason": "reason",
    "central_old": "centralOld",
    "central_new": "centralNew",
    "med_old": "medOld",
    "med_new": "medNew",
    "checked_by": "checkedBy",
    "seal": "seal",
}

REQUIRED_CRASH_FIELDS = {
    "location": "Location",
    "cart_number": "Cart #",
    "reason": "Reason",
    "checked_by": "Checked By",
}


def now_ms() -> int:
    """Current instant in epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


def clean(value) -> str:
    """Trim a free-text form value; ``None`` becomes the empty string."""
    if value is None:
        return ""
    return str(value).strip()


def _identity(entry_id) -> dict:
    # Restored backups keep their original identifiers
    return {"id": entry_id} if entry_id else {}


def coerce_severity(value) -> str:
    try:
        return Severity(clean(value)).value
    except ValueError:
        return Severity.LOW.value


@unitflow.aggregate
class LogEntry:
    mode = String(required=True, choices=EntryMode, sanitize=False)
    timestamp = Integer(required=True)  # epoch milliseconds

    # Supply restock
    author = Text(sanitize=False)
    shift = Text(sanitize=False)
    unit = Text(sanitize=False)
    entry_type = Text(sanitize=False)
    severity = String(choices=Severity, sanitize=False)
    qty = Text(sanitize=False)

    # Crash-cart check
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

    # Shared
    notes = Text(sanitize=False)

    @invariant.post
    def fields_must_belong_to_mode(self):
        foreign = CRASH_FIELDS if self.mode == EntryMode.SUPPLY.value else SUPPLY_FIELDS
        populated = [name for name in foreign if getattr(self, name, None)]
        if populated:
            raise ValidationError({name: [f"Not a field of {self.mode} entries"] for name in populated})

    @property
    def is_crash(self) -> bool:
        return self.mode == EntryMode.CRASH.value

    def field_value(self, name: str) -> str:
        return getattr(self, name, None) or ""

    # -------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------
    @classmethod
    def record_supply(
        cls,
        author=None,
        shift=None,
        unit=None,
        entry_type=None,
        severity=None,
        qty=None,
        notes=None,
        timestamp=None,
        entry_id=None,
    ):
        """Record a supply restock. Only trims; every submission is accepted."""
        entry = cls(
            **_identity(entry_id),
            mode=EntryMode.SUPPLY.value,
            timestamp=timestamp if timestamp is not None else now_ms(),
            author=clean(author),
            shift=clean(shift),
            unit=clean(unit),
            entry_type=clean(entry_type) or DEFAULT_SUPPLY_TYPE,
            severity=coerce_severity(severity),
            qty=clean(qty),
            notes=clean(notes),
        )
        entry.raise_(
            SupplyRestockLogged(
                entry_id=str(entry.id),
                logged_at_ms=entry.timestamp,
                author=entry.author,
                unit=entry.unit,
                entry_type=entry.entry_type,
                severity=entry.severity,
                qty=entry.qty,
                notes=entry.notes,
            )
        )
        return entry

    @classmethod
    def record_crash(
        cls,
        cart_type=None,
        location=None,
        cart_number=None,
        reason=None,
        central_old=None,
        central_new=None,
        med_old=None,
        med_new=None,
        checked_by=None,
        seal=None,
        notes=None,
        timestamp=None,
        entry_id=None,
    ):
        """Record a crash-cart check.

        Location, cart number, reason and checked-by are mandatory after
        trimming. Expiration dates are kept verbatim; an unparseable date is
        tolerated here and simply ignored by the status engine.
        """
        values = {
            "cart_type": clean(cart_type) or DEFAULT_CART_TYPE,
            "location": clean(location),
            "cart_number": clean(cart_number),
            "reason": clean(reason),
            "central_old": clean(central_old),
            "central_new": clean(central_new),
            "med_old": clean(med_old),
            "med_new": clean(med_new),
            "checked_by": clean(checked_by),
            "seal": clean(seal),
        }

        missing = {
            name: [f"{label} is required"] for name, label in REQUIRED_CRASH_FIELDS.items() if not values[name]
        }
        if missing:
            raise ValidationError(missing)

        entry = cls(
            **_identity(entry_id),
            mode=EntryMode.CRASH.value,
            timestamp=timestamp if timestamp is not None else now_ms(),
            notes=clean(notes),
            **values,
        )
        entry.raise_(
            CrashCartChecked(
                entry_id=str(entry.id),
                logged_at_ms=entry.timestamp,
                cart_type=entry.cart_type,
                location=entry.location,
                cart_number=entry.cart_number,
                reason=entry.reason,
                central_new=entry.central_new,
                med_new=entry.med_new,
                checked_by=entry.checked_by,
                seal=entry.seal,
            )
        )
        return entry
