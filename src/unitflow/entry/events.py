"""Domain events for the LogEntry aggregate.

Each event is the immutable fact of one entry being appended to the log.
The cart roster projection listens to crash-cart checks.
"""

from protean.fields import Identifier, Integer, String, Text

from unitflow.domain import unitflow


@unitflow.event(part_of="LogEntry")
class SupplyRestockLogged:
    """A restock event was recorded at a supply room."""

    __version__ = 1

    entry_id = Identifier(required=True)
    logged_at_ms = Integer(required=True)
    author = Text(sanitize=False)
    unit = Text(sanitize=False)
    entry_type = Text(sanitize=False)
    severity = String(required=True, sanitize=False)
    qty = Text(sanitize=False)
    notes = Text(sanitize=False)


@unitflow.event(part_of="LogEntry")
class CrashCartChecked:
    """A crash cart was inspected, resealed or restocked."""

    __version__ = 1

    entry_id = Identifier(required=True)
    logged_at_ms = Integer(required=True)
    cart_type = Text(sanitize=False)
    location = Text(required=True, sanitize=False)
    cart_number = Text(required=True, sanitize=False)
    reason = Text(required=True, sanitize=False)
    central_new = Text(sanitize=False)
    med_new = Text(sanitize=False)
    checked_by = Text(required=True, sanitize=False)
    seal = Text(sanitize=False)
