"""CartRoster: every crash cart this device has logged, with check counts.

Holds identity and activity only. Freshness status is derived from the full
history at read time and is deliberately absent here.
"""

from protean.core.projector import on
from protean.fields import Identifier, Integer, Text
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from unitflow.domain import unitflow
from unitflow.entry.entry import LogEntry
from unitflow.entry.events import CrashCartChecked


def roster_key(cart_type, location, cart_number) -> str:
    return f"{cart_type}|{location}|{cart_number}"


@unitflow.projection
class CartRoster:
    cart_key = Identifier(identifier=True, required=True)
    cart_type = Text(sanitize=False)
    location = Text(required=True, sanitize=False)
    cart_number = Text(required=True, sanitize=False)
    check_count = Integer(default=0)
    last_checked_at = Integer()  # epoch milliseconds
    last_checked_by = Text(sanitize=False)


@unitflow.projector(projector_for=CartRoster, aggregates=[LogEntry])
class CartRosterProjector:
    @on(CrashCartChecked)
    def on_crash_cart_checked(self, event):
        repo = current_domain.repository_for(CartRoster)
        key = roster_key(event.cart_type, event.location, event.cart_number)

        try:
            row = repo.get(key)
        except ObjectNotFoundError:
            row = CartRoster(
                cart_key=key,
                cart_type=event.cart_type,
                location=event.location,
                cart_number=event.cart_number,
                check_count=0,
            )

        row.check_count = (row.check_count or 0) + 1
        # Restored backups may arrive out of order
        if row.last_checked_at is None or event.logged_at_ms >= row.last_checked_at:
            row.last_checked_at = event.logged_at_ms
            row.last_checked_by = event.checked_by
        repo.add(row)
