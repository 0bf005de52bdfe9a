"""UnitFlow bounded context: supply restock and crash-cart inspection logs.

Both record streams share one append-only store on the device. Crash-cart
freshness (status badges and expiry alerts) is derived from that history on
every read and never persisted.
"""

from protean.domain import Domain

from unitflow.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
unitflow = Domain(name="unitflow")
