"""DevicePreferences aggregate: the per-device remembered values.

One row keyed ``device`` holds the last author / checked-by name and the
ordered list of cart locations offered by the crash form. Missing or
malformed values always read back as defaults.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from unitflow.domain import unitflow

logger = structlog.get_logger(__name__)

DEVICE_KEY = "device"

DEFAULT_LOCATIONS = [
    "4th Floor Tower – 4 South",
    "4th Floor Tower – 4 East",
    "3rd Floor Tower – 3 South",
    "3rd Floor Tower – 3 East",
    "ICU Pavilion – Pav A",
    "ICU Pavilion – Pav B",
    "ICU Pavilion – Pav C",
    "ER – Main",
    "X-Ray Dept",
    "Cath Lab",
    "Backup Cart – Central",
]

# Crash reasons for which the form asks for the new expiration dates
EXPIRATION_REASONS = ("Expiration swap", "Routine reseal (seal broken)")


def requires_expiration_dates(reason) -> bool:
    return reason in EXPIRATION_REASONS


def parse_locations(raw) -> list[str]:
    """Decode the stored location list, falling back to the built-in default."""
    if not raw:
        return list(DEFAULT_LOCATIONS)
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Stored location list is not valid JSON, using defaults")
        return list(DEFAULT_LOCATIONS)

    if not isinstance(value, list) or not value:
        return list(DEFAULT_LOCATIONS)
    return [str(location) for location in value]


def decode_locations(raw) -> list[str]:
    """Decode a submitted location list. Anything but a JSON array of strings is rejected."""
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ValidationError({"locations": ["Locations must be a JSON array of names"]}) from exc

    if not isinstance(value, list) or not all(isinstance(location, str) for location in value):
        raise ValidationError({"locations": ["Locations must be a JSON array of names"]})
    return value


@unitflow.aggregate
class DevicePreferences:
    device_key = Identifier(identifier=True, required=True)
    author = Text(sanitize=False, default="")
    locations = Text(sanitize=False)  # JSON array of location names

    @classmethod
    def blank(cls):
        return cls(device_key=DEVICE_KEY, author="", locations=None)

    def remember_author(self, name):
        name = (name or "").strip()
        if name:
            self.author = name

    def set_locations(self, locations):
        cleaned = [str(location).strip() for location in locations or [] if str(location).strip()]
        self.locations = json.dumps(cleaned) if cleaned else None

    @property
    def location_list(self) -> list[str]:
        return parse_locations(self.locations)


def load_preferences() -> DevicePreferences:
    """Fetch the device row, or an unsaved blank one when nothing is stored yet."""
    try:
        return current_domain.repository_for(DevicePreferences).get(DEVICE_KEY)
    except ObjectNotFoundError:
        return DevicePreferences.blank()
