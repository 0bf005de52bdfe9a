"""Expiry alerts for the crash-cart screen.

Each cart contributes at most one alert per component (Central, Med Box) when
that component is expired or due within 30 days. The list is ordered by
urgency and capped so the panel stays readable.
"""

from dataclasses import dataclass
from datetime import date

from unitflow.crash_cart.status import (
    ATTENTION_WITHIN_DAYS,
    CartKey,
    LatestExpirations,
    day_offset,
)

MAX_ALERTS = 6

COMPONENTS = (
    ("Central", "central_new"),
    ("Med Box", "med_new"),
)


@dataclass(frozen=True)
class CartAlert:
    cart: CartKey
    component: str
    days: int
    expires_on: str

    @property
    def expired(self) -> bool:
        return self.days < 0

    @property
    def text(self) -> str:
        if self.expired:
            return f"{self.cart.label} - {self.component} EXPIRED ({self.expires_on})"
        unit = "day" if self.days == 1 else "days"
        return f"{self.cart.label} - {self.component} expires in {self.days} {unit} ({self.expires_on})"


def collect_alerts(latest: dict[CartKey, LatestExpirations], today: date | None = None) -> list[CartAlert]:
    """Every alert, most urgent first."""
    today = today or date.today()
    alerts = []
    for key, expirations in latest.items():
        if not expirations.has_dates:
            continue
        for component, attribute in COMPONENTS:
            expires_on = getattr(expirations, attribute)
            days = day_offset(expires_on, today)
            if days is None or days > ATTENTION_WITHIN_DAYS:
                continue
            alerts.append(CartAlert(cart=key, component=component, days=days, expires_on=expires_on))

    component_order = {component: index for index, (component, _) in enumerate(COMPONENTS)}
    alerts.sort(key=lambda alert: (alert.days, alert.cart.label, component_order[alert.component]))
    return alerts


def build_alerts(
    latest: dict[CartKey, LatestExpirations], today: date | None = None, limit: int = MAX_ALERTS
) -> list[str]:
    return [alert.text for alert in collect_alerts(latest, today)[:limit]]
