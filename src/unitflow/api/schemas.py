"""Pydantic request/response schemas for the UnitFlow API."""

from __future__ import annotations

from pydantic import BaseModel

from unitflow.selection.session import ListScope

# --- Entry Request Schemas ---


class LogSupplyRestockRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "author": "J. Rivera",
                    "shift": "Day",
                    "unit": "4 South",
                    "entry_type": "Replenishment",
                    "severity": "Medium",
                    "qty": "2 cases",
                    "notes": "Saline flushes restocked from central supply",
                }
            ]
        }
    }

    author: str | None = None
    shift: str | None = None
    unit: str | None = None
    entry_type: str | None = None
    severity: str | None = None
    qty: str | None = None
    notes: str | None = None


class LogCrashCartCheckRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cart_type": "Adult",
                    "location": "ER – Main",
                    "cart_number": "12",
                    "reason": "Expiration swap",
                    "central_old": "2026-10-20",
                    "central_new": "2027-04-30",
                    "med_old": "2026-10-25",
                    "med_new": "2027-03-31",
                    "checked_by": "J. Rivera",
                    "seal": "A-448120",
                }
            ]
        }
    }

    cart_type: str | None = None
    location: str | None = None
    cart_number: str | None = None
    reason: str | None = None
    central_old: str | None = None
    central_new: str | None = None
    med_old: str | None = None
    med_new: str | None = None
    checked_by: str | None = None
    seal: str | None = None
    notes: str | None = None


class ImportBackupRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "backup": '[{"id": "1739800000000-ab12cd", "mode": "supply", "ts": 1739800000000, '
                    '"type": "Replenishment", "severity": "Low"}]'
                }
            ]
        }
    }

    backup: str


# --- Selection Request Schemas ---


class BeginSelectionRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"scope": "supply-today"}]}}

    scope: ListScope


class ToggleSelectionRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"entry_id": "e-001", "scope": "supply-today"}]}}

    entry_id: str
    scope: ListScope
    checked: bool | None = None


class NavigationRequest(BaseModel):
    target: str | None = None


# --- Preference Request Schemas ---


class UpdatePreferencesRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"author": "J. Rivera", "locations": ["ER – Main", "Cath Lab"]}]}
    }

    author: str | None = None
    locations: list[str] | None = None


# --- Response Schemas ---


class SubmissionResponse(BaseModel):
    entry_id: str
    phi_warning: bool = False


class CountResponse(BaseModel):
    count: int


class EntryCardResponse(BaseModel):
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


class EntryListResponse(BaseModel):
    label: str
    entries: list[EntryCardResponse]


class AlertsResponse(BaseModel):
    alerts: list[str]


class CartStatusResponse(BaseModel):
    cart_type: str
    location: str
    cart_number: str
    check_count: int
    last_checked_at: int | None = None
    last_checked_by: str = ""
    central_new: str | None = None
    med_new: str | None = None
    status: str


class SelectionStateResponse(BaseModel):
    active: bool
    scope: str
    count: int
    action_bar_visible: bool


class ToggleResponse(SelectionStateResponse):
    accepted: bool


class PreferencesResponse(BaseModel):
    author: str
    locations: list[str]


class StatusResponse(BaseModel):
    status: str = "ok"
