"""FastAPI routes for the UnitFlow workstation.

Routes translate between Pydantic schemas and the ``Workstation`` operations.
One module-level workstation backs every request, so the selection session
lives exactly as long as the server process.
"""

import json
from typing import Literal

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from unitflow.api.schemas import (
    AlertsResponse,
    BeginSelectionRequest,
    CartStatusResponse,
    CountResponse,
    EntryCardResponse,
    EntryListResponse,
    ImportBackupRequest,
    LogCrashCartCheckRequest,
    LogSupplyRestockRequest,
    NavigationRequest,
    PreferencesResponse,
    SelectionStateResponse,
    SubmissionResponse,
    ToggleResponse,
    ToggleSelectionRequest,
    UpdatePreferencesRequest,
)
from unitflow.entry.entry import EntryMode
from unitflow.exceptions import StorageFault
from unitflow.views.cards import count_label
from unitflow.workstation import Workstation

entry_router = APIRouter(prefix="/entries", tags=["entries"])
crash_cart_router = APIRouter(tags=["crash carts"])
selection_router = APIRouter(prefix="/selection", tags=["selection"])
navigation_router = APIRouter(tags=["selection"])
export_router = APIRouter(prefix="/exports", tags=["exports"])
preferences_router = APIRouter(prefix="/preferences", tags=["preferences"])

_workstation = Workstation()


def get_workstation() -> Workstation:
    return _workstation


async def storage_fault_handler(request: Request, exc: StorageFault) -> JSONResponse:
    return JSONResponse(status_code=507, content={"error": str(exc)})


def register_storage_fault_handler(app) -> None:
    app.add_exception_handler(StorageFault, storage_fault_handler)


def _entry_list(cards) -> EntryListResponse:
    return EntryListResponse(
        label=count_label(len(cards)),
        entries=[EntryCardResponse(**card.as_dict()) for card in cards],
    )


# --- Entry endpoints ---


@entry_router.post("/supply", status_code=201, response_model=SubmissionResponse)
async def log_supply_restock(
    body: LogSupplyRestockRequest, workstation: Workstation = Depends(get_workstation)
) -> SubmissionResponse:
    """Append a supply restock entry; flags notes that look like patient data."""
    submission = workstation.submit_supply_entry(**body.model_dump())
    return SubmissionResponse(entry_id=str(submission.entry.id), phi_warning=submission.phi_warning)


@entry_router.post("/crash", status_code=201, response_model=SubmissionResponse)
async def log_crash_cart_check(
    body: LogCrashCartCheckRequest, workstation: Workstation = Depends(get_workstation)
) -> SubmissionResponse:
    """Append a crash-cart check entry."""
    submission = workstation.submit_crash_entry(**body.model_dump())
    return SubmissionResponse(entry_id=str(submission.entry.id))


@entry_router.post("/import", response_model=CountResponse)
async def import_backup(body: ImportBackupRequest, workstation: Workstation = Depends(get_workstation)):
    return CountResponse(count=workstation.import_backup(body.backup))


@entry_router.delete("", response_model=CountResponse)
async def purge_logbook(requested_by: str | None = None, workstation: Workstation = Depends(get_workstation)):
    """Remove every entry from the device. Irreversible."""
    return CountResponse(count=workstation.clear_all(requested_by=requested_by))


@entry_router.get("/{mode}/today", response_model=EntryListResponse)
async def entries_today(mode: EntryMode, workstation: Workstation = Depends(get_workstation)):
    return _entry_list(workstation.rendered_today(mode))


@entry_router.get("/{mode}/week", response_model=EntryListResponse)
async def entries_this_week(mode: EntryMode, workstation: Workstation = Depends(get_workstation)):
    return _entry_list(workstation.rendered_week(mode))


# --- Crash cart endpoints ---


@crash_cart_router.get("/alerts", response_model=AlertsResponse)
async def expiry_alerts(workstation: Workstation = Depends(get_workstation)):
    return AlertsResponse(alerts=workstation.current_alerts())


@crash_cart_router.get("/carts", response_model=list[CartStatusResponse])
async def cart_statuses(workstation: Workstation = Depends(get_workstation)):
    return [CartStatusResponse(**cart) for cart in workstation.cart_statuses()]


# --- Selection endpoints ---


@selection_router.get("", response_model=SelectionStateResponse)
async def selection_state(workstation: Workstation = Depends(get_workstation)):
    return SelectionStateResponse(**workstation.selection_state())


@selection_router.post("/begin", response_model=SelectionStateResponse)
async def begin_selection(body: BeginSelectionRequest, workstation: Workstation = Depends(get_workstation)):
    return SelectionStateResponse(**workstation.begin_selection(body.scope))


@selection_router.post("/cancel", response_model=SelectionStateResponse)
async def cancel_selection(workstation: Workstation = Depends(get_workstation)):
    return SelectionStateResponse(**workstation.cancel_selection())


@selection_router.post("/toggle", response_model=ToggleResponse)
async def toggle_selection(body: ToggleSelectionRequest, workstation: Workstation = Depends(get_workstation)):
    """Toggle one rendered entry. Rejected toggles leave the session unchanged."""
    accepted = workstation.toggle_selection(body.entry_id, body.scope, body.checked)
    return ToggleResponse(accepted=accepted, **workstation.selection_state())


@navigation_router.post("/navigation", response_model=SelectionStateResponse)
async def navigate(body: NavigationRequest, workstation: Workstation = Depends(get_workstation)):
    """Screen or tab change reported by the UI; always ends the selection."""
    return SelectionStateResponse(**workstation.navigate_away(body.target))


# --- Export endpoints ---


@export_router.get("/csv")
async def export_csv(
    target: Literal["selected", "all"] = "selected",
    mode: EntryMode | None = None,
    workstation: Workstation = Depends(get_workstation),
):
    artifact = workstation.request_export(target, mode)
    if artifact is None:
        return Response(status_code=204)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@export_router.get("/print", response_class=HTMLResponse)
async def print_view(
    target: Literal["selected", "all"] = "selected",
    mode: EntryMode | None = None,
    workstation: Workstation = Depends(get_workstation),
):
    document = workstation.request_print(target, mode)
    if document is None:
        return Response(status_code=204)
    return HTMLResponse(document)


@export_router.get("/table", response_class=HTMLResponse)
async def table_view(workstation: Workstation = Depends(get_workstation)):
    document = workstation.request_table_view()
    if document is None:
        return Response(status_code=204)
    return HTMLResponse(document)


# --- Preference endpoints ---


@preferences_router.get("", response_model=PreferencesResponse)
async def read_preferences(workstation: Workstation = Depends(get_workstation)):
    return PreferencesResponse(author=workstation.author(), locations=workstation.locations())


@preferences_router.put("", response_model=PreferencesResponse)
async def update_preferences(body: UpdatePreferencesRequest, workstation: Workstation = Depends(get_workstation)):
    if body.author:
        workstation.remember_author(body.author)
    if body.locations is not None:
        workstation.set_locations(json.dumps(body.locations))
    return PreferencesResponse(author=workstation.author(), locations=workstation.locations())
