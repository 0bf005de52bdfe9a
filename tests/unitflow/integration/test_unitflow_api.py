"""Integration tests for the UnitFlow API endpoints via TestClient."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from unitflow.api import register_storage_fault_handler, routers
from unitflow.api.routes import get_workstation
from unitflow.entry.repository import LogEntryRepository
from unitflow.workstation import Workstation


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_exception_handlers(app)
    register_storage_fault_handler(app)

    workstation = Workstation()
    app.dependency_overrides[get_workstation] = lambda: workstation
    return TestClient(app)


def _log_supply(client, **overrides):
    body = {"author": "Kim", "unit": "4 South", "severity": "Medium", "notes": "gauze"}
    body.update(overrides)
    response = client.post("/entries/supply", json=body)
    assert response.status_code == 201
    return response.json()


def _log_crash(client, **overrides):
    body = {
        "location": "ER – Main",
        "cart_number": "12",
        "reason": "Expiration swap",
        "checked_by": "Lee",
        "central_new": "2099-01-01",
    }
    body.update(overrides)
    response = client.post("/entries/crash", json=body)
    assert response.status_code == 201
    return response.json()["entry_id"]


class TestEntriesAPI:
    def test_log_supply_returns_201(self, client):
        result = _log_supply(client)
        assert result["entry_id"]
        assert result["phi_warning"] is False

    def test_phi_warning_flag(self, client):
        assert _log_supply(client, notes="Room 204 refill")["phi_warning"] is True

    def test_crash_missing_fields_returns_400(self, client):
        response = client.post("/entries/crash", json={"location": "ER – Main"})
        assert response.status_code == 400

    def test_today_list(self, client):
        _log_supply(client)
        _log_supply(client, unit="4 East")
        response = client.get("/entries/supply/today")
        assert response.status_code == 200
        body = response.json()
        assert body["label"] == "2 entries"
        assert {card["scope"] for card in body["entries"]} == {"supply-today"}

    def test_week_list_carries_status_for_crash(self, client):
        _log_crash(client)
        (card,) = client.get("/entries/crash/week").json()["entries"]
        assert card["status"] == "READY"
        assert card["badge_class"] == "ready"

    def test_unknown_mode_rejected(self, client):
        assert client.get("/entries/pharmacy/today").status_code == 422

    def test_import_and_purge(self, client):
        payload = json.dumps([{"id": "b-1", "mode": "supply", "ts": 1, "unit": "A"}])
        assert client.post("/entries/import", json={"backup": payload}).json() == {"count": 1}
        assert client.delete("/entries").json() == {"count": 1}

    def test_long_supply_fields_return_201(self, client):
        _log_supply(client, unit="Supply room " + "x" * 500, qty="2 boxes of 100 " + "y" * 500)
        (card,) = client.get("/entries/supply/today").json()["entries"]
        assert "x" * 500 in card["meta"]

    def test_malformed_backup_imports_nothing(self, client):
        assert client.post("/entries/import", json={"backup": "not json"}).json() == {"count": 0}

    def test_storage_fault_returns_507(self, client, monkeypatch):
        def locked(self, entry):
            raise OSError("database is locked")

        monkeypatch.setattr(LogEntryRepository, "append", locked)
        response = client.post("/entries/supply", json={"unit": "A"})
        assert response.status_code == 507


class TestCrashCartAPI:
    def test_alerts(self, client):
        _log_crash(client, central_new="2000-01-01")
        alerts = client.get("/alerts").json()["alerts"]
        assert alerts == ["Adult Cart 12 (ER – Main) - Central EXPIRED (2000-01-01)"]

    def test_carts(self, client):
        _log_crash(client)
        _log_crash(client, cart_number="7", central_new="")
        carts = {cart["cart_number"]: cart for cart in client.get("/carts").json()}
        assert carts["12"]["status"] == "READY"
        assert carts["7"]["status"] == "UNVERIFIED"


class TestSelectionAPI:
    def test_select_and_export(self, client):
        entry_id = _log_supply(client)["entry_id"]
        client.post("/selection/begin", json={"scope": "supply-today"})

        response = client.post("/selection/toggle", json={"entry_id": entry_id, "scope": "supply-today"})
        assert response.json()["accepted"] is True
        assert response.json()["count"] == 1

        export = client.get("/exports/csv", params={"target": "selected"})
        assert export.status_code == 200
        assert export.headers["content-type"].startswith("text/csv")
        assert 'filename="unitflow_selected_' in export.headers["content-disposition"]

        table = client.get("/exports/table")
        assert table.status_code == 200
        assert "Items: 1" in table.text

    def test_toggle_from_other_list_rejected(self, client):
        entry_id = _log_crash(client)
        client.post("/selection/begin", json={"scope": "crash-today"})
        response = client.post("/selection/toggle", json={"entry_id": entry_id, "scope": "crash-week"})
        assert response.json()["accepted"] is False
        assert response.json()["count"] == 0

    def test_unknown_scope_rejected(self, client):
        assert client.post("/selection/begin", json={"scope": "pharmacy-today"}).status_code == 422

    def test_navigation_and_cancel(self, client):
        client.post("/selection/begin", json={"scope": "supply-week"})
        assert client.get("/selection").json()["active"] is True
        assert client.post("/navigation", json={"target": "crash"}).json()["active"] is False

        client.post("/selection/begin", json={"scope": "supply-week"})
        assert client.post("/selection/cancel").json()["active"] is False

    def test_empty_export_returns_204(self, client):
        assert client.get("/exports/csv").status_code == 204
        assert client.get("/exports/print", params={"target": "all", "mode": "crash"}).status_code == 204
        assert client.get("/exports/table").status_code == 204

    def test_export_all(self, client):
        _log_crash(client)
        response = client.get("/exports/csv", params={"target": "all", "mode": "crash"})
        assert 'filename="unitflow_crash_all_' in response.headers["content-disposition"]
        assert response.text.startswith('"mode","timestamp"')


class TestPreferencesAPI:
    def test_defaults(self, client):
        body = client.get("/preferences").json()
        assert body["author"] == ""
        assert "ER – Main" in body["locations"]

    def test_update(self, client):
        response = client.put("/preferences", json={"author": "Kim", "locations": ["Cath Lab"]})
        assert response.json() == {"author": "Kim", "locations": ["Cath Lab"]}
        assert client.get("/preferences").json()["author"] == "Kim"

    def test_location_names_kept_as_typed(self, client):
        response = client.put("/preferences", json={"locations": ["Pav A & B", "<Annex>"]})
        assert response.json()["locations"] == ["Pav A & B", "<Annex>"]

    def test_non_list_locations_return_422(self, client):
        assert client.put("/preferences", json={"locations": "Cath Lab"}).status_code == 422
