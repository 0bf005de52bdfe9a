"""Tests for the LogEntry aggregate and its factories."""

import pytest
from protean.exceptions import ValidationError
from unitflow.entry.entry import (
    CRASH_FIELDS,
    SUPPLY_FIELDS,
    EntryMode,
    LogEntry,
    coerce_severity,
)
from unitflow.entry.events import CrashCartChecked, SupplyRestockLogged


def _crash(**overrides):
    defaults = {
        "location": "ER – Main",
        "cart_number": "12",
        "reason": "Routine check",
        "checked_by": "J. Rivera",
    }
    defaults.update(overrides)
    return LogEntry.record_crash(**defaults)


class TestRecordSupply:
    def test_trims_free_text(self):
        entry = LogEntry.record_supply(author="  Kim ", unit=" 4 South ", notes="  gloves  ")
        assert entry.author == "Kim"
        assert entry.unit == "4 South"
        assert entry.notes == "gloves"

    def test_every_field_may_be_empty(self):
        entry = LogEntry.record_supply()
        assert entry.mode == EntryMode.SUPPLY.value
        assert not entry.author
        assert entry.timestamp > 0

    def test_type_defaults_to_replenishment(self):
        assert LogEntry.record_supply(entry_type="  ").entry_type == "Replenishment"

    def test_explicit_timestamp_is_kept(self):
        assert LogEntry.record_supply(timestamp=1_700_000_000_000).timestamp == 1_700_000_000_000

    def test_raises_restock_logged_event(self):
        entry = LogEntry.record_supply(unit="4 South", severity="High")
        assert len(entry._events) == 1
        event = entry._events[0]
        assert isinstance(event, SupplyRestockLogged)
        assert event.entry_id == str(entry.id)
        assert event.severity == "High"

    def test_identity_can_be_supplied(self):
        assert str(LogEntry.record_supply(entry_id="1739800000000-ab12cd").id) == "1739800000000-ab12cd"


class TestSeverity:
    @pytest.mark.parametrize("value", ["High", "Medium", "Low"])
    def test_known_values_kept(self, value):
        assert coerce_severity(value) == value

    @pytest.mark.parametrize("value", [None, "", "urgent", "high"])
    def test_unknown_values_read_as_low(self, value):
        assert coerce_severity(value) == "Low"

    def test_surrounding_whitespace_ignored(self):
        assert coerce_severity(" Medium ") == "Medium"


class TestRecordCrash:
    def test_cart_type_defaults_to_adult(self):
        assert _crash().cart_type == "Adult"

    def test_expiration_dates_kept_verbatim(self):
        entry = _crash(central_new="2027-01-31", med_new="not a date")
        assert entry.central_new == "2027-01-31"
        assert entry.med_new == "not a date"

    @pytest.mark.parametrize(
        "field, label",
        [
            ("location", "Location"),
            ("cart_number", "Cart #"),
            ("reason", "Reason"),
            ("checked_by", "Checked By"),
        ],
    )
    def test_required_fields(self, field, label):
        with pytest.raises(ValidationError) as exc:
            _crash(**{field: "   "})
        assert field in exc.value.messages
        assert f"{label} is required" in str(exc.value)

    def test_every_missing_field_reported_at_once(self):
        with pytest.raises(ValidationError) as exc:
            LogEntry.record_crash()
        assert set(exc.value.messages) == {"location", "cart_number", "reason", "checked_by"}

    def test_raises_cart_checked_event(self):
        entry = _crash(central_new="2027-01-31")
        event = entry._events[0]
        assert isinstance(event, CrashCartChecked)
        assert event.cart_number == "12"
        assert event.central_new == "2027-01-31"
        assert event.logged_at_ms == entry.timestamp


class TestModeFieldsAreExclusive:
    def test_supply_entry_holds_no_crash_fields(self):
        entry = LogEntry.record_supply(author="Kim", unit="4 South", qty="3")
        assert not any(getattr(entry, name) for name in CRASH_FIELDS)

    def test_crash_entry_holds_no_supply_fields(self):
        entry = _crash()
        assert not any(getattr(entry, name) for name in SUPPLY_FIELDS)

    def test_supply_with_crash_field_rejected(self):
        with pytest.raises(ValidationError) as exc:
            LogEntry(mode="supply", timestamp=1, cart_number="12")
        assert "cart_number" in exc.value.messages

    def test_crash_with_supply_field_rejected(self):
        with pytest.raises(ValidationError) as exc:
            LogEntry(mode="crash", timestamp=1, location="Cath Lab", severity="High")
        assert "severity" in exc.value.messages

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            LogEntry(mode="pharmacy", timestamp=1)

    def test_notes_shared_by_both_modes(self):
        assert LogEntry.record_supply(notes="a").notes == "a"
        assert _crash(notes="b").notes == "b"
