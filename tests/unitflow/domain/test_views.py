"""Tests for entry cards and the printable presentation view."""

from datetime import datetime

from unitflow.crash_cart.status import CartStatus
from unitflow.entry.entry import LogEntry
from unitflow.export.presentation import presentation_rows, to_presentation_view
from unitflow.views.cards import count_label, crash_card, format_when, supply_card


def _ms(*parts):
    return int(datetime(*parts).timestamp() * 1000)


def _crash(**overrides):
    defaults = {
        "location": "Cath Lab",
        "cart_number": "4",
        "reason": "Routine check",
        "checked_by": "Lee",
        "timestamp": _ms(2026, 3, 18, 9, 5),
    }
    defaults.update(overrides)
    return LogEntry.record_crash(**defaults)


class TestCountLabel:
    def test_singular_and_plural(self):
        assert count_label(0) == "0 entries"
        assert count_label(1) == "1 entry"
        assert count_label(7) == "7 entries"


class TestSupplyCard:
    def test_card_fields(self):
        entry = LogEntry.record_supply(
            author="Kim", unit="4 South", entry_type="Stockout", severity="High", qty="3", timestamp=_ms(2026, 3, 18, 9, 5)
        )
        card = supply_card(entry, "supply-today")
        assert card.entry_id == str(entry.id)
        assert card.scope == "supply-today"
        assert card.headline == "Stockout"
        assert card.when == "2026-03-18 09:05"
        assert "Qty: 3" in card.meta
        assert card.badge_label == "High"
        assert card.badge_class == "high"
        assert card.status is None

    def test_low_severity_badge(self):
        card = supply_card(LogEntry.record_supply(), "supply-week")
        assert card.badge_label == "Low"
        assert card.badge_class == "low"


class TestCrashCard:
    def test_card_carries_cart_status(self):
        entry = _crash(central_new="2026-04-01", seal="A-7")
        card = crash_card(entry, "crash-week", CartStatus.ATTN)
        assert card.headline == "Adult • Cart 4 • Cath Lab"
        assert "Seal: A-7" in card.meta
        assert card.detail == "Central: 2026-04-01"
        assert card.status == "ATTN"
        assert card.badge_class == "attn"

    def test_notes_shown_without_dates(self):
        card = crash_card(_crash(notes="seal intact"), "crash-today", CartStatus.UNVERIFIED)
        assert card.detail == "seal intact"
        assert card.badge_class == "unv"


class TestPresentationView:
    def test_rows_are_oldest_first(self):
        later = LogEntry.record_supply(unit="B", timestamp=_ms(2026, 3, 18, 11))
        earlier = _crash(timestamp=_ms(2026, 3, 18, 8))
        rows = presentation_rows([later, earlier])
        assert [row.mode_label for row in rows] == ["Crash", "Supply"]

    def test_document_escapes_values(self):
        entry = LogEntry.record_supply(notes="<b>gloves</b> & gauze", timestamp=_ms(2026, 3, 18, 9))
        html = to_presentation_view([entry], generated_at=datetime(2026, 3, 18, 12, 0))
        assert "&lt;b&gt;gloves&lt;/b&gt; &amp; gauze" in html
        assert "<b>gloves</b>" not in html
        assert "Generated: 2026-03-18 12:00" in html
        assert "Items: 1" in html

    def test_supply_notes_span_remaining_columns(self):
        entry = LogEntry.record_supply(notes="gauze", timestamp=_ms(2026, 3, 18, 9))
        assert '<td colspan="3">gauze</td>' in to_presentation_view([entry])

    def test_title(self):
        html = to_presentation_view([_crash()], title="UnitFlow - Crash log")
        assert "<title>UnitFlow - Crash log</title>" in html


def test_format_when_uses_local_time():
    assert format_when(_ms(2026, 1, 2, 3, 4)) == "2026-01-02 03:04"
