"""Shared BDD fixtures and step definitions for UnitFlow."""

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def toggle():
    """Outcome of the most recent toggle."""
    return {"accepted": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a supply restock logged today", target_fixture="entry")
def supply_restock_logged(workstation):
    return workstation.submit_supply_entry(author="Kim", unit="4 South", notes="gauze").entry


@given("a crash cart check logged today", target_fixture="entry")
def crash_cart_check_logged(workstation):
    return workstation.submit_crash_entry(
        location="ER – Main",
        cart_number="12",
        reason="Routine check",
        checked_by="Lee",
    ).entry


@given(parsers.cfparse('selection has begun on the "{scope}" list'))
def selection_begun(workstation, scope):
    workstation.begin_selection(scope)
