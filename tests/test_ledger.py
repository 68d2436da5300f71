import copy
import pytest
from resource_forge.errors import ConstructionError, LedgerViolation
from resource_forge.ledger import ResourceLedger

# ---------------------------------------------------------------------------
# Construction Tests
# ---------------------------------------------------------------------------

def test_empty_mapping_rejected():
    with pytest.raises(ConstructionError):
        ResourceLedger({})

def test_negative_opening_quantity_rejected():
    with pytest.raises(ConstructionError):
        ResourceLedger({"ore": -1})

def test_blank_resource_name_rejected():
    with pytest.raises(ConstructionError):
        ResourceLedger({" ": 3})

def test_ledger_does_not_alias_caller_mapping():
    opening = {"ore": 3}
    ledger = ResourceLedger(opening)
    ledger.increase("ore", 5)
    assert opening == {"ore": 3}

# ---------------------------------------------------------------------------
# Lookup Tests
# ---------------------------------------------------------------------------

def test_missing_resource_reads_as_zero():
    ledger = ResourceLedger({"ore": 3})
    assert ledger.has_resource("gold") is False
    assert ledger.get_quantity("gold") == 0
    assert ledger.get_quantity("ore") == 3

def test_shortfall_reports_missing_amounts():
    ledger = ResourceLedger({"ore": 3, "coal": 1})
    assert ledger.shortfall({"ore": 2, "coal": 4, "flux": 1}) == {"coal": 3, "flux": 1}
    assert ledger.covers({"ore": 3}) is True

def test_zero_requirement_on_unknown_resource_is_not_covered():
    ledger = ResourceLedger({"ore": 3})
    assert ledger.covers({"flux": 0}) is False

# ---------------------------------------------------------------------------
# Absolute Target Tests
# ---------------------------------------------------------------------------

def test_increase_sets_absolute_target():
    ledger = ResourceLedger({"ore": 3})
    assert ledger.increase("ore", 7) is True
    assert ledger.get_quantity("ore") == 7

def test_increase_below_current_raises():
    ledger = ResourceLedger({"ore": 3})
    with pytest.raises(LedgerViolation, match="smaller target"):
        ledger.increase("ore", 2)
    assert ledger.get_quantity("ore") == 3

def test_decrease_sets_absolute_target():
    ledger = ResourceLedger({"ore": 3})
    assert ledger.decrease("ore", 1) is False
    assert ledger.get_quantity("ore") == 1

def test_decrease_to_same_value_reports_true():
    ledger = ResourceLedger({"ore": 3})
    assert ledger.decrease("ore", 3) is True

def test_decrease_above_current_raises():
    ledger = ResourceLedger({"ore": 3})
    with pytest.raises(LedgerViolation, match="larger target"):
        ledger.decrease("ore", 4)

@pytest.mark.parametrize("method", ["increase", "decrease"])
def test_unknown_resource_raises(method):
    ledger = ResourceLedger({"ore": 3})
    with pytest.raises(LedgerViolation, match="Unknown resource"):
        getattr(ledger, method)("gold", 1)

def test_negative_target_raises():
    ledger = ResourceLedger({"ore": 3})
    with pytest.raises(LedgerViolation, match="negative"):
        ledger.decrease("ore", -1)

# ---------------------------------------------------------------------------
# Delta Helper Tests
# ---------------------------------------------------------------------------

def test_debit_and_credit_move_by_delta():
    ledger = ResourceLedger({"ore": 5})
    assert ledger.debit("ore", 2) == 3
    assert ledger.credit("ore", 4) == 7

def test_credit_opens_unknown_resource():
    ledger = ResourceLedger({"ore": 5})
    ledger.credit("ingot", 3)
    assert ledger.get_quantity("ingot") == 3

def test_debit_beyond_holdings_raises():
    ledger = ResourceLedger({"ore": 1})
    with pytest.raises(LedgerViolation, match="only 1 held"):
        ledger.debit("ore", 2)

# ---------------------------------------------------------------------------
# Entry Management Tests
# ---------------------------------------------------------------------------

def test_add_and_remove_resource():
    ledger = ResourceLedger({"ore": 5})
    ledger.add_resource("coal", 2)
    assert "coal" in ledger
    with pytest.raises(LedgerViolation, match="already exists"):
        ledger.add_resource("coal", 1)
    assert ledger.remove_resource("coal") == 2
    with pytest.raises(LedgerViolation):
        ledger.remove_resource("coal")

def test_merge_sums_quantities():
    ledger = ResourceLedger({"ore": 5})
    ledger.merge({"ore": 1, "coal": 2})
    assert ledger.snapshot() == {"coal": 2, "ore": 6}

def test_merge_with_negative_quantity_changes_nothing():
    ledger = ResourceLedger({"ore": 5})
    with pytest.raises(LedgerViolation):
        ledger.merge({"coal": 2, "ore": -1})
    assert ledger.snapshot() == {"ore": 5}

def test_merge_with_blank_name_changes_nothing():
    ledger = ResourceLedger({"ore": 5})
    with pytest.raises(LedgerViolation, match="whitespace"):
        ledger.merge({"ore": 2, "  ": 1})
    assert ledger.snapshot() == {"ore": 5}

def test_update_quantity_overwrites_in_either_direction():
    ledger = ResourceLedger({"ore": 5})
    ledger.update_quantity("ore", 9)
    ledger.update_quantity("ore", 2)
    assert ledger.get_quantity("ore") == 2
    with pytest.raises(LedgerViolation, match="Unknown resource"):
        ledger.update_quantity("gold", 1)

def test_split_into_moves_named_entries():
    source = ResourceLedger({"ore": 5, "coal": 0, "flux": 2})
    target = ResourceLedger({"ingot": 1})
    source.split_into(target, ["ore", "coal"])
    assert source.snapshot() == {"coal": 0, "flux": 2}
    assert target.snapshot() == {"ingot": 1, "ore": 5}

def test_split_into_rejects_before_moving_anything():
    source = ResourceLedger({"ore": 5, "flux": 2})
    target = ResourceLedger({"flux": 1})
    with pytest.raises(LedgerViolation, match="already exists"):
        source.split_into(target, ["ore", "flux"])
    with pytest.raises(LedgerViolation, match="Unknown resource"):
        source.split_into(target, ["ore", "gold"])
    assert source.snapshot() == {"flux": 2, "ore": 5}
    assert target.snapshot() == {"flux": 1}

def test_restock_restores_opening_balance():
    ledger = ResourceLedger({"ore": 5})
    ledger.debit("ore", 5)
    ledger.credit("ingot", 2)
    ledger.restock()
    assert ledger.snapshot() == {"ore": 5}

# ---------------------------------------------------------------------------
# Ownership Tests
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("copier", [copy.copy, copy.deepcopy])
def test_ledger_cannot_be_copied(copier):
    with pytest.raises(TypeError, match="transfer"):
        copier(ResourceLedger({"ore": 5}))

def test_transfer_moves_contents():
    source = ResourceLedger({"ore": 5})
    moved = source.transfer()
    assert moved.get_quantity("ore") == 5
    assert len(source) == 0
    moved.restock()
    assert moved.snapshot() == {"ore": 5}
