import pytest
from unittest.mock import MagicMock
from resource_forge.errors import StateViolation
from resource_forge.formula import Formula
from resource_forge.plan import Plan


def _formula(output=4, draw=0.95):
    rng = MagicMock()
    rng.random.return_value = draw
    return Formula(["log"], [1], ["plank"], [output], rng=rng)

# ---------------------------------------------------------------------------
# Growth Tests
# ---------------------------------------------------------------------------

def test_empty_plan_starts_with_capacity_two():
    plan = Plan()
    assert len(plan) == 0
    assert plan.capacity == 2

def test_capacity_doubles_on_overflow():
    plan = Plan()
    capacities = []
    for _ in range(5):
        plan.append(_formula())
        capacities.append(plan.capacity)
    assert capacities == [2, 2, 4, 4, 8]
    assert plan.capacity >= len(plan)

def test_append_rejects_non_formulas():
    with pytest.raises(TypeError):
        Plan().append("plank")

# ---------------------------------------------------------------------------
# Mutation Tests
# ---------------------------------------------------------------------------

def test_remove_last_returns_removed_formula():
    keep, drop = _formula(1), _formula(2)
    plan = Plan([keep, drop])
    assert plan.remove_last() is drop
    assert plan.formulas == [keep]

def test_remove_last_on_empty_plan_raises():
    with pytest.raises(StateViolation, match="empty plan"):
        Plan().remove_last()

def test_replace_at_overwrites_slot():
    replacement = _formula(9)
    plan = Plan([_formula(1), _formula(2)])
    plan.replace_at(1, replacement)
    assert plan[1] is replacement

def test_replace_at_size_appends():
    plan = Plan([_formula(1)])
    plan.replace_at(1, _formula(2))
    assert len(plan) == 2

@pytest.mark.parametrize("index", [-1, 3])
def test_replace_at_out_of_bounds_raises(index):
    plan = Plan([_formula(1)])
    with pytest.raises(StateViolation, match="out of bounds"):
        plan.replace_at(index, _formula(2))

# ---------------------------------------------------------------------------
# Bulk Apply Tests
# ---------------------------------------------------------------------------

def test_apply_all_applies_each_formula_in_order():
    plan = Plan([_formula(10, 0.95), _formula(10, 0.30)])
    records = plan.apply_all()
    assert [r.slot for r in records] == [0, 1]
    assert plan[0].result == [10]
    assert plan[1].result == [7]

def test_apply_all_on_empty_plan_raises():
    with pytest.raises(StateViolation, match="empty plan"):
        Plan().apply_all()

# ---------------------------------------------------------------------------
# Value Semantics Tests
# ---------------------------------------------------------------------------

def test_copy_duplicates_every_formula():
    plan = Plan([_formula(10)])
    clone = plan.copy()
    assert clone == plan
    assert clone[0] is not plan[0]

    clone.apply_all()
    assert plan[0].result == [0]
    assert clone != plan

def test_transfer_empties_source():
    plan = Plan([_formula(), _formula(), _formula()])
    moved = plan.transfer()
    assert len(moved) == 3
    assert moved.capacity == 4
    assert len(plan) == 0
    assert plan.capacity == 2
    plan.append(_formula())
    assert len(plan) == 1
