"""Unit tests for cost breakdowns and money helpers"""

import pytest
from decimal import Decimal
from cycle_ledger.domain.costs import summarize_costs
from cycle_ledger.utils.money_utils import from_cents, round_cents, to_cents


def test_summarize_costs_by_category_and_operator(make_cost):
    costs = [
        make_cost(10, "op-2", category="proxy", operator_name="Carla"),
        make_cost("2.50", "op-1", category="sms", operator_name="Bruno"),
        make_cost(5, "op-2", category="sms", operator_name="Carla"),
        make_cost(100, "op-1", category="tool", operator_name="Bruno"),
    ]

    breakdown = summarize_costs(costs)

    assert breakdown.total_cents == 11750
    # Category enumeration order, not insertion order
    assert breakdown.by_category == [("sms", 750), ("proxy", 1000), ("tool", 10000)]
    assert breakdown.by_operator == [("Carla", 1500), ("Bruno", 10250)]


def test_summarize_no_costs():
    breakdown = summarize_costs([])
    assert breakdown.total_cents == 0
    assert breakdown.by_category == []
    assert breakdown.by_operator == []


@pytest.mark.parametrize(
    "value,cents",
    [
        (0, 0),
        ("1.005", 101),
        ("1.004", 100),
        (2.675, 268),
        (Decimal("-1.005"), -101),
        ("1234.5", 123450),
    ],
)
def test_to_cents_half_away_from_zero(value, cents):
    assert to_cents(value) == cents


@pytest.mark.parametrize("value", ["", "ten", "NaN", "Infinity", True, "1e30", "-1e30"])
def test_to_cents_rejects_non_amounts(value):
    with pytest.raises(ValueError):
        to_cents(value)


def test_from_cents_and_round_cents():
    assert from_cents(12345) == Decimal("123.45")
    assert round_cents(Decimal("2.5")) == 3
    assert round_cents(Decimal("-2.5")) == -3
