"""Unit tests for per-operator aggregation"""

from cycle_ledger.domain.aggregation import aggregate_by_operator, net_base_cents


def test_example_operator_net_base_and_commission(make_cycle, make_cost, team):
    """deposit 500 / withdraw 650, cost 50, rate 20% -> net 100, commission 20"""
    cycles = [make_cycle("op-1", deposit=500, withdraw=650)]
    costs = [make_cost(50, "op-1")]

    aggregates = aggregate_by_operator(cycles, costs, team, ["op-1"])
    agg = aggregates["op-1"]

    assert agg.gross_profit_cents == 15000
    assert agg.total_expenses_cents == 5000
    assert agg.net_base_cents == 10000
    assert agg.commission_cents == 2000
    assert agg.gross_invested_cents == 50000
    assert agg.gross_return_cents == 65000
    assert agg.name == "Bruno"
    assert agg.commission_rate == 20.0


def test_loss_produces_no_commission(make_cycle, make_cost, team):
    """withdraw 400 -> profit -100, net -150, commission 0"""
    cycles = [make_cycle("op-1", deposit=500, withdraw=400)]
    costs = [make_cost(50, "op-1")]

    agg = aggregate_by_operator(cycles, costs, team, ["op-1"])["op-1"]

    assert agg.net_base_cents == -15000
    assert agg.commission_cents == 0


def test_costs_offset_profit_before_commission(make_cycle, make_cost, team):
    """Commission is computed on the operator's net, not per cycle"""
    cycles = [
        make_cycle("op-1", deposit=100, withdraw=300),  # +200
        make_cycle("op-1", deposit=300, withdraw=100),  # -200
    ]
    agg = aggregate_by_operator(cycles, [make_cost(10, "op-1")], team, ["op-1"])["op-1"]

    assert agg.net_base_cents == -1000
    assert agg.commission_cents == 0


def test_scoped_operator_without_activity_is_kept(make_cycle, team):
    cycles = [make_cycle("op-1", deposit=100, withdraw=200)]

    aggregates = aggregate_by_operator(cycles, [], team, ["op-1", "op-2"])

    assert list(aggregates) == ["op-1", "op-2"]
    idle = aggregates["op-2"]
    assert idle.net_base_cents == 0
    assert idle.commission_cents == 0
    assert idle.cycle_count == 0
    assert idle.name == "Carla"


def test_records_outside_scope_are_ignored(make_cycle, team):
    cycles = [make_cycle("op-1", withdraw=100), make_cycle("op-2", withdraw=999)]

    aggregates = aggregate_by_operator(cycles, [], team, ["op-1"])

    assert list(aggregates) == ["op-1"]
    assert aggregates["op-1"].gross_profit_cents == 10000


def test_default_scope_is_every_operator_in_records(make_cycle, make_cost, team):
    aggregates = aggregate_by_operator(
        [make_cycle("op-2", withdraw=10)], [make_cost(1, "op-1")], team
    )
    assert list(aggregates) == ["op-1", "op-2"]


def test_deleted_operator_uses_snapshot_name_and_zero_rate(make_cycle, team):
    cycles = [make_cycle("op-gone", deposit=100, withdraw=300, operator_name="Diego")]

    agg = aggregate_by_operator(cycles, [], team, ["op-gone"])["op-gone"]

    assert agg.name == "Diego"
    assert agg.commission_rate == 0.0
    assert agg.net_base_cents == 20000
    assert agg.commission_cents == 0


def test_iteration_order_is_stable(make_cycle, team):
    cycles = [make_cycle("op-2", withdraw=1), make_cycle("op-1", withdraw=1)]

    first = aggregate_by_operator(cycles, [], team, {"op-2", "op-1"})
    second = aggregate_by_operator(list(reversed(cycles)), [], team, ["op-1", "op-2"])

    assert list(first) == list(second) == ["op-1", "op-2"]
    assert first == second


def test_net_base_helper(make_cycle, make_cost):
    cycles = [make_cycle(deposit=10, withdraw=25), make_cycle(deposit=5, withdraw=0)]
    assert net_base_cents(cycles, [make_cost("2.50")]) == 750
