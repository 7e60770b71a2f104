"""Unit tests for the daily series and the commission ranking"""

from datetime import date
from cycle_ledger.domain.models import OperatorAggregate
from cycle_ledger.domain.timeseries import build_daily_series, build_operator_ranking


def aggregate(operator_id: str, commission_cents: int) -> OperatorAggregate:
    return OperatorAggregate(
        operator_id=operator_id,
        name=operator_id.title(),
        commission_rate=10.0,
        gross_profit_cents=0,
        total_expenses_cents=0,
        net_base_cents=commission_cents * 10,
        commission_cents=commission_cents,
        gross_return_cents=0,
        gross_invested_cents=0,
    )


def test_same_day_different_operators_merge_into_one_point(make_cycle):
    day = date(2026, 3, 10)
    cycles = [
        make_cycle("op-1", day=day, deposit=100, withdraw=150),
        make_cycle("op-2", day=day, deposit=100, withdraw=130),
    ]

    series = build_daily_series(cycles, [])

    assert len(series) == 1
    assert series[0].profit_cents == 8000
    assert series[0].display_label == "10/03"


def test_series_is_in_calendar_order_not_string_order(make_cycle, make_cost):
    """'02/01/2026' sorts after '10/12/2025' by calendar, before it as a string"""
    cycles = [
        make_cycle(day=date(2026, 1, 2), withdraw=10),
        make_cycle(day=date(2025, 12, 10), withdraw=20),
        make_cycle(day=date(2026, 1, 15), withdraw=30),
    ]

    series = build_daily_series(cycles, [make_cost(5, day=date(2025, 12, 31))])

    assert [p.date for p in series] == [
        date(2025, 12, 10),
        date(2025, 12, 31),
        date(2026, 1, 2),
        date(2026, 1, 15),
    ]
    assert all(a.date < b.date for a, b in zip(series, series[1:]))


def test_cost_only_day_is_a_point_and_gaps_are_not_filled(make_cycle, make_cost):
    cycles = [make_cycle(day=date(2026, 3, 1), deposit=10, withdraw=40)]
    costs = [make_cost(12, day=date(2026, 3, 5)), make_cost(3, day=date(2026, 3, 1))]

    series = build_daily_series(cycles, costs)

    assert [(p.date.day, p.gross_profit_cents, p.expenses_cents, p.profit_cents) for p in series] == [
        (1, 3000, 300, 2700),
        (5, 0, 1200, -1200),
    ]


def test_empty_input_gives_empty_series():
    assert build_daily_series([], []) == []


def test_ranking_keeps_aggregate_order_by_default():
    ranking = build_operator_ranking([aggregate("op-1", 0), aggregate("op-2", 500)])

    assert [(r.operator_id, r.commission_cents) for r in ranking] == [("op-1", 0), ("op-2", 500)]


def test_ranking_can_drop_zero_and_sort_descending():
    aggregates = [aggregate("op-1", 200), aggregate("op-2", 0), aggregate("op-3", 900), aggregate("op-4", 200)]

    ranking = build_operator_ranking(aggregates, include_zero=False, sort_desc=True)

    assert [r.operator_id for r in ranking] == ["op-3", "op-1", "op-4"]
    assert ranking[0].name == "Op-3"
