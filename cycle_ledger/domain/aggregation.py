"""Operator aggregation - net base and commission per operator"""

from typing import Dict, Iterable, List, Optional, Sequence

from cycle_ledger.domain.commission import calculate_commission, resolve_commission_rate
from cycle_ledger.domain.models import Cost, Cycle, OperatorAggregate, User


def gross_profit_cents(cycles: Iterable[Cycle]) -> int:
    """Sum of return - invested over cycles"""
    return sum(c.return_cents - c.invested_cents for c in cycles)


def total_expenses_cents(costs: Iterable[Cost]) -> int:
    return sum(c.amount_cents for c in costs)


def net_base_cents(cycles: Sequence[Cycle], costs: Sequence[Cost]) -> int:
    """Gross profit minus expenses, the quantity commission is computed on"""
    return gross_profit_cents(cycles) - total_expenses_cents(costs)


def _display_name(operator_id: str, user: Optional[User], cycles: List[Cycle], costs: List[Cost]) -> str:
    if user is not None:
        return user.name
    # Operator deleted: fall back to the name stored on its records
    for record in (*cycles, *costs):
        if record.operator_name:
            return record.operator_name
    return operator_id


def aggregate_by_operator(
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
    users: Sequence[User],
    scope_operator_ids: Optional[Iterable[str]] = None,
) -> Dict[str, OperatorAggregate]:
    """
    Group cycles and costs by operator and compute net base + commission.

    Args:
        cycles: Cycles of the reporting period (caller filters the period)
        costs: Costs of the reporting period
        users: Current user records, used for live rate and name lookup
        scope_operator_ids: Operators to evaluate. Every scoped operator
            gets an entry even without activity. Defaults to every operator
            id present in the records.

    Returns:
        Aggregates keyed by operator id, iterated in operator id order.
        Operators missing from users are aggregated with rate 0 and the
        name snapshot stored on their records.
    """
    if scope_operator_ids is None:
        scope = {c.operator_id for c in cycles} | {c.operator_id for c in costs}
    else:
        scope = set(scope_operator_ids)

    cycles_by_operator: Dict[str, List[Cycle]] = {op_id: [] for op_id in scope}
    costs_by_operator: Dict[str, List[Cost]] = {op_id: [] for op_id in scope}
    for cycle in cycles:
        if cycle.operator_id in cycles_by_operator:
            cycles_by_operator[cycle.operator_id].append(cycle)
    for cost in costs:
        if cost.operator_id in costs_by_operator:
            costs_by_operator[cost.operator_id].append(cost)

    users_by_id = {u.id: u for u in users}

    aggregates: Dict[str, OperatorAggregate] = {}
    for operator_id in sorted(scope):
        op_cycles = cycles_by_operator[operator_id]
        op_costs = costs_by_operator[operator_id]

        gross = gross_profit_cents(op_cycles)
        expenses = total_expenses_cents(op_costs)
        net_base = gross - expenses
        rate = resolve_commission_rate(users_by_id, operator_id)

        aggregates[operator_id] = OperatorAggregate(
            operator_id=operator_id,
            name=_display_name(operator_id, users_by_id.get(operator_id), op_cycles, op_costs),
            commission_rate=rate,
            gross_profit_cents=gross,
            total_expenses_cents=expenses,
            net_base_cents=net_base,
            commission_cents=calculate_commission(net_base, rate),
            gross_return_cents=sum(c.return_cents for c in op_cycles),
            gross_invested_cents=sum(c.invested_cents for c in op_cycles),
            cycle_count=len(op_cycles),
            cost_count=len(op_costs),
        )

    return aggregates
