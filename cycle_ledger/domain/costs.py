"""Cost breakdowns for the expenses view"""

from typing import Dict, Sequence

from cycle_ledger.domain.models import COST_CATEGORIES, Cost, CostBreakdown


def summarize_costs(costs: Sequence[Cost]) -> CostBreakdown:
    """Totals per category (enumeration order) and per operator name (first appearance)"""
    by_category: Dict[str, int] = {}
    by_operator: Dict[str, int] = {}

    for cost in costs:
        by_category[cost.category] = by_category.get(cost.category, 0) + cost.amount_cents
        name = cost.operator_name or cost.operator_id
        by_operator[name] = by_operator.get(name, 0) + cost.amount_cents

    return CostBreakdown(
        total_cents=sum(c.amount_cents for c in costs),
        by_category=[(cat, by_category[cat]) for cat in COST_CATEGORIES if cat in by_category],
        by_operator=list(by_operator.items()),
    )
