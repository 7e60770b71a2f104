"""Chart series: daily profit trend and commission ranking"""

from datetime import date
from typing import Dict, Iterable, List, Sequence

from cycle_ledger.domain.models import Cost, Cycle, DailySeriesPoint, OperatorAggregate, RankingEntry
from cycle_ledger.utils.date_utils import display_label


def build_daily_series(cycles: Sequence[Cycle], costs: Sequence[Cost]) -> List[DailySeriesPoint]:
    """
    Bucket cycles and costs by calendar day, regardless of owner.

    profit(day) = sum(return - invested) over the day's cycles - sum(amount)
    over the day's costs. Only days present in the input appear (no gap
    filling); points are in ascending calendar order.
    """
    gross_by_date: Dict[date, int] = {}
    expenses_by_date: Dict[date, int] = {}

    for cycle in cycles:
        gross_by_date[cycle.date] = gross_by_date.get(cycle.date, 0) + cycle.return_cents - cycle.invested_cents
    for cost in costs:
        expenses_by_date[cost.date] = expenses_by_date.get(cost.date, 0) + cost.amount_cents

    series = []
    for day in sorted(set(gross_by_date) | set(expenses_by_date)):
        gross = gross_by_date.get(day, 0)
        expenses = expenses_by_date.get(day, 0)
        series.append(
            DailySeriesPoint(
                date=day,
                display_label=display_label(day),
                gross_profit_cents=gross,
                expenses_cents=expenses,
                profit_cents=gross - expenses,
            )
        )
    return series


def build_operator_ranking(
    operator_aggregates: Iterable[OperatorAggregate],
    include_zero: bool = True,
    sort_desc: bool = False,
) -> List[RankingEntry]:
    """
    One entry per operator aggregate, in aggregate order by default.

    Args:
        include_zero: Keep operators whose commission is zero
        sort_desc: Sort by commission descending (operator id breaks ties)
    """
    ranking = [
        RankingEntry(operator_id=a.operator_id, name=a.name, commission_cents=a.commission_cents)
        for a in operator_aggregates
        if include_zero or a.commission_cents != 0
    ]
    if sort_desc:
        ranking.sort(key=lambda e: (-e.commission_cents, e.operator_id))
    return ranking
