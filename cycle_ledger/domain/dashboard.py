"""Dashboard entry point - the one pure computation the presentation layer calls"""

from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from cycle_ledger.domain.consolidation import consolidate
from cycle_ledger.domain.models import ROLE_ADMIN, ROLE_OPERATOR, Cost, Cycle, Dashboard, User
from cycle_ledger.domain.timeseries import build_daily_series, build_operator_ranking
from cycle_ledger.utils.date_utils import filter_by_timeframe


def is_visible_to(role: str, user_id: str, record: Union[Cycle, Cost]) -> bool:
    """
    Admins see everything attributed to them plus anything they recorded
    themselves; operators see only their own records.
    """
    if role == ROLE_ADMIN:
        return record.owner_admin_id == user_id or record.operator_id == user_id
    return record.operator_id == user_id


def visible_records(
    role: str,
    user_id: str,
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
) -> Tuple[List[Cycle], List[Cost]]:
    """Records a user may see"""
    return (
        [c for c in cycles if is_visible_to(role, user_id, c)],
        [c for c in costs if is_visible_to(role, user_id, c)],
    )


def team_operator_ids(admin_id: str, users: Sequence[User], cycles: Sequence[Cycle], costs: Sequence[Cost]) -> set:
    """Operators under an admin, including deleted ones still present in records"""
    members = {u.id for u in users if u.role == ROLE_OPERATOR and u.parent_id == admin_id}
    members |= {c.operator_id for c in cycles} | {c.operator_id for c in costs}
    members.discard(admin_id)
    return members


def personal_roi(profit_cents: int, invested_cents: int) -> float:
    """ROI percentage, 0 when nothing was invested"""
    if invested_cents <= 0:
        return 0.0
    return round(profit_cents / invested_cents * 100, 2)


def compute_dashboard(
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
    users: Sequence[User],
    role: str,
    current_user_id: str,
    timeframe: str = "all",
    today: Optional[date] = None,
    include_zero_in_ranking: bool = False,
) -> Dashboard:
    """
    Compute the full dashboard for one user from a snapshot.

    Flow:
    1. Restrict records to what the user may see
    2. Restrict to the reporting period (timeframe)
    3. Consolidate by role (admin: own result + team commissions,
       operator: net base - commission paid)
    4. Build the daily profit series and the commission ranking

    Pure and deterministic: the same snapshot always yields the same
    dashboard.
    """
    my_visible_cycles, my_visible_costs = visible_records(role, current_user_id, cycles, costs)
    scoped_cycles = filter_by_timeframe(my_visible_cycles, timeframe, today)
    scoped_costs = filter_by_timeframe(my_visible_costs, timeframe, today)

    team_ids = None
    if role == ROLE_ADMIN:
        team_ids = team_operator_ids(current_user_id, users, scoped_cycles, scoped_costs)

    result = consolidate(role, current_user_id, scoped_cycles, scoped_costs, users, team_ids)

    my_cycles = [c for c in scoped_cycles if c.operator_id == current_user_id]
    my_costs = [c for c in scoped_costs if c.operator_id == current_user_id]
    my_invested = sum(c.invested_cents for c in my_cycles)

    if role == ROLE_ADMIN:
        my_profit = result.my_net_base_cents
        ranking = build_operator_ranking(
            result.team.values(), include_zero=include_zero_in_ranking, sort_desc=True
        )
    else:
        my_profit = result.final_consolidated_cents
        ranking = []

    return Dashboard(
        role=role,
        user_id=current_user_id,
        final_consolidated_cents=result.final_consolidated_cents,
        my_personal_profit_cents=my_profit,
        my_roi=personal_roi(my_profit, my_invested),
        my_expenses_cents=sum(c.amount_cents for c in my_costs),
        my_invested_cents=my_invested,
        team_commissions_cents=result.team_commissions_cents,
        team_total_return_cents=sum(c.return_cents for c in scoped_cycles),
        team_total_invested_cents=sum(c.invested_cents for c in scoped_cycles),
        daily_series=build_daily_series(scoped_cycles, scoped_costs),
        operator_ranking=ranking,
    )
