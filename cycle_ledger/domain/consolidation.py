"""Consolidated result - role-aware composition of the commission formula"""

from typing import Iterable, Optional, Sequence

from cycle_ledger.domain.aggregation import aggregate_by_operator, net_base_cents
from cycle_ledger.domain.exceptions import InvalidRoleError
from cycle_ledger.domain.models import ROLE_ADMIN, ROLE_OPERATOR, ROLES, ConsolidatedResult, Cost, Cycle, User


def consolidate_admin(
    admin_id: str,
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
    users: Sequence[User],
    team_operator_ids: Optional[Iterable[str]] = None,
) -> ConsolidatedResult:
    """
    Admin balance = own net result + commissions owed by the team.

    The admin's own cycles/costs (operator_id == admin_id) are never
    commissioned. Team commissions come from the operator aggregation over
    every other operator in scope.
    """
    my_cycles = [c for c in cycles if c.operator_id == admin_id]
    my_costs = [c for c in costs if c.operator_id == admin_id]
    my_net = net_base_cents(my_cycles, my_costs)

    if team_operator_ids is None:
        team_operator_ids = {c.operator_id for c in cycles} | {c.operator_id for c in costs}
    scope = {op_id for op_id in team_operator_ids if op_id != admin_id}

    team = aggregate_by_operator(cycles, costs, users, scope)
    team_commissions = sum(a.commission_cents for a in team.values())

    return ConsolidatedResult(
        role=ROLE_ADMIN,
        user_id=admin_id,
        my_net_base_cents=my_net,
        my_commission_paid_cents=0,
        team_commissions_cents=team_commissions,
        final_consolidated_cents=my_net + team_commissions,
        team=team,
    )


def consolidate_operator(
    operator_id: str,
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
    users: Sequence[User],
) -> ConsolidatedResult:
    """
    Operator balance = own net base - commission paid to the admin.

    Runs the same operator aggregation the admin view uses, scoped to this
    operator, so the commission paid here equals the term the admin
    receives for the same records.
    """
    own = aggregate_by_operator(cycles, costs, users, [operator_id])[operator_id]

    return ConsolidatedResult(
        role=ROLE_OPERATOR,
        user_id=operator_id,
        my_net_base_cents=own.net_base_cents,
        my_commission_paid_cents=own.commission_cents,
        team_commissions_cents=0,
        final_consolidated_cents=own.net_base_cents - own.commission_cents,
    )


def consolidate(
    role: str,
    current_user_id: str,
    cycles: Sequence[Cycle],
    costs: Sequence[Cost],
    users: Sequence[User],
    team_operator_ids: Optional[Iterable[str]] = None,
) -> ConsolidatedResult:
    """Dispatch to the admin or operator composition"""
    if role not in ROLES:
        raise InvalidRoleError(f"Unknown role: {role}")
    if role == ROLE_ADMIN:
        return consolidate_admin(current_user_id, cycles, costs, users, team_operator_ids)
    return consolidate_operator(current_user_id, cycles, costs, users)
