"""Backup export and idempotent restore"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from cycle_ledger.domain.commission import validate_commission_rate
from cycle_ledger.domain.exceptions import InvalidBackupError, ValidationError
from cycle_ledger.domain.models import ROLE_ADMIN, ROLES, Cost, Cycle, LedgerSnapshot, RawCost, RawCycle, User
from cycle_ledger.domain.normalizer import normalize_cost, normalize_cycle
from cycle_ledger.infrastructure.database.repositories import CostRepository, CycleRepository, UserRepository
from cycle_ledger.utils.date_utils import format_record_date
from cycle_ledger.utils.money_utils import MAX_AMOUNT, from_cents


def _user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "username": user.username,
        "role": user.role,
        "commission_rate": user.commission_rate,
        "parent_id": user.parent_id,
    }


def _cycle_to_dict(cycle: Cycle) -> Dict[str, Any]:
    return {
        "id": cycle.id,
        "name": cycle.name,
        "date": format_record_date(cycle.date),
        "deposit_cents": cycle.deposit_cents,
        "redeposit_cents": cycle.redeposit_cents,
        "withdraw_cents": cycle.withdraw_cents,
        "chest_cents": cycle.chest_cents,
        "cooperation_cents": cycle.cooperation_cents,
        "accounts": cycle.accounts,
        # Advisory, recomputed on restore
        "invested_cents": cycle.invested_cents,
        "return_cents": cycle.return_cents,
        "profit_cents": cycle.profit_cents,
        "operator_id": cycle.operator_id,
        "operator_name": cycle.operator_name,
        "owner_admin_id": cycle.owner_admin_id,
    }


def _cost_to_dict(cost: Cost) -> Dict[str, Any]:
    return {
        "id": cost.id,
        "name": cost.name,
        "date": format_record_date(cost.date),
        "amount_cents": cost.amount_cents,
        "category": cost.category,
        "operator_id": cost.operator_id,
        "operator_name": cost.operator_name,
        "owner_admin_id": cost.owner_admin_id,
    }


def export_backup(snapshot: LedgerSnapshot) -> Dict[str, Any]:
    """Serialize a snapshot as {users, cycles, costs, exported_at}"""
    return {
        "users": [_user_to_dict(u) for u in snapshot.users],
        "cycles": [_cycle_to_dict(c) for c in snapshot.cycles],
        "costs": [_cost_to_dict(c) for c in snapshot.costs],
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }


def _integer_field(data: Dict[str, Any], key: str, default: Any = None) -> int:
    """Integer backup field (cents, account count); fractions and out-of-range values are rejected"""
    value = data[key] if default is None else data.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key} must be a whole number, got {value!r}")
        value = int(value)
    number = int(value)
    if abs(number) > MAX_AMOUNT * 100:
        raise ValueError(f"{key} exceeds {MAX_AMOUNT * 100}")
    return number


def _parse_user(data: Dict[str, Any]) -> User:
    if data["role"] not in ROLES:
        raise InvalidBackupError(f"Unknown role {data['role']!r} for user {data['id']}")
    if data["role"] == ROLE_ADMIN:
        rate = 0.0
    else:
        rate = validate_commission_rate(data.get("commission_rate") or 0.0)
    return User(
        id=data["id"],
        name=data["name"],
        username=data["username"],
        role=data["role"],
        commission_rate=rate,
        parent_id=data.get("parent_id"),
    )


def _parse_cycle(data: Dict[str, Any]) -> Cycle:
    return normalize_cycle(
        RawCycle(
            id=data["id"],
            name=data["name"],
            date=data["date"],
            operator_id=data["operator_id"],
            operator_name=data.get("operator_name") or "",
            owner_admin_id=data["owner_admin_id"],
            deposit=from_cents(_integer_field(data, "deposit_cents", 0)),
            redeposit=from_cents(_integer_field(data, "redeposit_cents", 0)),
            withdraw=from_cents(_integer_field(data, "withdraw_cents", 0)),
            chest=from_cents(_integer_field(data, "chest_cents", 0)),
            cooperation=from_cents(_integer_field(data, "cooperation_cents", 0)),
            accounts=_integer_field(data, "accounts", 1),
        )
    )


def _parse_cost(data: Dict[str, Any]) -> Cost:
    return normalize_cost(
        RawCost(
            id=data["id"],
            name=data["name"],
            date=data["date"],
            amount=from_cents(_integer_field(data, "amount_cents")),
            category=data["category"],
            operator_id=data["operator_id"],
            operator_name=data.get("operator_name") or "",
            owner_admin_id=data["owner_admin_id"],
        )
    )


def restore_backup(db: Session, payload: Dict[str, Any]) -> Dict[str, int]:
    """
    Upsert every record of a backup by id.

    All records are parsed and re-normalized before anything is written,
    so one invalid record aborts the restore untouched. Re-importing the
    same backup is a no-op. Caller commits.

    Returns:
        Count of records restored per entity
    """
    try:
        users: List[User] = [_parse_user(u) for u in payload.get("users") or []]
        cycles: List[Cycle] = [_parse_cycle(c) for c in payload.get("cycles") or []]
        costs: List[Cost] = [_parse_cost(c) for c in payload.get("costs") or []]
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        raise InvalidBackupError(f"Invalid backup record: {e}") from e

    user_repo = UserRepository(db)
    # Admins first so operators' parent references resolve
    for user in sorted(users, key=lambda u: (u.role != "admin", u.id)):
        user_repo.upsert(user)
    db.flush()

    cycle_repo = CycleRepository(db)
    for cycle in cycles:
        cycle_repo.persist(cycle)

    cost_repo = CostRepository(db)
    for cost in costs:
        cost_repo.persist(cost)

    return {"users": len(users), "cycles": len(cycles), "costs": len(costs)}
