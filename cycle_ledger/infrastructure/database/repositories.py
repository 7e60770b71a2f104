"""Data access layer for users, cycles and costs"""

from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from cycle_ledger.infrastructure.database.models import UserRecord, CycleRecord, CostRecord, new_record_id
from cycle_ledger.domain.commission import validate_commission_rate
from cycle_ledger.domain.exceptions import (
    DuplicateUsernameError,
    PermissionDeniedError,
    RecordNotFoundError,
    UserNotFoundError,
)
from cycle_ledger.domain.models import ROLE_ADMIN, ROLE_OPERATOR, Cost, Cycle, RawCost, RawCycle, User
from cycle_ledger.domain.normalizer import normalize_cost, normalize_cycle
from cycle_ledger.utils.money_utils import from_cents


def user_from_record(record: UserRecord) -> User:
    return User(
        id=record.id,
        name=record.name,
        username=record.username,
        role=record.role,
        commission_rate=record.commission_rate or 0.0,
        parent_id=record.parent_id,
    )


def cycle_from_record(record: CycleRecord) -> Cycle:
    """Rebuild a cycle from its raw columns; the cached profit column is ignored"""
    return normalize_cycle(
        RawCycle(
            id=record.id,
            name=record.name,
            date=record.date,
            operator_id=record.operator_id,
            operator_name=record.operator_name,
            owner_admin_id=record.owner_admin_id,
            deposit=from_cents(record.deposit_cents),
            redeposit=from_cents(record.redeposit_cents),
            withdraw=from_cents(record.withdraw_cents),
            chest=from_cents(record.chest_cents),
            cooperation=from_cents(record.cooperation_cents),
            accounts=record.accounts,
        )
    )


def cost_from_record(record: CostRecord) -> Cost:
    return normalize_cost(
        RawCost(
            id=record.id,
            name=record.name,
            date=record.date,
            amount=from_cents(record.amount_cents),
            category=record.category,
            operator_id=record.operator_id,
            operator_name=record.operator_name,
            owner_admin_id=record.owner_admin_id,
        )
    )


class UserRepository:
    """Repository for admins and operators"""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        records = self.db.query(UserRecord).order_by(UserRecord.id).all()
        return [user_from_record(r) for r in records]

    def get(self, user_id: str) -> Optional[User]:
        record = self.db.get(UserRecord, user_id)
        return user_from_record(record) if record else None

    def require(self, user_id: str) -> User:
        user = self.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def get_by_username(self, username: str) -> Optional[User]:
        """Case-insensitive username lookup"""
        record = (
            self.db.query(UserRecord)
            .filter(func.lower(UserRecord.username) == username.strip().lower())
            .first()
        )
        return user_from_record(record) if record else None

    def _create(self, name: str, username: str, role: str, commission_rate: float, parent_id: Optional[str]) -> User:
        if self.get_by_username(username) is not None:
            raise DuplicateUsernameError(f"Username '{username}' is already registered")
        record = UserRecord(
            id=new_record_id(),
            name=name,
            username=username.strip(),
            role=role,
            commission_rate=commission_rate,
            parent_id=parent_id,
        )
        self.db.add(record)
        self.db.flush()
        return user_from_record(record)

    def register_admin(self, name: str, username: str) -> User:
        """Admins never pay commission, their rate is fixed at 0"""
        return self._create(name, username, ROLE_ADMIN, 0.0, None)

    def create_operator(self, admin_id: str, name: str, username: str, commission_rate: float) -> User:
        admin = self.require(admin_id)
        if not admin.is_admin:
            raise PermissionDeniedError(f"User {admin_id} is not an admin")
        validate_commission_rate(commission_rate)
        return self._create(name, username, ROLE_OPERATOR, float(commission_rate), admin.id)

    def _owned_operator(self, admin_id: str, operator_id: str) -> UserRecord:
        record = self.db.get(UserRecord, operator_id)
        if record is None or record.role != ROLE_OPERATOR:
            raise UserNotFoundError(f"Operator {operator_id} not found")
        if record.parent_id != admin_id:
            raise PermissionDeniedError(f"Operator {operator_id} is not managed by {admin_id}")
        return record

    def update_commission_rate(self, admin_id: str, operator_id: str, commission_rate: float) -> User:
        """Only the owning admin may change an operator's rate; applies retroactively on next load"""
        validate_commission_rate(commission_rate)
        record = self._owned_operator(admin_id, operator_id)
        record.commission_rate = float(commission_rate)
        self.db.flush()
        return user_from_record(record)

    def delete_operator(self, admin_id: str, operator_id: str) -> None:
        """Remove the operator; its cycles and costs stay in place"""
        record = self._owned_operator(admin_id, operator_id)
        self.db.delete(record)
        self.db.flush()

    def list_team(self, admin_id: str) -> List[User]:
        records = (
            self.db.query(UserRecord)
            .filter(UserRecord.parent_id == admin_id, UserRecord.role == ROLE_OPERATOR)
            .order_by(UserRecord.name, UserRecord.id)
            .all()
        )
        return [user_from_record(r) for r in records]

    def upsert(self, user: User) -> None:
        self.db.merge(
            UserRecord(
                id=user.id,
                name=user.name,
                username=user.username,
                role=user.role,
                commission_rate=user.commission_rate,
                parent_id=user.parent_id,
            )
        )


class CycleRepository:
    """Repository for cycles"""

    def __init__(self, db: Session):
        self.db = db

    def list_cycles(self) -> List[Cycle]:
        records = self.db.query(CycleRecord).order_by(CycleRecord.date, CycleRecord.id).all()
        return [cycle_from_record(r) for r in records]

    def get(self, cycle_id: str) -> Optional[Cycle]:
        record = self.db.get(CycleRecord, cycle_id)
        return cycle_from_record(record) if record else None

    def persist(self, cycle: Cycle) -> None:
        """Insert or fully replace a cycle (no partial update)"""
        self.db.merge(
            CycleRecord(
                id=cycle.id,
                name=cycle.name,
                date=cycle.date,
                deposit_cents=cycle.deposit_cents,
                redeposit_cents=cycle.redeposit_cents,
                withdraw_cents=cycle.withdraw_cents,
                chest_cents=cycle.chest_cents,
                cooperation_cents=cycle.cooperation_cents,
                accounts=cycle.accounts,
                profit_cents=cycle.profit_cents,
                operator_id=cycle.operator_id,
                operator_name=cycle.operator_name,
                owner_admin_id=cycle.owner_admin_id,
            )
        )
        self.db.flush()

    def delete(self, cycle_id: str) -> None:
        record = self.db.get(CycleRecord, cycle_id)
        if record is None:
            raise RecordNotFoundError(f"Cycle {cycle_id} not found")
        self.db.delete(record)
        self.db.flush()

    def delete_many(self, cycle_ids: Iterable[str]) -> int:
        """Batch delete; unknown ids are ignored. Returns rows removed."""
        ids = list(set(cycle_ids))
        if not ids:
            return 0
        deleted = (
            self.db.query(CycleRecord)
            .filter(CycleRecord.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted


class CostRepository:
    """Repository for operating expenses (append-only apart from delete)"""

    def __init__(self, db: Session):
        self.db = db

    def list_costs(self) -> List[Cost]:
        records = self.db.query(CostRecord).order_by(CostRecord.date, CostRecord.id).all()
        return [cost_from_record(r) for r in records]

    def get(self, cost_id: str) -> Optional[Cost]:
        record = self.db.get(CostRecord, cost_id)
        return cost_from_record(record) if record else None

    def persist(self, cost: Cost) -> None:
        self.db.merge(
            CostRecord(
                id=cost.id,
                name=cost.name,
                date=cost.date,
                amount_cents=cost.amount_cents,
                category=cost.category,
                operator_id=cost.operator_id,
                operator_name=cost.operator_name,
                owner_admin_id=cost.owner_admin_id,
            )
        )
        self.db.flush()

    def delete(self, cost_id: str) -> None:
        record = self.db.get(CostRecord, cost_id)
        if record is None:
            raise RecordNotFoundError(f"Cost {cost_id} not found")
        self.db.delete(record)
        self.db.flush()
