"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

ROLE_ADMIN = "admin"
ROLE_OPERATOR = "operator"
ROLES = (ROLE_ADMIN, ROLE_OPERATOR)

COST_CATEGORIES = ("sms", "proxy", "tool", "other")

TIMEFRAMES = ("daily", "weekly", "monthly", "all")

MoneyInput = Union[Decimal, int, float, str]
DateInput = Union[date, str]


@dataclass
class User:
    """Admin or operator; operators reference their admin through parent_id"""

    id: str
    name: str
    username: str
    role: str  # "admin" or "operator"
    commission_rate: float = 0.0  # Percent, inert for admins
    parent_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def owner_admin_id(self) -> str:
        """Admin that records created by this user are attributed to"""
        if self.is_admin or not self.parent_id:
            return self.id
        return self.parent_id


@dataclass
class RawCycle:
    """Cycle as entered on the form, money in currency units"""

    id: str
    name: str
    date: DateInput
    operator_id: str
    operator_name: str
    owner_admin_id: str
    deposit: MoneyInput = 0
    redeposit: MoneyInput = 0
    withdraw: MoneyInput = 0
    chest: MoneyInput = 0
    cooperation: MoneyInput = 0
    accounts: int = 1


@dataclass(frozen=True)
class Cycle:
    """Normalized cycle; invested/return/profit are always derived from the raw fields"""

    id: str
    name: str
    date: date
    deposit_cents: int
    redeposit_cents: int
    withdraw_cents: int
    chest_cents: int
    cooperation_cents: int
    accounts: int
    invested_cents: int
    return_cents: int
    profit_cents: int
    operator_id: str
    operator_name: str
    owner_admin_id: str


@dataclass
class RawCost:
    """Operating expense as entered, amount in currency units"""

    id: str
    name: str
    date: DateInput
    amount: MoneyInput
    category: str
    operator_id: str
    operator_name: str
    owner_admin_id: str


@dataclass(frozen=True)
class Cost:
    """Normalized operating expense"""

    id: str
    name: str
    date: date
    amount_cents: int
    category: str  # one of COST_CATEGORIES
    operator_id: str
    operator_name: str
    owner_admin_id: str


@dataclass(frozen=True)
class LedgerSnapshot:
    """Full reload of the three record sets; never mutated, never kept across requests"""

    users: Tuple[User, ...] = ()
    cycles: Tuple[Cycle, ...] = ()
    costs: Tuple[Cost, ...] = ()


@dataclass
class OperatorAggregate:
    """Net base and commission for one operator over a reporting period"""

    operator_id: str
    name: str
    commission_rate: float
    gross_profit_cents: int
    total_expenses_cents: int
    net_base_cents: int
    commission_cents: int
    gross_return_cents: int
    gross_invested_cents: int
    cycle_count: int = 0
    cost_count: int = 0


@dataclass
class ConsolidatedResult:
    """Role-aware final balance"""

    role: str
    user_id: str
    my_net_base_cents: int
    my_commission_paid_cents: int
    team_commissions_cents: int
    final_consolidated_cents: int
    team: Dict[str, OperatorAggregate] = field(default_factory=dict)


@dataclass
class DailySeriesPoint:
    """Profit bucket for one calendar day"""

    date: date
    display_label: str
    gross_profit_cents: int
    expenses_cents: int
    profit_cents: int


@dataclass
class RankingEntry:
    """Commission an operator generated for the admin"""

    operator_id: str
    name: str
    commission_cents: int


@dataclass
class CostBreakdown:
    """Cost totals per category and per operator name snapshot"""

    total_cents: int
    by_category: List[Tuple[str, int]]
    by_operator: List[Tuple[str, int]]


@dataclass
class Dashboard:
    """Everything the presentation layer renders for one user"""

    role: str
    user_id: str
    final_consolidated_cents: int
    my_personal_profit_cents: int
    my_roi: float
    my_expenses_cents: int
    my_invested_cents: int
    team_commissions_cents: int
    team_total_return_cents: int
    team_total_invested_cents: int
    daily_series: List[DailySeriesPoint]
    operator_ranking: List[RankingEntry]
