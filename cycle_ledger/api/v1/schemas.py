"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from cycle_ledger.utils.money_utils import MAX_AMOUNT


CostCategory = Literal["sms", "proxy", "tool", "other"]


class CycleRequest(BaseModel):
    """Request body for POST /v1/cycles and PUT /v1/cycles/{cycle_id}; money in currency units"""

    user_id: str = Field(..., min_length=1, description="User recording the cycle")
    name: str = Field("New cycle", min_length=1)
    date: Optional[str] = Field(None, description="dd/mm/yyyy or yyyy-mm-dd, defaults to today")
    deposit: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    redeposit: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    withdraw: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    chest: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    cooperation: Decimal = Field(Decimal("0"), ge=0, le=MAX_AMOUNT)
    accounts: int = Field(1, ge=1)


class CycleResponse(BaseModel):
    """Normalized cycle"""

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


class CycleListResponse(BaseModel):
    """Response for GET /v1/cycles"""

    user_id: str
    timeframe: str
    cycles: List[CycleResponse]


class BatchDeleteRequest(BaseModel):
    """Request body for POST /v1/cycles/batch-delete"""

    user_id: str = Field(..., min_length=1)
    cycle_ids: List[str] = Field(..., min_length=1)


class BatchDeleteResponse(BaseModel):
    deleted: int


class CostRequest(BaseModel):
    """Request body for POST /v1/costs; amount in currency units"""

    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    category: CostCategory = "other"
    date: Optional[str] = Field(None, description="dd/mm/yyyy or yyyy-mm-dd, defaults to today")


class CostResponse(BaseModel):
    id: str
    name: str
    date: date
    amount_cents: int
    category: str
    operator_id: str
    operator_name: str
    owner_admin_id: str


class CostListResponse(BaseModel):
    user_id: str
    timeframe: str
    total_cents: int
    costs: List[CostResponse]


class BreakdownItem(BaseModel):
    name: str
    amount_cents: int


class CostSummaryResponse(BaseModel):
    """Response for GET /v1/costs/summary"""

    user_id: str
    timeframe: str
    total_cents: int
    by_category: List[BreakdownItem]
    by_operator: List[BreakdownItem]


class AdminCreateRequest(BaseModel):
    """Request body for POST /v1/users/admins"""

    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)


class OperatorCreateRequest(BaseModel):
    """Request body for POST /v1/users/operators"""

    admin_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    commission_rate: Optional[float] = Field(None, ge=0, le=100, description="Percent, defaults to service setting")


class CommissionUpdateRequest(BaseModel):
    """Request body for PATCH /v1/users/{operator_id}/commission"""

    admin_id: str = Field(..., min_length=1)
    commission_rate: float = Field(..., ge=0, le=100)


class UserResponse(BaseModel):
    id: str
    name: str
    username: str
    role: str
    commission_rate: float
    parent_id: Optional[str] = None


class TeamResponse(BaseModel):
    admin_id: str
    operators: List[UserResponse]


class DailySeriesPointSchema(BaseModel):
    date: date
    display_label: str
    gross_profit_cents: int
    expenses_cents: int
    profit_cents: int


class RankingEntrySchema(BaseModel):
    operator_id: str
    name: str
    commission_cents: int


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    role: str
    user_id: str
    timeframe: str
    currency: str
    final_consolidated_cents: int
    my_personal_profit_cents: int
    my_roi: float
    my_expenses_cents: int
    my_invested_cents: int
    team_commissions_cents: int
    team_total_return_cents: int
    team_total_invested_cents: int
    daily_series: List[DailySeriesPointSchema]
    operator_ranking: List[RankingEntrySchema]


class BackupDocument(BaseModel):
    """Logical backup schema: {users, cycles, costs}"""

    users: List[Dict[str, Any]] = Field(default_factory=list)
    cycles: List[Dict[str, Any]] = Field(default_factory=list)
    costs: List[Dict[str, Any]] = Field(default_factory=list)
    exported_at: Optional[str] = None


class RestoreResponse(BaseModel):
    users: int
    cycles: int
    costs: int
