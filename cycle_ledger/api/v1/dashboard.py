"""GET /v1/dashboard - Consolidated financial summary for one user"""

import time
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cycle_ledger.api.dependencies import get_request_id, require_user, validate_timeframe
from cycle_ledger.api.v1.schemas import DashboardResponse, DailySeriesPointSchema, RankingEntrySchema
from cycle_ledger.config import settings
from cycle_ledger.domain.dashboard import compute_dashboard
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.infrastructure.database.snapshot import SnapshotLoader
from cycle_ledger.infrastructure.observability.logging import log_dashboard
from cycle_ledger.infrastructure.observability.metrics import record_dashboard

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    request: Request,
    user_id: str = Query(..., description="User the dashboard is computed for"),
    timeframe: str = Query("all", description="daily | weekly | monthly | all"),
    db: Session = Depends(get_db),
):
    """
    Compute the role-aware dashboard.

    Flow:
    1. Resolve the user (role decides the consolidation)
    2. Reload the full snapshot (users, cycles, costs)
    3. Run the pure dashboard computation
    4. Record metrics and logs
    """
    start_time = time.time()
    request_id = get_request_id(request)
    validate_timeframe(timeframe)
    user = require_user(db, user_id)

    snapshot = SnapshotLoader(db).load()
    dashboard = compute_dashboard(
        snapshot.cycles,
        snapshot.costs,
        snapshot.users,
        role=user.role,
        current_user_id=user.id,
        timeframe=timeframe,
        include_zero_in_ranking=settings.ranking_include_zero_commission,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_dashboard(user.role, dashboard.team_commissions_cents)
    log_dashboard(
        request_id,
        user.id,
        user.role,
        timeframe,
        dashboard.final_consolidated_cents,
        dashboard.team_commissions_cents,
        duration_ms,
    )

    return DashboardResponse(
        role=dashboard.role,
        user_id=dashboard.user_id,
        timeframe=timeframe,
        currency=settings.currency_code,
        final_consolidated_cents=dashboard.final_consolidated_cents,
        my_personal_profit_cents=dashboard.my_personal_profit_cents,
        my_roi=dashboard.my_roi,
        my_expenses_cents=dashboard.my_expenses_cents,
        my_invested_cents=dashboard.my_invested_cents,
        team_commissions_cents=dashboard.team_commissions_cents,
        team_total_return_cents=dashboard.team_total_return_cents,
        team_total_invested_cents=dashboard.team_total_invested_cents,
        daily_series=[
            DailySeriesPointSchema(
                date=p.date,
                display_label=p.display_label,
                gross_profit_cents=p.gross_profit_cents,
                expenses_cents=p.expenses_cents,
                profit_cents=p.profit_cents,
            )
            for p in dashboard.daily_series
        ],
        operator_ranking=[
            RankingEntrySchema(operator_id=r.operator_id, name=r.name, commission_cents=r.commission_cents)
            for r in dashboard.operator_ranking
        ],
    )
