"""/v1/costs - Operating expenses (append-only apart from delete)"""

import logging
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cycle_ledger.api.dependencies import get_request_id, http_error_for, require_user, validate_timeframe
from cycle_ledger.api.v1.schemas import (
    BreakdownItem,
    CostListResponse,
    CostRequest,
    CostResponse,
    CostSummaryResponse,
)
from cycle_ledger.domain.costs import summarize_costs
from cycle_ledger.domain.dashboard import is_visible_to
from cycle_ledger.domain.exceptions import DomainException, ValidationError
from cycle_ledger.domain.models import Cost, RawCost, User
from cycle_ledger.domain.normalizer import normalize_cost
from cycle_ledger.infrastructure.database.models import new_record_id
from cycle_ledger.infrastructure.database.repositories import CostRepository
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.infrastructure.database.snapshot import invalidate_snapshot
from cycle_ledger.infrastructure.observability.logging import log_mutation
from cycle_ledger.infrastructure.observability.metrics import record_write, validation_failure_counter
from cycle_ledger.utils.date_utils import filter_by_timeframe

router = APIRouter()


def to_response(cost: Cost) -> CostResponse:
    return CostResponse(
        id=cost.id,
        name=cost.name,
        date=cost.date,
        amount_cents=cost.amount_cents,
        category=cost.category,
        operator_id=cost.operator_id,
        operator_name=cost.operator_name,
        owner_admin_id=cost.owner_admin_id,
    )


def _visible_costs(db: Session, actor: User, timeframe: str) -> List[Cost]:
    costs = [c for c in CostRepository(db).list_costs() if is_visible_to(actor.role, actor.id, c)]
    return filter_by_timeframe(costs, timeframe)


@router.get("/costs", response_model=CostListResponse)
def list_costs(
    user_id: str = Query(...),
    timeframe: str = Query("all", description="daily | weekly | monthly | all"),
    db: Session = Depends(get_db),
):
    """List visible costs, newest first, with the period total"""
    validate_timeframe(timeframe)
    actor = require_user(db, user_id)
    costs = sorted(_visible_costs(db, actor, timeframe), key=lambda c: (c.date, c.id), reverse=True)

    return CostListResponse(
        user_id=actor.id,
        timeframe=timeframe,
        total_cents=sum(c.amount_cents for c in costs),
        costs=[to_response(c) for c in costs],
    )


@router.get("/costs/summary", response_model=CostSummaryResponse)
def get_cost_summary(
    user_id: str = Query(...),
    timeframe: str = Query("all", description="daily | weekly | monthly | all"),
    db: Session = Depends(get_db),
):
    """Cost totals by category and by operator for the period"""
    validate_timeframe(timeframe)
    actor = require_user(db, user_id)
    breakdown = summarize_costs(_visible_costs(db, actor, timeframe))

    return CostSummaryResponse(
        user_id=actor.id,
        timeframe=timeframe,
        total_cents=breakdown.total_cents,
        by_category=[BreakdownItem(name=n, amount_cents=a) for n, a in breakdown.by_category],
        by_operator=[BreakdownItem(name=n, amount_cents=a) for n, a in breakdown.by_operator],
    )


@router.post("/costs", response_model=CostResponse, status_code=201)
def create_cost(body: CostRequest, request: Request, db: Session = Depends(get_db)):
    request_id = get_request_id(request)
    actor = require_user(db, body.user_id)

    try:
        cost = normalize_cost(
            RawCost(
                id=new_record_id(),
                name=body.name,
                date=body.date or date.today(),
                amount=body.amount,
                category=body.category,
                operator_id=actor.id,
                operator_name=actor.name,
                owner_admin_id=actor.owner_admin_id,
            )
        )
    except ValidationError as e:
        validation_failure_counter.labels(entity="cost").inc()
        raise HTTPException(status_code=422, detail=str(e))

    try:
        CostRepository(db).persist(cost)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save cost: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_write("cost", "create")
    log_mutation(request_id, actor.id, "cost_created", cost.id)
    invalidate_snapshot("cost_created", request_id)
    return to_response(cost)


@router.delete("/costs/{cost_id}", status_code=204)
def delete_cost(
    cost_id: str,
    request: Request,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    actor = require_user(db, user_id)
    repo = CostRepository(db)

    cost = repo.get(cost_id)
    if cost is None:
        raise HTTPException(status_code=404, detail="Cost not found")
    if not is_visible_to(actor.role, actor.id, cost):
        raise HTTPException(status_code=403, detail="Cost belongs to another team")

    try:
        repo.delete(cost_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("cost", "delete")
    log_mutation(request_id, actor.id, "cost_deleted", cost_id)
    invalidate_snapshot("cost_deleted", request_id)
