"""/v1/cycles - Record, replace, list and delete cycles"""

import logging
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cycle_ledger.api.dependencies import get_request_id, http_error_for, require_user, validate_timeframe
from cycle_ledger.api.v1.schemas import (
    BatchDeleteRequest,
    BatchDeleteResponse,
    CycleListResponse,
    CycleRequest,
    CycleResponse,
)
from cycle_ledger.domain.dashboard import is_visible_to
from cycle_ledger.domain.exceptions import DomainException, ValidationError
from cycle_ledger.domain.models import Cycle, RawCycle, User
from cycle_ledger.domain.normalizer import normalize_cycle
from cycle_ledger.infrastructure.database.models import new_record_id
from cycle_ledger.infrastructure.database.repositories import CycleRepository
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.infrastructure.database.snapshot import invalidate_snapshot
from cycle_ledger.infrastructure.observability.logging import log_mutation
from cycle_ledger.infrastructure.observability.metrics import record_write, validation_failure_counter
from cycle_ledger.utils.date_utils import filter_by_timeframe

router = APIRouter()


def to_response(cycle: Cycle) -> CycleResponse:
    return CycleResponse(
        id=cycle.id,
        name=cycle.name,
        date=cycle.date,
        deposit_cents=cycle.deposit_cents,
        redeposit_cents=cycle.redeposit_cents,
        withdraw_cents=cycle.withdraw_cents,
        chest_cents=cycle.chest_cents,
        cooperation_cents=cycle.cooperation_cents,
        accounts=cycle.accounts,
        invested_cents=cycle.invested_cents,
        return_cents=cycle.return_cents,
        profit_cents=cycle.profit_cents,
        operator_id=cycle.operator_id,
        operator_name=cycle.operator_name,
        owner_admin_id=cycle.owner_admin_id,
    )


def _normalize(body: CycleRequest, cycle_id: str, operator_id: str, operator_name: str, owner_admin_id: str) -> Cycle:
    try:
        return normalize_cycle(
            RawCycle(
                id=cycle_id,
                name=body.name,
                date=body.date or date.today(),
                operator_id=operator_id,
                operator_name=operator_name,
                owner_admin_id=owner_admin_id,
                deposit=body.deposit,
                redeposit=body.redeposit,
                withdraw=body.withdraw,
                chest=body.chest,
                cooperation=body.cooperation,
                accounts=body.accounts,
            )
        )
    except ValidationError as e:
        validation_failure_counter.labels(entity="cycle").inc()
        raise HTTPException(status_code=422, detail=str(e))


def _require_visible(repo: CycleRepository, actor: User, cycle_id: str) -> Cycle:
    cycle = repo.get(cycle_id)
    if cycle is None:
        raise HTTPException(status_code=404, detail="Cycle not found")
    if not is_visible_to(actor.role, actor.id, cycle):
        raise HTTPException(status_code=403, detail="Cycle belongs to another team")
    return cycle


@router.get("/cycles", response_model=CycleListResponse)
def list_cycles(
    user_id: str = Query(..., description="User whose visible cycles are listed"),
    timeframe: str = Query("all", description="daily | weekly | monthly | all"),
    search: str = Query("", description="Case-insensitive match on cycle name"),
    db: Session = Depends(get_db),
):
    """List visible cycles, newest first"""
    validate_timeframe(timeframe)
    actor = require_user(db, user_id)

    cycles = [c for c in CycleRepository(db).list_cycles() if is_visible_to(actor.role, actor.id, c)]
    cycles = filter_by_timeframe(cycles, timeframe)
    needle = search.strip().lower()
    if needle:
        cycles = [c for c in cycles if needle in c.name.lower()]
    cycles.sort(key=lambda c: (c.date, c.id), reverse=True)

    return CycleListResponse(user_id=actor.id, timeframe=timeframe, cycles=[to_response(c) for c in cycles])


@router.post("/cycles", response_model=CycleResponse, status_code=201)
def create_cycle(body: CycleRequest, request: Request, db: Session = Depends(get_db)):
    """
    Record a new cycle for the acting user.

    The cycle is normalized before anything is written; a validation
    failure leaves the store untouched.
    """
    request_id = get_request_id(request)
    actor = require_user(db, body.user_id)
    cycle = _normalize(body, new_record_id(), actor.id, actor.name, actor.owner_admin_id)

    try:
        CycleRepository(db).persist(cycle)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to save cycle: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_write("cycle", "create")
    log_mutation(request_id, actor.id, "cycle_created", cycle.id)
    invalidate_snapshot("cycle_created", request_id)
    return to_response(cycle)


@router.put("/cycles/{cycle_id}", response_model=CycleResponse)
def replace_cycle(cycle_id: str, body: CycleRequest, request: Request, db: Session = Depends(get_db)):
    """Fully replace a cycle's fields; id and ownership are kept"""
    request_id = get_request_id(request)
    actor = require_user(db, body.user_id)
    repo = CycleRepository(db)
    existing = _require_visible(repo, actor, cycle_id)

    cycle = _normalize(body, existing.id, existing.operator_id, existing.operator_name, existing.owner_admin_id)

    try:
        repo.persist(cycle)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to replace cycle: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_write("cycle", "update")
    log_mutation(request_id, actor.id, "cycle_replaced", cycle.id)
    invalidate_snapshot("cycle_replaced", request_id)
    return to_response(cycle)


@router.delete("/cycles/{cycle_id}", status_code=204)
def delete_cycle(
    cycle_id: str,
    request: Request,
    user_id: str = Query(...),
    db: Session = Depends(get_db),
):
    request_id = get_request_id(request)
    actor = require_user(db, user_id)
    repo = CycleRepository(db)
    _require_visible(repo, actor, cycle_id)

    try:
        repo.delete(cycle_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("cycle", "delete")
    log_mutation(request_id, actor.id, "cycle_deleted", cycle_id)
    invalidate_snapshot("cycle_deleted", request_id)


@router.post("/cycles/batch-delete", response_model=BatchDeleteResponse)
def delete_cycles(body: BatchDeleteRequest, request: Request, db: Session = Depends(get_db)):
    """Delete several cycles at once; any foreign or unknown id aborts the whole batch"""
    request_id = get_request_id(request)
    actor = require_user(db, body.user_id)
    repo = CycleRepository(db)
    ids: List[str] = list(dict.fromkeys(body.cycle_ids))
    for cycle_id in ids:
        _require_visible(repo, actor, cycle_id)

    try:
        deleted = repo.delete_many(ids)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to delete cycles: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_write("cycle", "delete", deleted)
    log_mutation(request_id, actor.id, "cycles_batch_deleted", ",".join(ids))
    invalidate_snapshot("cycles_batch_deleted", request_id)
    return BatchDeleteResponse(deleted=deleted)
