"""/v1/users - Admin registration and team management"""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from cycle_ledger.api.dependencies import get_request_id, http_error_for, require_user
from cycle_ledger.api.v1.schemas import (
    AdminCreateRequest,
    CommissionUpdateRequest,
    OperatorCreateRequest,
    TeamResponse,
    UserResponse,
)
from cycle_ledger.config import settings
from cycle_ledger.domain.exceptions import DomainException
from cycle_ledger.domain.models import User
from cycle_ledger.infrastructure.database.repositories import UserRepository
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.infrastructure.database.snapshot import invalidate_snapshot
from cycle_ledger.infrastructure.observability.logging import log_mutation
from cycle_ledger.infrastructure.observability.metrics import record_write

router = APIRouter()


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        username=user.username,
        role=user.role,
        commission_rate=user.commission_rate,
        parent_id=user.parent_id,
    )


@router.post("/users/admins", response_model=UserResponse, status_code=201)
def register_admin(body: AdminCreateRequest, request: Request, db: Session = Depends(get_db)):
    """Register an admin; usernames are unique regardless of case"""
    request_id = get_request_id(request)
    try:
        user = UserRepository(db).register_admin(body.name, body.username)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("user", "create")
    log_mutation(request_id, user.id, "admin_registered", user.id)
    invalidate_snapshot("admin_registered", request_id)
    return to_response(user)


@router.post("/users/operators", response_model=UserResponse, status_code=201)
def create_operator(body: OperatorCreateRequest, request: Request, db: Session = Depends(get_db)):
    """Create an operator under an admin"""
    request_id = get_request_id(request)
    rate = body.commission_rate if body.commission_rate is not None else settings.default_operator_commission_rate
    try:
        user = UserRepository(db).create_operator(body.admin_id, body.name, body.username, rate)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("user", "create")
    log_mutation(request_id, body.admin_id, "operator_created", user.id)
    invalidate_snapshot("operator_created", request_id)
    return to_response(user)


@router.get("/users/{admin_id}/team", response_model=TeamResponse)
def get_team(admin_id: str, db: Session = Depends(get_db)):
    admin = require_user(db, admin_id)
    operators = UserRepository(db).list_team(admin.id)
    return TeamResponse(admin_id=admin.id, operators=[to_response(u) for u in operators])


@router.patch("/users/{operator_id}/commission", response_model=UserResponse)
def update_commission(
    operator_id: str,
    body: CommissionUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Change an operator's commission rate.

    Commission is never stored, so the new rate applies to every cycle of
    the operator on the next dashboard load.
    """
    request_id = get_request_id(request)
    try:
        user = UserRepository(db).update_commission_rate(body.admin_id, operator_id, body.commission_rate)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("user", "update")
    log_mutation(request_id, body.admin_id, "commission_rate_updated", operator_id)
    invalidate_snapshot("commission_rate_updated", request_id)
    return to_response(user)


@router.delete("/users/{operator_id}", status_code=204)
def delete_operator(
    operator_id: str,
    request: Request,
    admin_id: str = Query(..., description="Admin that manages the operator"),
    db: Session = Depends(get_db),
):
    """Remove an operator; its historical cycles and costs remain"""
    request_id = get_request_id(request)
    try:
        UserRepository(db).delete_operator(admin_id, operator_id)
        db.commit()
    except DomainException as e:
        db.rollback()
        raise http_error_for(e)

    record_write("user", "delete")
    log_mutation(request_id, admin_id, "operator_deleted", operator_id)
    invalidate_snapshot("operator_deleted", request_id)
