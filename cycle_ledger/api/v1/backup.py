"""/v1/backup - Full export and idempotent restore"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cycle_ledger.api.dependencies import get_request_id, http_error_for
from cycle_ledger.api.v1.schemas import BackupDocument, RestoreResponse
from cycle_ledger.domain.exceptions import DomainException
from cycle_ledger.infrastructure.backup import export_backup, restore_backup
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.infrastructure.database.snapshot import SnapshotLoader, invalidate_snapshot

router = APIRouter()


@router.get("/backup")
def get_backup(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Export users, cycles and costs"""
    return export_backup(SnapshotLoader(db).load())


@router.post("/backup/restore", response_model=RestoreResponse)
def post_restore(body: BackupDocument, request: Request, db: Session = Depends(get_db)):
    """
    Restore a backup by upserting every record by id.

    Invalid records abort the whole restore; importing the same file twice
    leaves the store unchanged.
    """
    request_id = get_request_id(request)
    try:
        counts = restore_backup(db, body.model_dump())
        db.commit()
    except DomainException as e:
        db.rollback()
        logging.warning(f"Backup rejected: {e}", extra={"request_id": request_id})
        raise http_error_for(e)
    except IntegrityError as e:
        db.rollback()
        logging.warning(f"Backup conflicts with stored data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Backup conflicts with stored users")

    invalidate_snapshot("backup_restored", request_id)
    return RestoreResponse(**counts)
