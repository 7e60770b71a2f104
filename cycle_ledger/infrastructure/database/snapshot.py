"""Snapshot loading and invalidation

The engine has no incremental path: every mutation invalidates the
snapshot and the next aggregation reloads users, cycles and costs in full.
"""

import logging
from sqlalchemy.orm import Session

from cycle_ledger.domain.models import LedgerSnapshot
from cycle_ledger.infrastructure.database.repositories import CostRepository, CycleRepository, UserRepository
from cycle_ledger.infrastructure.observability.metrics import snapshot_invalidation_counter, snapshot_load_histogram


class SnapshotLoader:
    """Full reload of the three record sets"""

    def __init__(self, db: Session):
        self.users = UserRepository(db)
        self.cycles = CycleRepository(db)
        self.costs = CostRepository(db)

    def load(self) -> LedgerSnapshot:
        with snapshot_load_histogram.time():
            return LedgerSnapshot(
                users=tuple(self.users.list_users()),
                cycles=tuple(self.cycles.list_cycles()),
                costs=tuple(self.costs.list_costs()),
            )


def invalidate_snapshot(reason: str, request_id: str = "unknown") -> None:
    """Mark the current snapshot stale after a committed mutation"""
    snapshot_invalidation_counter.labels(reason=reason).inc()
    logging.info("Snapshot invalidated", extra={"request_id": request_id, "reason": reason})
