"""Prometheus metrics for dashboards, record writes and snapshot reloads"""

from prometheus_client import Counter, Histogram

# Dashboard metrics
dashboard_counter = Counter(
    "cycle_ledger_dashboard_total",
    "Dashboards computed",
    ["role"],  # admin | operator
)

commission_histogram = Histogram(
    "cycle_ledger_team_commission_brl",
    "Team commissions per admin dashboard (currency units)",
    buckets=[0, 50, 100, 500, 1000, 5000, 10000],
)

# Store writes
record_write_counter = Counter(
    "cycle_ledger_record_writes_total",
    "Cycles, costs and users written or deleted",
    ["entity", "action"],  # cycle|cost|user, create|update|delete
)

validation_failure_counter = Counter(
    "cycle_ledger_validation_failures_total",
    "Inputs rejected at the normalization boundary",
    ["entity"],
)

snapshot_invalidation_counter = Counter(
    "cycle_ledger_snapshot_invalidations_total",
    "Mutations that force a full reload before the next aggregation",
    ["reason"],
)

snapshot_load_histogram = Histogram(
    "cycle_ledger_snapshot_load_seconds",
    "Time spent reloading users, cycles and costs",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_dashboard(role: str, team_commissions_cents: int) -> None:
    """Count dashboards and track the commission distribution for admins"""
    dashboard_counter.labels(role=role).inc()
    if role == "admin":
        commission_histogram.observe(team_commissions_cents / 100)


def record_write(entity: str, action: str, count: int = 1) -> None:
    record_write_counter.labels(entity=entity, action=action).inc(count)
