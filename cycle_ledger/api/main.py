"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cycle_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cycle_ledger.api.v1 import backup, costs, cycles, dashboard, users
from cycle_ledger.infrastructure.observability.logging import setup_logging
from cycle_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cycle Ledger",
        description="Cycle and cost tracking with commission and profit consolidation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(cycles.router, prefix="/v1", tags=["cycles"])
    app.include_router(costs.router, prefix="/v1", tags=["costs"])
    app.include_router(users.router, prefix="/v1", tags=["users"])
    app.include_router(backup.router, prefix="/v1", tags=["backup"])

    return app


app = create_app()
