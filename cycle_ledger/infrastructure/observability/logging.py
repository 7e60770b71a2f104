"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from cycle_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_dashboard(
    request_id: str,
    user_id: str,
    role: str,
    timeframe: str,
    final_consolidated_cents: int,
    team_commissions_cents: int,
    duration_ms: float,
) -> None:
    """Log structured dashboard outcome"""
    logging.info(
        "Dashboard computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "role": role,
            "timeframe": timeframe,
            "step": "dashboard_complete",
            "final_consolidated_cents": final_consolidated_cents,
            "team_commissions_cents": team_commissions_cents,
            "duration_ms": duration_ms,
        },
    )


def log_mutation(request_id: str, user_id: str, action: str, record_id: str) -> None:
    """Log a write against the store"""
    logging.info(
        "Record mutated",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": action,
            "record_id": record_id,
        },
    )
