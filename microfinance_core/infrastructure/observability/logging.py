"""Structured JSON logging for report refreshes and rejected inputs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from pythonjsonlogger import jsonlogger

from microfinance_core.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_refresh(
    generation: int,
    record_counts: Mapping[str, int],
    client_count: int,
    duration_ms: float,
) -> None:
    """Log structured refresh outcome"""
    logging.info(
        "Report refresh completed",
        extra={
            "generation": generation,
            "step": "refresh_complete",
            "record_counts": dict(record_counts),
            "client_count": client_count,
            "duration_ms": duration_ms,
        },
    )


def log_validation_failure(operation: str, errors: Mapping[str, str]) -> None:
    """Log a rejected input together with its field errors"""
    logging.warning(
        "Validation failed",
        extra={
            "step": operation,
            "fields": sorted(errors),
            "errors": dict(errors),
        },
    )
