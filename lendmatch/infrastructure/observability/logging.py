"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from lendmatch.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_chat_turn(
    request_id: str,
    lead_id: int | None,
    match_count: int,
    top_score: int,
    duration_ms: float,
) -> None:
    """Log structured chat outcome for analysis"""
    logging.info(
        "Chat turn completed",
        extra={
            "request_id": request_id,
            "lead_id": lead_id,
            "step": "chat_complete",
            "match_outcome": "matched" if match_count else "no_match",
            "match_count": match_count,
            "top_score": top_score,
            "duration_ms": duration_ms,
        },
    )
