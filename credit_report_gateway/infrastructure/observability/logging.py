"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "credit-report-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "credit-report-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ingestion(
    request_id: str,
    outcome: str,
    duration_ms: float,
    report_number: Optional[str] = None,
    filename: Optional[str] = None,
) -> None:
    """Log structured ingestion outcome for analysis"""
    logging.info(
        "Ingestion completed",
        extra={
            "request_id": request_id,
            "step": "ingestion_complete",
            "outcome": outcome,
            "report_number": report_number,
            "upload_filename": filename,
            "duration_ms": duration_ms,
        },
    )
