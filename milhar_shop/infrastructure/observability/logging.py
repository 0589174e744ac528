"""Structured JSON logging for shop operations"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from milhar_shop.domain.models import Bet, User

SERVICE_NAME = "milhar-shop"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = SERVICE_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = SERVICE_NAME) -> None:
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


def log_bet_placed(bet: Bet) -> None:
    logging.info(
        "Bet placed",
        extra={
            "step": "bet_placed",
            "bet_id": bet.id,
            "seller_id": bet.seller_id,
            "game_type": bet.game_type.value,
            "amount": str(bet.amount),
            "receipt_code": bet.receipt_code,
        },
    )


def log_bet_cancelled(bet: Bet, cancelled_by: User) -> None:
    logging.info(
        "Bet cancelled",
        extra={
            "step": "bet_cancelled",
            "bet_id": bet.id,
            "seller_id": bet.seller_id,
            "cancelled_by": cancelled_by.id,
        },
    )


def log_login(username: str, succeeded: bool) -> None:
    """Record a login attempt; the password never reaches the log"""
    logging.log(
        logging.INFO if succeeded else logging.WARNING,
        "Login succeeded" if succeeded else "Login failed",
        extra={
            "step": "login",
            "username": username,
            "outcome": "success" if succeeded else "failure",
        },
    )
