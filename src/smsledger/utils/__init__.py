"""Utility functions for smsledger."""

from smsledger.utils.date_parser import parse_date, parse_timestamp, period_start
from smsledger.utils.amount_parser import parse_amount, format_amount, round_amount
from smsledger.utils.logging_config import setup_logging, get_logger

__all__ = [
    "parse_date",
    "parse_timestamp",
    "period_start",
    "parse_amount",
    "format_amount",
    "round_amount",
    "setup_logging",
    "get_logger",
]
