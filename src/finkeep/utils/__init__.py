"""Utility functions for finkeep."""

from finkeep.utils.date_parser import parse_date, parse_month
from finkeep.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "parse_amount"]
