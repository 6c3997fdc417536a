"""Utility functions for pockettrack."""

from pockettrack.utils.date_parser import parse_date, parse_month, month_bounds
from pockettrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_month", "month_bounds", "parse_amount"]
