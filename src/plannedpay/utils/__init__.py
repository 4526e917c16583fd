"""Utility functions for plannedpay."""

from plannedpay.utils.date_parser import parse_date
from plannedpay.utils.amount_parser import parse_amount
from plannedpay.utils.weekday_parser import parse_weekdays, format_weekdays

__all__ = ["parse_date", "parse_amount", "parse_weekdays", "format_weekdays"]
