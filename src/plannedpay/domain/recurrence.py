"""Next-execution-date rule for planned payments."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from plannedpay.domain.entities import (
    PlannedPayment,
    ONE_TIME,
    DAILY,
    WEEKLY,
    MONTHLY,
    YEARLY,
)


def weekday_index(day: date) -> int:
    """Return the weekday index of ``day`` with 0 as Sunday and 6 as Saturday."""
    return day.isoweekday() % 7


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _first_occurrence(payment: PlannedPayment, start: date) -> Optional[date]:
    """First occurrence on or after the start date of a never executed payment."""
    recurrence = payment.recurrence_type
    if recurrence == WEEKLY and payment.weekly_days:
        for offset in range(7):
            candidate = start + timedelta(days=offset)
            if weekday_index(candidate) in payment.weekly_days:
                return candidate
        return start
    if recurrence in (DAILY, WEEKLY, MONTHLY, YEARLY):
        return start
    return None


def _advance(payment: PlannedPayment, base: date) -> Optional[date]:
    """Advance a single recurrence step from ``base``."""
    recurrence = payment.recurrence_type
    if recurrence == DAILY:
        return base + timedelta(days=1)

    if recurrence == WEEKLY:
        if payment.weekly_days:
            for offset in range(1, 8):
                candidate = base + timedelta(days=offset)
                if weekday_index(candidate) in payment.weekly_days:
                    return candidate
        return base + timedelta(days=7)

    if recurrence == MONTHLY:
        return base + relativedelta(months=payment.monthly_interval or 1)

    if recurrence == YEARLY:
        return base + relativedelta(years=1)

    return None


def compute_next_execution_date(
    payment: PlannedPayment,
    last_executed: Optional[date] = None,
    today: Optional[date] = None,
) -> Optional[date]:
    """Compute the next date a planned payment should execute.

    A one-time payment is due on its scheduled date until it has executed,
    after which it has no further occurrences. A recurrent payment that never
    executed first occurs on its start date (for weekly payments with chosen
    weekdays, the first chosen weekday on or after it). After that it
    advances one step from its last execution. Monthly and yearly steps clamp
    to the end of shorter months.

    Args:
        payment: Planned payment (only its scheduling fields are read)
        last_executed: Date or timestamp of the most recent execution
        today: Base for recurrent payments with neither a start date nor an
            execution (defaults to the current date)

    Returns:
        Next execution date, or None when nothing remains to schedule
    """
    if payment.frequency == ONE_TIME:
        if last_executed is not None:
            return None
        return payment.scheduled_date

    if last_executed is not None:
        return _advance(payment, _as_date(last_executed))
    if payment.start_date is not None:
        return _first_occurrence(payment, _as_date(payment.start_date))
    return _advance(payment, today if today is not None else date.today())
