"""Recurring task schedule arithmetic."""

from datetime import date, timedelta

from projecthub.domain.enums import Frequency
from projecthub.shared.utils.datetime import days_in_month


def add_months(value: date, months: int) -> date:
    """Shift value by whole months, clamping the day to the target month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(value.day, days_in_month(year, month)))


def calculate_next_due_date(
    frequency: str,
    interval: int,
    current: date,
    day_of_month: int | None = None,
) -> date:
    """Return the due date following current.

    Advances by interval days, weeks, months or years. Monthly schedules
    then land on day_of_month, clamped to the length of the target month.
    """
    step = max(1, interval)
    if frequency == Frequency.DAILY:
        return current + timedelta(days=step)
    if frequency == Frequency.WEEKLY:
        return current + timedelta(weeks=step)
    if frequency == Frequency.MONTHLY:
        shifted = add_months(current, step)
        if day_of_month:
            last_day = days_in_month(shifted.year, shifted.month)
            shifted = shifted.replace(day=min(day_of_month, last_day))
        return shifted
    if frequency == Frequency.YEARLY:
        return add_months(current, 12 * step)
    raise ValueError(f"Unknown frequency: {frequency}")
