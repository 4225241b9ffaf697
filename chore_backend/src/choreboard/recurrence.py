"""
Recurrence rules for chores.

All functions are pure apart from `sweep`, which mutates the tasks it is given
and reports whether anything changed so callers can persist and redraw.
Datetimes are naive and share a single local clock domain.
"""
from __future__ import annotations

import calendar
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from .models import Frequency, Task

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)
_MONDAY = 0


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


# PUBLIC_INTERFACE
def next_due(last_completed_at: Optional[datetime], frequency: Frequency, now: datetime) -> datetime:
    """
    Compute when a chore becomes due again.

    - Never completed: due immediately (now).
    - Daily: midnight starting the day after the completion.
    - Weekly: completion + 7 days, moved back to the Monday of that week, so a
      Wednesday completion resets on the following Monday. Time of day is kept.
    - Monthly: the 1st of the following month, same time of day.
    """
    if last_completed_at is None:
        return now

    if frequency == Frequency.DAILY:
        return _start_of_day(last_completed_at) + _ONE_DAY

    if frequency == Frequency.WEEKLY:
        candidate = last_completed_at + timedelta(days=7)
        while candidate.weekday() != _MONDAY:
            candidate -= _ONE_DAY
        return candidate

    if frequency == Frequency.MONTHLY:
        return last_completed_at.replace(day=1) + relativedelta(months=1)

    raise ValueError(f"Unsupported frequency: {frequency!r}")


# PUBLIC_INTERFACE
def days_until_due(task: Task, now: datetime) -> int:
    """Whole days until a completed chore resets; 0 when incomplete or already past due."""
    if not task.completed:
        return 0
    remaining = task.next_due_at - now
    if remaining <= timedelta(0):
        return 0
    return remaining // _ONE_DAY


# PUBLIC_INTERFACE
def days_until_reset(task: Task, now: datetime) -> int:
    """Days left in the current period of an incomplete chore (informational)."""
    if task.frequency == Frequency.DAILY:
        return 1
    if task.frequency == Frequency.WEEKLY:
        # Monday counts a full week.
        return 7 - now.weekday()
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    return (days_in_month - now.day) + 1


# PUBLIC_INTERFACE
def is_overdue(task: Task, now: datetime) -> bool:
    """An incomplete chore is overdue once `now` passes its due time."""
    return not task.completed and now > task.next_due_at


# PUBLIC_INTERFACE
def sweep(tasks: Iterable[Task], now: datetime) -> bool:
    """
    Reset completions whose cycle has ended.

    Clears `completed` and `points_awarded` together for every completed task
    with `now >= next_due_at`. Incomplete tasks are never touched.

    Returns:
        True if at least one task was reset.
    """
    changed = False
    for task in tasks:
        if task.completed and now >= task.next_due_at:
            task.completed = False
            task.points_awarded = False
            changed = True
            logger.info("Reset chore %r (%s cycle ended)", task.name, task.frequency.value)
    return changed
