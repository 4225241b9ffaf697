from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Sequence

from .models import Task
from .recurrence import is_overdue


# PUBLIC_INTERFACE
class StatusSignal(str, Enum):
    """The single household status shown on the signal output."""

    OFFLINE = "offline"
    OVERDUE = "overdue"
    ALL_CLEAR = "all-clear"
    PENDING = "pending"


# PUBLIC_INTERFACE
def indicator(tasks: Sequence[Task], connectivity_up: bool, now: datetime) -> StatusSignal:
    """
    Derive the status signal. The first matching rule wins:
    offline, then any overdue chore, then all done (or nothing to do), else pending.
    """
    if not connectivity_up:
        return StatusSignal.OFFLINE
    if any(is_overdue(task, now) for task in tasks):
        return StatusSignal.OVERDUE
    if all(task.completed for task in tasks):
        return StatusSignal.ALL_CLEAR
    return StatusSignal.PENDING
