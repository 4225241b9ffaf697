from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


# PUBLIC_INTERFACE
class Frequency(str, Enum):
    """Recurrence class of a chore."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


# Points credited per completion cycle; strictly increasing with the period length.
POINTS_BY_FREQUENCY: Dict[Frequency, int] = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 5,
    Frequency.MONTHLY: 20,
}


# PUBLIC_INTERFACE
@dataclass
class Task:
    """
    A recurring household chore.

    Fields:
    - name: Display name
    - assignee: Username of the responsible user (plain string match, not a key)
    - frequency: Daily/Weekly/Monthly
    - completed: Completion flag for the current cycle
    - last_completed_at: Last completion time, None when never completed
    - next_due_at: Derived from last_completed_at and frequency
    - points_awarded: True iff points were credited for the current cycle
    """

    name: str
    assignee: str
    frequency: Frequency
    next_due_at: datetime
    completed: bool = False
    last_completed_at: Optional[datetime] = None
    points_awarded: bool = False

    @property
    def points(self) -> int:
        return POINTS_BY_FREQUENCY[self.frequency]


# PUBLIC_INTERFACE
@dataclass
class User:
    """A household member with a point balance."""

    username: str
    points: int = 0


# PUBLIC_INTERFACE
@dataclass
class AppState:
    """
    Owned application state shared by the request surface and the device loop.

    The cursor is the index of the task shown on the physical display. It is
    never persisted.
    """

    tasks: List[Task] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    cursor: int = 0

    def selected_task(self) -> Optional[Task]:
        if not self.tasks:
            return None
        return self.tasks[self.cursor]

    def clamp_cursor(self) -> None:
        if not self.tasks:
            self.cursor = 0
        elif self.cursor >= len(self.tasks):
            self.cursor = len(self.tasks) - 1
        elif self.cursor < 0:
            self.cursor = 0

    def find_user(self, username: str) -> Optional[User]:
        return find_user(self.users, username)


def find_user(users: List[User], username: str) -> Optional[User]:
    """Return the first user whose username equals the given string exactly."""
    for user in users:
        if user.username == username:
            return user
    return None
