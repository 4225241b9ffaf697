"""
Completion and points ledger.

Every mutating operation works on an in-memory AppState and returns a
`Commit` naming the collections that changed. Persisting them is the caller's
job (see `service.ChoreService`), which keeps this module free of I/O.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .models import AppState, Frequency, Task, User, find_user
from .recurrence import next_due

logger = logging.getLogger(__name__)


class RecordNotFound(IndexError):
    """Raised when an index does not address an existing task or user."""

    def __init__(self, kind: str, index: int) -> None:
        self.kind = kind
        self.index = index
        super().__init__(f"{kind} index {index} out of range")


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Commit:
    """Which persisted collections a mutation touched."""

    tasks: bool = False
    users: bool = False

    def __bool__(self) -> bool:
        return self.tasks or self.users


NO_COMMIT = Commit()


def _task_at(state: AppState, index: int) -> Task:
    if not 0 <= index < len(state.tasks):
        raise RecordNotFound("task", index)
    return state.tasks[index]


def _user_at(state: AppState, index: int) -> User:
    if not 0 <= index < len(state.users):
        raise RecordNotFound("user", index)
    return state.users[index]


# PUBLIC_INTERFACE
def set_completion(task: Task, users: List[User], now: datetime, complete: bool) -> Commit:
    """
    Mark a task complete or incomplete, crediting or debiting its assignee.

    Points are awarded at most once per cycle: the credit is gated on
    `points_awarded`, so repeating "complete" never pays twice. A missing
    assignee leaves the points side untouched while the completion still
    goes through.
    """
    if complete:
        task.completed = True
        task.last_completed_at = now
        task.next_due_at = next_due(now, task.frequency, now)
        if task.points_awarded:
            return Commit(tasks=True)
        user = find_user(users, task.assignee)
        if user is None:
            logger.debug("No user named %r; completing %r without points", task.assignee, task.name)
            return Commit(tasks=True)
        user.points += task.points
        task.points_awarded = True
        logger.info("Credited %d points to %s for %r", task.points, user.username, task.name)
        return Commit(tasks=True, users=True)

    task.completed = False
    if not task.points_awarded:
        return Commit(tasks=True)
    task.points_awarded = False
    user = find_user(users, task.assignee)
    if user is None:
        logger.debug("No user named %r; nothing to revoke for %r", task.assignee, task.name)
        return Commit(tasks=True)
    user.points = max(0, user.points - task.points)
    logger.info("Revoked %d points from %s for %r", task.points, user.username, task.name)
    return Commit(tasks=True, users=True)


# PUBLIC_INTERFACE
def toggle_completion(state: AppState, index: int, now: datetime) -> Commit:
    """Flip the completion state of the task at `index`."""
    task = _task_at(state, index)
    return set_completion(task, state.users, now, not task.completed)


# PUBLIC_INTERFACE
def add_task(state: AppState, name: str, assignee: str, frequency: Frequency, now: datetime) -> Commit:
    """Append a new, never-completed task that is due immediately."""
    state.tasks.append(
        Task(
            name=name,
            assignee=assignee,
            frequency=frequency,
            next_due_at=next_due(None, frequency, now),
        )
    )
    logger.info("Added chore %r for %s (%s)", name, assignee, frequency.value)
    return Commit(tasks=True)


# PUBLIC_INTERFACE
def edit_task(
    state: AppState,
    index: int,
    now: datetime,
    name: Optional[str] = None,
    assignee: Optional[str] = None,
    frequency: Optional[Frequency] = None,
) -> Commit:
    """
    Update task fields. The due date of a completed task follows its new
    frequency; points already awarded are left as they are.
    """
    task = _task_at(state, index)
    if name is not None:
        task.name = name
    if assignee is not None:
        task.assignee = assignee
    if frequency is not None:
        task.frequency = frequency
    if task.completed:
        task.next_due_at = next_due(task.last_completed_at, task.frequency, now)
    return Commit(tasks=True)


# PUBLIC_INTERFACE
def delete_task(state: AppState, index: int) -> Commit:
    """Remove a task and clamp the display cursor back into range."""
    task = _task_at(state, index)
    del state.tasks[index]
    state.clamp_cursor()
    logger.info("Deleted chore %r", task.name)
    return Commit(tasks=True)


# PUBLIC_INTERFACE
def add_user(state: AppState, username: str) -> Commit:
    state.users.append(User(username=username))
    logger.info("Added user %s", username)
    return Commit(users=True)


# PUBLIC_INTERFACE
def delete_user(state: AppState, index: int) -> Commit:
    """Remove a user. Tasks that still name them keep the stale assignee."""
    user = _user_at(state, index)
    del state.users[index]
    logger.info("Deleted user %s", user.username)
    return Commit(users=True)


# PUBLIC_INTERFACE
def rename_user(state: AppState, index: int, username: str) -> Commit:
    """Rename a user. Task assignees are not rewritten."""
    user = _user_at(state, index)
    logger.info("Renamed user %s -> %s", user.username, username)
    user.username = username
    return Commit(users=True)


# PUBLIC_INTERFACE
def reset_points(state: AppState) -> Commit:
    for user in state.users:
        user.points = 0
    logger.info("Reset points for %d users", len(state.users))
    return Commit(users=True)


def get_task(state: AppState, index: int) -> Task:
    return _task_at(state, index)


def get_user(state: AppState, index: int) -> User:
    return _user_at(state, index)
