from __future__ import annotations

import logging
from datetime import datetime
from threading import RLock
from typing import Callable, Dict, List, Optional

from . import ledger
from .display import Frame, compose_frame
from .indicator import StatusSignal, indicator
from .joystick import InputSample, JoystickMachine, StepResult
from .ledger import Commit
from .models import AppState, Frequency, Task, User
from .recurrence import days_until_due, days_until_reset, is_overdue, sweep
from .repositories import Repository, get_repository
from .settings import Settings

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
TaskRow = Dict[str, object]


# PUBLIC_INTERFACE
class ChoreService:
    """
    Owns the AppState and serializes every operation on it.

    Requests and device input both go through this object. Each call holds the
    lock for its whole duration, so a listing never observes half of an
    input-driven change. Mutations are written through: the collections named
    by the returned Commit are saved before the call returns.
    """

    def __init__(self, repository: Repository, clock: Optional[Clock] = None) -> None:
        self._repo = repository
        self._clock: Clock = clock or datetime.now
        self._lock = RLock()
        self.state = AppState(tasks=repository.load_tasks(), users=repository.load_users())
        self.connectivity_up = True
        logger.info("Loaded %d chores and %d users", len(self.state.tasks), len(self.state.users))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChoreService":
        return cls(get_repository(settings))

    def now(self) -> datetime:
        return self._clock()

    def commit(self, commit: Commit) -> None:
        """Persist the collections a mutation touched."""
        with self._lock:
            if commit.tasks:
                self._repo.save_tasks(self.state.tasks)
            if commit.users:
                self._repo.save_users(self.state.users)

    # Tasks

    @staticmethod
    def _row(i: int, t: Task, now: datetime) -> TaskRow:
        return {
            "index": i,
            "name": t.name,
            "assignee": t.assignee,
            "frequency": t.frequency,
            "completed": t.completed,
            "last_completed_at": t.last_completed_at,
            "next_due_at": t.next_due_at,
            "points_awarded": t.points_awarded,
            "days_until_due": days_until_due(t, now),
            "days_until_reset": days_until_reset(t, now),
            "overdue": is_overdue(t, now),
        }

    def list_tasks(self) -> List[TaskRow]:
        with self._lock:
            now = self.now()
            return [self._row(i, t, now) for i, t in enumerate(self.state.tasks)]

    def get_task(self, index: int) -> Task:
        with self._lock:
            return ledger.get_task(self.state, index)

    def toggle_task(self, index: int) -> TaskRow:
        with self._lock:
            now = self.now()
            self.commit(ledger.toggle_completion(self.state, index, now))
            return self._row(index, self.state.tasks[index], now)

    def add_task(self, name: str, assignee: str, frequency: Frequency) -> TaskRow:
        with self._lock:
            now = self.now()
            self.commit(ledger.add_task(self.state, name, assignee, frequency, now))
            index = len(self.state.tasks) - 1
            return self._row(index, self.state.tasks[index], now)

    def update_task(self, index: int, name: str, assignee: str, frequency: Frequency) -> TaskRow:
        with self._lock:
            now = self.now()
            self.commit(ledger.edit_task(self.state, index, now, name, assignee, frequency))
            return self._row(index, self.state.tasks[index], now)

    def delete_task(self, index: int) -> None:
        with self._lock:
            self.commit(ledger.delete_task(self.state, index))

    # Users

    def list_users(self) -> List[User]:
        with self._lock:
            return list(self.state.users)

    def get_user(self, index: int) -> User:
        with self._lock:
            return ledger.get_user(self.state, index)

    def add_user(self, username: str) -> User:
        with self._lock:
            self.commit(ledger.add_user(self.state, username))
            return self.state.users[-1]

    def rename_user(self, index: int, username: str) -> User:
        with self._lock:
            self.commit(ledger.rename_user(self.state, index, username))
            return self.state.users[index]

    def delete_user(self, index: int) -> None:
        with self._lock:
            self.commit(ledger.delete_user(self.state, index))

    def reset_points(self) -> None:
        with self._lock:
            self.commit(ledger.reset_points(self.state))

    # Periodic work and device input

    def sweep(self) -> bool:
        """Reset expired completions, saving tasks when anything changed."""
        with self._lock:
            changed = sweep(self.state.tasks, self.now())
            if changed:
                self.commit(Commit(tasks=True))
            return changed

    def status(self) -> StatusSignal:
        with self._lock:
            return indicator(self.state.tasks, self.connectivity_up, self.now())

    def summary(self) -> Dict[str, object]:
        with self._lock:
            now = self.now()
            tasks = self.state.tasks
            return {
                "signal": indicator(tasks, self.connectivity_up, now),
                "connectivity_up": self.connectivity_up,
                "tasks": len(tasks),
                "completed": sum(1 for t in tasks if t.completed),
                "overdue": sum(1 for t in tasks if is_overdue(t, now)),
            }

    def apply_input(self, machine: JoystickMachine, sample: InputSample, now_ms: int) -> StepResult:
        with self._lock:
            result = machine.step(sample, now_ms, self.state, self.now())
            self.commit(result.commit)
            return result

    def frame(self, machine: JoystickMachine, address: Optional[str] = None) -> Frame:
        with self._lock:
            return compose_frame(self.state, machine, self.now(), self.connectivity_up, address)
