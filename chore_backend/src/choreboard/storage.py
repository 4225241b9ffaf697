"""
JSON file persistence for tasks and users.

Each collection lives in its own file (tasks.json, users.json) as a list of
records. A missing or unreadable file loads as an empty collection and a
malformed record is skipped, so a corrupt save never stops the board.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .models import Frequency, Task, User
from .repositories import Repository

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
T = TypeVar("T")

TASKS_FILE = "tasks.json"
USERS_FILE = "users.json"


def _format_dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    if value is None or value == "never":
        return None
    return datetime.fromisoformat(value)


# PUBLIC_INTERFACE
def task_to_record(task: Task) -> Record:
    return {
        "name": task.name,
        "assignee": task.assignee,
        "frequency": task.frequency.value,
        "completed": task.completed,
        "lastCompletedAt": _format_dt(task.last_completed_at),
        "nextDueAt": _format_dt(task.next_due_at),
        "pointsAwarded": task.points_awarded,
    }


# PUBLIC_INTERFACE
def task_from_record(record: Record) -> Task:
    """Decode a stored task. Raises KeyError/ValueError/TypeError on malformed input."""
    completed = bool(record.get("completed", False))
    return Task(
        name=str(record["name"]),
        assignee=str(record["assignee"]),
        frequency=Frequency(record["frequency"]),
        completed=completed,
        last_completed_at=_parse_dt(record.get("lastCompletedAt")),
        next_due_at=_parse_dt(record["nextDueAt"]) or datetime.now(),
        # Never trust an award flag on an incomplete task
        points_awarded=completed and bool(record.get("pointsAwarded", False)),
    )


# PUBLIC_INTERFACE
def user_to_record(user: User) -> Record:
    return {"username": user.username, "points": user.points}


# PUBLIC_INTERFACE
def user_from_record(record: Record) -> User:
    points = int(record.get("points", 0))
    return User(username=str(record["username"]), points=max(points, 0))


class JsonFileRepository(Repository):
    """
    Lightweight JSON file repository implementing the Repository interface.
    """

    def __init__(self, data_dir: str) -> None:
        os.makedirs(data_dir or ".", exist_ok=True)
        self._dir = Path(data_dir or ".")

    @property
    def tasks_path(self) -> Path:
        return self._dir / TASKS_FILE

    @property
    def users_path(self) -> Path:
        return self._dir / USERS_FILE

    def _read(self, path: Path, decode: Callable[[Record], T]) -> List[T]:
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, starting empty: %s", path, exc)
            return []
        if not isinstance(raw, list):
            logger.warning("Expected a list in %s, starting empty", path)
            return []

        items: List[T] = []
        for position, record in enumerate(raw):
            try:
                items.append(decode(record))
            except (KeyError, ValueError, TypeError, AttributeError) as exc:
                logger.warning("Skipping malformed record %d in %s: %s", position, path, exc)
        return items

    def _write(self, path: Path, records: List[Record]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)

    def load_tasks(self) -> List[Task]:
        return self._read(self.tasks_path, task_from_record)

    def save_tasks(self, tasks: List[Task]) -> None:
        self._write(self.tasks_path, [task_to_record(t) for t in tasks])

    def load_users(self) -> List[User]:
        return self._read(self.users_path, user_from_record)

    def save_users(self, users: List[User]) -> None:
        self._write(self.users_path, [user_to_record(u) for u in users])
