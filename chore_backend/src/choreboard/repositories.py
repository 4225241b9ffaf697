from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional

from .models import Task, User
from .settings import Settings, get_settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Load/save contract for the two persisted collections.

    Each collection is stored independently and always written in full.
    Loading a missing or unreadable collection yields an empty list.
    """

    @abstractmethod
    def load_tasks(self) -> List[Task]:
        """Return every stored task, in display order."""

    @abstractmethod
    def save_tasks(self, tasks: List[Task]) -> None:
        """Replace the stored task collection."""

    @abstractmethod
    def load_users(self) -> List[User]:
        """Return every stored user."""

    @abstractmethod
    def save_users(self, users: List[User]) -> None:
        """Replace the stored user collection."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self, tasks: Optional[List[Task]] = None, users: Optional[List[User]] = None) -> None:
        self._lock = RLock()
        self._tasks: List[Task] = copy.deepcopy(tasks or [])
        self._users: List[User] = copy.deepcopy(users or [])
        self.task_saves = 0
        self.user_saves = 0

    def load_tasks(self) -> List[Task]:
        with self._lock:
            return copy.deepcopy(self._tasks)

    def save_tasks(self, tasks: List[Task]) -> None:
        with self._lock:
            # Store copies so later in-place mutation is only visible after the next save
            self._tasks = copy.deepcopy(tasks)
            self.task_saves += 1

    def load_users(self) -> List[User]:
        with self._lock:
            return copy.deepcopy(self._users)

    def save_users(self, users: List[User]) -> None:
        with self._lock:
            self._users = copy.deepcopy(users)
            self.user_saves += 1


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - json: JsonFileRepository rooted at settings.data_dir
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "json":
        from .storage import JsonFileRepository

        return JsonFileRepository(settings.data_dir)
    return InMemoryRepository()
