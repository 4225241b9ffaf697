from __future__ import annotations

import os

import pytest

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from choreboard.models import AppState, Frequency, User  # noqa: E402
from choreboard.repositories import InMemoryRepository  # noqa: E402
from choreboard.service import ChoreService  # noqa: E402

from .helpers import WEDNESDAY, FixedClock, make_task  # noqa: E402


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(WEDNESDAY)


@pytest.fixture()
def state() -> AppState:
    return AppState(
        tasks=[
            make_task("Dishes", "alice", Frequency.DAILY),
            make_task("Vacuum", "bob", Frequency.WEEKLY),
            make_task("Clean fridge", "alice", Frequency.MONTHLY),
        ],
        users=[User("alice"), User("bob")],
    )


@pytest.fixture()
def repo(state: AppState) -> InMemoryRepository:
    return InMemoryRepository(tasks=state.tasks, users=state.users)


@pytest.fixture()
def service(repo: InMemoryRepository, clock: FixedClock) -> ChoreService:
    return ChoreService(repo, clock=clock)
