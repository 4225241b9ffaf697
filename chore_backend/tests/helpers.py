from __future__ import annotations

from datetime import datetime, timedelta

from choreboard.models import Frequency, Task
from choreboard.recurrence import next_due
from choreboard.settings import Settings

# Wednesday
WEDNESDAY = datetime(2024, 1, 10, 9, 30)


class FixedClock:
    """Deterministic clock that tests advance by hand."""

    def __init__(self, now: datetime) -> None:
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class FakeTimeSource:
    """Time source backed by a FixedClock; counts resyncs."""

    def __init__(self, clock: FixedClock) -> None:
        self.clock = clock
        self.syncs = 0

    def now(self) -> datetime:
        return self.clock()

    def sync(self) -> bool:
        self.syncs += 1
        return True


def make_task(name="Dishes", assignee="alice", frequency=Frequency.DAILY, now=WEDNESDAY, **overrides) -> Task:
    task = Task(name=name, assignee=assignee, frequency=frequency, next_due_at=next_due(None, frequency, now))
    for key, value in overrides.items():
        setattr(task, key, value)
    return task


def make_settings(**overrides) -> Settings:
    base = dict(
        persistence_backend="memory",
        data_dir="./data",
        cors_allow_origins=["*"],
        log_level="INFO",
        log_file=None,
        device_enabled=False,
        display_width=16,
        poll_interval_ms=20,
        sweep_interval_s=60,
        clock_sync_interval_s=3600,
        connectivity_host="127.0.0.1",
        connectivity_port=53,
    )
    base.update(overrides)
    return Settings(**base)
