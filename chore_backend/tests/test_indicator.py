from datetime import timedelta

from choreboard.indicator import StatusSignal, indicator

from .helpers import WEDNESDAY, make_task


def test_offline_wins_over_everything():
    overdue = make_task(next_due_at=WEDNESDAY - timedelta(days=1))
    assert indicator([overdue], False, WEDNESDAY) == StatusSignal.OFFLINE
    assert indicator([], False, WEDNESDAY) == StatusSignal.OFFLINE


def test_any_overdue_task_is_overdue():
    tasks = [
        make_task("done", completed=True, next_due_at=WEDNESDAY + timedelta(days=1)),
        make_task("late", next_due_at=WEDNESDAY - timedelta(hours=1)),
    ]
    assert indicator(tasks, True, WEDNESDAY) == StatusSignal.OVERDUE


def test_empty_task_set_is_all_clear():
    assert indicator([], True, WEDNESDAY) == StatusSignal.ALL_CLEAR


def test_all_completed_is_all_clear():
    tasks = [make_task(str(i), completed=True, next_due_at=WEDNESDAY + timedelta(days=2)) for i in range(3)]
    assert indicator(tasks, True, WEDNESDAY) == StatusSignal.ALL_CLEAR


def test_incomplete_but_not_late_is_pending():
    tasks = [
        make_task("done", completed=True, next_due_at=WEDNESDAY + timedelta(days=1)),
        make_task("soon", next_due_at=WEDNESDAY + timedelta(hours=3)),
    ]
    assert indicator(tasks, True, WEDNESDAY) == StatusSignal.PENDING
