from datetime import datetime, timedelta

import pytest

from choreboard import ledger
from choreboard.ledger import Commit, RecordNotFound, set_completion
from choreboard.models import POINTS_BY_FREQUENCY, AppState, Frequency, User

from .helpers import WEDNESDAY, make_task


def points_of(state: AppState, username: str) -> int:
    return state.find_user(username).points


class TestSetCompletion:
    def test_complete_credits_assignee_and_schedules_next_due(self, state):
        task = state.tasks[1]  # Vacuum, weekly, bob
        commit = set_completion(task, state.users, WEDNESDAY, True)
        assert commit == Commit(tasks=True, users=True)
        assert task.completed is True
        assert task.points_awarded is True
        assert task.last_completed_at == WEDNESDAY
        assert task.next_due_at == datetime(2024, 1, 15, 9, 30)
        assert points_of(state, "bob") == POINTS_BY_FREQUENCY[Frequency.WEEKLY]

    def test_completing_twice_credits_once(self, state):
        task = state.tasks[0]
        set_completion(task, state.users, WEDNESDAY, True)
        commit = set_completion(task, state.users, WEDNESDAY + timedelta(minutes=5), True)
        assert commit == Commit(tasks=True)
        assert points_of(state, "alice") == POINTS_BY_FREQUENCY[Frequency.DAILY]

    def test_complete_then_uncomplete_restores_balance(self, state):
        state.find_user("alice").points = 7
        task = state.tasks[2]  # monthly
        set_completion(task, state.users, WEDNESDAY, True)
        assert points_of(state, "alice") == 7 + POINTS_BY_FREQUENCY[Frequency.MONTHLY]
        set_completion(task, state.users, WEDNESDAY, False)
        assert points_of(state, "alice") == 7
        assert task.completed is False
        assert task.points_awarded is False

    def test_debit_is_clamped_at_zero(self, state):
        task = state.tasks[2]
        set_completion(task, state.users, WEDNESDAY, True)
        ledger.reset_points(state)
        set_completion(task, state.users, WEDNESDAY, False)
        assert points_of(state, "alice") == 0

    def test_unknown_assignee_still_completes_without_points(self, state):
        task = make_task(assignee="nobody")
        commit = set_completion(task, state.users, WEDNESDAY, True)
        assert commit == Commit(tasks=True)
        assert task.completed is True
        assert task.points_awarded is False
        assert [u.points for u in state.users] == [0, 0]

    def test_uncomplete_without_award_leaves_points(self, state):
        state.find_user("alice").points = 3
        task = make_task(completed=True, last_completed_at=WEDNESDAY)
        set_completion(task, state.users, WEDNESDAY, False)
        assert points_of(state, "alice") == 3

    def test_award_flag_cleared_even_if_user_was_deleted(self, state):
        task = state.tasks[1]
        set_completion(task, state.users, WEDNESDAY, True)
        ledger.delete_user(state, 1)  # bob
        set_completion(task, state.users, WEDNESDAY, False)
        assert task.points_awarded is False
        assert task.completed is False

    def test_toggle_flips_by_index(self, state):
        ledger.toggle_completion(state, 0, WEDNESDAY)
        assert state.tasks[0].completed is True
        ledger.toggle_completion(state, 0, WEDNESDAY)
        assert state.tasks[0].completed is False
        assert points_of(state, "alice") == 0


class TestEditTask:
    def test_edit_completed_recomputes_due_but_keeps_points(self, state):
        task = state.tasks[0]
        set_completion(task, state.users, WEDNESDAY, True)
        ledger.edit_task(state, 0, WEDNESDAY, frequency=Frequency.MONTHLY, assignee="bob")
        assert task.next_due_at == datetime(2024, 2, 1, 9, 30)
        assert points_of(state, "alice") == POINTS_BY_FREQUENCY[Frequency.DAILY]
        assert points_of(state, "bob") == 0
        assert task.points_awarded is True

    def test_edit_incomplete_keeps_due_date(self, state):
        task = state.tasks[0]
        due = task.next_due_at
        ledger.edit_task(state, 0, WEDNESDAY + timedelta(days=2), name="Wash up", frequency=Frequency.WEEKLY)
        assert task.name == "Wash up"
        assert task.next_due_at == due

    def test_out_of_range_index_changes_nothing(self, state):
        with pytest.raises(RecordNotFound):
            ledger.edit_task(state, 3, WEDNESDAY, name="x")
        with pytest.raises(IndexError):
            ledger.toggle_completion(state, -1, WEDNESDAY)
        assert [t.name for t in state.tasks] == ["Dishes", "Vacuum", "Clean fridge"]


class TestTaskLifecycle:
    def test_add_task_is_due_immediately(self, state):
        commit = ledger.add_task(state, "Laundry", "bob", Frequency.WEEKLY, WEDNESDAY)
        assert commit == Commit(tasks=True)
        task = state.tasks[-1]
        assert task.completed is False
        assert task.last_completed_at is None
        assert task.points_awarded is False
        assert task.next_due_at == WEDNESDAY

    def test_deleting_selected_last_task_clamps_cursor(self, state):
        state.cursor = 2
        ledger.delete_task(state, 2)
        assert state.cursor == 1

    def test_deleting_only_task_resets_cursor(self):
        state = AppState(tasks=[make_task()], users=[])
        ledger.delete_task(state, 0)
        assert state.cursor == 0
        assert state.selected_task() is None

    def test_delete_out_of_range(self, state):
        with pytest.raises(RecordNotFound):
            ledger.delete_task(state, 10)
        assert len(state.tasks) == 3


class TestUsers:
    def test_add_user_starts_at_zero(self, state):
        assert ledger.add_user(state, "carol") == Commit(users=True)
        assert state.users[-1] == User("carol", 0)

    def test_rename_does_not_rewrite_assignees(self, state):
        # Assignee is a plain string: renaming orphans the chores.
        ledger.rename_user(state, 0, "alicia")
        assert state.tasks[0].assignee == "alice"
        set_completion(state.tasks[0], state.users, WEDNESDAY, True)
        assert points_of(state, "alicia") == 0
        assert state.tasks[0].points_awarded is False

    def test_delete_user_does_not_cascade(self, state):
        ledger.delete_user(state, 0)
        assert [u.username for u in state.users] == ["bob"]
        assert [t.assignee for t in state.tasks] == ["alice", "bob", "alice"]

    def test_reset_points(self, state):
        for user in state.users:
            user.points = 12
        ledger.reset_points(state)
        assert [u.points for u in state.users] == [0, 0]

    def test_user_index_out_of_range(self, state):
        with pytest.raises(RecordNotFound):
            ledger.rename_user(state, 5, "x")


class TestCommit:
    def test_empty_commit_is_falsy(self):
        assert not Commit()
        assert Commit(users=True)
