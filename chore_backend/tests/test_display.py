from datetime import timedelta

from choreboard.display import compose_frame
from choreboard.joystick import Choice, ConfirmingCompletion, JoystickMachine, ViewingStatusPanel
from choreboard.models import AppState, Frequency

from .helpers import WEDNESDAY, make_task


def frame_for(state, machine=None, connected=True, address=None):
    return compose_frame(state, machine or JoystickMachine(), WEDNESDAY, connected, address)


class TestBrowsingFrames:
    def test_lines_are_padded_to_display_width(self, state):
        frame = frame_for(state)
        assert len(frame.top) == 16
        assert len(frame.bottom) == 16
        assert frame.top.rstrip() == "Dishes"

    def test_incomplete_shows_days_left(self):
        task = make_task("Vacuum", "bob", Frequency.WEEKLY, next_due_at=WEDNESDAY + timedelta(hours=1))
        frame = frame_for(AppState(tasks=[task]))
        assert frame.bottom == "bob      5d left"

    def test_overdue_is_flagged(self):
        task = make_task("Vacuum", "bob", next_due_at=WEDNESDAY - timedelta(hours=1))
        frame = frame_for(AppState(tasks=[task]))
        assert frame.bottom.endswith("OVERDUE")

    def test_completed_shows_days_until_due(self):
        task = make_task("Vacuum", "bob", completed=True, next_due_at=WEDNESDAY + timedelta(days=4, hours=2))
        frame = frame_for(AppState(tasks=[task]))
        assert frame.bottom.endswith("Done 4d")

    def test_long_name_is_windowed_by_scroll_offset(self):
        task = make_task("Clean the bathroom", next_due_at=WEDNESDAY + timedelta(hours=1))
        machine = JoystickMachine()
        machine.state.scroll_offset = 2
        frame = frame_for(AppState(tasks=[task]), machine)
        assert frame.top == "ean the bathroom"

    def test_empty_board(self):
        frame = frame_for(AppState())
        assert frame.top.rstrip() == "No chores"


class TestModalFrames:
    def test_confirmation_marks_choice(self, state):
        machine = JoystickMachine()
        machine.state = ConfirmingCompletion(task=state.tasks[0])
        assert frame_for(state, machine).bottom.rstrip() == "[Yes]  No"
        machine.state.choice = Choice.CANCEL
        assert frame_for(state, machine).bottom.rstrip() == " Yes  [No]"

    def test_status_panel_shows_connectivity(self, state):
        machine = JoystickMachine()
        machine.state = ViewingStatusPanel()
        online = frame_for(state, machine, connected=True, address="192.168.1.20")
        assert online.top.rstrip() == "WiFi: Online"
        assert online.bottom.rstrip() == "192.168.1.20"
        offline = frame_for(state, machine, connected=False)
        assert offline.top.rstrip() == "WiFi: Offline"
