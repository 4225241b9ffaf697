from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .joystick import Browsing, Choice, ConfirmingCompletion, JoystickMachine, ViewingStatusPanel
from .models import AppState
from .recurrence import days_until_due, days_until_reset, is_overdue


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Frame:
    """Two fixed-width lines for the character display."""

    top: str
    bottom: str


def _fit(text: str, width: int) -> str:
    return text[:width].ljust(width)


def _status_text(app_state: AppState, now: datetime) -> str:
    task = app_state.selected_task()
    if task.completed:
        return f"Done {days_until_due(task, now)}d"
    if is_overdue(task, now):
        return "OVERDUE"
    return f"{days_until_reset(task, now)}d left"


# PUBLIC_INTERFACE
def compose_frame(
    app_state: AppState,
    machine: JoystickMachine,
    now: datetime,
    connectivity_up: bool,
    address: Optional[str] = None,
) -> Frame:
    """Render the current machine state as two display lines."""
    width = machine.config.display_width
    state = machine.state

    if isinstance(state, ViewingStatusPanel):
        top = "Online" if connectivity_up else "Offline"
        return Frame(_fit(f"WiFi: {top}", width), _fit(address or "No address", width))

    if isinstance(state, ConfirmingCompletion):
        if state.choice == Choice.CONFIRM:
            bottom = "[Yes]  No"
        else:
            bottom = " Yes  [No]"
        return Frame(_fit("Mark done?", width), _fit(bottom, width))

    if not app_state.tasks:
        return Frame(_fit("No chores", width), _fit("Add via web", width))

    task = app_state.selected_task()
    offset = state.scroll_offset if isinstance(state, Browsing) else 0
    name = task.name[offset:offset + width]
    status = _status_text(app_state, now)
    room = max(width - len(status) - 1, 0)
    bottom = f"{task.assignee[:room].ljust(room)} {status}" if room else status
    return Frame(_fit(name, width), _fit(bottom, width))
