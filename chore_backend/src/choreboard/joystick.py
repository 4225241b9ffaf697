"""
Joystick interaction state machine.

A single two-axis analog stick plus its push button drives the physical chore
board. The machine is fed one `InputSample` per loop iteration together with a
monotonic millisecond clock. It never touches storage or hardware: each step
returns a `StepResult` whose `commit` tells the caller what to persist.

States form a tagged union:

- `Browsing`: default. The navigation axis moves the cursor, a short press
  toggles (or asks to confirm), a long press opens the status panel. Long
  names scroll horizontally on a timer.
- `ConfirmingCompletion`: yes/no dialog before a task is marked complete. The
  choice axis flips the answer, a short press commits it.
- `ViewingStatusPanel`: read-only connectivity view, left automatically a
  fixed dwell after the button is released.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .ledger import NO_COMMIT, Commit, set_completion
from .models import AppState, Task

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class JoystickConfig:
    """
    Tunables for a 12-bit analog stick (0..4095, rest position near 2048).

    A reading inside [center_low, center_high] is the dead zone. A reading below
    low_threshold or above high_threshold is a deflection.
    """

    center_low: int = 1500
    center_high: int = 2600
    low_threshold: int = 1000
    high_threshold: int = 3000
    nav_delay_ms: int = 200
    debounce_ms: int = 50
    long_press_ms: int = 1500
    status_dwell_ms: int = 3000
    scroll_interval_ms: int = 400
    scroll_pause_ms: int = 1500
    display_width: int = 16


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class InputSample:
    """One reading of the stick: navigation axis, choice axis, button held."""

    nav_axis: int
    choice_axis: int
    pressed: bool = False


class Choice(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"


@dataclass
class Browsing:
    scroll_offset: int = 0
    last_scroll_ms: Optional[int] = None
    pause_until_ms: Optional[int] = None


@dataclass
class ConfirmingCompletion:
    task: Task
    choice: Choice = Choice.CONFIRM


@dataclass
class ViewingStatusPanel:
    released_at_ms: Optional[int] = None


MachineState = Union[Browsing, ConfirmingCompletion, ViewingStatusPanel]


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class StepResult:
    commit: Commit = field(default=NO_COMMIT)
    redraw: bool = False


class ButtonEvent(str, Enum):
    NONE = "none"
    PRESS = "press"
    LONG_HOLD = "long_hold"
    SHORT_RELEASE = "short_release"
    LONG_RELEASE = "long_release"


LOW = 1
HIGH = -1


class AxisGate:
    """
    Edge-triggered reader for one analog axis.

    After a counted deflection the axis must come back to the dead zone before
    it can count again, and two counted moves are at least `nav_delay_ms` apart.
    Holding the stick over produces exactly one move.
    """

    def __init__(self, config: JoystickConfig) -> None:
        self._config = config
        self.armed = True
        self.last_move_ms: Optional[int] = None

    def read(self, value: int, now_ms: int) -> int:
        cfg = self._config
        if cfg.center_low <= value <= cfg.center_high:
            self.armed = True
            return 0
        if not self.armed:
            return 0
        if self.last_move_ms is not None and now_ms - self.last_move_ms < cfg.nav_delay_ms:
            return 0
        if value < cfg.low_threshold:
            direction = LOW
        elif value > cfg.high_threshold:
            direction = HIGH
        else:
            return 0
        self.armed = False
        self.last_move_ms = now_ms
        return direction


class ButtonTracker:
    """
    Turns raw button levels into press events.

    A press edge arriving within `debounce_ms` of the previous release is
    contact bounce and is ignored along with its release. `LONG_HOLD` fires
    once, while the button is still down.
    """

    def __init__(self, config: JoystickConfig) -> None:
        self._config = config
        self.pressed = False
        self.pressed_since_ms: Optional[int] = None
        self.last_release_ms: Optional[int] = None
        self.long_fired = False
        self._bounce = False

    def restart(self, now_ms: int) -> None:
        """Measure a press still in progress from `now_ms`."""
        self.pressed_since_ms = now_ms
        self.long_fired = False

    def update(self, pressed: bool, now_ms: int) -> ButtonEvent:
        cfg = self._config
        if pressed and not self.pressed:
            self.pressed = True
            self.pressed_since_ms = now_ms
            self.long_fired = False
            self._bounce = (
                self.last_release_ms is not None and now_ms - self.last_release_ms < cfg.debounce_ms
            )
            return ButtonEvent.NONE if self._bounce else ButtonEvent.PRESS

        if pressed:
            if self._bounce or self.long_fired:
                return ButtonEvent.NONE
            if now_ms - self.pressed_since_ms >= cfg.long_press_ms:
                self.long_fired = True
                return ButtonEvent.LONG_HOLD
            return ButtonEvent.NONE

        if not self.pressed:
            return ButtonEvent.NONE

        self.pressed = False
        self.last_release_ms = now_ms
        if self._bounce:
            self._bounce = False
            return ButtonEvent.NONE
        if self.long_fired or now_ms - self.pressed_since_ms >= cfg.long_press_ms:
            return ButtonEvent.LONG_RELEASE
        return ButtonEvent.SHORT_RELEASE


# PUBLIC_INTERFACE
class JoystickMachine:
    """Drives selection, scrolling and the completion dialog from stick input."""

    def __init__(self, config: Optional[JoystickConfig] = None) -> None:
        self.config = config or JoystickConfig()
        self.state: MachineState = Browsing()
        self._nav = AxisGate(self.config)
        self._choice = AxisGate(self.config)
        self._button = ButtonTracker(self.config)

    @property
    def scroll_offset(self) -> int:
        if isinstance(self.state, Browsing):
            return self.state.scroll_offset
        return 0

    # PUBLIC_INTERFACE
    def step(self, sample: InputSample, now_ms: int, app_state: AppState, now: datetime) -> StepResult:
        """Consume one input sample and advance the machine."""
        event = self._button.update(sample.pressed, now_ms)
        state = self.state
        if isinstance(state, ViewingStatusPanel):
            return self._step_status_panel(state, now_ms)
        if isinstance(state, ConfirmingCompletion):
            return self._step_confirming(state, sample, event, now_ms, app_state, now)
        return self._step_browsing(state, sample, event, now_ms, app_state, now)

    def _step_browsing(
        self,
        state: Browsing,
        sample: InputSample,
        event: ButtonEvent,
        now_ms: int,
        app_state: AppState,
        now: datetime,
    ) -> StepResult:
        if event == ButtonEvent.LONG_HOLD:
            logger.debug("Long press: showing status panel")
            self.state = ViewingStatusPanel()
            return StepResult(redraw=True)

        if event == ButtonEvent.SHORT_RELEASE:
            task = app_state.selected_task()
            if task is None:
                return StepResult()
            if task.completed:
                commit = set_completion(task, app_state.users, now, False)
                self.state = Browsing(last_scroll_ms=now_ms)
                return StepResult(commit=commit, redraw=True)
            self._enter_confirming(task, now_ms)
            return StepResult(redraw=True)

        direction = self._nav.read(sample.nav_axis, now_ms)
        if direction and app_state.tasks:
            app_state.cursor = (app_state.cursor + direction) % len(app_state.tasks)
            self.state = Browsing(last_scroll_ms=now_ms)
            return StepResult(redraw=True)

        return StepResult(redraw=self._scroll(state, app_state, now_ms))

    def _enter_confirming(self, task: Task, now_ms: int) -> None:
        self.state = ConfirmingCompletion(task=task)
        if self._button.pressed:
            self._button.restart(now_ms)

    def _step_confirming(
        self,
        state: ConfirmingCompletion,
        sample: InputSample,
        event: ButtonEvent,
        now_ms: int,
        app_state: AppState,
        now: datetime,
    ) -> StepResult:
        if event == ButtonEvent.SHORT_RELEASE:
            commit = NO_COMMIT
            # The task may have been deleted from the web while the dialog was open
            if state.choice == Choice.CONFIRM and any(t is state.task for t in app_state.tasks):
                commit = set_completion(state.task, app_state.users, now, True)
            self.state = Browsing(last_scroll_ms=now_ms)
            return StepResult(commit=commit, redraw=True)

        if self._button.pressed:
            return StepResult()

        if self._choice.read(sample.choice_axis, now_ms):
            state.choice = Choice.CANCEL if state.choice == Choice.CONFIRM else Choice.CONFIRM
            return StepResult(redraw=True)
        return StepResult()

    def _step_status_panel(self, state: ViewingStatusPanel, now_ms: int) -> StepResult:
        if self._button.pressed:
            state.released_at_ms = None
            return StepResult()
        if state.released_at_ms is None:
            state.released_at_ms = now_ms
            return StepResult()
        if now_ms - state.released_at_ms >= self.config.status_dwell_ms:
            self.state = Browsing(last_scroll_ms=now_ms)
            return StepResult(redraw=True)
        return StepResult()

    def _scroll(self, state: Browsing, app_state: AppState, now_ms: int) -> bool:
        task = app_state.selected_task()
        width = self.config.display_width
        if task is None or len(task.name) <= width:
            if state.scroll_offset:
                state.scroll_offset = 0
                return True
            return False

        if state.last_scroll_ms is None:
            state.last_scroll_ms = now_ms
            return False
        if state.pause_until_ms is not None:
            if now_ms < state.pause_until_ms:
                return False
            state.pause_until_ms = None
            state.last_scroll_ms = now_ms
            return False
        if now_ms - state.last_scroll_ms < self.config.scroll_interval_ms:
            return False

        state.last_scroll_ms = now_ms
        state.scroll_offset += 1
        if state.scroll_offset + width > len(task.name):
            state.scroll_offset = 0
            state.pause_until_ms = now_ms + self.config.scroll_pause_ms
        return True
