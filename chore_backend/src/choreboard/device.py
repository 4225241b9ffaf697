from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from .display import Frame
from .indicator import StatusSignal
from .joystick import JoystickMachine
from .ports import ConnectivityProbe, DisplaySink, InputSource, SignalOutput, TimeSource
from .service import ChoreService

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


# PUBLIC_INTERFACE
class DeviceLoop:
    """
    Cooperative control loop for the physical board.

    Every iteration runs the due timers (completion sweep, clock resync,
    connectivity check), feeds one input sample to the joystick machine and
    refreshes the display and status signal when they changed. All state
    access goes through the ChoreService, so it serializes with requests.
    """

    def __init__(
        self,
        service: ChoreService,
        machine: JoystickMachine,
        input_source: InputSource,
        display: DisplaySink,
        signal_output: SignalOutput,
        time_source: TimeSource,
        connectivity: ConnectivityProbe,
        *,
        poll_interval_ms: int = 20,
        sweep_interval_s: int = 60,
        clock_sync_interval_s: int = 3600,
        connectivity_interval_s: int = 10,
    ) -> None:
        self.service = service
        self.machine = machine
        self.input_source = input_source
        self.display = display
        self.signal_output = signal_output
        self.time_source = time_source
        self.connectivity = connectivity
        self.poll_interval_ms = poll_interval_ms
        self._sweep_every_ms = sweep_interval_s * 1000
        self._sync_every_ms = clock_sync_interval_s * 1000
        self._probe_every_ms = connectivity_interval_s * 1000
        self._last_sweep_ms: Optional[int] = None
        self._last_sync_ms: Optional[int] = None
        self._last_probe_ms: Optional[int] = None
        self._last_frame: Optional[Frame] = None
        self._last_signal: Optional[StatusSignal] = None

    @staticmethod
    def _due(last_ms: Optional[int], every_ms: int, now_ms: int) -> bool:
        return last_ms is None or now_ms - last_ms >= every_ms

    def _probe_due(self, now_ms: int) -> bool:
        if self._due(self._last_probe_ms, self._probe_every_ms, now_ms):
            self._last_probe_ms = now_ms
            return True
        return False

    def probe_connectivity(self) -> bool:
        """Ask the connectivity probe and publish the result. May block."""
        up = self.connectivity.is_up()
        if up != self.service.connectivity_up:
            logger.info("Connectivity %s", "restored" if up else "lost")
        self.service.connectivity_up = up
        return up

    def _run_timers(self, now_ms: int, probe: bool) -> None:
        if probe and self._probe_due(now_ms):
            self.probe_connectivity()

        if self._due(self._last_sync_ms, self._sync_every_ms, now_ms):
            self._last_sync_ms = now_ms
            if not self.time_source.sync():
                logger.warning("Clock resync failed; keeping current time")

        if self._due(self._last_sweep_ms, self._sweep_every_ms, now_ms):
            self._last_sweep_ms = now_ms
            self.service.sweep()

    # PUBLIC_INTERFACE
    def step(self, now_ms: int, probe: bool = True) -> None:
        """
        Run one loop iteration at monotonic time `now_ms`.

        With `probe=False` the connectivity check is left to the caller;
        `run()` does it on a worker thread.
        """
        self._run_timers(now_ms, probe)
        self.service.apply_input(self.machine, self.input_source.read(), now_ms)

        frame = self.service.frame(self.machine, self.connectivity.address())
        if frame != self._last_frame:
            self.display.show(frame)
            self._last_frame = frame

        signal = self.service.status()
        if signal != self._last_signal:
            self.signal_output.show(signal)
            self._last_signal = signal

    async def run(self) -> None:
        logger.info("Device loop started (poll every %d ms)", self.poll_interval_ms)
        probe_task: Optional[asyncio.Future] = None
        try:
            while True:
                now_ms = monotonic_ms()
                if probe_task is not None and probe_task.done():
                    probe_task.result()
                    probe_task = None
                if probe_task is None and self._probe_due(now_ms):
                    # The probe does network I/O and must not hold up the event loop
                    probe_task = asyncio.ensure_future(asyncio.to_thread(self.probe_connectivity))
                self.step(now_ms, probe=False)
                await asyncio.sleep(self.poll_interval_ms / 1000)
        finally:
            if probe_task is not None:
                probe_task.cancel()
