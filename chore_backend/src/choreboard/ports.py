"""
Hardware-facing collaborators of the device loop.

The loop only depends on these protocols. The adapters below are the ones used
when the board runs without real hardware attached (development, CI, the
server's built-in simulator): a stick resting at center, a display and status
light that write to the log, the system clock, and a TCP reachability probe.
"""
from __future__ import annotations

import logging
import socket
from datetime import datetime
from typing import Optional, Protocol

from .display import Frame
from .indicator import StatusSignal
from .joystick import InputSample

logger = logging.getLogger(__name__)

ADC_CENTER = 2048


class InputSource(Protocol):
    def read(self) -> InputSample:
        ...


class DisplaySink(Protocol):
    def show(self, frame: Frame) -> None:
        ...


class SignalOutput(Protocol):
    def show(self, signal: StatusSignal) -> None:
        ...


class TimeSource(Protocol):
    def now(self) -> datetime:
        ...

    def sync(self) -> bool:
        ...


class ConnectivityProbe(Protocol):
    def is_up(self) -> bool:
        ...

    def address(self) -> Optional[str]:
        ...


class RestingInput:
    """A stick that never moves and a button that is never pressed."""

    def read(self) -> InputSample:
        return InputSample(nav_axis=ADC_CENTER, choice_axis=ADC_CENTER, pressed=False)


class LoggingDisplay:
    def __init__(self) -> None:
        self.last: Optional[Frame] = None

    def show(self, frame: Frame) -> None:
        self.last = frame
        logger.info("[display] %s | %s", frame.top, frame.bottom)


class LoggingSignalOutput:
    def __init__(self) -> None:
        self.last: Optional[StatusSignal] = None

    def show(self, signal: StatusSignal) -> None:
        if signal != self.last:
            logger.info("[signal] %s", signal.value)
        self.last = signal


class SystemClock:
    """Wall clock of the host; syncing is left to the operating system."""

    def now(self) -> datetime:
        return datetime.now()

    def sync(self) -> bool:
        return True


class TcpConnectivityProbe:
    """
    Reports the network as up when a TCP connection to host:port succeeds
    within `timeout` seconds.
    """

    def __init__(self, host: str, port: int, timeout: float = 0.5) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self._local_address: Optional[str] = None

    def is_up(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout) as sock:
                self._local_address = sock.getsockname()[0]
        except OSError as exc:
            logger.debug("Connectivity probe to %s:%d failed: %s", self.host, self.port, exc)
            return False
        return True

    def address(self) -> Optional[str]:
        return self._local_address
