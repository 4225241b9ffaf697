from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow choreboard logs
    - device display/signal echo only at WARNING+ unless explicitly enabled
    - third-party loggers (uvicorn access, httpx) only at WARNING+
    """

    def __init__(self, echo_device: bool = False) -> None:
        super().__init__()
        self.echo_device = echo_device

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("choreboard."):
            if name == "choreboard.ports" and not self.echo_device:
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    echo_device: bool = False,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered for interactive use
    - Optional file handler: full DEBUG logs

    Call this once at startup, before the first log line.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(echo_device=echo_device))
    root.addHandler(ch)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
