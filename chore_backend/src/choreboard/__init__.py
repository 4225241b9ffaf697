"""
Chore board package.

Recurring household chores with a shared points ledger, served over a FastAPI
request surface and driven locally by a joystick and a two-line display.
The FastAPI app is exposed here for `uvicorn choreboard:app`.
"""

from .main import app, create_app  # noqa: F401
