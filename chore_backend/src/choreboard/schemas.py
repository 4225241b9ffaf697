from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .indicator import StatusSignal
from .models import Frequency


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the listing for a chore, including computed schedule fields.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "index": 0,
                "name": "Take out recycling",
                "assignee": "sam",
                "frequency": "Weekly",
                "completed": True,
                "last_completed_at": "2024-01-10T18:30:00",
                "next_due_at": "2024-01-15T18:30:00",
                "points_awarded": True,
                "days_until_due": 4,
                "days_until_reset": 5,
                "overdue": False,
            }
        }
    )

    index: int = Field(..., description="Position of the chore; used as its identifier")
    name: str = Field(..., description="Chore name")
    assignee: str = Field(..., description="Username responsible for the chore")
    frequency: Frequency = Field(..., description="Daily, Weekly or Monthly")
    completed: bool = Field(..., description="Completed in the current cycle")
    last_completed_at: Optional[datetime] = Field(default=None, description="Last completion, null if never")
    next_due_at: datetime = Field(..., description="When the chore is due again")
    points_awarded: bool = Field(..., description="Points already credited for this cycle")
    days_until_due: int = Field(..., description="Whole days until a completed chore resets")
    days_until_reset: int = Field(..., description="Days left in the current period")
    overdue: bool = Field(..., description="Incomplete and past its due time")


# PUBLIC_INTERFACE
class TaskDetail(BaseModel):
    """Editable fields of a single chore."""

    name: str
    assignee: str
    frequency: Frequency


# PUBLIC_INTERFACE
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str = Field(..., description="Display name, matched against chore assignees")
    points: int = Field(..., description="Current point balance")


# PUBLIC_INTERFACE
class StatusOut(BaseModel):
    """Board-wide summary mirroring the physical status signal."""

    signal: StatusSignal
    connectivity_up: bool
    tasks: int
    completed: int
    overdue: int


class ResultOut(BaseModel):
    ok: bool = True
    message: str
