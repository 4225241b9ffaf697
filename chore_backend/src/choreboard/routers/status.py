from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import StatusOut
from ..service import ChoreService
from .tasks import get_service

router = APIRouter(prefix="/api", tags=["status"])


# PUBLIC_INTERFACE
@router.get(
    "/status",
    response_model=StatusOut,
    summary="Board Status",
    description="The status signal shown on the board, with chore counts.",
)
def board_status(service: ChoreService = Depends(get_service)) -> StatusOut:
    return StatusOut(**service.summary())  # type: ignore[arg-type]
