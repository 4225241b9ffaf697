from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ..ledger import RecordNotFound
from ..models import Frequency
from ..schemas import ResultOut, TaskDetail, TaskOut
from ..service import ChoreService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


# PUBLIC_INTERFACE
def get_service(request: Request) -> ChoreService:
    """
    Dependency returning the ChoreService owned by the running app.
    """
    return request.app.state.service


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


def clean_text(value: str, field: str) -> str:
    """Strip whitespace and reject values that are blank afterwards."""
    s = value.strip()
    if not s:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{field} must not be blank")
    return s


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Chores",
    description=(
        "List every chore with its computed schedule.\n\n"
        "Each item carries days_until_due, days_until_reset and overdue, evaluated "
        "at request time. The index of an item is its identifier for the other routes."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Unsupported action"},
    },
)
def list_tasks(
    action: str = Query("list", description="Only 'list' is supported"),
    service: ChoreService = Depends(get_service),
) -> List[TaskOut]:
    """
    List chores in display order.
    """
    if action.strip().lower() != "list":
        raise HTTPException(status_code=400, detail="action must be 'list'")
    return [TaskOut(**row) for row in service.list_tasks()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/toggle",
    response_model=TaskOut,
    summary="Toggle Chore",
    description="Flip completion of a chore, crediting or revoking the assignee's points.",
    responses={
        200: {"description": "Chore toggled"},
        404: {"description": "Chore not found"},
    },
)
def toggle_task(
    index: int = Query(..., description="Index of the chore"),
    service: ChoreService = Depends(get_service),
) -> TaskOut:
    try:
        row = service.toggle_task(index)
    except RecordNotFound:
        raise _not_found()
    return TaskOut(**row)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/add",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add Chore",
    description="Create a new chore. It starts incomplete and due immediately.",
)
def add_task(
    name: str = Query(..., min_length=1, max_length=200, description="Chore name"),
    assignee: str = Query(..., min_length=1, max_length=100, description="Username of the assignee"),
    frequency: Frequency = Query(..., description="Daily, Weekly or Monthly"),
    service: ChoreService = Depends(get_service),
) -> TaskOut:
    row = service.add_task(clean_text(name, "name"), clean_text(assignee, "assignee"), frequency)
    return TaskOut(**row)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/delete",
    response_model=ResultOut,
    summary="Delete Chore",
    responses={
        200: {"description": "Chore deleted"},
        404: {"description": "Chore not found"},
    },
)
def delete_task(
    index: int = Query(..., description="Index of the chore"),
    service: ChoreService = Depends(get_service),
) -> ResultOut:
    try:
        service.delete_task(index)
    except RecordNotFound:
        raise _not_found()
    return ResultOut(message="Task deleted")


# PUBLIC_INTERFACE
@router.get(
    "/get",
    response_model=TaskDetail,
    summary="Get Chore",
    description="Editable fields of a single chore.",
    responses={
        200: {"description": "Chore found"},
        404: {"description": "Chore not found"},
    },
)
def get_task(
    index: int = Query(..., description="Index of the chore"),
    service: ChoreService = Depends(get_service),
) -> TaskDetail:
    try:
        task = service.get_task(index)
    except RecordNotFound:
        raise _not_found()
    return TaskDetail(name=task.name, assignee=task.assignee, frequency=task.frequency)


# PUBLIC_INTERFACE
@router.get(
    "/update",
    response_model=TaskOut,
    summary="Update Chore",
    description=(
        "Replace name, assignee and frequency. A completed chore gets its due date "
        "recomputed; points already awarded are not adjusted."
    ),
    responses={
        200: {"description": "Chore updated"},
        404: {"description": "Chore not found"},
    },
)
def update_task(
    index: int = Query(..., description="Index of the chore"),
    name: str = Query(..., min_length=1, max_length=200),
    assignee: str = Query(..., min_length=1, max_length=100),
    frequency: Frequency = Query(...),
    service: ChoreService = Depends(get_service),
) -> TaskOut:
    name = clean_text(name, "name")
    assignee = clean_text(assignee, "assignee")
    try:
        row = service.update_task(index, name, assignee, frequency)
    except RecordNotFound:
        raise _not_found()
    return TaskOut(**row)  # type: ignore[arg-type]
