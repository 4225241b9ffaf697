from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..ledger import RecordNotFound
from ..schemas import ResultOut, UserOut
from ..service import ChoreService
from .tasks import clean_text, get_service

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


# PUBLIC_INTERFACE
@router.get("", response_model=List[UserOut], summary="List Users")
def list_users(service: ChoreService = Depends(get_service)) -> List[UserOut]:
    return [UserOut.model_validate(u) for u in service.list_users()]


# PUBLIC_INTERFACE
@router.get(
    "/add",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add User",
    description="Create a user with a zero point balance.",
)
def add_user(
    username: str = Query(..., min_length=1, max_length=100),
    service: ChoreService = Depends(get_service),
) -> UserOut:
    return UserOut.model_validate(service.add_user(clean_text(username, "username")))


# PUBLIC_INTERFACE
@router.get(
    "/delete",
    response_model=ResultOut,
    summary="Delete User",
    description="Remove a user. Chores assigned to them keep the old assignee name.",
    responses={404: {"description": "User not found"}},
)
def delete_user(
    index: int = Query(..., description="Index of the user"),
    service: ChoreService = Depends(get_service),
) -> ResultOut:
    try:
        service.delete_user(index)
    except RecordNotFound:
        raise _not_found()
    return ResultOut(message="User deleted")


# PUBLIC_INTERFACE
@router.get(
    "/get",
    response_model=UserOut,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
def get_user(
    index: int = Query(..., description="Index of the user"),
    service: ChoreService = Depends(get_service),
) -> UserOut:
    try:
        return UserOut.model_validate(service.get_user(index))
    except RecordNotFound:
        raise _not_found()


# PUBLIC_INTERFACE
@router.get(
    "/update",
    response_model=UserOut,
    summary="Rename User",
    description="Rename a user. Chore assignees are not rewritten.",
    responses={404: {"description": "User not found"}},
)
def update_user(
    index: int = Query(..., description="Index of the user"),
    username: str = Query(..., min_length=1, max_length=100),
    service: ChoreService = Depends(get_service),
) -> UserOut:
    username = clean_text(username, "username")
    try:
        return UserOut.model_validate(service.rename_user(index, username))
    except RecordNotFound:
        raise _not_found()


# PUBLIC_INTERFACE
@router.get("/reset-points", response_model=ResultOut, summary="Reset Points")
def reset_points(service: ChoreService = Depends(get_service)) -> ResultOut:
    """
    Zero every user's point balance.
    """
    service.reset_points()
    return ResultOut(message="Points reset")
