from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoopspicks.core.security import get_current_user, require_admin
from hoopspicks.database import get_db
from hoopspicks.schemas.auth import CurrentUser
from hoopspicks.schemas.picks import UserPickCreate, UserPickGrade, UserPickOut, UserPickUpdate
from hoopspicks.services.profile_service import ProfileService
from hoopspicks.services.user_pick_service import UserPickService

from ._results import unwrap

router = APIRouter()


@router.get("/", response_model=list[UserPickOut])
async def list_my_picks(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return unwrap(await UserPickService(db).get_user_picks(user.id))


@router.post("/", response_model=UserPickOut, status_code=status.HTTP_201_CREATED)
async def create_my_pick(
    payload: UserPickCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # user_picks.user_id references profiles
    unwrap(await ProfileService(db).get_or_create_profile(user.id))
    return unwrap(await UserPickService(db).create_pick(user.id, payload.model_dump()))


@router.patch("/{pick_id}", response_model=UserPickOut)
async def update_my_pick(
    pick_id: UUID,
    payload: UserPickUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="No fields to update")
    return unwrap(await UserPickService(db).update_pick(pick_id, data, user_id=user.id))


@router.delete("/{pick_id}")
async def delete_my_pick(
    pick_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    unwrap(await UserPickService(db).delete_pick(pick_id, user_id=user.id))
    return {"success": True}


@router.put("/{pick_id}/result", response_model=UserPickOut)
async def grade_pick(
    pick_id: UUID,
    payload: UserPickGrade,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Record the outcome of any user's pick once its game is final."""
    return unwrap(await UserPickService(db).update_pick(pick_id, {"result": payload.result}))
