from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hoopspicks.core.security import get_current_user
from hoopspicks.database import get_db
from hoopspicks.schemas.auth import CurrentUser
from hoopspicks.schemas.profile import ProfileOut
from hoopspicks.services.profile_service import ProfileService

from ._results import unwrap

router = APIRouter()


@router.get("/me", response_model=ProfileOut)
async def my_profile(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Current user's profile; first visit creates a free one."""
    return unwrap(await ProfileService(db).get_or_create_profile(user.id))
