from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hoopspicks.core.exceptions import ValidationError
from hoopspicks.database import get_db
from hoopspicks.schemas.leaderboard import LeaderboardEntry
from hoopspicks.services.leaderboard_service import LeaderboardService

from ._results import unwrap

router = APIRouter()


@router.get("/", response_model=list[LeaderboardEntry])
async def get_leaderboard(days: Optional[int] = None, db: Session = Depends(get_db)):
    try:
        result = await LeaderboardService(db).get_leaderboard(days)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return unwrap(result)
