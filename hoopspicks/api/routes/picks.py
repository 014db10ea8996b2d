from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hoopspicks.config import settings
from hoopspicks.core.exceptions import ValidationError
from hoopspicks.core.security import require_admin, require_pro
from hoopspicks.database import get_db
from hoopspicks.models import Profile
from hoopspicks.schemas.auth import CurrentUser
from hoopspicks.schemas.picks import NbaPickOut
from hoopspicks.services.ai_picks import AIPicksService, build_games_source, build_pick_writer
from hoopspicks.services.nba_pick_service import NbaPickService

from ._results import unwrap

router = APIRouter()


@router.get("/", response_model=list[NbaPickOut])
async def list_picks(
    profile: Profile = Depends(require_pro),
    db: Session = Depends(get_db),
):
    return unwrap(await NbaPickService(db).get_picks())


@router.post("/generate", response_model=list[NbaPickOut], status_code=status.HTTP_201_CREATED)
async def generate_picks(
    phase: Literal["early", "final"] = Query(default="early"),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = AIPicksService(
        NbaPickService(db),
        build_games_source(settings),
        build_pick_writer(settings),
    )
    try:
        result = await service.generate(phase)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return unwrap(result)
