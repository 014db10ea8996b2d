from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hoopspicks.core.exceptions import ValidationError
from hoopspicks.models import UserPick
from hoopspicks.schemas.leaderboard import LeaderboardEntry
from hoopspicks.services.action_state import ActionState

logger = logging.getLogger(__name__)

MAX_WINDOW_DAYS = 3650


def validate_days(days: Any) -> Optional[int]:
    """Return a usable look-back window or raise ValidationError."""
    if days is None:
        return None
    if isinstance(days, bool) or not isinstance(days, int):
        raise ValidationError(f"days must be an integer, got {type(days).__name__}")
    if days < 1 or days > MAX_WINDOW_DAYS:
        raise ValidationError(f"days must be between 1 and {MAX_WINDOW_DAYS}")
    return days


def _outcome_count(result: str):
    return func.coalesce(func.sum(case((UserPick.result == result, 1), else_=0)), 0)


class LeaderboardService:
    def __init__(self, db: Session):
        self.db = db

    async def get_leaderboard(self, days: Optional[int] = None) -> ActionState[list[LeaderboardEntry]]:
        # Validation happens before any SQL is built; the cutoff is only ever a bound parameter.
        window = validate_days(days)

        total_wins = _outcome_count("win").label("total_wins")
        query = self.db.query(
            UserPick.user_id.label("user_id"),
            func.count(UserPick.id).label("total_picks"),
            total_wins,
            _outcome_count("loss").label("total_losses"),
            _outcome_count("push").label("total_pushes"),
        )
        if window is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(days=window)
            query = query.filter(UserPick.created_at > cutoff)
        query = query.group_by(UserPick.user_id).order_by(total_wins.desc(), UserPick.user_id)

        try:
            rows = query.all()
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving leaderboard data: {str(e)}")
            return ActionState.fail("Failed to retrieve leaderboard data")

        return ActionState.ok(
            "Leaderboard data retrieved successfully",
            [self._to_entry(row._mapping) for row in rows],
        )

    @staticmethod
    def _to_entry(row) -> LeaderboardEntry:
        total_picks = int(row["total_picks"] or 0)
        total_wins = int(row["total_wins"] or 0)
        return LeaderboardEntry(
            user_id=str(row["user_id"]),
            total_picks=total_picks,
            total_wins=total_wins,
            total_losses=int(row["total_losses"] or 0),
            total_pushes=int(row["total_pushes"] or 0),
            win_percentage=total_wins / total_picks if total_picks > 0 else 0.0,
        )
