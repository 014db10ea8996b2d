from __future__ import annotations

from pydantic import BaseModel, Field


class LeaderboardEntry(BaseModel):
    user_id: str
    total_picks: int = Field(ge=0)
    total_wins: int = Field(ge=0)
    total_losses: int = Field(ge=0)
    total_pushes: int = Field(ge=0)
    win_percentage: float = Field(ge=0, le=1)
