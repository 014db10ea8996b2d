from __future__ import annotations

from pydantic import BaseModel


class SpreadOdds(BaseModel):
    home_spread: float
    away_spread: float


class GameOdds(BaseModel):
    game_id: str
    home_team: str
    away_team: str
    odds: SpreadOdds


class PickDraft(BaseModel):
    recommended_spread: str
    explanation: str
