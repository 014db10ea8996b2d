from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

PickResult = Literal["win", "loss", "push"]


class NbaPickOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    game_id: str
    spread_pick: str
    explanation: Optional[str] = None
    created_at: Optional[datetime] = None


class UserPickCreate(BaseModel):
    game_id: str = Field(min_length=1)
    pick: str = Field(min_length=1)


class UserPickUpdate(BaseModel):
    """Owner edits. Results are graded separately by an admin."""

    model_config = ConfigDict(extra="forbid")

    game_id: Optional[str] = Field(default=None, min_length=1)
    pick: Optional[str] = Field(default=None, min_length=1)

    @field_validator("game_id", "pick")
    @classmethod
    def not_null(cls, value: Optional[str]) -> str:
        # Omit a field to leave it unchanged; null would clear a required column.
        if value is None:
            raise ValueError("must not be null")
        return value


class UserPickGrade(BaseModel):
    result: Optional[PickResult]


class UserPickOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    game_id: str
    pick: str
    result: Optional[PickResult] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
