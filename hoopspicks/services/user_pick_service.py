from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hoopspicks.models import UserPick
from hoopspicks.services.action_state import NOT_FOUND, ActionState

logger = logging.getLogger(__name__)


class UserPickService:
    def __init__(self, db: Session):
        self.db = db

    async def create_pick(self, user_id: str, data: dict[str, Any]) -> ActionState[UserPick]:
        try:
            pick = UserPick(user_id=user_id, **data)
            self.db.add(pick)
            self.db.commit()
            self.db.refresh(pick)
            return ActionState.ok("User pick created successfully", pick)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating user pick for {user_id}: {str(e)}")
            return ActionState.fail("Failed to create user pick")

    async def get_user_picks(self, user_id: str) -> ActionState[list[UserPick]]:
        try:
            picks = (
                self.db.query(UserPick)
                .filter(UserPick.user_id == user_id)
                .order_by(UserPick.created_at.desc())
                .all()
            )
            return ActionState.ok("User picks retrieved successfully", picks)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user picks for {user_id}: {str(e)}")
            return ActionState.fail("Failed to retrieve user picks")

    async def get_pick(self, pick_id, user_id: str | None = None) -> ActionState[UserPick]:
        try:
            pick = self._find(pick_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving user pick {pick_id}: {str(e)}")
            return ActionState.fail("Failed to retrieve user pick")
        if pick is None:
            return ActionState.fail("User pick not found", NOT_FOUND)
        return ActionState.ok("User pick retrieved successfully", pick)

    async def update_pick(
        self, pick_id, data: dict[str, Any], user_id: str | None = None
    ) -> ActionState[UserPick]:
        try:
            pick = self._find(pick_id, user_id)
            if pick is None:
                return ActionState.fail("User pick not found or no update performed", NOT_FOUND)
            for k, v in data.items():
                setattr(pick, k, v)
            self.db.commit()
            self.db.refresh(pick)
            return ActionState.ok("User pick updated successfully", pick)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating user pick {pick_id}: {str(e)}")
            return ActionState.fail("Failed to update user pick")

    async def delete_pick(self, pick_id, user_id: str | None = None) -> ActionState[None]:
        try:
            pick = self._find(pick_id, user_id)
            if pick is None:
                return ActionState.fail("User pick not found to delete", NOT_FOUND)
            self.db.delete(pick)
            self.db.commit()
            return ActionState.ok("User pick deleted successfully")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting user pick {pick_id}: {str(e)}")
            return ActionState.fail("Failed to delete user pick")

    def _find(self, pick_id, user_id: str | None) -> UserPick | None:
        query = self.db.query(UserPick).filter(UserPick.id == pick_id)
        if user_id is not None:
            query = query.filter(UserPick.user_id == user_id)
        return query.first()
