from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hoopspicks.models import NbaPick
from hoopspicks.services.action_state import NOT_FOUND, ActionState

logger = logging.getLogger(__name__)


class NbaPickService:
    def __init__(self, db: Session):
        self.db = db

    async def create_pick(self, data: dict[str, Any]) -> ActionState[NbaPick]:
        try:
            pick = NbaPick(**data)
            self.db.add(pick)
            self.db.commit()
            self.db.refresh(pick)
            return ActionState.ok("NBA pick created successfully", pick)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating NBA pick: {str(e)}")
            return ActionState.fail("Failed to create NBA pick")

    async def create_picks(self, rows: Iterable[dict[str, Any]]) -> ActionState[list[NbaPick]]:
        """Insert a batch of picks in one commit."""
        try:
            picks = [NbaPick(**row) for row in rows]
            self.db.add_all(picks)
            self.db.commit()
            for pick in picks:
                self.db.refresh(pick)
            return ActionState.ok("NBA picks created successfully", picks)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating NBA picks: {str(e)}")
            return ActionState.fail("Failed to create NBA picks")

    async def get_picks(self) -> ActionState[list[NbaPick]]:
        try:
            picks = self.db.query(NbaPick).order_by(NbaPick.created_at.desc()).all()
            return ActionState.ok("NBA picks retrieved successfully", picks)
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving NBA picks: {str(e)}")
            return ActionState.fail("Failed to retrieve NBA picks")

    async def update_pick(self, pick_id, data: dict[str, Any]) -> ActionState[NbaPick]:
        try:
            pick = self.db.query(NbaPick).filter(NbaPick.id == pick_id).first()
            if pick is None:
                return ActionState.fail("NBA pick not found to update", NOT_FOUND)
            for k, v in data.items():
                setattr(pick, k, v)
            self.db.commit()
            self.db.refresh(pick)
            return ActionState.ok("NBA pick updated successfully", pick)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating NBA pick {pick_id}: {str(e)}")
            return ActionState.fail("Failed to update NBA pick")

    async def delete_pick(self, pick_id) -> ActionState[None]:
        try:
            deleted = self.db.query(NbaPick).filter(NbaPick.id == pick_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting NBA pick {pick_id}: {str(e)}")
            return ActionState.fail("Failed to delete NBA pick")
        if not deleted:
            return ActionState.fail("NBA pick not found to delete", NOT_FOUND)
        return ActionState.ok("NBA pick deleted successfully")
