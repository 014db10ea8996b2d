from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hoopspicks.models import Membership, Profile
from hoopspicks.services.action_state import NOT_FOUND, ActionState

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"membership", "stripe_customer_id", "stripe_subscription_id"}


class ProfileService:
    """Profile store. Every method reports success or failure through ActionState."""

    def __init__(self, db: Session):
        self.db = db

    async def create_profile(self, user_id: str, **fields: Any) -> ActionState[Profile]:
        try:
            profile = Profile(user_id=user_id, membership=Membership.FREE)
            self._apply(profile, fields)
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            return ActionState.ok("Profile created successfully", profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating profile for {user_id}: {str(e)}")
            return ActionState.fail("Failed to create profile")

    async def get_profile_by_user_id(self, user_id: str) -> ActionState[Profile]:
        try:
            profile = self.db.query(Profile).filter(Profile.user_id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error getting profile for {user_id}: {str(e)}")
            return ActionState.fail("Failed to get profile")
        if profile is None:
            return ActionState.fail("Profile not found", NOT_FOUND)
        return ActionState.ok("Profile retrieved successfully", profile)

    async def get_or_create_profile(self, user_id: str) -> ActionState[Profile]:
        result = await self.get_profile_by_user_id(user_id)
        if result.not_found:
            return await self.create_profile(user_id)
        return result

    async def update_profile(self, user_id: str, fields: dict[str, Any]) -> ActionState[Profile]:
        return await self._update_where(Profile.user_id == user_id, fields, f"user {user_id}")

    async def update_profile_by_stripe_customer_id(
        self, customer_id: str, fields: dict[str, Any]
    ) -> ActionState[Profile]:
        return await self._update_where(
            Profile.stripe_customer_id == customer_id, fields, f"customer {customer_id}"
        )

    async def delete_profile(self, user_id: str) -> ActionState[None]:
        try:
            deleted = self.db.query(Profile).filter(Profile.user_id == user_id).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting profile for {user_id}: {str(e)}")
            return ActionState.fail("Failed to delete profile")
        if not deleted:
            return ActionState.fail("Profile not found to delete", NOT_FOUND)
        return ActionState.ok("Profile deleted successfully")

    async def _update_where(self, criterion, fields: dict[str, Any], label: str) -> ActionState[Profile]:
        try:
            profile = self.db.query(Profile).filter(criterion).first()
            if profile is None:
                return ActionState.fail("Profile not found to update", NOT_FOUND)
            self._apply(profile, fields)
            self.db.commit()
            self.db.refresh(profile)
            return ActionState.ok("Profile updated successfully", profile)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating profile for {label}: {str(e)}")
            return ActionState.fail("Failed to update profile")

    @staticmethod
    def _apply(profile: Profile, fields: dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        for key, value in fields.items():
            if key == "membership":
                value = Membership(value)
            setattr(profile, key, value)
