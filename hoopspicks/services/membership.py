"""
Membership reconciliation driven by Stripe subscription events.

The webhook receiver verifies the event and then calls one of the two
MembershipReconciler operations. Neither operation retries: any failure is
logged and re-raised so Stripe redelivers the event.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from hoopspicks.core.exceptions import (
    DataIntegrityError,
    DependencyError,
    PersistenceError,
    ValidationError,
)
from hoopspicks.models import Membership, Profile
from hoopspicks.schemas.subscription import StripeProduct, StripeSubscription
from hoopspicks.services.action_state import ActionState

logger = logging.getLogger(__name__)

ENTITLED_STATUSES = frozenset({"active", "trialing"})
LAPSED_STATUSES = frozenset(
    {"canceled", "incomplete", "incomplete_expired", "past_due", "paused", "unpaid"}
)


def map_membership_status(status: str, declared_tier: Membership | str) -> Membership:
    """
    Effective tier for a subscription status and the product's declared tier.

    active/trialing pass the declared tier through. Every other status,
    including ones Stripe may add later, resolves to free.
    """
    if status in ENTITLED_STATUSES:
        return Membership(declared_tier)
    return Membership.FREE


class PaymentsGateway(Protocol):
    async def fetch_subscription(self, subscription_id: str) -> Optional[StripeSubscription]: ...

    async def fetch_product(self, product_id: str) -> Optional[StripeProduct]: ...


class ProfileStore(Protocol):
    async def update_profile(self, user_id: str, fields: dict[str, Any]) -> ActionState[Profile]: ...

    async def update_profile_by_stripe_customer_id(
        self, customer_id: str, fields: dict[str, Any]
    ) -> ActionState[Profile]: ...


class MembershipReconciler:
    def __init__(self, payments: PaymentsGateway, profiles: ProfileStore):
        self.payments = payments
        self.profiles = profiles

    async def bind_customer(self, user_id: str, subscription_id: str, customer_id: str) -> Profile:
        """Store the Stripe customer and subscription ids on the user's profile after checkout."""
        try:
            _require(user_id=user_id, subscription_id=subscription_id, customer_id=customer_id)
            subscription = await self._fetch_subscription(subscription_id)
            return await self._bind(user_id, subscription, customer_id)
        except Exception as e:
            logger.error(f"Error in bind_customer for user {user_id!r}: {str(e)}")
            raise

    async def reconcile_subscription(
        self, subscription_id: str, customer_id: str, product_id: str
    ) -> Membership:
        """Derive the membership tier from Stripe and persist it on the customer's profile."""
        try:
            _require(subscription_id=subscription_id, customer_id=customer_id, product_id=product_id)
            subscription = await self._fetch_subscription(subscription_id)
            return await self._reconcile(subscription, customer_id, product_id)
        except Exception as e:
            logger.error(f"Error in reconcile_subscription for {subscription_id!r}: {str(e)}")
            raise

    async def complete_checkout(self, user_id: str, subscription_id: str, customer_id: str) -> Membership:
        """
        Bind then reconcile for a finished checkout session.

        Same steps and errors as bind_customer followed by
        reconcile_subscription, with the subscription fetched once.
        """
        try:
            _require(user_id=user_id, subscription_id=subscription_id, customer_id=customer_id)
            subscription = await self._fetch_subscription(subscription_id)
            await self._bind(user_id, subscription, customer_id)
            if not subscription.product_id:
                raise DependencyError(f"Subscription {subscription.id} has no product")
            return await self._reconcile(subscription, customer_id, subscription.product_id)
        except Exception as e:
            logger.error(f"Error in complete_checkout for user {user_id!r}: {str(e)}")
            raise

    async def _bind(self, user_id: str, subscription: StripeSubscription, customer_id: str) -> Profile:
        # Trust the id Stripe returned over the one in the event payload.
        result = await self.profiles.update_profile(
            user_id,
            {
                "stripe_customer_id": customer_id,
                "stripe_subscription_id": subscription.id,
            },
        )
        if not result.is_success or result.data is None:
            raise PersistenceError(f"Failed to update customer profile in DB: {result.message}")
        return result.data

    async def _reconcile(
        self, subscription: StripeSubscription, customer_id: str, product_id: str
    ) -> Membership:
        product = await self._call(self.payments.fetch_product, product_id, "product")
        if product is None or product.metadata is None:
            raise DependencyError("Failed to retrieve product or product metadata from Stripe.")

        declared = product.metadata.get("membership")
        if declared not in (Membership.FREE.value, Membership.PRO.value):
            raise DataIntegrityError(f"Invalid membership type in product metadata: {declared!r}")

        membership = map_membership_status(subscription.status, declared)
        if subscription.status not in ENTITLED_STATUSES | LAPSED_STATUSES:
            logger.warning(
                f"Unrecognized subscription status {subscription.status!r} on {subscription.id}; treating as free"
            )

        result = await self.profiles.update_profile_by_stripe_customer_id(
            customer_id,
            {
                "stripe_subscription_id": subscription.id,
                "membership": membership,
            },
        )
        if not result.is_success:
            raise PersistenceError(f"Failed to update subscription status in DB: {result.message}")

        logger.info(
            f"Customer {customer_id} now {membership.value} "
            f"(subscription {subscription.id} is {subscription.status})"
        )
        return membership

    async def _fetch_subscription(self, subscription_id: str) -> StripeSubscription:
        subscription = await self._call(self.payments.fetch_subscription, subscription_id, "subscription")
        if subscription is None:
            raise DependencyError("Failed to retrieve subscription from Stripe.")
        return subscription

    @staticmethod
    async def _call(fetch, object_id: str, kind: str):
        try:
            return await fetch(object_id)
        except DependencyError:
            raise
        except Exception as exc:
            raise DependencyError(f"Failed to retrieve {kind} {object_id}: {exc}") from exc


def _require(**values: str) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError(f"Missing required parameters: {', '.join(missing)}")
