from __future__ import annotations

import json
import logging
from typing import Any, Type, TypeVar

import pydantic
import stripe

from hoopspicks.config import Settings
from hoopspicks.core.exceptions import DependencyError
from hoopspicks.schemas.subscription import StripeProduct, StripeSubscription

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _payload(obj: Any) -> dict[str, Any]:
    if type(obj) is dict:
        return obj
    # StripeObject serialises itself (recursively) to JSON.
    return json.loads(str(obj))


class StripePayments:
    """Payments collaborator: typed reads of Stripe subscriptions and products."""

    def __init__(self, client: stripe.StripeClient, webhook_secret: str = ""):
        self.client = client
        self.webhook_secret = webhook_secret

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripePayments":
        client = stripe.StripeClient(
            settings.stripe_secret_key.get_secret_value(),
            http_client=stripe.HTTPXClient(),
        )
        return cls(client, webhook_secret=settings.stripe_webhook_secret.get_secret_value())

    async def fetch_subscription(self, subscription_id: str) -> StripeSubscription:
        try:
            subscription = await self.client.subscriptions.retrieve_async(
                subscription_id,
                params={"expand": ["default_payment_method"]},
            )
        except stripe.StripeError as exc:
            raise DependencyError(f"Stripe subscription {subscription_id} unavailable: {exc}") from exc
        return self._parse(StripeSubscription, subscription, "subscription")

    async def fetch_product(self, product_id: str) -> StripeProduct:
        try:
            product = await self.client.products.retrieve_async(product_id)
        except stripe.StripeError as exc:
            raise DependencyError(f"Stripe product {product_id} unavailable: {exc}") from exc
        return self._parse(StripeProduct, product, "product")

    def construct_event(self, payload: bytes, sig_header: str) -> dict[str, Any]:
        """Verify a webhook signature and return the event as a plain dict.

        Raises ValueError for an unparseable body and
        stripe.SignatureVerificationError for a bad signature.
        """
        if not self.webhook_secret:
            raise ValueError("STRIPE_WEBHOOK_SECRET is not configured")
        event = stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret)
        return _payload(event)

    @staticmethod
    def _parse(model: Type[ModelT], obj: Any, kind: str) -> ModelT:
        try:
            return model.model_validate(_payload(obj))
        except (pydantic.ValidationError, ValueError, TypeError) as exc:
            logger.error(f"Unexpected Stripe {kind} payload: {str(exc)}")
            raise DependencyError(f"Malformed Stripe {kind} payload") from exc
