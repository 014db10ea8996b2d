"""
Stripe webhook receiver.

Verifies the signature, then hands subscription lifecycle events to the
MembershipReconciler. Reconciler errors propagate to the AppError handler,
which answers non-2xx so Stripe redelivers.
"""
from __future__ import annotations

import logging
from typing import Any

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request, status

from hoopspicks.api.dependencies import get_payments, get_reconciler
from hoopspicks.core.exceptions import ValidationError
from hoopspicks.integrations.stripe_payments import StripePayments
from hoopspicks.schemas.subscription import StripeSubscription
from hoopspicks.services.membership import MembershipReconciler

logger = logging.getLogger(__name__)

router = APIRouter()

RELEVANT_EVENTS = {
    "checkout.session.completed",
    "customer.subscription.updated",
    "customer.subscription.deleted",
}


@router.post("/webhooks")
async def stripe_webhook(
    request: Request,
    payments: StripePayments = Depends(get_payments),
    reconciler: MembershipReconciler = Depends(get_reconciler),
) -> dict:
    payload = await request.body()
    sig_header = request.headers.get("Stripe-Signature", "")
    try:
        event = payments.construct_event(payload, sig_header)
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning(f"Stripe webhook verification failed: {str(e)}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook")

    event_type = event.get("type")
    if event_type not in RELEVANT_EVENTS:
        return {"received": True, "handled": False}

    obj: dict[str, Any] = (event.get("data") or {}).get("object") or {}
    if event_type == "checkout.session.completed":
        if obj.get("mode") != "subscription":
            return {"received": True, "handled": False}
        membership = await handle_checkout_completed(obj, reconciler)
    else:
        membership = await handle_subscription_change(obj, reconciler)

    logger.info(f"Handled {event_type} ({event.get('id')}): membership={membership}")
    return {"received": True, "handled": True, "membership": membership}


async def handle_checkout_completed(session: dict[str, Any], reconciler: MembershipReconciler) -> str:
    user_id = session.get("client_reference_id") or ""
    subscription_id = _object_id(session.get("subscription"))
    customer_id = _object_id(session.get("customer"))

    membership = await reconciler.complete_checkout(user_id, subscription_id, customer_id)
    return membership.value


async def handle_subscription_change(obj: dict[str, Any], reconciler: MembershipReconciler) -> str:
    try:
        subscription = StripeSubscription.model_validate(obj)
    except ValueError as exc:
        raise ValidationError(f"Malformed subscription event: {exc}") from exc
    membership = await reconciler.reconcile_subscription(
        subscription.id, subscription.customer or "", subscription.product_id or ""
    )
    return membership.value


def _object_id(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("id") or ""
    return value or ""
