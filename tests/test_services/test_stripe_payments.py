from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
import stripe

from hoopspicks.core.exceptions import DependencyError
from hoopspicks.integrations.stripe_payments import StripePayments
from tests.fakes import sign


class FakeResource:
    def __init__(self, objects=None, error=None):
        self.objects = objects or {}
        self.error = error
        self.calls = []

    async def retrieve_async(self, object_id, params=None):
        self.calls.append((object_id, params))
        if self.error is not None:
            raise self.error
        return self.objects[object_id]


def _payments(subscriptions=None, products=None, error=None) -> StripePayments:
    client = SimpleNamespace(
        subscriptions=FakeResource(subscriptions, error),
        products=FakeResource(products, error),
    )
    return StripePayments(client, webhook_secret="whsec_test")


@pytest.mark.asyncio
async def test_fetch_subscription_flattens_customer_and_product():
    payments = _payments(
        subscriptions={
            "sub_1": {
                "id": "sub_1",
                "object": "subscription",
                "status": "past_due",
                "customer": {"id": "cus_1", "object": "customer"},
                "items": {"data": [{"price": {"id": "price_1", "product": "prod_pro"}}]},
            }
        }
    )

    sub = await payments.fetch_subscription("sub_1")

    assert (sub.id, sub.status, sub.customer, sub.product_id) == ("sub_1", "past_due", "cus_1", "prod_pro")
    assert payments.client.subscriptions.calls == [("sub_1", {"expand": ["default_payment_method"]})]


@pytest.mark.asyncio
async def test_fetch_subscription_keeps_unknown_status():
    payments = _payments(subscriptions={"sub_1": {"id": "sub_1", "status": "brand_new_status"}})

    sub = await payments.fetch_subscription("sub_1")

    assert sub.status == "brand_new_status"
    assert sub.product_id is None


@pytest.mark.asyncio
async def test_stripe_errors_become_dependency_errors():
    payments = _payments(error=stripe.StripeError("connection reset"))

    with pytest.raises(DependencyError):
        await payments.fetch_subscription("sub_1")
    with pytest.raises(DependencyError):
        await payments.fetch_product("prod_1")


@pytest.mark.asyncio
async def test_malformed_payload_is_dependency_error():
    payments = _payments(products={"prod_1": {"metadata": {"membership": "pro"}}})

    with pytest.raises(DependencyError):
        await payments.fetch_product("prod_1")


def test_construct_event_verifies_signature():
    payments = _payments()
    body = json.dumps({"id": "evt_1", "type": "customer.subscription.updated"}).encode()

    assert payments.construct_event(body, sign(body))["id"] == "evt_1"
    with pytest.raises(stripe.SignatureVerificationError):
        payments.construct_event(body, sign(body, secret="whsec_other"))


def test_construct_event_requires_secret():
    payments = StripePayments(client=None, webhook_secret="")
    with pytest.raises(ValueError):
        payments.construct_event(b"{}", "t=1,v1=abc")


def test_construct_event_returns_plain_nested_dicts():
    payments = _payments()
    event = {
        "id": "evt_2",
        "object": "event",
        "type": "customer.subscription.deleted",
        "data": {"object": {"id": "sub_1", "object": "subscription", "status": "canceled"}},
    }
    body = json.dumps(event).encode()

    parsed = payments.construct_event(body, sign(body))

    assert type(parsed) is dict
    assert type(parsed["data"]["object"]) is dict
    assert parsed["data"]["object"]["status"] == "canceled"


def test_construct_event_rejects_unparseable_body():
    payments = _payments()
    body = b"not json"

    with pytest.raises(ValueError):
        payments.construct_event(body, sign(body))
