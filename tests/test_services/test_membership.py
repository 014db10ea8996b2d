from __future__ import annotations

import pytest

from hoopspicks.core.exceptions import (
    DataIntegrityError,
    DependencyError,
    PersistenceError,
    ValidationError,
)
from hoopspicks.models import Membership, Profile
from hoopspicks.services.membership import MembershipReconciler, map_membership_status
from tests.fakes import FakePayments, FakeProfiles, product, subscription

LAPSED = ["canceled", "incomplete", "incomplete_expired", "past_due", "paused", "unpaid"]


@pytest.mark.parametrize("status", ["active", "trialing"])
@pytest.mark.parametrize("tier", ["free", "pro"])
def test_entitled_status_passes_declared_tier_through(status, tier):
    assert map_membership_status(status, tier) == tier


@pytest.mark.parametrize("status", LAPSED)
@pytest.mark.parametrize("tier", ["free", "pro"])
def test_lapsed_status_is_free(status, tier):
    assert map_membership_status(status, tier) == Membership.FREE


@pytest.mark.parametrize("status", ["", "ACTIVE", "on_hold", "some_future_status"])
def test_unrecognized_status_fails_safe_to_free(status):
    assert map_membership_status(status, "pro") == Membership.FREE


def test_status_mapper_examples():
    assert map_membership_status("active", "pro") == "pro"
    assert map_membership_status("canceled", "pro") == "free"
    assert map_membership_status("trialing", "free") == "free"
    # same inputs, same answer
    assert map_membership_status("active", "pro") is map_membership_status("active", "pro")


def _profile(user_id="user_1", customer="cus_1", membership=Membership.FREE) -> Profile:
    return Profile(user_id=user_id, stripe_customer_id=customer, membership=membership)


@pytest.mark.asyncio
async def test_reconcile_sets_pro_for_active_subscription():
    payments = FakePayments({"sub_1": subscription()}, {"prod_pro": product()})
    profiles = FakeProfiles([_profile()])
    reconciler = MembershipReconciler(payments, profiles)

    result = await reconciler.reconcile_subscription("sub_1", "cus_1", "prod_pro")

    assert result == Membership.PRO
    assert profiles.writes == [
        ("customer", "cus_1", {"stripe_subscription_id": "sub_1", "membership": Membership.PRO})
    ]
    assert profiles.profiles["user_1"].membership == Membership.PRO


@pytest.mark.asyncio
async def test_reconcile_downgrades_canceled_subscription():
    payments = FakePayments({"sub_1": subscription(status="canceled")}, {"prod_pro": product()})
    profiles = FakeProfiles([_profile(membership=Membership.PRO)])

    result = await MembershipReconciler(payments, profiles).reconcile_subscription(
        "sub_1", "cus_1", "prod_pro"
    )

    assert result == Membership.FREE
    assert profiles.profiles["user_1"].membership == Membership.FREE


@pytest.mark.asyncio
async def test_reconcile_rejects_unknown_product_tier_without_writing():
    payments = FakePayments(
        {"sub_1": subscription()}, {"prod_ent": product("prod_ent", "enterprise")}
    )
    profiles = FakeProfiles([_profile()])

    with pytest.raises(DataIntegrityError):
        await MembershipReconciler(payments, profiles).reconcile_subscription(
            "sub_1", "cus_1", "prod_ent"
        )
    assert profiles.writes == []


@pytest.mark.asyncio
async def test_reconcile_subscription_fetch_failure_skips_product_fetch():
    payments = FakePayments(fail_subscription=RuntimeError("stripe down"))
    profiles = FakeProfiles([_profile()])

    with pytest.raises(DependencyError):
        await MembershipReconciler(payments, profiles).reconcile_subscription(
            "sub_1", "cus_1", "prod_pro"
        )
    assert payments.product_calls == []
    assert profiles.writes == []


@pytest.mark.asyncio
async def test_reconcile_missing_subscription_is_dependency_error():
    payments = FakePayments({}, {"prod_pro": product()})

    with pytest.raises(DependencyError):
        await MembershipReconciler(payments, FakeProfiles()).reconcile_subscription(
            "sub_missing", "cus_1", "prod_pro"
        )
    assert payments.product_calls == []


@pytest.mark.asyncio
async def test_reconcile_product_without_metadata_is_dependency_error():
    payments = FakePayments({"sub_1": subscription()}, {"prod_pro": product(membership=None)})
    profiles = FakeProfiles([_profile()])

    with pytest.raises(DependencyError):
        await MembershipReconciler(payments, profiles).reconcile_subscription(
            "sub_1", "cus_1", "prod_pro"
        )
    assert profiles.writes == []


@pytest.mark.asyncio
async def test_reconcile_unknown_customer_is_persistence_error():
    payments = FakePayments({"sub_1": subscription()}, {"prod_pro": product()})
    profiles = FakeProfiles([_profile(customer="cus_other")])

    with pytest.raises(PersistenceError):
        await MembershipReconciler(payments, profiles).reconcile_subscription(
            "sub_1", "cus_1", "prod_pro"
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "args",
    [("", "cus_1", "prod_pro"), ("sub_1", "", "prod_pro"), ("sub_1", "cus_1", "")],
)
async def test_reconcile_requires_all_ids(args):
    payments = FakePayments({"sub_1": subscription()}, {"prod_pro": product()})

    with pytest.raises(ValidationError):
        await MembershipReconciler(payments, FakeProfiles()).reconcile_subscription(*args)
    assert payments.subscription_calls == []


@pytest.mark.asyncio
async def test_bind_customer_with_empty_user_id_makes_no_calls():
    payments = FakePayments({"sub_1": subscription()})
    profiles = FakeProfiles([_profile()])

    with pytest.raises(ValidationError):
        await MembershipReconciler(payments, profiles).bind_customer("", "sub_1", "cus_1")
    assert payments.subscription_calls == []
    assert profiles.writes == []


@pytest.mark.asyncio
async def test_bind_customer_stores_fetched_subscription_id():
    # Stripe answers with the canonical id even when the event carried an alias.
    payments = FakePayments({"sub_alias": subscription(sub_id="sub_canonical")})
    profiles = FakeProfiles([_profile(customer=None)])

    profile = await MembershipReconciler(payments, profiles).bind_customer(
        "user_1", "sub_alias", "cus_9"
    )

    assert profile.stripe_customer_id == "cus_9"
    assert profile.stripe_subscription_id == "sub_canonical"
    assert profile.membership == Membership.FREE
    assert payments.product_calls == []


@pytest.mark.asyncio
async def test_bind_customer_fetch_failure_is_dependency_error():
    payments = FakePayments(fail_subscription=RuntimeError("timeout"))
    profiles = FakeProfiles([_profile()])

    with pytest.raises(DependencyError):
        await MembershipReconciler(payments, profiles).bind_customer("user_1", "sub_1", "cus_1")
    assert profiles.writes == []


@pytest.mark.asyncio
async def test_bind_customer_failed_write_is_persistence_error():
    payments = FakePayments({"sub_1": subscription()})
    profiles = FakeProfiles([_profile()], fail_writes=True)

    with pytest.raises(PersistenceError):
        await MembershipReconciler(payments, profiles).bind_customer("user_1", "sub_1", "cus_1")


@pytest.mark.asyncio
async def test_complete_checkout_fetches_subscription_once():
    payments = FakePayments({"sub_alias": subscription(sub_id="sub_canonical")}, {"prod_pro": product()})
    profiles = FakeProfiles([_profile(customer=None)])

    result = await MembershipReconciler(payments, profiles).complete_checkout("user_1", "sub_alias", "cus_1")

    assert result == Membership.PRO
    assert payments.subscription_calls == ["sub_alias"]
    assert profiles.writes == [
        ("user", "user_1", {"stripe_customer_id": "cus_1", "stripe_subscription_id": "sub_canonical"}),
        ("customer", "cus_1", {"stripe_subscription_id": "sub_canonical", "membership": Membership.PRO}),
    ]


@pytest.mark.asyncio
async def test_complete_checkout_failed_bind_skips_reconcile():
    payments = FakePayments({"sub_1": subscription()}, {"prod_pro": product()})
    profiles = FakeProfiles([], fail_writes=True)

    with pytest.raises(PersistenceError):
        await MembershipReconciler(payments, profiles).complete_checkout("user_1", "sub_1", "cus_1")
    assert payments.product_calls == []
    assert len(profiles.writes) == 1


@pytest.mark.asyncio
async def test_complete_checkout_without_product_is_dependency_error():
    payments = FakePayments({"sub_1": subscription(product=None)})
    profiles = FakeProfiles([_profile(customer=None)])

    with pytest.raises(DependencyError):
        await MembershipReconciler(payments, profiles).complete_checkout("user_1", "sub_1", "cus_1")
    assert profiles.profiles["user_1"].stripe_customer_id == "cus_1"
    assert payments.product_calls == []
