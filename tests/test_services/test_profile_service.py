from __future__ import annotations

import pytest

from hoopspicks.models import Membership
from hoopspicks.services.profile_service import ProfileService


@pytest.mark.asyncio
async def test_get_or_create_profile_defaults_to_free(db_session):
    service = ProfileService(db_session)

    created = await service.get_or_create_profile("user_1")
    again = await service.get_or_create_profile("user_1")

    assert created.is_success
    assert created.data.membership == Membership.FREE
    assert again.data.user_id == "user_1"


@pytest.mark.asyncio
async def test_update_missing_profile_reports_not_found(db_session):
    result = await ProfileService(db_session).update_profile("nobody", {"membership": "pro"})

    assert not result.is_success
    assert result.not_found


@pytest.mark.asyncio
async def test_update_by_customer_id(db_session):
    service = ProfileService(db_session)
    await service.create_profile("user_1", stripe_customer_id="cus_1")

    missing = await service.update_profile_by_stripe_customer_id("cus_2", {"membership": "pro"})
    updated = await service.update_profile_by_stripe_customer_id(
        "cus_1", {"membership": Membership.PRO, "stripe_subscription_id": "sub_1"}
    )

    assert missing.not_found
    assert updated.is_success
    assert updated.data.membership == Membership.PRO
    assert updated.data.stripe_subscription_id == "sub_1"


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields(db_session):
    service = ProfileService(db_session)
    await service.create_profile("user_1")

    with pytest.raises(ValueError):
        await service.update_profile("user_1", {"user_id": "someone_else"})


@pytest.mark.asyncio
async def test_delete_profile(db_session):
    service = ProfileService(db_session)
    await service.create_profile("user_1")

    assert (await service.delete_profile("user_1")).is_success
    assert (await service.delete_profile("user_1")).not_found
    assert (await service.get_profile_by_user_id("user_1")).not_found


@pytest.mark.asyncio
async def test_stripe_customer_id_belongs_to_one_profile(db_session):
    service = ProfileService(db_session)
    await service.create_profile("user_1", stripe_customer_id="cus_1")
    await service.create_profile("user_2")

    duplicate = await service.create_profile("user_3", stripe_customer_id="cus_1")
    rebind = await service.update_profile("user_2", {"stripe_customer_id": "cus_1"})
    updated = await service.update_profile_by_stripe_customer_id("cus_1", {"membership": "pro"})

    assert not duplicate.is_success
    assert duplicate.error_code == "db_error"
    assert not rebind.is_success
    assert updated.data.user_id == "user_1"
    assert (await service.get_profile_by_user_id("user_2")).data.stripe_customer_id is None
