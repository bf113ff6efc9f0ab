from types import SimpleNamespace

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from hoodsgoods.config import settings
from hoodsgoods.models import AdminAction, AdminActionType, CartItem, Product, Store, User, UserRole
from hoodsgoods.services.moderation import ModerationService

pytestmark = pytest.mark.anyio


@pytest.fixture
async def world(seed):
    admin = await seed.user("admin-1", role=UserRole.ADMIN)
    seller = await seed.user("seller-1", role=UserRole.SELLER)
    live = await seed.store("seller-1", name="Soweto Crafts")
    live_product = await seed.product(live, name="Beaded Bracelet")
    pending_product = await seed.product(live, name="Clay Pot", active=False)

    await seed.user("seller-2", role=UserRole.SELLER)
    new_store = await seed.store("seller-2", name="Kasi Threads", active=False)
    new_product = await seed.product(new_store, name="Shweshwe Shirt", active=False)
    return SimpleNamespace(
        admin=admin, seller=seller, live=live, live_product=live_product,
        pending_product=pending_product, new_store=new_store, new_product=new_product,
    )


async def audit_rows(session_factory, action_type=None) -> list[AdminAction]:
    async with session_factory() as session:
        stmt = select(AdminAction).order_by(AdminAction.id)
        if action_type is not None:
            stmt = stmt.where(AdminAction.action_type == action_type)
        return list((await session.execute(stmt)).scalars().all())


async def test_moderation_requires_admin(client, auth, world):
    headers = auth("seller-1")
    assert (await client.get("/products/pending", headers=headers)).status_code == 403
    assert (await client.patch(f"/products/{world.pending_product.id}/approve", headers=headers)).status_code == 403
    assert (await client.delete(f"/stores/{world.new_store.id}", headers=headers)).status_code == 403
    assert (await client.get("/admin/actions", headers=headers)).status_code == 403


async def test_pending_listings(client, auth, world):
    headers = auth("admin-1")
    pending = {p["name"] for p in (await client.get("/products/pending", headers=headers)).json()}
    assert pending == {"Clay Pot", "Shweshwe Shirt"}

    # only products whose store is already live
    ready = [p["name"] for p in (await client.get("/products/inactive", headers=headers)).json()]
    assert ready == ["Clay Pot"]

    stores = (await client.get("/stores/inactive", headers=headers)).json()
    assert [s["store"]["store_name"] for s in stores] == ["Kasi Threads"]
    assert [p["name"] for p in stores[0]["products"]] == ["Shweshwe Shirt"]


async def test_approve_product_is_idempotent(client, auth, world, session_factory):
    headers = auth("admin-1")
    product_id = world.pending_product.id

    for _ in range(2):
        resp = await client.patch(f"/products/{product_id}/approve", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["is_active"] is True

    assert (await client.get(f"/products/{product_id}")).status_code == 200
    rows = await audit_rows(session_factory, AdminActionType.APPROVE_PRODUCT)
    assert len(rows) == 1
    assert rows[0].target_id == str(product_id)
    assert rows[0].admin_id == "admin-1"


async def test_approve_unknown_product(client, auth, world):
    assert (await client.patch("/products/9999/approve", headers=auth("admin-1"))).status_code == 404


async def test_product_in_pending_store_can_be_approved_by_default(client, auth, world):
    resp = await client.patch(f"/products/{world.new_product.id}/approve", headers=auth("admin-1"))
    assert resp.status_code == 200
    # still hidden until the store goes live
    assert (await client.get(f"/products/{world.new_product.id}")).status_code == 404


async def test_store_must_be_live_when_guard_enabled(client, auth, world, monkeypatch, session_factory):
    monkeypatch.setattr(settings, "require_active_store_for_product_approval", True)
    resp = await client.patch(f"/products/{world.new_product.id}/approve", headers=auth("admin-1"))
    assert resp.status_code == 409
    assert await audit_rows(session_factory) == []


async def test_reject_product(client, auth, world, session_factory):
    resp = await client.delete(
        f"/products/{world.pending_product.id}/disapprove", params={"reason": "blurry photos"}, headers=auth("admin-1")
    )
    assert resp.status_code == 200

    async with session_factory() as session:
        assert await session.get(Product, world.pending_product.id) is None
    rows = await audit_rows(session_factory)
    assert [r.action_type for r in rows] == [AdminActionType.REJECT_PRODUCT]
    assert "blurry photos" in rows[0].details


async def test_approve_store_makes_catalogue_visible(client, auth, world):
    headers = auth("admin-1")
    assert (await client.patch(f"/stores/{world.new_store.id}/approve", headers=headers)).json()["is_active"] is True
    await client.patch(f"/products/{world.new_product.id}/approve", headers=headers)

    public = await client.get("/products", params={"storeName": "Kasi Threads"})
    assert [p["name"] for p in public.json()["items"]] == ["Shweshwe Shirt"]
    assert "Kasi Threads" in [s["store_name"] for s in (await client.get("/stores")).json()]


async def test_reject_store_cascades(client, auth, world, session_factory):
    # a buyer has the live store's product in their cart
    await client.post("/cart", json={"product_id": world.live_product.id}, headers=auth("buyer-1"))

    resp = await client.delete(f"/stores/{world.live.id}", headers=auth("admin-1"))
    assert resp.status_code == 200

    async with session_factory() as session:
        assert await session.get(Store, world.live.id) is None
        remaining = (await session.execute(
            select(func.count()).select_from(Product).where(Product.store_id == world.live.id)
        )).scalar_one()
        lines = (await session.execute(select(func.count()).select_from(CartItem))).scalar_one()
        owner = await session.get(User, "seller-1")
    assert remaining == 0
    assert lines == 0
    assert owner.role == UserRole.BUYER

    rows = await audit_rows(session_factory, AdminActionType.REJECT_STORE)
    assert len(rows) == 1
    assert "2 products" in rows[0].details
    assert (await client.get(f"/products/{world.live_product.id}")).status_code == 404


async def test_failed_store_rejection_rolls_back(client, auth, world, session_factory, monkeypatch):
    await client.post("/cart", json={"product_id": world.live_product.id}, headers=auth("buyer-1"))

    def failing_record(self, *args, **kwargs):
        raise OperationalError("INSERT INTO admin_actions", {}, Exception("disk full"))

    monkeypatch.setattr(ModerationService, "_record", failing_record)

    resp = await client.delete(f"/stores/{world.live.id}", headers=auth("admin-1"))
    assert resp.status_code == 500
    assert "internal error" in resp.json()["detail"]

    async with session_factory() as session:
        assert await session.get(Store, world.live.id) is not None
        remaining = (await session.execute(
            select(func.count()).select_from(Product).where(Product.store_id == world.live.id)
        )).scalar_one()
        lines = (await session.execute(select(func.count()).select_from(CartItem))).scalar_one()
        owner = await session.get(User, "seller-1")
    assert remaining == 2
    assert lines == 1
    assert owner.role == UserRole.SELLER
    assert await audit_rows(session_factory) == []


async def test_reject_unknown_store(client, auth, world):
    assert (await client.delete("/stores/9999", headers=auth("admin-1"))).status_code == 404


async def test_deactivated_user_is_locked_out(client, auth, world, session_factory):
    resp = await client.post("/admin/users/seller-1/deactivate", headers=auth("admin-1"))
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    assert (await client.get("/stores/my-store", headers=auth("seller-1"))).status_code == 403
    assert (await client.get("/auth/me", headers=auth("seller-1"))).status_code == 403

    # second call is a no-op
    await client.post("/admin/users/seller-1/deactivate", headers=auth("admin-1"))
    assert len(await audit_rows(session_factory, AdminActionType.DEACTIVATE_USER)) == 1


async def test_admin_cannot_deactivate_self(client, auth, world):
    assert (await client.post("/admin/users/admin-1/deactivate", headers=auth("admin-1"))).status_code == 409


async def test_list_users(client, auth, world):
    users = (await client.get("/admin/users", headers=auth("admin-1"))).json()
    assert {u["id"] for u in users} == {"admin-1", "seller-1", "seller-2"}


async def test_audit_log_is_newest_first_and_paginated(client, auth, world):
    headers = auth("admin-1")
    await client.patch(f"/products/{world.pending_product.id}/approve", headers=headers)
    await client.patch(f"/stores/{world.new_store.id}/approve", headers=headers)
    await client.patch(f"/products/{world.new_product.id}/approve", headers=headers)

    first = (await client.get("/admin/actions", params={"limit": 2}, headers=headers)).json()
    assert first["total"] == 3
    assert [a["action_type"] for a in first["items"]] == ["approve_product", "approve_store"]
    assert first["items"][0]["target_id"] == str(world.new_product.id)

    second = (await client.get("/admin/actions", params={"limit": 2, "page": 2}, headers=headers)).json()
    assert [a["target_id"] for a in second["items"]] == [str(world.pending_product.id)]
