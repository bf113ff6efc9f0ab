from datetime import date, datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import update

from hoodsgoods.models import Order, UserRole
from hoodsgoods.schemas.reporting import TimePeriod
from hoodsgoods.services.reporting import period_window

pytestmark = pytest.mark.anyio


@pytest.fixture
async def shops(seed):
    await seed.user("admin-1", role=UserRole.ADMIN)
    await seed.user("seller-1", role=UserRole.SELLER)
    await seed.user("seller-2", role=UserRole.SELLER)
    crafts = await seed.store("seller-1", name="Soweto Crafts", standard_price="50.00")
    threads = await seed.store("seller-2", name="Kasi Threads", express_price="80.00")
    return SimpleNamespace(
        crafts=crafts,
        threads=threads,
        bracelet=await seed.product(crafts, name="Beaded Bracelet", price="100.00", quantity=10),
        shirt=await seed.product(threads, name="Shweshwe Shirt", price="450.00", quantity=10),
    )


async def buy(client, auth, shops, buyer, product, quantity) -> dict:
    payload = {
        "cart_items": [{
            "product_id": product.id,
            "quantity": quantity,
            "price_per_unit_snapshot": str(product.price),
            "store_id": product.store_id,
        }],
        "delivery_selections": {str(shops.crafts.id): "standard", str(shops.threads.id): "express"},
        "selected_area": "Soweto",
        "selected_pickup_point": "Maponya Mall Collection Desk",
        "frontend_grand_total": "0",
    }
    resp = await client.post("/orders", json=payload, headers=auth(buyer))
    assert resp.status_code == 201
    return resp.json()


async def backdate(session_factory, order_id: int, days: int) -> None:
    async with session_factory() as session:
        await session.execute(
            update(Order).where(Order.id == order_id).values(order_date=datetime.utcnow() - timedelta(days=days))
        )
        await session.commit()


def test_period_window():
    assert period_window(TimePeriod.DAILY, date(2026, 3, 10)) == (date(2026, 3, 10), date(2026, 3, 10))
    assert period_window(TimePeriod.WEEKLY, date(2026, 3, 10)) == (date(2026, 3, 4), date(2026, 3, 10))
    assert period_window(TimePeriod.MONTHLY, date(2026, 3, 10)) == (date(2026, 2, 9), date(2026, 3, 10))


async def test_inventory_status(client, auth, seed):
    await seed.user("seller-1", role=UserRole.SELLER)
    store = await seed.store("seller-1", name="Soweto Crafts")
    await seed.product(store, name="Beaded Bracelet", quantity=10)
    await seed.product(store, name="Clay Pot", quantity=3)
    await seed.product(store, name="Woven Basket", quantity=0)
    await seed.product(store, name="Grass Mat", quantity=1, active=False)

    resp = await client.get("/reporting/seller/inventory/status", headers=auth("seller-1"))
    assert resp.status_code == 200
    report = resp.json()

    assert [i["product_name"] for i in report["low_stock_items"]] == ["Grass Mat", "Clay Pot"]
    assert report["low_stock_items"][1]["current_quantity"] == 3
    assert [i["product_name"] for i in report["out_of_stock_items"]] == ["Woven Basket"]
    assert len(report["full_inventory"]) == 4

    breakdown = report["stock_breakdown"]
    assert breakdown["total_products"] == 4
    assert Decimal(str(breakdown["in_stock_percent"])) == Decimal("25")
    assert Decimal(str(breakdown["low_stock_percent"])) == Decimal("50")
    assert Decimal(str(breakdown["out_of_stock_percent"])) == Decimal("25")


async def test_empty_inventory(client, auth, seed):
    await seed.user("seller-1", role=UserRole.SELLER)
    await seed.store("seller-1")
    report = (await client.get("/reporting/seller/inventory/status", headers=auth("seller-1"))).json()
    assert report["full_inventory"] == []
    assert report["stock_breakdown"]["total_products"] == 0
    assert Decimal(str(report["stock_breakdown"]["in_stock_percent"])) == Decimal("0")


async def test_seller_reports_need_a_store(client, auth, seed):
    await seed.user("seller-1", role=UserRole.SELLER)
    headers = auth("seller-1")
    assert (await client.get("/reporting/seller/inventory/status", headers=headers)).status_code == 404
    assert (await client.get("/reporting/seller/sales-trends", headers=headers)).status_code == 404
    assert (await client.get("/reporting/seller/inventory/status", headers=auth("buyer-1"))).status_code == 403


async def test_sales_trends(client, auth, shops):
    await buy(client, auth, shops, "buyer-1", shops.bracelet, 2)
    cancelled = await buy(client, auth, shops, "buyer-2", shops.bracelet, 1)
    await buy(client, auth, shops, "buyer-2", shops.shirt, 1)
    await client.patch(
        f"/orders/seller/{cancelled['seller_orders'][0]['id']}/status",
        json={"status": "Cancelled"},
        headers=auth("seller-1"),
    )

    resp = await client.get("/reporting/seller/sales-trends", params={"period": "weekly"}, headers=auth("seller-1"))
    assert resp.status_code == 200
    report = resp.json()

    # item subtotals only, cancelled seller orders skipped
    assert len(report["sales_data"]) == 1
    assert Decimal(str(report["sales_data"][0]["sales"])) == Decimal("200")
    assert report["sales_data"][0]["order_count"] == 1
    summary = report["summary"]
    assert summary["period"] == "weekly"
    assert Decimal(str(summary["total_sales"])) == Decimal("200")
    assert Decimal(str(summary["average_daily_sales"])) == Decimal("28.57")
    assert summary["end_date"] == datetime.utcnow().date().isoformat()


async def test_sales_trends_for_past_period(client, auth, shops):
    await buy(client, auth, shops, "buyer-1", shops.bracelet, 2)
    resp = await client.get(
        "/reporting/seller/sales-trends",
        params={"period": "daily", "date": "2020-01-01"},
        headers=auth("seller-1"),
    )
    report = resp.json()
    assert report["sales_data"] == []
    assert Decimal(str(report["summary"]["total_sales"])) == Decimal("0")
    assert report["summary"]["start_date"] == "2020-01-01"

    bad = await client.get("/reporting/seller/sales-trends", params={"period": "hourly"}, headers=auth("seller-1"))
    assert bad.status_code == 422


async def test_platform_metrics(client, auth, shops, session_factory):
    await buy(client, auth, shops, "buyer-1", shops.bracelet, 2)
    old = await buy(client, auth, shops, "buyer-2", shops.shirt, 1)
    await backdate(session_factory, old["id"], 400)

    headers = auth("admin-1")
    resp = await client.get("/reporting/admin/platform-metrics", headers=headers)
    assert resp.status_code == 200
    report = resp.json()

    overall = report["overall_metrics"]
    # 2 x 100 + 50 standard, 1 x 450 + 80 express
    assert Decimal(str(overall["total_sales"])) == Decimal("780")
    assert overall["total_orders"] == 2
    assert Decimal(str(overall["average_order_value"])) == Decimal("390")
    assert overall["total_active_sellers"] == 2
    assert overall["total_registered_buyers"] == 2
    assert len(report["time_series_metrics"]) == 2
    assert report["period_covered"] == {"period": "allTime", "start_date": None, "end_date": None}

    yearly = (await client.get("/reporting/admin/platform-metrics", params={"period": "yearly"}, headers=headers)).json()
    assert yearly["overall_metrics"]["total_orders"] == 1
    assert Decimal(str(yearly["overall_metrics"]["total_sales"])) == Decimal("250")
    assert yearly["period_covered"]["period"] == "yearly"


async def test_platform_metrics_require_admin(client, auth, shops):
    assert (await client.get("/reporting/admin/platform-metrics", headers=auth("seller-1"))).status_code == 403
