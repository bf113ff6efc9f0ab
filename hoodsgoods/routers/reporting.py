from datetime import date

from fastapi import APIRouter, Depends, Query

from hoodsgoods.deps import get_reporting_service, require
from hoodsgoods.models import User
from hoodsgoods.schemas.reporting import InventoryStatus, PlatformMetrics, SalesReport, TimePeriod
from hoodsgoods.services.reporting import ReportingService

router = APIRouter(prefix="/reporting", tags=["reporting"])


@router.get("/seller/inventory/status", response_model=InventoryStatus)
async def inventory_status(
    user: User = Depends(require("order.fulfil")),
    service: ReportingService = Depends(get_reporting_service),
):
    return await service.inventory_status(user.id)


@router.get("/seller/sales-trends", response_model=SalesReport)
async def sales_trends(
    period: TimePeriod = TimePeriod.MONTHLY,
    end_date: date | None = Query(None, alias="date"),
    user: User = Depends(require("order.fulfil")),
    service: ReportingService = Depends(get_reporting_service),
):
    return await service.sales_trends(user.id, period, end_date)


@router.get("/admin/platform-metrics", response_model=PlatformMetrics)
async def platform_metrics(
    period: TimePeriod | None = None,
    _: User = Depends(require("moderate")),
    service: ReportingService = Depends(get_reporting_service),
):
    """Omitting ``period`` reports over all time."""
    return await service.platform_metrics(period)
