from fastapi import APIRouter

from hoodsgoods.schemas.content import Page, PageSummary, PickupArea
from hoodsgoods.services import content

router = APIRouter(tags=["content"])


@router.get("/pages", response_model=list[PageSummary])
async def list_pages() -> list[PageSummary]:
    return content.list_pages()


@router.get("/pages/{slug}", response_model=Page)
async def get_page(slug: str) -> Page:
    return content.get_page(slug)


@router.get("/pickup-points", response_model=list[PickupArea])
async def pickup_points() -> list[PickupArea]:
    return content.pickup_points()
