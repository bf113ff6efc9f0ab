from hoodsgoods.errors import NotFoundError
from hoodsgoods.schemas.content import Page, PageSummary, PickupArea
from hoodsgoods.utils.content import load_content


def list_pages() -> list[PageSummary]:
    pages = load_content().get("pages", {})
    return [PageSummary(slug=slug, title=page.get("title", slug)) for slug, page in pages.items()]


def get_page(slug: str) -> Page:
    page = load_content().get("pages", {}).get(slug)
    if page is None:
        raise NotFoundError(f"Page '{slug}' not found")
    return Page(slug=slug, title=page.get("title", slug), body=page.get("body", "").strip())


def pickup_points() -> list[PickupArea]:
    areas = load_content().get("pickup_points", {})
    return [PickupArea(area=area, points=list(points or [])) for area, points in areas.items()]


def is_pickup_point(area: str, point: str) -> bool:
    return point in (load_content().get("pickup_points", {}).get(area) or [])
