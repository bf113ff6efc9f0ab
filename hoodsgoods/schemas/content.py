from pydantic import BaseModel


class PageSummary(BaseModel):
    slug: str
    title: str


class Page(PageSummary):
    body: str


class PickupArea(BaseModel):
    area: str
    points: list[str]
