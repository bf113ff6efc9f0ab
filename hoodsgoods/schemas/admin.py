from datetime import datetime

from pydantic import BaseModel, ConfigDict

from hoodsgoods.models import AdminActionType


class AdminActionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    action_type: AdminActionType
    target_id: str
    details: str | None = None
    admin_id: str
    created_at: datetime


class AdminActionPage(BaseModel):
    items: list[AdminActionOut]
    total: int
    page: int
    limit: int
