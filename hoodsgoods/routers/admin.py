from fastapi import APIRouter, Depends, Query

from hoodsgoods.deps import get_moderation_service, require
from hoodsgoods.models import User
from hoodsgoods.schemas.admin import AdminActionPage
from hoodsgoods.schemas.auth import UserOut
from hoodsgoods.services.moderation import ModerationService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/actions", response_model=AdminActionPage)
async def list_actions(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    _: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
) -> AdminActionPage:
    return await service.list_actions(page, limit)


@router.get("/users", response_model=list[UserOut])
async def list_users(
    _: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.list_users()


@router.post("/users/{user_id}/deactivate", response_model=UserOut)
async def deactivate_user(
    user_id: str,
    admin: User = Depends(require("moderate")),
    service: ModerationService = Depends(get_moderation_service),
):
    return await service.deactivate_user(admin.id, user_id)
