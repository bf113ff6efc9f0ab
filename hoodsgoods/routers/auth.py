from fastapi import APIRouter, Depends

from hoodsgoods.deps import get_claims, get_current_user, get_user_service
from hoodsgoods.models import User
from hoodsgoods.schemas.auth import Claims, UserOut, VerifyAdminResponse
from hoodsgoods.services.users import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(get_current_user)) -> User:
    return user


@router.post("/register", response_model=UserOut)
async def register(
    user: User = Depends(get_current_user),
    claims: Claims = Depends(get_claims),
    service: UserService = Depends(get_user_service),
) -> User:
    return await service.register(user, claims)


@router.post("/promote-to-seller", response_model=UserOut)
async def promote_to_seller(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
) -> User:
    return await service.promote_to_seller(user)


@router.get("/verify-admin", response_model=VerifyAdminResponse)
async def verify_admin(user: User = Depends(get_current_user)) -> VerifyAdminResponse:
    return VerifyAdminResponse(is_admin=user.is_admin)
