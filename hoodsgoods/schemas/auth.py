from pydantic import BaseModel, ConfigDict

from hoodsgoods.models import UserRole


class Claims(BaseModel):
    """Verified claim set of the caller's bearer token."""
    sub: str
    email: str | None = None
    name: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    display_name: str | None = None
    role: UserRole
    is_active: bool


class MessageResponse(BaseModel):
    message: str


class VerifyAdminResponse(BaseModel):
    is_admin: bool
