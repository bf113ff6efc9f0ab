from enum import Enum
from datetime import datetime

from sqlalchemy import String, Text, DateTime, Enum as PgEnum
from sqlalchemy.orm import Mapped, mapped_column

from hoodsgoods.db.base_class import Base


class AdminActionType(str, Enum):
    APPROVE_PRODUCT = "approve_product"
    REJECT_PRODUCT = "reject_product"
    APPROVE_STORE = "approve_store"
    REJECT_STORE = "reject_store"
    DEACTIVATE_USER = "deactivate_user"


class AdminAction(Base):
    """Audit trail of moderation decisions. Rows are only ever inserted."""

    __tablename__ = "admin_actions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    action_type: Mapped[AdminActionType] = mapped_column(PgEnum(AdminActionType, name="admin_action_type"), nullable=False)
    target_id: Mapped[str] = mapped_column(String(255), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
