from enum import Enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Text, Boolean, DateTime, Numeric, Enum as PgEnum
from sqlalchemy.orm import Mapped, mapped_column

from hoodsgoods.db.base_class import Base


class StandardTime(str, Enum):
    DAYS_3_5 = "3-5"
    DAYS_5_7 = "5-7"
    DAYS_7_9 = "7-9"


class ExpressTime(str, Enum):
    DAYS_0_1 = "0-1"
    DAYS_1_2 = "1-2"
    DAYS_2_3 = "2-3"


class Store(Base):
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    store_name: Mapped[str] = mapped_column(Text, nullable=False)

    # delivery options
    standard_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    standard_time: Mapped[StandardTime] = mapped_column(
        PgEnum(StandardTime, name="standard_time", values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    express_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    express_time: Mapped[ExpressTime] = mapped_column(
        PgEnum(ExpressTime, name="express_time", values_callable=lambda e: [m.value for m in e]), nullable=False
    )

    # moderation
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
