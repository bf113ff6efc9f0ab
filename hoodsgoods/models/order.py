from enum import Enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Integer, DateTime, Numeric, ForeignKey, Enum as PgEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoodsgoods.db.base_class import Base


class DeliveryMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class SellerOrderStatus(str, Enum):
    PROCESSING = "Processing"
    PACKAGING = "Packaging"
    READY_FOR_PICKUP = "Ready for Pickup"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)  # buyer
    order_date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    pickup_area: Mapped[str] = mapped_column(String(255), nullable=False)
    pickup_point: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)

    seller_orders: Mapped[list["SellerOrder"]] = relationship(
        back_populates="order", cascade="all, delete-orphan", lazy="selectin", order_by="SellerOrder.id"
    )


class SellerOrder(Base):
    __tablename__ = "seller_orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)  # seller
    store_id: Mapped[int | None] = mapped_column(ForeignKey("stores.id", ondelete="SET NULL"), nullable=True)
    delivery_method: Mapped[DeliveryMethod] = mapped_column(PgEnum(DeliveryMethod, name="delivery_method"), nullable=False)
    delivery_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    delivery_time_estimate: Mapped[str | None] = mapped_column(String(64), nullable=True)
    items_subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    seller_total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[SellerOrderStatus] = mapped_column(
        PgEnum(SellerOrderStatus, name="seller_order_status", values_callable=lambda e: [m.value for m in e]),
        default=SellerOrderStatus.PROCESSING,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    order: Mapped[Order] = relationship(back_populates="seller_orders")
    items: Mapped[list["SellerOrderItem"]] = relationship(
        back_populates="seller_order", cascade="all, delete-orphan", lazy="selectin", order_by="SellerOrderItem.id"
    )


class SellerOrderItem(Base):
    __tablename__ = "seller_order_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    seller_order_id: Mapped[int] = mapped_column(ForeignKey("seller_orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    quantity_ordered: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_unit: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    product_name_snapshot: Mapped[str | None] = mapped_column(String(255), nullable=True)

    seller_order: Mapped[SellerOrder] = relationship(back_populates="items")
