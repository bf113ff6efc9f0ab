# Import all the models, so that Base has them before being imported by Alembic
from hoodsgoods.db.base_class import Base  # noqa
from hoodsgoods.models.user import User  # noqa
from hoodsgoods.models.store import Store  # noqa
from hoodsgoods.models.product import Product  # noqa
from hoodsgoods.models.cart_item import CartItem  # noqa
from hoodsgoods.models.admin_action import AdminAction  # noqa
from hoodsgoods.models.order import Order, SellerOrder, SellerOrderItem  # noqa
