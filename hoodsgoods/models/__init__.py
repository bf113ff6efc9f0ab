# models package
from .user import User, UserRole
from .store import Store, StandardTime, ExpressTime
from .product import Product
from .cart_item import CartItem
from .admin_action import AdminAction, AdminActionType
from .order import Order, SellerOrder, SellerOrderItem, SellerOrderStatus, DeliveryMethod
