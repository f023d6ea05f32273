# ------ academy/model/__init__.py ------

from .user import User
from .course import Course
from .cart import Cart, CartItem
from .coupon import Coupon, COUPON_TYPES
from .order import Order, OrderItem, ORDER_STATUS_COMPLETED
from .enrollment import Enrollment

__all__ = [
    "User",
    "Course",
    "Cart",
    "CartItem",
    "Coupon",
    "COUPON_TYPES",
    "Order",
    "OrderItem",
    "ORDER_STATUS_COMPLETED",
    "Enrollment",
]
