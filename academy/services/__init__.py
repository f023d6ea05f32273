# ------ academy/services/__init__.py ------
from flask import current_app

from ..extensions import db
from .repository import CommerceRepository
from .cart_service import CartService
from .coupon_service import CouponService, CouponQuote
from .enrollment_service import EnrollmentService
from .order_service import OrderService
from .checkout_service import CheckoutService, CheckoutResult, generate_order_number


def commerce_repo() -> CommerceRepository:
    """Repository bound to the request's session."""
    return CommerceRepository(db.session)


def checkout_service() -> CheckoutService:
    return CheckoutService(
        commerce_repo(),
        max_attempts=current_app.config.get("ORDER_NUMBER_ATTEMPTS", 3),
    )
