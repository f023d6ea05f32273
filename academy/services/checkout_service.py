# academy/services/checkout_service.py
from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError

from ..model import Enrollment, Order, OrderItem, ORDER_STATUS_COMPLETED
from ..utils.errors import conflict, validation
from ..utils.money import D, ZERO, round_money
from .coupon_service import CouponService, EXHAUSTED_COUPON_MSG
from .enrollment_service import EnrollmentService
from .repository import CommerceRepository

log = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number() -> str:
    """ORD-<epoch millis>-<7 base36 chars>. Uniqueness is enforced by the
    orders.order_number constraint, not by this function."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(7))
    return f"ORD-{millis}-{suffix}"


class OrderNumberTaken(Exception):
    pass


@dataclass
class CheckoutResult:
    order: Order
    enrollments: list[Enrollment] = field(default_factory=list)

    def as_api(self):
        return {
            "order": self.order.as_api(),
            "enrollments": [e.as_api() for e in self.enrollments],
        }


class CheckoutService:
    """Turns a user's cart into an order plus enrollments.

    Everything that writes happens inside one ``repo.transaction()``:
    order, order items, enrollments, the coupon use and emptying the cart.
    Any error rolls all of it back, leaving cart and coupon as they were.
    """

    def __init__(
        self,
        repo: CommerceRepository,
        coupons: CouponService | None = None,
        enrollments: EnrollmentService | None = None,
        order_number_factory=generate_order_number,
        max_attempts: int = 3,
    ):
        self.repo = repo
        self.coupons = coupons or CouponService(repo)
        self.enrollments = enrollments or EnrollmentService(repo)
        self._order_number = order_number_factory
        self.max_attempts = max(1, int(max_attempts))

    def checkout(self, user_id: int, coupon_code: str | None = None) -> CheckoutResult:
        for attempt in range(1, self.max_attempts + 1):
            order_number = self._order_number()
            try:
                result = self._checkout_once(user_id, coupon_code, order_number)
            except OrderNumberTaken:
                # nothing was committed; safe to run again with a new number
                log.warning("checkout.order_number_collision user=%s number=%s attempt=%d",
                            user_id, order_number, attempt)
                continue
            log.info("checkout.completed user=%s order=%s items=%d total=%s",
                     user_id, order_number, len(result.enrollments), result.order.total)
            return result
        raise conflict("could not allocate an order number, please retry")

    def _checkout_once(self, user_id: int, coupon_code: str | None, order_number: str) -> CheckoutResult:
        with self.repo.transaction():
            cart = self.repo.find_cart(user_id, lock=True)
            if cart is None or not cart.items:
                raise validation("cart is empty")
            items = list(cart.items)

            subtotal = round_money(D(cart.total))
            discount = ZERO
            coupon = None
            if coupon_code:
                quote = self.coupons.evaluate(coupon_code, subtotal)
                discount, coupon = quote.discount, quote.coupon
            total = round_money(max(ZERO, subtotal - discount))

            order = self.repo.add(Order(
                order_number=order_number,
                status=ORDER_STATUS_COMPLETED,
                user_id=user_id,
                coupon_id=coupon.id if coupon is not None else None,
                subtotal=subtotal,
                discount=discount,
                total=total,
            ))
            try:
                self.repo.flush()
            except IntegrityError as e:
                raise OrderNumberTaken(order_number) from e

            for it in items:
                order.items.append(OrderItem(
                    course_id=it.course_id,
                    title=it.course.title,
                    price=it.price,
                ))

            enrollments = [
                self.enrollments.activate(user_id, it.course_id, order_id=order.id)
                for it in items
            ]

            if coupon is not None and not self.repo.increment_coupon_usage(coupon.id):
                log.warning("checkout.coupon_exhausted user=%s coupon=%s", user_id, coupon.code)
                raise validation(EXHAUSTED_COUPON_MSG)

            self.repo.delete_cart_items(cart.id)
            self.repo.recompute_cart_total(cart)

        return CheckoutResult(order=order, enrollments=enrollments)
