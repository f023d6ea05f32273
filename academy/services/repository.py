# academy/services/repository.py
from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import func, or_, select, update, delete
from sqlalchemy.orm import Session

from ..model import Cart, CartItem, Coupon, Course, Enrollment, Order


class CommerceRepository:
    """Persistence handle for the commerce core.

    Wraps one SQLAlchemy session. Reads are plain lookups; writes that must
    not race (cart total, coupon usage) are single statements evaluated by
    the database. ``transaction()`` is the unit of work checkout runs in.
    """

    def __init__(self, session: Session):
        self.session = session

    # ---- unit of work ------------------------------------------------------

    @contextmanager
    def transaction(self):
        try:
            yield self
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def flush(self):
        self.session.flush()

    def add(self, obj):
        self.session.add(obj)
        return obj

    # ---- catalog -----------------------------------------------------------

    def find_course(self, course_id) -> Course | None:
        return self.session.get(Course, course_id)

    # ---- cart --------------------------------------------------------------

    def find_cart(self, user_id: int, *, lock: bool = False) -> Cart | None:
        q = select(Cart).where(Cart.user_id == user_id)
        if lock:
            # re-read the row under the lock, even if it is already in the identity map
            q = q.with_for_update().execution_options(populate_existing=True)
        return self.session.execute(q).scalars().first()

    def create_cart(self, user_id: int) -> Cart:
        cart = Cart(user_id=user_id, total=0)
        self.session.add(cart)
        self.session.flush()
        return cart

    def find_cart_item(self, cart_id: int, course_id: int) -> CartItem | None:
        q = select(CartItem).where(CartItem.cart_id == cart_id, CartItem.course_id == course_id)
        return self.session.execute(q).scalars().first()

    def upsert_cart_item(self, cart_id: int, course_id: int, price) -> CartItem:
        """Insert the line; flushing lets the (cart, course) constraint fire now."""
        item = CartItem(cart_id=cart_id, course_id=course_id, price=price)
        self.session.add(item)
        self.session.flush()
        return item

    def delete_cart_item(self, cart_id: int, course_id: int) -> int:
        res = self.session.execute(
            delete(CartItem)
            .where(CartItem.cart_id == cart_id, CartItem.course_id == course_id)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def delete_cart_items(self, cart_id: int) -> int:
        res = self.session.execute(
            delete(CartItem)
            .where(CartItem.cart_id == cart_id)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def recompute_cart_total(self, cart: Cart) -> None:
        items_sum = (
            select(func.coalesce(func.sum(CartItem.price), 0))
            .where(CartItem.cart_id == cart.id)
            .scalar_subquery()
        )
        self.session.execute(
            update(Cart)
            .where(Cart.id == cart.id)
            .values(total=items_sum)
            .execution_options(synchronize_session=False)
        )
        self.session.expire(cart)

    # ---- coupons -----------------------------------------------------------

    def find_coupon_by_code(self, code: str) -> Coupon | None:
        q = select(Coupon).where(func.upper(Coupon.code) == code.strip().upper())
        return self.session.execute(q).scalars().first()

    def coupon_code_taken(self, code: str) -> bool:
        return self.find_coupon_by_code(code) is not None

    def increment_coupon_usage(self, coupon_id: int) -> bool:
        """Compare-and-increment; False when the usage limit is already reached."""
        res = self.session.execute(
            update(Coupon)
            .where(
                Coupon.id == coupon_id,
                or_(Coupon.usage_limit.is_(None), Coupon.used_count < Coupon.usage_limit),
            )
            .values(used_count=Coupon.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount == 1

    # ---- enrollments -------------------------------------------------------

    def find_enrollment(self, user_id: int, course_id: int) -> Enrollment | None:
        q = select(Enrollment).where(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        return self.session.execute(q).scalars().first()

    def enrollments_query(self, user_id: int):
        return (
            self.session.query(Enrollment)
            .filter(Enrollment.user_id == user_id)
            .order_by(Enrollment.created_at.desc(), Enrollment.id.desc())
        )

    # ---- orders ------------------------------------------------------------

    def orders_query(self, user_id: int):
        return (
            self.session.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    def find_order(self, user_id: int, order_number: str) -> Order | None:
        q = select(Order).where(Order.user_id == user_id, Order.order_number == order_number)
        return self.session.execute(q).scalars().first()
