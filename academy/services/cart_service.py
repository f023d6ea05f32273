import logging

from sqlalchemy.exc import IntegrityError

from ..model import Cart
from ..utils.errors import conflict, not_found, validation
from .enrollment_service import EnrollmentService
from .repository import CommerceRepository

log = logging.getLogger(__name__)


class CartService:
    """Per-user cart. ``cart.total`` always equals the sum of item prices."""

    def __init__(self, repo: CommerceRepository):
        self.repo = repo
        self.enrollments = EnrollmentService(repo)

    def _load(self, user_id: int, *, lock: bool = False) -> Cart:
        cart = self.repo.find_cart(user_id, lock=lock)
        if cart is None:
            try:
                cart = self.repo.create_cart(user_id)
            except IntegrityError:
                # another request created it first
                self.repo.session.rollback()
                cart = self.repo.find_cart(user_id, lock=lock)
        return cart

    def get_or_create(self, user_id: int) -> Cart:
        cart = self._load(user_id)
        self.repo.session.commit()
        return cart

    def add_item(self, user_id: int, course_id: int) -> Cart:
        with self.repo.transaction():
            course = self.repo.find_course(course_id)
            if course is None:
                raise not_found("course not found")
            if not course.is_published:
                raise validation("course is not available")
            if self.enrollments.is_enrolled(user_id, course_id):
                raise conflict("already enrolled in this course")

            cart = self._load(user_id, lock=True)
            if self.repo.find_cart_item(cart.id, course_id) is not None:
                raise conflict("course is already in the cart")
            try:
                self.repo.upsert_cart_item(cart.id, course.id, course.price)
            except IntegrityError:
                raise conflict("course is already in the cart")
            self.repo.recompute_cart_total(cart)

        log.info("cart.item_added user=%s course=%s", user_id, course_id)
        return cart

    def remove_item(self, user_id: int, course_id: int) -> Cart:
        with self.repo.transaction():
            cart = self._load(user_id, lock=True)
            if self.repo.delete_cart_item(cart.id, course_id):
                log.info("cart.item_removed user=%s course=%s", user_id, course_id)
            self.repo.recompute_cart_total(cart)
        return cart

    def clear(self, user_id: int) -> None:
        with self.repo.transaction():
            cart = self.repo.find_cart(user_id, lock=True)
            if cart is None:
                return
            self.repo.delete_cart_items(cart.id)
            self.repo.recompute_cart_total(cart)
