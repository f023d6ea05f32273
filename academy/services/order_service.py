from ..model import Order
from ..utils.errors import not_found
from ..utils.paging import paginate
from .repository import CommerceRepository


class OrderService:
    """Read-only view over a user's orders."""

    def __init__(self, repo: CommerceRepository):
        self.repo = repo

    def list_for_user(self, user_id: int, page=1, per_page=20):
        return paginate(self.repo.orders_query(user_id), page, per_page)

    def get_for_user(self, user_id: int, order_number: str) -> Order:
        o = self.repo.find_order(user_id, order_number)
        if o is None:
            raise not_found("order not found")
        return o
