# academy/order/routes.py
from flask import current_app, request

from ..utils.api import ok
from ..utils.decorators import current_user_id, login_required
from ..utils.paging import normalize_paging
from ..services import OrderService, commerce_repo
from . import bp


@bp.get("")
@login_required
def list_orders():
    """
    Query params:
      - page, per_page (max 100)
    Newest first.
    """
    page, per_page = normalize_paging(
        request.args.get("page"),
        request.args.get("per_page"),
        default_per_page=current_app.config.get("ORDERS_PER_PAGE", 20),
    )
    page_data = OrderService(commerce_repo()).list_for_user(current_user_id(), page, per_page)
    return ok("orders", {
        "meta": page_data["meta"],
        "items": [o.as_api() for o in page_data["items"]],
    })


@bp.get("/<order_number>")
@login_required
def get_order(order_number: str):
    o = OrderService(commerce_repo()).get_for_user(current_user_id(), order_number)
    return ok("order", o.as_api())
