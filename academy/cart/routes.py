# academy/cart/routes.py
from __future__ import annotations
from flask import request

from ..utils.api import ok
from ..utils.decorators import current_user_id, login_required
from ..utils.errors import validation
from ..services import CartService, checkout_service, commerce_repo
from . import bp


def _cart_service() -> CartService:
    return CartService(commerce_repo())


# ---- endpoints -------------------------------------------------------------

@bp.get("")
@login_required
def get_cart():
    cart = _cart_service().get_or_create(current_user_id())
    return ok("cart", cart.as_api())


@bp.post("")
@login_required
def add_item():
    """
    Body: { "course_id": int }
    """
    data = request.get_json(silent=True) or {}
    course_id = data.get("course_id")
    if isinstance(course_id, bool) or not isinstance(course_id, int):
        raise validation("course_id is required")

    cart = _cart_service().add_item(current_user_id(), course_id)
    return ok("item added", cart.as_api(), status=201)


@bp.delete("/<int:course_id>")
@login_required
def remove_item(course_id: int):
    cart = _cart_service().remove_item(current_user_id(), course_id)
    return ok("item removed", cart.as_api())


# ---- clear all items (empty the cart, keep the same cart row) --------------
@bp.delete("")
@login_required
def clear_cart():
    svc = _cart_service()
    uid = current_user_id()
    svc.clear(uid)
    return ok("all items removed", svc.get_or_create(uid).as_api())


@bp.post("/checkout")
@login_required
def checkout():
    """
    Body: { "coupon_code": str? }
    Creates a completed order, one enrollment per course and empties the cart.
    """
    data = request.get_json(silent=True) or {}
    code = data.get("coupon_code")
    if code is not None and not isinstance(code, str):
        raise validation("coupon_code must be a string")

    result = checkout_service().checkout(current_user_id(), (code or "").strip() or None)
    resp = ok("order created", result.as_api(), status=201)
    resp.headers["X-Order-Number"] = result.order.order_number
    return resp
