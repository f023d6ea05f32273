# academy/coupon/routes.py
from __future__ import annotations
from flask import request

from ..utils.api import ok
from ..utils.decorators import login_required, role_required
from ..utils.paging import normalize_paging
from ..services import CouponService, commerce_repo
from . import bp


def _coupon_service() -> CouponService:
    return CouponService(commerce_repo())


@bp.post("/validate")
@login_required
def validate_coupon():
    """
    Body: { "code": "SAVE10", "subtotal": 100 }
    Read-only: does not consume a use.
    """
    data = request.get_json(silent=True) or {}
    quote = _coupon_service().evaluate(data.get("code"), data.get("subtotal"))
    return ok("coupon valid", quote.as_api())


@bp.post("")
@role_required("admin")
def create_coupon():
    data = request.get_json(silent=True) or {}
    c = _coupon_service().create_coupon(data)
    return ok("Coupon created", c.as_api(), status=201)


@bp.get("")
@role_required("admin")
def list_coupons():
    active = request.args.get("active")
    if active is not None:
        active = active.lower() == "true"
    page, per_page = normalize_paging(request.args.get("page"), request.args.get("per_page"))

    page_data = _coupon_service().list_coupons(active=active, page=page, per_page=per_page)
    return ok("coupons", {
        "meta": page_data["meta"],
        "items": [c.as_api() for c in page_data["items"]],
    })
