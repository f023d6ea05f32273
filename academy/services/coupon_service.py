# academy/services/coupon_service.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from ..model import Coupon, COUPON_TYPES
from ..utils.errors import conflict, not_found, validation
from ..utils.money import D, ZERO, parse_money, round_money
from ..utils.paging import paginate
from .repository import CommerceRepository

# expired and not-yet-valid coupons look exactly like unknown codes
INVALID_COUPON_MSG = "invalid or expired coupon"
EXHAUSTED_COUPON_MSG = "coupon exhausted"


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _parse_iso8601(s):
    if not s:
        return None
    s = str(s).strip()
    # support trailing 'Z' (UTC)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    # store naive UTC
    if dt.tzinfo:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


@dataclass(frozen=True)
class CouponQuote:
    discount: Decimal
    coupon: Coupon

    def as_api(self):
        return {"discount": float(self.discount), "coupon": self.coupon.as_api()}


def compute_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
    value = D(coupon.value)
    if coupon.ctype == "percentage":
        discount = subtotal * value / Decimal(100)
        if coupon.max_discount is not None:
            discount = min(discount, D(coupon.max_discount))
    else:
        discount = min(value, subtotal)
    # never more than the subtotal, never negative
    return round_money(max(ZERO, min(discount, subtotal)))


class CouponService:
    """Coupon rules. ``evaluate`` never touches ``used_count``; consuming a
    use happens inside the checkout transaction."""

    def __init__(self, repo: CommerceRepository, clock=_utcnow):
        self.repo = repo
        self._clock = clock

    def evaluate(self, code, subtotal) -> CouponQuote:
        code = (code or "").strip() if isinstance(code, str) else ""
        if not code:
            raise validation("coupon code is required")
        amount = parse_money(subtotal)
        if amount is None or amount < 0:
            raise validation("subtotal must be a non-negative number")

        coupon = self.repo.find_coupon_by_code(code)
        if coupon is None or not coupon.is_active:
            raise not_found(INVALID_COUPON_MSG)

        now = self._clock()
        if now < coupon.valid_from or now > coupon.valid_until:
            raise not_found(INVALID_COUPON_MSG)

        if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
            raise validation(EXHAUSTED_COUPON_MSG)

        if coupon.min_purchase is not None and amount < D(coupon.min_purchase):
            raise validation(f"subtotal must be at least {D(coupon.min_purchase):.2f}")

        return CouponQuote(discount=compute_discount(coupon, amount), coupon=coupon)

    # ---- administration ----------------------------------------------------

    def create_coupon(self, data: dict) -> Coupon:
        code = (data.get("code") or "").strip().upper()
        ctype = (data.get("type") or data.get("ctype") or "percentage").lower().strip()
        value = parse_money(data.get("value"))

        if not code:
            raise validation("code is required")
        if ctype not in COUPON_TYPES:
            raise validation("type must be 'percentage' or 'fixed'")
        if value is None or value <= 0:
            raise validation("value must be > 0")
        if ctype == "percentage" and value > 100:
            raise validation("percentage coupon must be <= 100")

        limits = {}
        for field in ("min_purchase", "max_discount"):
            raw = data.get(field)
            if raw is None:
                limits[field] = None
                continue
            amount = parse_money(raw)
            if amount is None or amount < 0:
                raise validation(f"{field} must be a non-negative number")
            limits[field] = amount
        if limits["max_discount"] is not None and ctype != "percentage":
            raise validation("max_discount only applies to percentage coupons")

        is_active = data.get("is_active", True)
        if not isinstance(is_active, bool):
            raise validation("is_active must be true or false")

        usage_limit = data.get("usage_limit")
        if usage_limit is not None:
            if isinstance(usage_limit, bool) or not isinstance(usage_limit, int) or usage_limit < 0:
                raise validation("usage_limit must be a non-negative integer")

        valid_from = _parse_iso8601(data.get("valid_from"))
        valid_until = _parse_iso8601(data.get("valid_until"))
        if data.get("valid_from") and not valid_from:
            raise validation("Invalid datetime format for valid_from")
        if not valid_until:
            raise validation("valid_until is required (ISO-8601)")
        valid_from = valid_from or self._clock()
        if valid_until <= valid_from:
            raise validation("valid_until must be after valid_from")

        if self.repo.coupon_code_taken(code):
            raise conflict("Coupon code already exists")

        try:
            with self.repo.transaction():
                c = self.repo.add(Coupon(
                    code=code,
                    ctype=ctype,
                    value=value,
                    is_active=is_active,
                    min_purchase=limits["min_purchase"],
                    max_discount=limits["max_discount"],
                    usage_limit=usage_limit,
                    used_count=0,
                    valid_from=valid_from,
                    valid_until=valid_until,
                ))
        except IntegrityError:
            raise conflict("Coupon code already exists")
        return c

    def list_coupons(self, active=None, page=1, per_page=20):
        q = self.repo.session.query(Coupon)
        if active is not None:
            q = q.filter(Coupon.is_active == active)
        return paginate(q.order_by(Coupon.id.desc()), page, per_page)
